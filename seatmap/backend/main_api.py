import json
import logging
from typing import Optional

from fastapi import FastAPI, Depends, Body, File, HTTPException, UploadFile
from fastapi.responses import FileResponse, HTMLResponse, Response
from pydantic import BaseModel, conlist
from sqlalchemy.orm import Session

from seatmap.backend.database import Base, engine, SessionLocal
from seatmap.backend.db_models import LayoutDB, new_layout_name
from seatmap.backend.exports import export_csv, export_excel, export_pdf, print_html
from seatmap.config import EXPORT_DIR, LOG_LEVEL
from seatmap.seatplan import SeatPlan
from seatmap.student_import import StudentImportError, read_students_csv

logger = logging.getLogger(__name__)

if not logging.getLogger().hasHandlers():
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


app = FastAPI(title = "Seat Map API")

Base.metadata.create_all(bind = engine)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


class GridRequest(BaseModel):
    rows: Optional[int] = None
    cols: Optional[int] = None
    seatSize: Optional[int] = None
    gap: Optional[int] = None
    template: Optional[str] = None


class RelocateRequest(BaseModel):
    source: conlist(int, min_length=2, max_length=2)
    target: conlist(int, min_length=2, max_length=2)


def _get_layout(db, file_name):
    layout = db.query(LayoutDB).filter(LayoutDB.file_name == file_name).first()
    if not layout:
        raise HTTPException(status_code=404, detail="File not found")
    try:
        record = json.loads(layout.payload_json)
    except ValueError:
        raise HTTPException(status_code=400, detail="Corrupt file")
    return layout, SeatPlan.from_record(record)


def _store(db, layout, plan):
    layout.payload_json = json.dumps(plan.to_record())
    db.commit()


@app.get("/")
def root():
    return {"message": "Seat Map API is running !"}


@app.post("/students/import")
async def import_students_csv(csv: UploadFile = File(...)):
    content = await csv.read()
    try:
        students = read_students_csv(content)
    except StudentImportError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "status": "ok",
        "students": [{"name": name, "email": email} for name, email in students],
    }


@app.post("/layouts")
def save_layout(record: dict = Body(...), db: Session = Depends(get_db)):
    """
    Example request body:
    {
      "rows": 4, "cols": 6, "seatSize": 64, "gap": 16, "template": "u",
      "students": [{"id": "ab12cd3", "name": "Alice", "email": ""}],
      "seats": {"0_0": "ab12cd3"}
    }
    """
    if "rows" not in record or "cols" not in record:
        raise HTTPException(status_code=400, detail="Invalid layout: rows and cols are required")

    plan = SeatPlan.from_record(record)
    layout = LayoutDB(file_name=new_layout_name(), payload_json=json.dumps(plan.to_record()))
    db.add(layout)
    db.commit()

    logger.info("Saved layout %s (%d students)", layout.file_name, len(plan.students))
    return {"status": "ok", "file": layout.file_name}


@app.get("/layouts")
def list_layouts(db: Session = Depends(get_db)):
    layouts = db.query(LayoutDB).order_by(LayoutDB.file_name).all()
    return {"status": "ok", "files": [l.file_name for l in layouts]}


@app.get("/layouts/{file_name}")
def load_layout(file_name: str, db: Session = Depends(get_db)):
    _, plan = _get_layout(db, file_name)
    return plan.to_record()


@app.post("/layouts/{file_name}/grid")
def apply_grid(file_name: str, req: GridRequest, db: Session = Depends(get_db)):
    layout, plan = _get_layout(db, file_name)
    plan = plan.apply_grid(
        rows=req.rows,
        cols=req.cols,
        seat_size=req.seatSize,
        gap=req.gap,
        template=req.template,
    )
    _store(db, layout, plan)

    return {
        "status": "ok",
        "layout": plan.to_record(),
        "unseated": [s.id for s in plan.unseated()],
    }


@app.post("/layouts/{file_name}/randomize")
def randomize_layout(file_name: str, db: Session = Depends(get_db)):
    layout, plan = _get_layout(db, file_name)
    plan = plan.randomize()
    _store(db, layout, plan)
    return {"status": "ok", "layout": plan.to_record()}


@app.post("/layouts/{file_name}/relocate")
def relocate_student(file_name: str, req: RelocateRequest, db: Session = Depends(get_db)):
    layout, plan = _get_layout(db, file_name)
    plan, result = plan.relocate(tuple(req.source), tuple(req.target))
    if result.changed:
        _store(db, layout, plan)

    return {"status": "ok", "outcome": result.outcome.value, "layout": plan.to_record()}


@app.get("/layouts/{file_name}/export/csv")
def export_layout_csv(file_name: str, db: Session = Depends(get_db)):
    _, plan = _get_layout(db, file_name)
    return Response(
        content=export_csv(plan),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="seatmap.csv"'},
    )


@app.get("/layouts/{file_name}/export/excel")
def export_layout_excel(file_name: str, db: Session = Depends(get_db)):
    _, plan = _get_layout(db, file_name)

    EXPORT_DIR.mkdir(parents=True, exist_ok=True)
    file_path = EXPORT_DIR / file_name.replace(".json", ".xlsx")
    export_excel(plan, file_path)

    return FileResponse(
        path=str(file_path),
        filename=file_path.name,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )


@app.get("/layouts/{file_name}/export/pdf")
def export_layout_pdf(file_name: str, class_name: Optional[str] = None, db: Session = Depends(get_db)):
    _, plan = _get_layout(db, file_name)

    EXPORT_DIR.mkdir(parents=True, exist_ok=True)
    file_path = EXPORT_DIR / file_name.replace(".json", ".pdf")
    export_pdf(plan, file_path, class_name)

    return FileResponse(
        path=str(file_path),
        filename=file_path.name,
        media_type="application/pdf"
    )


@app.get("/layouts/{file_name}/print", response_class=HTMLResponse)
def print_layout(file_name: str, class_name: Optional[str] = None, db: Session = Depends(get_db)):
    _, plan = _get_layout(db, file_name)
    return print_html(plan, class_name)
