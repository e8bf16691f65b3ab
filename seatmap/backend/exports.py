import csv
import html
import json
import logging

import pandas as pd
from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfgen import canvas

from seatmap.config import DEFAULT_CLASS_NAME
from seatmap.models import seat_key

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ["seatKey", "row", "col", "name", "email"]


def seat_rows(plan):
    """One row per seat in reading order, empty seats included."""
    rows = []
    for cell in plan.cells():
        if not cell.valid:
            continue
        student = cell.student
        row, col = cell.position
        rows.append({
            "seatKey": seat_key(cell.position),
            "row": row,
            "col": col,
            "name": student.name if student else "",
            "email": student.email if student else "",
        })
    return rows


def export_csv(plan):
    df = pd.DataFrame(seat_rows(plan), columns=EXPORT_COLUMNS)
    return df.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\r\n")


def export_json(plan):
    return json.dumps(plan.to_record(), indent=2, ensure_ascii=False)


def export_excel(plan, file_path):
    df = pd.DataFrame(seat_rows(plan), columns=EXPORT_COLUMNS)
    df.to_excel(file_path, index=False)
    logger.info("Wrote Excel export %s", file_path)
    return file_path


def print_html(plan, class_name=None):
    """Printable seat map page that opens the print dialog on load."""
    class_name = class_name or DEFAULT_CLASS_NAME
    grid = plan.grid

    parts = [
        '<!doctype html><html><head><meta charset="utf-8"><title>Seatmap Print</title>',
        "<style>"
        "body{font-family:Arial,Helvetica,sans-serif;color:#000;padding:10px;}"
        "table{border-collapse:collapse;margin-top:20px;}"
        "td{border:1px solid #000;width:60px;height:60px;text-align:center;"
        "vertical-align:middle;padding:0;box-sizing:border-box;overflow:hidden;white-space:nowrap;}"
        ".empty{background:#f8f8f8;}"
        ".seatName{font-weight:bold;display:block;}"
        ".seatEmail{font-size:11px;color:#666;display:block;}"
        "</style></head><body>",
        f"<h2>{html.escape(class_name)} – Sitzplan ({grid.rows} × {grid.cols})</h2>",
        "<table>",
    ]

    cells = plan.cells()
    for r in range(grid.rows):
        parts.append("<tr>")
        for cell in cells[r * grid.cols:(r + 1) * grid.cols]:
            if not cell.valid:
                parts.append('<td class="empty"></td>')
                continue
            parts.append("<td>")
            if cell.student:
                parts.append(f'<span class="seatName">{html.escape(cell.student.name)}</span>')
                parts.append(f'<span class="seatEmail">{html.escape(cell.student.email)}</span>')
            parts.append("</td>")
        parts.append("</tr>")

    parts.append("</table>")
    parts.append("<script>window.onload = function(){ setTimeout(() => { window.print(); }, 200); }</script>")
    parts.append("</body></html>")
    return "".join(parts)


def export_pdf(plan, file_path, class_name=None):
    class_name = class_name or DEFAULT_CLASS_NAME
    grid = plan.grid

    c = canvas.Canvas(str(file_path), pagesize=landscape(A4))
    width, height = landscape(A4)

    y = height - 50
    c.setFont("Helvetica-Bold", 14)
    c.drawString(50, y, f"{class_name} - Sitzplan ({grid.rows} x {grid.cols})")
    y -= 20

    # shrink cells so the whole grid fits on one page
    cell = min(60, (width - 100) / grid.cols, (y - 40) / grid.rows)
    font_size = max(4, min(9, cell / 6))

    for pos_cell in plan.cells():
        row, col = pos_cell.position
        x = 50 + col * cell
        top = y - row * cell

        if not pos_cell.valid:
            c.setFillGray(0.97)
            c.rect(x, top - cell, cell, cell, stroke=1, fill=1)
            c.setFillGray(0)
            continue

        c.rect(x, top - cell, cell, cell, stroke=1, fill=0)
        if pos_cell.student:
            max_chars = int(cell / (font_size * 0.55))
            c.setFont("Helvetica-Bold", font_size)
            c.drawCentredString(x + cell / 2, top - cell / 2, pos_cell.student.name[:max_chars])
            c.setFont("Helvetica", font_size * 0.8)
            c.drawCentredString(x + cell / 2, top - cell / 2 - font_size, pos_cell.student.email[:max_chars])

    c.save()
    logger.info("Wrote PDF export %s", file_path)
    return file_path
