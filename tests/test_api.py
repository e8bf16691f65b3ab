"""Tests for the HTTP layer, against a private in-memory database."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from seatmap.backend.database import Base
from seatmap.backend.main_api import app, get_db

LAYOUT = {
    "rows": 3,
    "cols": 3,
    "seatSize": 64,
    "gap": 16,
    "template": "u",
    "students": [
        {"id": "a", "name": "Ann", "email": "ann@school.test"},
        {"id": "b", "name": "Ben", "email": ""},
    ],
    "seats": {"0_0": "a", "1_1": "b"},
}


@pytest.fixture
def client():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _save(client, record=LAYOUT):
    res = client.post("/layouts", json=record)
    assert res.status_code == 200
    return res.json()["file"]


def test_root(client) -> None:
    assert client.get("/").status_code == 200


def test_csv_upload_returns_students(client) -> None:
    files = {"csv": ("students.csv", b"Ann,ann@school.test\n,skip@school.test\nBen\n", "text/csv")}
    res = client.post("/students/import", files=files)

    assert res.status_code == 200
    assert res.json() == {
        "status": "ok",
        "students": [
            {"name": "Ann", "email": "ann@school.test"},
            {"name": "Ben", "email": ""},
        ],
    }


def test_save_list_and_load(client) -> None:
    name = _save(client)
    assert name.startswith("seatmap_") and name.endswith(".json")

    listing = client.get("/layouts").json()
    assert listing == {"status": "ok", "files": [name]}

    loaded = client.get(f"/layouts/{name}").json()
    # (1, 1) is not a seat in the U template, so Ben takes the next free seat
    assert loaded["seats"] == {"0_0": "a", "0_2": "b"}
    assert [s["id"] for s in loaded["students"]] == ["a", "b"]


def test_save_rejects_incomplete_layout(client) -> None:
    res = client.post("/layouts", json={"students": []})
    assert res.status_code == 400


def test_save_with_malformed_seats_still_succeeds(client) -> None:
    record = {"rows": 2, "cols": 2, "students": [{"id": "a", "name": "Ann"}], "seats": ["0_0"]}

    name = _save(client, record)

    assert client.get(f"/layouts/{name}").json()["seats"] == {"0_0": "a"}


def test_unknown_layout_is_404(client) -> None:
    assert client.get("/layouts/seatmap_nope.json").status_code == 404


def test_relocate_swaps_and_persists(client) -> None:
    name = _save(client, {**LAYOUT, "seats": {"0_0": "a", "0_2": "b"}})

    res = client.post(f"/layouts/{name}/relocate", json={"source": [0, 0], "target": [0, 2]})

    assert res.json()["outcome"] == "swapped"
    assert client.get(f"/layouts/{name}").json()["seats"] == {"0_0": "b", "0_2": "a"}


def test_relocate_to_missing_seat_is_rejected(client) -> None:
    name = _save(client)

    res = client.post(f"/layouts/{name}/relocate", json={"source": [0, 0], "target": [1, 1]})

    assert res.json()["outcome"] == "rejected"
    assert res.json()["layout"]["seats"] == {"0_0": "a", "0_2": "b"}


def test_grid_change_reconciles(client) -> None:
    name = _save(client)

    res = client.post(f"/layouts/{name}/grid", json={"template": "full"})
    body = res.json()

    assert body["layout"]["template"] == "full"
    assert body["layout"]["seats"] == {"0_0": "a", "0_2": "b"}
    assert body["unseated"] == []


def test_randomize_keeps_everyone_seated(client) -> None:
    name = _save(client)

    layout = client.post(f"/layouts/{name}/randomize").json()["layout"]

    assert sorted(layout["seats"].values()) == ["a", "b"]


def test_exports(client) -> None:
    name = _save(client)

    csv_res = client.get(f"/layouts/{name}/export/csv")
    assert csv_res.headers["content-type"].startswith("text/csv")
    assert csv_res.text.startswith('"seatKey"')

    page = client.get(f"/layouts/{name}/print", params={"class_name": "7b"})
    assert "7b – Sitzplan (3 × 3)" in page.text

    pdf = client.get(f"/layouts/{name}/export/pdf")
    assert pdf.status_code == 200
    assert pdf.content.startswith(b"%PDF")
