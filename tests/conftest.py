import os
import tempfile
from pathlib import Path

import pytest

_tmp = Path(tempfile.mkdtemp(prefix="seatmap-tests-"))
os.environ.setdefault("SEATMAP_DATABASE_URL", f"sqlite:///{_tmp / 'seatmap.db'}")
os.environ.setdefault("SEATMAP_EXPORT_DIR", str(_tmp / "exports"))

from seatmap.models import Student  # noqa: E402


@pytest.fixture
def students():
    return [Student(id=f"s{i}", name=f"Student {i}") for i in range(1, 6)]


def assert_consistent(seats, valid, students):
    """Every seat exists and every seated student is known and seated once."""
    ids = {s.id for s in students}
    assert set(seats) <= set(valid)
    assert len(set(seats.values())) == len(seats)
    assert set(seats.values()) <= ids
