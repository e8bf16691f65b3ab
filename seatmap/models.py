import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from seatmap import config

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


def seat_key(position: Position) -> str:
    row, col = position
    return f"{row}_{col}"


def parse_seat_key(key) -> Optional[Position]:
    """Inverse of seat_key; returns None for anything that is not "row_col"."""
    if not isinstance(key, str):
        return None
    parts = key.split("_")
    if len(parts) != 2:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None


def new_student_id() -> str:
    return uuid.uuid4().hex[:7]


class Template(str, Enum):
    FULL = "full"
    U = "u"
    FRONT_ROWS = "front-rows"

    @classmethod
    def parse(cls, name) -> "Template":
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            logger.debug("Unknown template %r, using full grid", name)
            return cls.FULL


@dataclass(frozen=True)
class Student:
    id: str
    name: str
    email: str = ""

    @classmethod
    def create(cls, name, email=""):
        return cls(id=new_student_id(), name=name.strip(), email=(email or "").strip())


def _clamp(value, bounds, default):
    low, high = bounds
    try:
        value = int(value)
    except (TypeError, ValueError):
        value = default
    return max(low, min(high, value))


@dataclass(frozen=True)
class GridSpec:
    rows: int = config.DEFAULT_ROWS
    cols: int = config.DEFAULT_COLS
    seat_size: int = config.DEFAULT_SEAT_SIZE
    gap: int = config.DEFAULT_GAP
    template: Template = Template.FULL

    def __post_init__(self):
        object.__setattr__(self, "template", Template.parse(self.template))

    @classmethod
    def clamped(
        cls,
        rows=None,
        cols=None,
        seat_size=None,
        gap=None,
        template=None,
    ) -> "GridSpec":
        return cls(
            rows=_clamp(rows, config.ROWS_RANGE, config.DEFAULT_ROWS),
            cols=_clamp(cols, config.COLS_RANGE, config.DEFAULT_COLS),
            seat_size=_clamp(seat_size, config.SEAT_SIZE_RANGE, config.DEFAULT_SEAT_SIZE),
            gap=_clamp(gap, config.GAP_RANGE, config.DEFAULT_GAP),
            template=Template.parse(template),
        )

    @property
    def stride(self) -> int:
        return self.seat_size + self.gap

    def in_bounds(self, position: Position) -> bool:
        row, col = position
        return 0 <= row < self.rows and 0 <= col < self.cols
