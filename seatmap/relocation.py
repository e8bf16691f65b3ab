"""Turn a seat drag into a move or a swap.

A drag starts on an occupied seat, accumulates a pixel displacement and
ends either in a release, which is snapped to the nearest grid cell, or
in a cancel. Whatever happens, the result is a complete assignment: the
new one when the drop lands on another seat, the original one otherwise.
"""
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from seatmap.models import GridSpec, Position

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    MOVED = "moved"
    SWAPPED = "swapped"
    REJECTED = "rejected"
    UNCHANGED = "unchanged"


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class Relocation:
    outcome: Outcome
    seats: Dict[Position, str]
    source: Optional[Position] = None
    target: Optional[Position] = None

    @property
    def changed(self) -> bool:
        return self.outcome in (Outcome.MOVED, Outcome.SWAPPED)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def snap_to_cell(grid: GridSpec, origin: Tuple[float, float], displacement: Tuple[float, float]) -> Position:
    """Nearest grid cell for a seat dragged from ``origin`` (left, top) by ``displacement``."""
    left = origin[0] + displacement[0]
    top = origin[1] + displacement[1]
    row = _round_half_up(top / grid.stride)
    col = _round_half_up(left / grid.stride)
    row = max(0, min(grid.rows - 1, row))
    col = max(0, min(grid.cols - 1, col))
    return row, col


def cell_origin(grid: GridSpec, position: Position) -> Tuple[int, int]:
    row, col = position
    return col * grid.stride, row * grid.stride


def relocate(
    seats: Dict[Position, str],
    valid: FrozenSet[Position],
    source: Position,
    target: Position,
) -> Relocation:
    """Move the student at ``source`` to ``target``, swapping with any occupant."""
    original = dict(seats)

    if target not in valid:
        logger.debug("Drop on %s rejected, no seat there", target)
        return Relocation(Outcome.REJECTED, original, source, target)
    if source not in valid or source not in seats:
        return Relocation(Outcome.REJECTED, original, source, target)
    if source == target:
        return Relocation(Outcome.UNCHANGED, original, source, target)

    moving = seats[source]
    other = seats.get(target)

    updated = dict(seats)
    updated[target] = moving
    if other is None:
        del updated[source]
        return Relocation(Outcome.MOVED, updated, source, target)

    updated[source] = other
    return Relocation(Outcome.SWAPPED, updated, source, target)


class DragGesture:
    """One pointer drag over the seat grid.

    ``begin`` refuses to start on an empty or missing seat. ``release``
    and ``cancel`` both end the gesture with a :class:`Relocation`.
    """

    def __init__(self, grid: GridSpec, valid: FrozenSet[Position], seats: Dict[Position, str]):
        self.grid = grid
        self.valid = frozenset(valid)
        self._seats = dict(seats)
        self.state = DragState.IDLE
        self.source: Optional[Position] = None
        self.origin = (0, 0)
        self.displacement = (0.0, 0.0)
        self.result: Optional[Relocation] = None

    def begin(self, source: Position, origin=None) -> bool:
        if self.state is not DragState.IDLE:
            return False
        if source not in self.valid or source not in self._seats:
            return False

        self.source = source
        self.origin = origin if origin is not None else cell_origin(self.grid, source)
        self.displacement = (0.0, 0.0)
        self.state = DragState.DRAGGING
        return True

    def move(self, dx: float, dy: float) -> None:
        if self.state is DragState.DRAGGING:
            self.displacement = (dx, dy)

    def release(self) -> Relocation:
        if self.state is DragState.RESOLVED:
            return self.result
        if self.state is not DragState.DRAGGING:
            return Relocation(Outcome.REJECTED, dict(self._seats))

        target = snap_to_cell(self.grid, self.origin, self.displacement)
        self.result = relocate(self._seats, self.valid, self.source, target)
        self.state = DragState.RESOLVED
        return self.result

    def cancel(self) -> Relocation:
        if self.state is DragState.RESOLVED:
            return self.result
        source = self.source
        self.state = DragState.IDLE
        self.source = None
        self.displacement = (0.0, 0.0)
        return Relocation(Outcome.REJECTED, dict(self._seats), source)
