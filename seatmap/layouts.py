from typing import FrozenSet, Iterable, List

from seatmap.models import Position, Template


def _has_seat(template, row, col, rows, cols):
    if template is Template.U:
        # open side is the top edge
        return col == 0 or col == cols - 1 or row == rows - 1
    if template is Template.FRONT_ROWS:
        return row < max(1, min(2, rows))
    return True


def shape(rows: int, cols: int, template="full") -> FrozenSet[Position]:
    """Return the positions of a rows x cols grid that carry a seat."""
    parsed = Template.parse(template)
    valid = set()
    for row in range(rows):
        for col in range(cols):
            if _has_seat(parsed, row, col, rows, cols):
                valid.add((row, col))

    return frozenset(valid)


def row_major(positions: Iterable[Position]) -> List[Position]:
    return sorted(positions)
