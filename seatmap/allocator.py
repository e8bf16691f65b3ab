import logging
import random
from typing import Dict, Iterable, Optional, Sequence

from seatmap.layouts import row_major
from seatmap.models import Position, Student

logger = logging.getLogger(__name__)

Assignment = Dict[Position, str]


def _fill_free_seats(seats: Assignment, valid, students: Sequence[Student]) -> Assignment:
    """Seat every unseated student on the free seats, both in reading order."""
    seated = set(seats.values())
    free = [p for p in row_major(valid) if p not in seats]
    remaining = [s for s in students if s.id not in seated]

    filled = dict(seats)
    for position, student in zip(free, remaining):
        filled[position] = student.id

    if len(remaining) > len(free):
        logger.debug("%d students left unseated", len(remaining) - len(free))

    return filled


def reconcile(
    old: Assignment,
    old_valid: Iterable[Position],
    new_valid: Iterable[Position],
    students: Sequence[Student],
) -> Assignment:
    """Adapt an assignment to a new set of valid seats.

    Placements whose seat still exists are kept. Students who lost their
    seat, or never had one, then fill the free seats in reading order
    (row by row, left to right), in the order of ``students``. Students
    that do not fit stay unseated.

    ``old_valid`` is accepted for symmetry with the caller's state; only
    membership in ``new_valid`` decides what is carried forward.
    """
    new_valid = frozenset(new_valid)
    known = {s.id for s in students}

    carried = {}
    taken = set()
    for position in row_major(old):
        student_id = old[position]
        if position not in new_valid or student_id not in known or student_id in taken:
            continue
        carried[position] = student_id
        taken.add(student_id)

    dropped = len(old) - len(carried)
    if dropped:
        logger.debug("Reconcile dropped %d placements", dropped)

    return _fill_free_seats(carried, new_valid, students)


def place_unseated(
    seats: Assignment,
    valid: Iterable[Position],
    students: Sequence[Student],
) -> Assignment:
    """Seat new students in the gaps without moving anyone already seated."""
    valid = frozenset(valid)
    current = {p: sid for p, sid in seats.items() if p in valid}
    return _fill_free_seats(current, valid, students)


def place_random(
    valid: Iterable[Position],
    students: Sequence[Student],
    rng: Optional[random.Random] = None,
) -> Assignment:
    """Discard the current seating and seat students on shuffled seats."""
    rng = rng or random.SystemRandom()
    positions = row_major(valid)
    rng.shuffle(positions)

    allocation = {}
    for position, student in zip(positions, students):
        allocation[position] = student.id

    return allocation
