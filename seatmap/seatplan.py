"""Seat plan state: grid, students and who sits where.

Every operation returns a new :class:`SeatPlan`; the caller replaces its
reference with the result. Assignments are rebuilt in full before they
are stored, so a plan is never observed half-updated.
"""
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, List, NamedTuple, Optional, Tuple

from seatmap.allocator import place_random, place_unseated, reconcile
from seatmap.layouts import row_major, shape
from seatmap.models import GridSpec, Position, Student, Template, parse_seat_key, seat_key
from seatmap.relocation import DragGesture, Relocation, cell_origin, relocate

logger = logging.getLogger(__name__)


class Cell(NamedTuple):
    position: Position
    valid: bool
    student: Optional[Student]


@dataclass(frozen=True)
class SeatPlan:
    grid: GridSpec = field(default_factory=GridSpec)
    students: Tuple[Student, ...] = ()
    seats: Dict[Position, str] = field(default_factory=dict)
    valid: FrozenSet[Position] = frozenset()

    @classmethod
    def new(cls, grid: Optional[GridSpec] = None) -> "SeatPlan":
        grid = grid or GridSpec()
        return cls(grid=grid, valid=shape(grid.rows, grid.cols, grid.template))

    # -- lookups --------------------------------------------------------

    def student(self, student_id) -> Optional[Student]:
        for s in self.students:
            if s.id == student_id:
                return s
        return None

    def seat_of(self, student_id) -> Optional[Position]:
        for position, sid in self.seats.items():
            if sid == student_id:
                return position
        return None

    def unseated(self) -> List[Student]:
        seated = set(self.seats.values())
        return [s for s in self.students if s.id not in seated]

    def cells(self) -> List[Cell]:
        by_id = {s.id: s for s in self.students}
        cells = []
        for row in range(self.grid.rows):
            for col in range(self.grid.cols):
                position = (row, col)
                sid = self.seats.get(position)
                cells.append(Cell(position, position in self.valid, by_id.get(sid)))
        return cells

    # -- grid -----------------------------------------------------------

    def apply_grid(self, rows=None, cols=None, seat_size=None, gap=None, template=None) -> "SeatPlan":
        grid = GridSpec.clamped(
            rows=self.grid.rows if rows is None else rows,
            cols=self.grid.cols if cols is None else cols,
            seat_size=self.grid.seat_size if seat_size is None else seat_size,
            gap=self.grid.gap if gap is None else gap,
            template=self.grid.template if template is None else template,
        )
        valid = shape(grid.rows, grid.cols, grid.template)
        seats = reconcile(self.seats, self.valid, valid, self.students)
        seats = place_unseated(seats, valid, self.students)
        logger.debug("Grid now %dx%d %s, %d seated", grid.rows, grid.cols, grid.template.value, len(seats))
        return replace(self, grid=grid, valid=valid, seats=seats)

    def set_template(self, name) -> "SeatPlan":
        return self.apply_grid(template=Template.parse(name))

    # -- students -------------------------------------------------------

    def add_student(self, name, email="") -> "SeatPlan":
        if not (name or "").strip():
            return self
        return self.import_students([(name, email)])

    def import_students(self, pairs: Iterable[Tuple[str, str]]) -> "SeatPlan":
        added = [Student.create(name, email) for name, email in pairs if (name or "").strip()]
        if not added:
            return self
        students = self.students + tuple(added)
        seats = place_unseated(self.seats, self.valid, students)
        logger.debug("Added %d students", len(added))
        return replace(self, students=students, seats=seats)

    def delete_student(self, student_id) -> "SeatPlan":
        students = tuple(s for s in self.students if s.id != student_id)
        seats = {p: sid for p, sid in self.seats.items() if sid != student_id}
        seats = place_unseated(seats, self.valid, students)
        return replace(self, students=students, seats=seats)

    def rename_student(self, student_id, name, email=None) -> "SeatPlan":
        if not (name or "").strip():
            return self
        students = []
        for s in self.students:
            if s.id == student_id:
                s = replace(s, name=name.strip(), email=s.email if email is None else email.strip())
            students.append(s)
        return replace(self, students=tuple(students))

    def clear(self) -> "SeatPlan":
        return replace(self, students=(), seats={})

    # -- seating --------------------------------------------------------

    def assign(self, student_id, position: Position) -> "SeatPlan":
        """Put a student on a chosen seat.

        The student's old seat is vacated. Whoever sat on the chosen seat
        goes to the first free seat, if there is one.
        """
        if position not in self.valid or self.student(student_id) is None:
            logger.debug("Assign of %s to %s rejected", student_id, position)
            return self
        seats = {p: sid for p, sid in self.seats.items() if sid != student_id}
        seats[position] = student_id
        seats = place_unseated(seats, self.valid, self.students)
        return replace(self, seats=seats)

    def randomize(self, rng=None) -> "SeatPlan":
        return replace(self, seats=place_random(self.valid, self.students, rng))

    def relocate(self, source: Position, target: Position) -> Tuple["SeatPlan", Relocation]:
        result = relocate(self.seats, self.valid, source, target)
        if not result.changed:
            return self, result
        return replace(self, seats=result.seats), result

    def drag(self, source: Position, dx: float, dy: float, cancelled=False) -> Tuple["SeatPlan", Relocation]:
        """Replay a full pointer drag from ``source`` by ``(dx, dy)`` pixels."""
        gesture = DragGesture(self.grid, self.valid, self.seats)
        if not gesture.begin(source, cell_origin(self.grid, source)):
            return self, gesture.cancel()
        gesture.move(dx, dy)
        result = gesture.cancel() if cancelled else gesture.release()
        if not result.changed:
            return self, result
        return replace(self, seats=result.seats), result

    # -- persistence ----------------------------------------------------

    def to_record(self) -> dict:
        return {
            "rows": self.grid.rows,
            "cols": self.grid.cols,
            "seatSize": self.grid.seat_size,
            "gap": self.grid.gap,
            "template": self.grid.template.value,
            "students": [{"id": s.id, "name": s.name, "email": s.email} for s in self.students],
            "seats": {seat_key(p): self.seats[p] for p in row_major(self.seats)},
        }

    @classmethod
    def from_record(cls, record: dict) -> "SeatPlan":
        """Rebuild a plan from a stored snapshot.

        Invalid seats are dropped, then unseated students fill the free
        seats in reading order.
        """
        grid = GridSpec.clamped(
            rows=record.get("rows"),
            cols=record.get("cols"),
            seat_size=record.get("seatSize"),
            gap=record.get("gap"),
            template=record.get("template") or "full",
        )
        valid = shape(grid.rows, grid.cols, grid.template)

        students = []
        seen_ids = set()
        raw_students = record.get("students") or []
        if not isinstance(raw_students, list):
            logger.warning("Ignoring students of type %s in layout", type(raw_students).__name__)
            raw_students = []
        for raw in raw_students:
            if not isinstance(raw, dict):
                continue
            name = str(raw.get("name") or "").strip()
            sid = raw.get("id")
            if not name or sid is None or str(sid) in seen_ids:
                continue
            seen_ids.add(str(sid))
            students.append(Student(id=str(sid), name=name, email=str(raw.get("email") or "").strip()))

        raw_seats = record.get("seats") or {}
        if not isinstance(raw_seats, dict):
            logger.warning("Ignoring seats of type %s in layout", type(raw_seats).__name__)
            raw_seats = {}

        parsed = {}
        for key, sid in raw_seats.items():
            position = parse_seat_key(key)
            if position is not None:
                parsed[position] = str(sid) if sid is not None else None

        seats = {}
        taken = set()
        for position in row_major(parsed):
            sid = parsed[position]
            if position not in valid or sid not in seen_ids or sid in taken:
                continue
            seats[position] = sid
            taken.add(sid)

        dropped = len(raw_seats) - len(seats)
        if dropped:
            logger.warning("Dropped %d invalid seat entries while loading layout", dropped)

        students = tuple(students)
        seats = place_unseated(seats, valid, students)
        return cls(grid=grid, students=students, seats=seats, valid=valid)
