import argparse
import logging
from pathlib import Path

from seatmap.backend.exports import export_json
from seatmap.config import LOG_LEVEL
from seatmap.models import GridSpec
from seatmap.seatplan import SeatPlan
from seatmap.student_import import StudentImportError, parse_manual_entry, read_students_csv

logger = logging.getLogger(__name__)


def main(argv=None):
    ap = argparse.ArgumentParser(description="Lay out classroom seats and seat students on them")
    ap.add_argument("csv", nargs="?", help="Headerless CSV with name[,email] per line")
    ap.add_argument("--add", action="append", default=[], metavar="NAME[,EMAIL]", help="Add one student, may be repeated")
    ap.add_argument("--rows", type=int, default=None)
    ap.add_argument("--cols", type=int, default=None)
    ap.add_argument("--template", default="full", help="full, u or front-rows")
    ap.add_argument("--random", action="store_true", help="Shuffle students over the seats")
    ap.add_argument("--save", type=Path, help="Write the layout as JSON to this file")
    args = ap.parse_args(argv)

    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    students = []
    if args.csv:
        try:
            students = read_students_csv(args.csv)
        except StudentImportError as e:
            logger.error("%s", e)
            return 1
    students += parse_manual_entry("\n".join(args.add))

    plan = SeatPlan.new(GridSpec.clamped(rows=args.rows, cols=args.cols, template=args.template))
    plan = plan.import_students(students)
    if args.random:
        plan = plan.randomize()

    print("\n--- Seat Allocation ---")
    for cell in plan.cells():
        if cell.student:
            row, col = cell.position
            print(f"{cell.student.name} -> Row {row + 1} | Column {col + 1}")

    unseated = plan.unseated()
    if unseated:
        print(f"\n{len(unseated)} student(s) without a seat:")
        for s in unseated:
            print(f"  {s.name}")

    if args.save:
        args.save.write_text(export_json(plan), encoding="utf-8")
        logger.info("Saved layout to %s", args.save)

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
