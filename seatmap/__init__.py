from seatmap.allocator import place_random, place_unseated, reconcile
from seatmap.layouts import shape
from seatmap.models import GridSpec, Student, Template
from seatmap.relocation import DragGesture, Outcome, relocate
from seatmap.seatplan import SeatPlan

__all__ = [
    "DragGesture",
    "GridSpec",
    "Outcome",
    "SeatPlan",
    "Student",
    "Template",
    "place_random",
    "place_unseated",
    "reconcile",
    "relocate",
    "shape",
]
