"""Tests for reconciling and filling seat assignments."""
import random
from collections import Counter

from conftest import assert_consistent
from seatmap.allocator import place_random, place_unseated, reconcile
from seatmap.layouts import shape
from seatmap.models import Student


def test_reconcile_fills_in_reading_order() -> None:
    people = [Student("e1", "E1"), Student("e2", "E2"), Student("e3", "E3")]
    valid = shape(2, 3, "full")

    seats = reconcile({}, frozenset(), valid, people)

    assert seats == {(0, 0): "e1", (0, 1): "e2", (0, 2): "e3"}


def test_reconcile_keeps_surviving_placements(students) -> None:
    old_valid = shape(3, 3, "full")
    old = {(2, 2): "s1", (1, 1): "s2"}

    seats = reconcile(old, old_valid, shape(3, 3, "u"), students)

    # (2, 2) still exists, (1, 1) is gone so s2 moves to the first free seat
    assert seats[(2, 2)] == "s1"
    assert seats[(0, 0)] == "s2"
    assert seats[(0, 2)] == "s3"
    assert_consistent(seats, shape(3, 3, "u"), students)


def test_reconcile_is_deterministic_and_idempotent(students) -> None:
    v1 = shape(4, 4, "full")
    v2 = shape(4, 4, "u")
    old = place_random(v1, students, random.Random(3))

    first = reconcile(old, v1, v2, students)
    assert reconcile(old, v1, v2, students) == first
    assert reconcile(first, v2, v2, students) == first


def test_reconcile_overflow_seats_first_students(students) -> None:
    valid = shape(1, 3, "full")

    seats = reconcile({}, frozenset(), valid, students)

    assert sorted(seats.values()) == ["s1", "s2", "s3"]


def test_reconcile_drops_deleted_students(students) -> None:
    valid = shape(2, 2, "full")
    seats = reconcile({(0, 0): "gone", (0, 1): "s1"}, valid, valid, students[:2])

    assert seats == {(0, 0): "s2", (0, 1): "s1"}


def test_place_unseated_does_not_move_anyone(students) -> None:
    valid = shape(2, 3, "full")
    current = {(1, 2): "s1", (0, 1): "s2"}

    seats = place_unseated(current, valid, students)

    assert seats[(1, 2)] == "s1"
    assert seats[(0, 1)] == "s2"
    assert seats[(0, 0)] == "s3"
    assert seats[(0, 2)] == "s4"
    assert seats[(1, 0)] == "s5"
    assert (1, 1) not in seats


def test_place_unseated_overflow(students) -> None:
    valid = shape(3, 1, "full")
    seats = place_unseated({}, valid, students)
    assert seats == {(0, 0): "s1", (1, 0): "s2", (2, 0): "s3"}


def test_place_random_respects_capacity(students) -> None:
    valid = shape(1, 3, "full")

    seats = place_random(valid, students)

    assert len(seats) == 3
    assert_consistent(seats, valid, students)


def test_place_random_leaves_spare_seats_empty(students) -> None:
    valid = shape(3, 3, "full")
    seats = place_random(valid, students[:2])
    assert sorted(seats.values()) == ["s1", "s2"]


def test_place_random_spreads_over_all_seats() -> None:
    valid = shape(1, 3, "full")
    rng = random.Random(1234)
    only = [Student("a", "A")]

    counts = Counter()
    for _ in range(3000):
        seats = place_random(valid, only, rng)
        counts.update(seats.keys())

    assert set(counts) == set(valid)
    assert min(counts.values()) > 800


def test_reconcile_keeps_first_duplicate_in_reading_order(students) -> None:
    valid = shape(1, 3, "full")
    old = {(0, 2): "s1", (0, 0): "s1"}

    seats = reconcile(old, valid, valid, students[:2])

    assert seats == {(0, 0): "s1", (0, 1): "s2"}
