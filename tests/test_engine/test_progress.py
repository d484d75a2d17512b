"""
Tests for progress and remaining amount
"""
from decimal import Decimal

import pytest

from savings.engine.progress import compute_progress, compute_remaining


def test_progress_and_remaining_from_zero_start(make_goal):
    goal = make_goal(target="10000", starting="0")

    assert compute_progress(goal, Decimal("2000")) == Decimal("20")
    assert compute_remaining(goal, Decimal("2000")) == Decimal("8000")


def test_progress_counts_from_starting_balance(make_goal):
    goal = make_goal(target="5000", starting="1000")
    assert compute_progress(goal, Decimal("3000")) == Decimal("50")


def test_starting_above_target(make_goal):
    """starting_balance > target - 100%, остаток 0"""
    goal = make_goal(target="5000", starting="6000")

    assert compute_progress(goal, Decimal("6000")) == Decimal("100")
    assert compute_remaining(goal, Decimal("6000")) == Decimal("0")


def test_target_equal_to_starting_is_complete(make_goal):
    goal = make_goal(target="1000", starting="1000")
    assert compute_progress(goal, Decimal("0")) == Decimal("100")


def test_progress_clamped_above(make_goal):
    goal = make_goal(target="1000")
    assert compute_progress(goal, Decimal("2500")) == Decimal("100")


def test_progress_clamped_below(make_goal):
    """Сумма упала ниже стартовой - прогресс 0, не отрицательный"""
    goal = make_goal(target="1000", starting="500")
    assert compute_progress(goal, Decimal("100")) == Decimal("0")


def test_over_funded_goal_has_zero_remaining(make_goal):
    goal = make_goal(target="1000")
    assert compute_remaining(goal, Decimal("1500")) == Decimal("0")


@pytest.mark.parametrize("target,starting,current", [
    ("10000", "0", "-50"),
    ("10000", "0", "0"),
    ("10000", "0", "9999.99"),
    ("10000", "0", "10000"),
    ("10000", "2000", "1000"),
    ("100", "0", "1000000"),
    ("0.01", "0", "0.005"),
    ("500", "800", "0"),
])
def test_progress_and_remaining_bounds(make_goal, target, starting, current):
    goal = make_goal(target=target, starting=starting)
    current = Decimal(current)

    assert Decimal("0") <= compute_progress(goal, current) <= Decimal("100")
    assert compute_remaining(goal, current) >= Decimal("0")
