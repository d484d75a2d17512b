"""
Progress calculator - share of the starting-to-target distance covered so far.
"""
from decimal import Decimal

from savings.domain.goal import Goal

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def compute_progress(goal: Goal, current_amount: Decimal) -> Decimal:
    """
    Progress in percent, always within [0, 100]

    Цель, у которой target <= starting_balance, считается выполненной (100).
    """
    needed = goal.target_amount - goal.starting_balance
    if needed <= 0:
        return _HUNDRED

    saved = current_amount - goal.starting_balance
    progress = saved / needed * _HUNDRED
    return max(_ZERO, min(_HUNDRED, progress))


def compute_remaining(goal: Goal, current_amount: Decimal) -> Decimal:
    """Amount still missing; an over-funded goal reports zero."""
    return max(_ZERO, goal.target_amount - current_amount)
