"""
Allocation resolver - derives a goal's current saved amount from its accounts.

Pure functions: same Goal + Account snapshot always give the same amount.
Rules pointing at an unknown account contribute zero; allocation values are
taken as-is (range checks live in savings.application.validation).
"""
import logging
from decimal import Decimal
from typing import Iterable, Mapping, Union

from savings.domain.account import Account
from savings.domain.allocation import AllocationKind, AllocationRule
from savings.domain.goal import Goal

logger = logging.getLogger(__name__)

AccountSnapshot = Union[Mapping[str, Account], Iterable[Account]]

_HUNDRED = Decimal("100")


def index_accounts(accounts: AccountSnapshot) -> Mapping[str, Account]:
    """Accept either {account_id: Account} or a plain sequence of accounts."""
    if isinstance(accounts, Mapping):
        return accounts
    return {a.account_id: a for a in accounts}


def allocation_contribution(rule: AllocationRule, account: Account) -> Decimal:
    """How much of the account's balance the rule claims for its goal."""
    if rule.kind is AllocationKind.PERCENTAGE:
        return account.balance * rule.value / _HUNDRED
    if rule.kind is AllocationKind.FIXED:
        # Fixed claim is capped by what is actually in the account
        return min(rule.value, account.balance)
    raise ValueError(f"Unknown allocation kind: {rule.kind!r}")


def resolve_current_amount(goal: Goal, accounts: AccountSnapshot) -> Decimal:
    """
    Current saved amount of a goal

    Args:
        goal: Goal snapshot
        accounts: Account snapshot (mapping by account_id or sequence)

    Returns:
        starting_balance for manual goals, otherwise the sum of the
        contributions of every rule whose account exists

    Example:
        >>> goal = Goal(..., allocations=(AllocationRule.percentage("acc-1", 50),))
        >>> resolve_current_amount(goal, [Account("acc-1", "Savings", Decimal("4000"))])
        Decimal('2000')
    """
    if not goal.allocations:
        return goal.starting_balance

    by_id = index_accounts(accounts)
    total = Decimal("0")

    for rule in goal.allocations:
        account = by_id.get(rule.account_id)
        if account is None:
            logger.debug(
                "Goal %s: allocation references unknown account %s, skipped",
                goal.goal_id, rule.account_id
            )
            continue
        total += allocation_contribution(rule, account)

    return total
