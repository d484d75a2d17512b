"""
Tests for the full recompute: balances, statuses, ordering, totals
"""
from datetime import date, datetime
from decimal import Decimal

from savings.domain.allocation import AllocationRule
from savings.engine.overview import build_overview, pacing_label, recompute_goal_balances
from savings.engine.pacing import Pacing

NOW = datetime(2026, 3, 1)


def test_recompute_goal_balances(make_goal, savings_account, checking_account):
    goals = [
        make_goal(goal_id=1, allocations=[AllocationRule.percentage("acc-savings", 50)]),
        make_goal(goal_id=2, allocations=[AllocationRule.fixed("acc-checking", 10000)]),
        make_goal(goal_id=3, starting="125"),
    ]
    balances = recompute_goal_balances(goals, [savings_account, checking_account])

    assert balances == {1: Decimal("2000"), 2: Decimal("3000"), 3: Decimal("125")}


def test_overview_percentage_and_fixed_goals(make_goal, savings_account, checking_account):
    goals = [
        make_goal(goal_id=1, target="10000", allocations=[AllocationRule.percentage("acc-savings", 50)]),
        make_goal(goal_id=2, target="5000", starting="1000",
                  allocations=[AllocationRule.fixed("acc-checking", 10000)]),
    ]
    overview = build_overview(goals, [savings_account, checking_account], NOW)

    a, b = overview.goals
    assert (a.current_amount, a.progress, a.remaining) == (Decimal("2000"), Decimal("20"), Decimal("8000"))
    assert (b.current_amount, b.progress, b.remaining) == (Decimal("3000"), Decimal("50"), Decimal("2000"))
    assert overview.totals.total_saved == Decimal("4000")
    assert overview.totals.total_target == Decimal("14000")


def test_completed_goals_listed_last(make_goal):
    done = make_goal(goal_id=1, target="100", starting="100").mark_completed(NOW)
    goals = [done, make_goal(goal_id=2), make_goal(goal_id=3)]

    overview = build_overview(goals, [], NOW)

    assert [s.goal.goal_id for s in overview.goals] == [2, 3, 1]
    assert overview.active_count == 2
    assert overview.completed_count == 1


def test_ready_to_complete_flag(make_goal):
    reached = make_goal(goal_id=1, target="500", starting="500")
    pending = make_goal(goal_id=2, target="500")
    done = make_goal(goal_id=3, target="500", starting="500").mark_completed(NOW)

    statuses = {s.goal.goal_id: s for s in build_overview([reached, pending, done], [], NOW).goals}

    assert statuses[1].is_ready_to_complete
    assert not statuses[2].is_ready_to_complete
    assert not statuses[3].is_ready_to_complete


def test_overview_carries_pacing(make_goal):
    goal = make_goal(goal_id=1, target="3000", created_at=datetime(2026, 1, 1), target_date=date(2026, 5, 30))
    status = build_overview([goal], [], NOW).goals[0]

    assert status.pacing.days_remaining == 90
    assert status.pacing.monthly_needed == Decimal("1000")


def test_overview_does_not_mutate_inputs(make_goal, savings_account):
    goals = [make_goal(goal_id=1, allocations=[AllocationRule.percentage("acc-savings", 50)])]
    accounts = [savings_account]

    first = build_overview(goals, accounts, NOW)
    second = build_overview(goals, accounts, NOW)

    assert first == second
    assert accounts == [savings_account]


def test_pacing_label():
    assert pacing_label(Pacing()) == ""
    assert pacing_label(Pacing(days_remaining=-3, on_track=False)) == "past due"
    assert pacing_label(Pacing(days_remaining=0)) == "due today"
    assert pacing_label(Pacing(days_remaining=1)) == "1 day left"
    assert pacing_label(Pacing(days_remaining=42)) == "42 days left"
