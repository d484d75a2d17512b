"""
Tests for GoalsProjector / AccountsProjector: replay, checkpoints, rebuild
"""
from decimal import Decimal

from savings.domain.account import Account
from savings.domain.allocation import AllocationRule
from savings.domain.goal import Goal
from savings.infrastructure.db.models import GoalAllocationInfo, GoalInfo, ProjectorCheckpoint
from savings.infrastructure.eventlog.repository import EventLogRepository
from savings.readmodels.projectors.accounts import AccountsProjector
from savings.readmodels.projectors.base import default_orchestrator
from savings.readmodels.projectors.goals import GoalsProjector
from savings.readmodels.snapshots import load_accounts, load_goals


def _append(db, event_type, payload):
    EventLogRepository(db).append_event(event_type=event_type, payload=payload)
    db.commit()


def _seed(db):
    _append(db, "account_synced", Account.sync("acc-1", "Savings", "4000"))
    _append(db, "goal_created", Goal.create(
        goal_id=1,
        name="House",
        target_amount="10000",
        starting_balance="0",
        allocations=[AllocationRule.percentage("acc-1", 50)],
    ))
    _append(db, "goal_created", Goal.create(goal_id=2, name="Car", target_amount="5000", starting_balance="100"))
    _append(db, "goal_updated", Goal.update(2, name="New car", allocations=[AllocationRule.fixed("acc-1", 700)]))
    _append(db, "goal_completed", Goal.complete(1))


def test_projectors_build_read_models(db_session):
    _seed(db_session)

    results = default_orchestrator(db_session).run_all()

    assert results == {"accounts": 5, "goals": 5}
    assert load_accounts(db_session)["acc-1"].balance == Decimal("4000")

    house, car = load_goals(db_session)
    assert house.is_completed
    assert car.name == "New car"
    assert car.allocations == (AllocationRule.fixed("acc-1", 700),)


def test_checkpoint_prevents_double_processing(db_session):
    _seed(db_session)
    projector = GoalsProjector(db_session)

    assert projector.run() == 5
    assert projector.run() == 0
    assert projector.get_checkpoint() == 5


def test_reset_rebuilds_same_state(db_session):
    """Полная пересборка даёт тот же read model"""
    _seed(db_session)
    projector = GoalsProjector(db_session)
    projector.run()
    before = load_goals(db_session)

    projector.reset()
    db_session.commit()
    assert db_session.query(GoalInfo).count() == 0
    assert projector.run() == 5

    assert load_goals(db_session) == before


def test_duplicate_goal_created_ignored(db_session):
    payload = Goal.create(goal_id=1, name="A", target_amount="1", starting_balance="0")
    _append(db_session, "goal_created", payload)
    _append(db_session, "goal_created", payload)

    GoalsProjector(db_session).run()

    assert db_session.query(GoalInfo).count() == 1


def test_reopen_and_delete(db_session):
    _seed(db_session)
    _append(db_session, "goal_reopened", Goal.reopen_event(1))
    _append(db_session, "goal_deleted", Goal.delete(2))

    GoalsProjector(db_session).run()

    goals = load_goals(db_session)
    assert [g.goal_id for g in goals] == [1]
    assert not goals[0].is_completed
    assert db_session.query(GoalAllocationInfo).filter(GoalAllocationInfo.goal_id == 2).count() == 0


def test_events_for_missing_goal_ignored(db_session):
    _append(db_session, "goal_updated", Goal.update(9, name="ghost"))
    _append(db_session, "goal_completed", Goal.complete(9))

    assert GoalsProjector(db_session).run() == 2
    assert db_session.query(GoalInfo).count() == 0


def test_account_removed(db_session):
    _append(db_session, "account_synced", Account.sync("acc-1", "Savings", "10"))
    _append(db_session, "account_removed", Account.remove("acc-1"))

    AccountsProjector(db_session).run()

    assert load_accounts(db_session) == {}
    checkpoint = db_session.query(ProjectorCheckpoint).filter(
        ProjectorCheckpoint.projector_name == "accounts"
    ).one()
    assert checkpoint.last_event_id == 2
