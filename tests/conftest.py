"""
Pytest fixtures for testing
"""
from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, JSON
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from sqlalchemy.dialects.postgresql import JSONB

from savings.domain.account import Account
from savings.domain.goal import Goal
from savings.infrastructure.db import models  # noqa: F401  (register tables)
from savings.infrastructure.db.session import Base


@pytest.fixture
def db_engine():
    """Create in-memory SQLite engine for tests, with JSONB→JSON mapping."""
    # StaticPool: одно соединение на все потоки (TestClient гоняет sync routes в threadpool)
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # SQLite doesn't support JSONB: remap to JSON for tests
    for table in Base.metadata.tables.values():
        for col in table.columns:
            if isinstance(col.type, JSONB):
                col.type = JSON()
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = sessionmaker(bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def make_goal():
    """Factory for Goal snapshots with sensible defaults"""
    def _make(goal_id=1, target="10000", starting="0", allocations=(), **kwargs):
        kwargs.setdefault("name", f"goal-{goal_id}")
        kwargs.setdefault("created_at", datetime(2026, 1, 1))
        return Goal(
            goal_id=goal_id,
            target_amount=Decimal(target),
            starting_balance=Decimal(starting),
            allocations=tuple(allocations),
            **kwargs
        )
    return _make


@pytest.fixture
def savings_account():
    return Account(account_id="acc-savings", name="High-yield savings", balance=Decimal("4000"), account_type="savings")


@pytest.fixture
def checking_account():
    return Account(account_id="acc-checking", name="Checking", balance=Decimal("3000"), account_type="checking")
