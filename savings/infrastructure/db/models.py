"""
SQLAlchemy ORM models (event log + readmodels)
"""
from decimal import Decimal
from datetime import date as date_type
from sqlalchemy import String, DateTime, Integer, TIMESTAMP, Date, func, Boolean, Numeric, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import JSONB

from savings.infrastructure.db.session import Base


class EventLog(Base):
    """
    Event log - source of truth для Event Sourcing

    Все изменения целей и снапшоты счетов записываются как события (неизменяемые)
    """
    __tablename__ = "event_log"

    id: Mapped[int] = mapped_column(primary_key=True)

    event_type: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    payload_json: Mapped[dict] = mapped_column(JSONB, nullable=False)  # PostgreSQL JSONB

    occurred_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        index=True
    )
    idempotency_key: Mapped[str | None] = mapped_column(
        String(255),
        unique=True,
        nullable=True
    )
    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<EventLog(id={self.id}, type={self.event_type})>"


class ProjectorCheckpoint(Base):
    """
    Infrastructure: Track projector progress for idempotent event processing
    """
    __tablename__ = "projector_checkpoints"

    id: Mapped[int] = mapped_column(primary_key=True)
    projector_name: Mapped[str] = mapped_column(String(128), nullable=False)
    last_event_id: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")

    updated_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    __table_args__ = (
        UniqueConstraint('projector_name', name='uq_projector_name'),
    )


class AccountInfo(Base):
    """
    Read model: Freshest known account balances (built by AccountsProjector)
    """
    __tablename__ = "accounts"

    account_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    balance: Mapped[Decimal] = mapped_column(
        Numeric(precision=20, scale=2),
        nullable=False,
        server_default="0"
    )
    account_type: Mapped[str | None] = mapped_column(String(64), nullable=True)

    synced_at: Mapped[DateTime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)


class GoalInfo(Base):
    """Read model: Savings goals (built by GoalsProjector)"""
    __tablename__ = "goals"

    goal_id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    target_amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    target_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    starting_balance: Mapped[Decimal] = mapped_column(
        Numeric(precision=20, scale=2),
        nullable=False,
        server_default="0"
    )
    icon: Mapped[str] = mapped_column(String(32), nullable=False)
    color: Mapped[str] = mapped_column(String(32), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="true")
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")
    completed_at: Mapped[DateTime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    created_at: Mapped[DateTime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    updated_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )


class GoalAllocationInfo(Base):
    """Read model: Goal x Account allocation rules (built by GoalsProjector)"""
    __tablename__ = "goal_allocations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    goal_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    account_id: Mapped[str] = mapped_column(String(128), nullable=False)
    allocation_type: Mapped[str] = mapped_column(String(16), nullable=False)  # percentage, fixed
    allocation_value: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)

    __table_args__ = (
        UniqueConstraint('goal_id', 'account_id', name='uq_goal_allocation_account'),
    )
