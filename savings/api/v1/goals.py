"""
Goals API endpoints
"""
from datetime import date, datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from savings.api.deps import get_db, get_overview_service
from savings.application.goals import (
    CompleteGoalUseCase,
    CreateGoalUseCase,
    DeleteGoalUseCase,
    ReopenGoalUseCase,
    SetGoalAllocationsUseCase,
    UpdateGoalUseCase,
)
from savings.application.overview import GoalsOverviewService
from savings.application.validation import GoalNotFoundError, GoalValidationError
from savings.domain.allocation import AllocationKind, AllocationRule
from savings.domain.goal import DEFAULT_COLOR, DEFAULT_ICON
from savings.engine.overview import GoalStatus, pacing_label
from savings.utils.money import format_money, format_percent
from savings.utils.validation import validate_and_normalize_amount


router = APIRouter(prefix="/api/v1/goals", tags=["goals"])


# === Request/Response models ===

class AllocationPayload(BaseModel):
    account_id: str
    allocation_type: AllocationKind
    allocation_value: str

    @field_validator("allocation_value")
    @classmethod
    def validate_value(cls, v: str) -> str:
        return validate_and_normalize_amount(v, max_decimal_places=2)

    def to_rule(self) -> AllocationRule:
        return AllocationRule(
            account_id=self.account_id,
            kind=self.allocation_type,
            value=Decimal(self.allocation_value)
        )


class CreateGoalRequest(BaseModel):
    name: str
    target_amount: str
    target_date: date | None = None
    allocations: list[AllocationPayload] = []
    starting_balance: str | None = None  # None - посчитать по счетам
    icon: str = DEFAULT_ICON
    color: str = DEFAULT_COLOR

    @field_validator("target_amount", "starting_balance")
    @classmethod
    def validate_amount(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return validate_and_normalize_amount(v, max_decimal_places=2)


class UpdateGoalRequest(BaseModel):
    name: str | None = None
    target_amount: str | None = None
    target_date: date | None = None  # явный null снимает дедлайн
    starting_balance: str | None = None
    icon: str | None = None
    color: str | None = None
    is_active: bool | None = None

    @field_validator("target_amount", "starting_balance")
    @classmethod
    def validate_amount(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return validate_and_normalize_amount(v, max_decimal_places=2)


class SetAllocationsRequest(BaseModel):
    allocations: list[AllocationPayload]


class GoalResponse(BaseModel):
    goal_id: int
    name: str
    icon: str
    color: str
    target_amount: str  # Decimal as string
    starting_balance: str
    current_amount: str
    remaining: str
    progress: str
    target_date: date | None
    days_remaining: int | None
    monthly_needed: str | None
    on_track: bool | None
    pacing_label: str
    is_active: bool
    is_completed: bool
    is_ready_to_complete: bool
    completed_at: datetime | None
    created_at: datetime
    allocations: list[AllocationPayload]
    current_label: str
    target_label: str
    progress_label: str


class GoalsOverviewResponse(BaseModel):
    goals: list[GoalResponse]
    total_saved: str
    total_target: str
    active_count: int
    completed_count: int


class GoalCreatedResponse(BaseModel):
    goal_id: int


# === Helpers ===

def _decimal_str(value: Decimal | None, places: str = "0.01") -> str | None:
    if value is None:
        return None
    return str(value.quantize(Decimal(places)))


def _goal_response(status: GoalStatus, currency: str) -> GoalResponse:
    goal = status.goal
    pacing = status.pacing
    return GoalResponse(
        goal_id=goal.goal_id,
        name=goal.name,
        icon=goal.icon,
        color=goal.color,
        target_amount=_decimal_str(goal.target_amount),
        starting_balance=_decimal_str(goal.starting_balance),
        current_amount=_decimal_str(status.current_amount),
        remaining=_decimal_str(status.remaining),
        progress=_decimal_str(status.progress, "0.1"),
        target_date=goal.target_date,
        days_remaining=pacing.days_remaining,
        monthly_needed=_decimal_str(pacing.monthly_needed),
        on_track=pacing.on_track,
        pacing_label=pacing_label(pacing),
        is_active=goal.is_active,
        is_completed=goal.is_completed,
        is_ready_to_complete=status.is_ready_to_complete,
        completed_at=goal.completed_at,
        created_at=goal.created_at,
        allocations=[AllocationPayload(**rule.to_payload()) for rule in goal.allocations],
        current_label=format_money(status.current_amount, currency),
        target_label=format_money(goal.target_amount, currency),
        progress_label=format_percent(status.progress),
    )


def _http_error(e: GoalValidationError) -> HTTPException:
    if isinstance(e, GoalNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


# === Endpoints ===

@router.get("/", response_model=GoalsOverviewResponse)
def list_goals(service: GoalsOverviewService = Depends(get_overview_service)):
    """Все цели с прогрессом, темпом и итогами"""
    overview = service.build()
    currency = service.currency

    return GoalsOverviewResponse(
        goals=[_goal_response(s, currency) for s in overview.goals],
        total_saved=_decimal_str(overview.totals.total_saved),
        total_target=_decimal_str(overview.totals.total_target),
        active_count=overview.active_count,
        completed_count=overview.completed_count,
    )


@router.post("/", response_model=GoalCreatedResponse)
def create_goal(req: CreateGoalRequest, db: Session = Depends(get_db)):
    """Создать цель"""
    try:
        goal_id = CreateGoalUseCase(db).execute(
            name=req.name,
            target_amount=req.target_amount,
            target_date=req.target_date,
            allocations=[a.to_rule() for a in req.allocations],
            starting_balance=req.starting_balance,
            icon=req.icon,
            color=req.color
        )
    except GoalValidationError as e:
        raise _http_error(e) from e

    return GoalCreatedResponse(goal_id=goal_id)


@router.patch("/{goal_id}")
def update_goal(goal_id: int, req: UpdateGoalRequest, db: Session = Depends(get_db)):
    """Обновить цель (только переданные поля)"""
    try:
        UpdateGoalUseCase(db).execute(
            goal_id=goal_id,
            name=req.name,
            target_amount=req.target_amount,
            target_date=req.target_date if "target_date" in req.model_fields_set else ...,
            starting_balance=req.starting_balance,
            icon=req.icon,
            color=req.color,
            is_active=req.is_active
        )
    except GoalValidationError as e:
        raise _http_error(e) from e

    return {"ok": True}


@router.put("/{goal_id}/allocations")
def set_allocations(goal_id: int, req: SetAllocationsRequest, db: Session = Depends(get_db)):
    """Заменить правила привязки к счетам"""
    try:
        SetGoalAllocationsUseCase(db).execute(
            goal_id=goal_id,
            allocations=[a.to_rule() for a in req.allocations]
        )
    except GoalValidationError as e:
        raise _http_error(e) from e

    return {"ok": True}


@router.post("/{goal_id}/complete")
def complete_goal(goal_id: int, db: Session = Depends(get_db)):
    """Отметить цель выполненной"""
    try:
        CompleteGoalUseCase(db).execute(goal_id=goal_id)
    except GoalValidationError as e:
        raise _http_error(e) from e

    return {"ok": True}


@router.post("/{goal_id}/reopen")
def reopen_goal(goal_id: int, db: Session = Depends(get_db)):
    """Вернуть цель в работу"""
    try:
        ReopenGoalUseCase(db).execute(goal_id=goal_id)
    except GoalValidationError as e:
        raise _http_error(e) from e

    return {"ok": True}


@router.delete("/{goal_id}")
def delete_goal(goal_id: int, db: Session = Depends(get_db)):
    """Удалить цель"""
    try:
        DeleteGoalUseCase(db).execute(goal_id=goal_id)
    except GoalValidationError as e:
        raise _http_error(e) from e

    return {"ok": True}
