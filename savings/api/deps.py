"""
FastAPI dependencies (DB session, settings)
"""
from sqlalchemy.orm import Session
from fastapi import Depends

from savings.application.overview import GoalsOverviewService
from savings.config import Settings, get_settings
from savings.infrastructure.db.session import get_db as _get_db


# Re-export get_db для удобства
get_db = _get_db


def get_overview_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> GoalsOverviewService:
    """
    Usage:
        @router.get("/goals")
        def list_goals(service: GoalsOverviewService = Depends(get_overview_service)):
            ...
    """
    return GoalsOverviewService(db, settings)
