"""
Goals overview service - loads snapshots and recomputes every goal figure
"""
import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from savings.config import Settings, get_settings
from savings.engine.overview import GoalsOverview, build_overview
from savings.readmodels.snapshots import load_accounts, load_goals

logger = logging.getLogger(__name__)


class GoalsOverviewService:
    """
    Пересчёт по запросу: вызывается после любого изменения данных,
    результат заменяет предыдущий целиком
    """

    def __init__(self, db: Session, settings: Settings | None = None) -> None:
        self._db = db
        self._settings = settings or get_settings()

    @property
    def currency(self) -> str:
        return self._settings.CURRENCY

    def now(self) -> datetime:
        return datetime.now(ZoneInfo(self._settings.TIMEZONE))

    def build(self, now: datetime | None = None) -> GoalsOverview:
        goals = load_goals(self._db)
        accounts = load_accounts(self._db)

        overview = build_overview(
            goals,
            accounts,
            now or self.now(),
            tolerance=self._settings.PACE_TOLERANCE_PCT
        )

        logger.info(
            "Goals overview: %d active, %d completed, saved %s of %s",
            overview.active_count,
            overview.completed_count,
            overview.totals.total_saved,
            overview.totals.total_target,
        )
        return overview
