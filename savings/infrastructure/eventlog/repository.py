"""
Event Log Repository - source of truth для Event Sourcing

Все изменения целей и снапшоты счетов записываются как неизменяемые события.
"""
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List
from sqlalchemy.orm import Session

from savings.infrastructure.db.models import EventLog


class EventLogRepository:
    """
    Repository для работы с event log
    """

    def __init__(self, db: Session):
        self.db = db

    def append_event(
        self,
        event_type: str,
        payload: Dict[str, Any],
        occurred_at: Optional[datetime] = None,
        idempotency_key: Optional[str] = None,
    ) -> int:
        """
        Добавить событие в event log

        Args:
            event_type: Тип события (например, "goal_created")
            payload: Данные события (будут сохранены как JSONB)
            occurred_at: Когда произошло событие (default: now)
            idempotency_key: Ключ для идемпотентности (опционально)

        Returns:
            event_id: ID созданного события

        Raises:
            IntegrityError: если idempotency_key уже существует

        Example:
            >>> repo = EventLogRepository(db)
            >>> event_id = repo.append_event(
            ...     event_type="goal_created",
            ...     payload={"goal_id": 1, "name": "Emergency fund"},
            ...     idempotency_key="goal-create-1"
            ... )
        """
        if occurred_at is None:
            occurred_at = datetime.now(timezone.utc)

        event = EventLog(
            event_type=event_type,
            payload_json=payload,
            occurred_at=occurred_at,
            idempotency_key=idempotency_key,
        )

        self.db.add(event)
        self.db.flush()  # Получить ID без commit

        return event.id

    def list_events_since(
        self,
        after_id: int = 0,
        limit: int = 200,
        event_types: Optional[List[str]] = None,
    ) -> List[EventLog]:
        """
        Получить события после указанного ID (для projectors)

        Args:
            after_id: Получить события с ID > after_id (checkpoint)
            limit: Максимум событий за раз (default: 200)
            event_types: Фильтр по типам событий (опционально)

        Returns:
            Список событий отсортированных по ID (ASC)
        """
        query = self.db.query(EventLog).filter(EventLog.id > after_id)

        if event_types:
            query = query.filter(EventLog.event_type.in_(event_types))

        query = query.order_by(EventLog.id.asc()).limit(limit)

        return query.all()

    def count_events(self, event_types: Optional[List[str]] = None) -> int:
        """Подсчитать количество событий (опционально по типам)"""
        query = self.db.query(EventLog)

        if event_types:
            query = query.filter(EventLog.event_type.in_(event_types))

        return query.count()
