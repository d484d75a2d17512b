"""
Base Projector - базовый класс для всех projectors (CQRS read-side)

Projectors строят read models из событий event log.
Используют checkpoint для идемпотентности и инкрементальных обновлений.
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional
from sqlalchemy.orm import Session

from savings.infrastructure.db.models import EventLog, ProjectorCheckpoint
from savings.infrastructure.eventlog.repository import EventLogRepository

logger = logging.getLogger(__name__)


class BaseProjector(ABC):
    """
    Базовый класс для всех projectors

    Каждый projector:
    1. Читает события из event_log (с checkpoint)
    2. Обрабатывает события (handle_event)
    3. Обновляет read model
    4. Сохраняет новый checkpoint
    """

    def __init__(self, db: Session, projector_name: str):
        """
        Args:
            db: SQLAlchemy session
            projector_name: Уникальное имя projector'а (для checkpoint)
        """
        self.db = db
        self.projector_name = projector_name
        self.event_repo = EventLogRepository(db)

    @abstractmethod
    def handle_event(self, event: EventLog) -> None:
        """
        Обработать одно событие и обновить read model

        Note:
            Метод должен быть идемпотентным - повторная обработка
            того же события не должна ломать состояние read model.
        """
        pass

    def get_checkpoint(self) -> int:
        """Last processed event_id (0 если projector ещё не запускался)"""
        checkpoint = self.db.query(ProjectorCheckpoint).filter(
            ProjectorCheckpoint.projector_name == self.projector_name
        ).first()

        return checkpoint.last_event_id if checkpoint else 0

    def save_checkpoint(self, event_id: int) -> None:
        """Сохранить checkpoint (last processed event_id) в БД"""
        # Flush перед query чтобы увидеть незакоммиченные изменения
        self.db.flush()

        checkpoint = self.db.query(ProjectorCheckpoint).filter(
            ProjectorCheckpoint.projector_name == self.projector_name
        ).first()

        if checkpoint:
            checkpoint.last_event_id = event_id
        else:
            checkpoint = ProjectorCheckpoint(
                projector_name=self.projector_name,
                last_event_id=event_id
            )
            self.db.add(checkpoint)

    def run(
        self,
        event_types: Optional[List[str]] = None,
        batch_size: int = 200
    ) -> int:
        """
        Запустить projector - обработать все новые события

        Args:
            event_types: Фильтр по типам событий (если None - все события).
                The checkpoint still moves past the filtered events, so only
                use a filter on a projector that ignores the other types anyway.
            batch_size: Размер батча для обработки (default: 200)

        Returns:
            Количество обработанных событий

        Example:
            >>> projector = GoalsProjector(db)
            >>> count = projector.run()
        """
        checkpoint = self.get_checkpoint()
        processed_count = 0

        while True:
            events = self.event_repo.list_events_since(
                after_id=checkpoint,
                limit=batch_size,
                event_types=event_types
            )

            if not events:
                break  # Нет новых событий

            for event in events:
                self.handle_event(event)
                checkpoint = event.id
                processed_count += 1

            # Сохраняем checkpoint после батча
            self.save_checkpoint(checkpoint)
            self.db.commit()

            if len(events) < batch_size:
                break

        if processed_count:
            logger.debug("Projector %s processed %d event(s)", self.projector_name, processed_count)

        return processed_count

    def reset(self) -> None:
        """
        Сбросить projector - checkpoint в 0

        Warning:
            Это приведёт к полной пересборке read model!
            Подклассы удаляют свои read models и вызывают super().reset()
        """
        self.save_checkpoint(0)


class ProjectorOrchestrator:
    """
    Orchestrator для запуска всех projectors в правильном порядке
    """

    def __init__(self, db: Session):
        self.db = db
        self.projectors: List[BaseProjector] = []

    def register(self, projector: BaseProjector) -> None:
        """Порядок регистрации = порядок выполнения!"""
        self.projectors.append(projector)

    def run_all(self) -> dict[str, int]:
        """
        Запустить все зарегистрированные projectors

        Returns:
            Словарь {projector_name: processed_count}

        Example:
            >>> orchestrator = ProjectorOrchestrator(db)
            >>> orchestrator.register(AccountsProjector(db))
            >>> orchestrator.register(GoalsProjector(db))
            >>> orchestrator.run_all()
            {'accounts': 12, 'goals': 7}
        """
        results = {}

        for projector in self.projectors:
            count = projector.run()
            results[projector.projector_name] = count

        return results


def default_orchestrator(db: Session) -> ProjectorOrchestrator:
    """All read-model projectors of the service, in dependency order."""
    from savings.readmodels.projectors.accounts import AccountsProjector
    from savings.readmodels.projectors.goals import GoalsProjector

    orchestrator = ProjectorOrchestrator(db)
    orchestrator.register(AccountsProjector(db))
    orchestrator.register(GoalsProjector(db))
    return orchestrator
