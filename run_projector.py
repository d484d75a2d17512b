"""
Пересобрать read models из event log и показать итог по целям
"""
import logging

from savings.application.overview import GoalsOverviewService
from savings.infrastructure.db.session import get_db
from savings.readmodels.projectors.base import default_orchestrator
from savings.utils.money import format_money, format_money2, format_percent

logging.basicConfig(level=logging.INFO)

db = next(get_db())

try:
    orchestrator = default_orchestrator(db)

    # Сбросить checkpoints чтобы обработать все события
    for projector in orchestrator.projectors:
        projector.reset()
    db.commit()

    results = orchestrator.run_all()
    for name, count in results.items():
        print(f"✓ {name}: обработано событий {count}")

    overview = GoalsOverviewService(db).build()
    for status in overview.goals:
        goal = status.goal
        line = (
            f"  - {goal.icon} {goal.name}: {format_money(status.current_amount)}"
            f" / {format_money(goal.target_amount)} ({format_percent(status.progress)})"
        )
        if status.pacing.monthly_needed is not None:
            line += f", {format_money2(status.pacing.monthly_needed)}/мес"
        print(line)

finally:
    db.close()
