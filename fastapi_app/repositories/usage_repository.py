"""
Репозиторий счётчиков использования
"""

import logging
from datetime import date
from typing import Optional

from models import UsageLog
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class UsageRepository(BaseRepository[UsageLog]):
    """Агрегаты по таблице usage_logs"""

    def __init__(self, db: Session):
        super().__init__(db, UsageLog)

    def sum_between(
        self, start: date, end: date, user_id: Optional[int] = None
    ) -> int:
        """
        Сумма analysis_count за полуинтервал дат [start, end).

        Args:
            start: Первый день (включительно)
            end: Последний день (не включительно)
            user_id: Ограничить одним пользователем; None - по всем

        Returns:
            Количество анализов (0 если записей нет)
        """
        query = select(func.coalesce(func.sum(UsageLog.analysis_count), 0)).where(
            UsageLog.usage_date >= start,
            UsageLog.usage_date < end,
        )
        if user_id is not None:
            query = query.where(UsageLog.user_id == user_id)
        return int(self.db.execute(query).scalar() or 0)

    def get_for_day(self, user_id: int, day: date) -> Optional[UsageLog]:
        return self._first(UsageLog.user_id == user_id, UsageLog.usage_date == day)

    def increment(self, user_id: int, day: date) -> UsageLog:
        """
        Увеличить дневной счётчик пользователя или создать запись с count=1.

        Returns:
            Актуальная запись за день
        """
        log = self.get_for_day(user_id, day)
        if log is None:
            log = self.create(user_id=user_id, usage_date=day, analysis_count=1)
        else:
            log.analysis_count = log.analysis_count + 1
            self.db.flush()

        logger.debug(
            "Usage incremented",
            extra={"user_id": user_id, "day": day.isoformat(), "count": log.analysis_count},
        )
        return log
