"""
Учёт использования и лимиты анализов (дневной, месячный, глобальный дневной)
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Optional

from config import get_settings
from core.exceptions import RateLimitError
from repositories import UsageRepository
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def month_bounds(day: date) -> tuple[date, date]:
    """Первый день месяца и первый день следующего месяца"""
    start = day.replace(day=1)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def next_utc_midnight(now: datetime) -> datetime:
    tomorrow = now.astimezone(timezone.utc).date() + timedelta(days=1)
    return datetime.combine(tomorrow, time.min, tzinfo=timezone.utc)


@dataclass
class UsageStatus:
    """Текущее использование и лимиты пользователя"""

    daily_usage: int
    daily_limit: int
    monthly_usage: int
    monthly_limit: int
    can_analyze: bool
    reset_time: datetime
    global_limit_reached: bool = False


class UsageService:
    """
    Счётчики анализов на базе таблицы usage_logs.

    Все даты считаются в UTC. Месяц - полуинтервал [YYYY-MM-01, первое число
    следующего месяца).
    """

    def __init__(
        self,
        db: Session,
        daily_limit: Optional[int] = None,
        monthly_limit: Optional[int] = None,
        global_daily_limit: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        settings = get_settings()
        self.repository = UsageRepository(db)
        self.daily_limit = daily_limit if daily_limit is not None else settings.daily_analysis_limit
        self.monthly_limit = monthly_limit if monthly_limit is not None else settings.monthly_analysis_limit
        self.global_daily_limit = (
            global_daily_limit if global_daily_limit is not None else settings.global_daily_limit
        )
        self.clock = clock

    def _today(self) -> date:
        return self.clock().astimezone(timezone.utc).date()

    def get_daily_usage(self, user_id: int) -> int:
        today = self._today()
        return self.repository.sum_between(today, today + timedelta(days=1), user_id=user_id)

    def get_monthly_usage(self, user_id: int, month: Optional[date] = None) -> int:
        start, end = month_bounds(month or self._today())
        return self.repository.sum_between(start, end, user_id=user_id)

    def get_global_daily_usage(self) -> int:
        today = self._today()
        return self.repository.sum_between(today, today + timedelta(days=1))

    def increment(self, user_id: int) -> None:
        """Учесть один анализ (без commit: транзакцию фиксирует вызывающий)"""
        self.repository.increment(user_id, self._today())

    def get_status(self, user_id: int) -> UsageStatus:
        """
        Состояние лимитов пользователя.

        Returns:
            UsageStatus с can_analyze = daily < limit и monthly < limit
            (и не исчерпан глобальный дневной лимит)
        """
        daily = self.get_daily_usage(user_id)
        monthly = self.get_monthly_usage(user_id)
        global_reached = self.get_global_daily_usage() >= self.global_daily_limit

        return UsageStatus(
            daily_usage=daily,
            daily_limit=self.daily_limit,
            monthly_usage=monthly,
            monthly_limit=self.monthly_limit,
            can_analyze=daily < self.daily_limit and monthly < self.monthly_limit and not global_reached,
            reset_time=next_utc_midnight(self.clock()),
            global_limit_reached=global_reached,
        )

    def ensure_can_analyze(self, user_id: int) -> UsageStatus:
        """
        Проверяет лимиты перед анализом.

        Raises:
            RateLimitError: если анализ сейчас недоступен
        """
        status = self.get_status(user_id)
        if status.can_analyze:
            return status

        reset_at = status.reset_time
        if status.global_limit_reached:
            message = "Service daily analysis limit reached. Please try again tomorrow."
        elif status.monthly_usage >= status.monthly_limit:
            message = f"Monthly analysis limit reached ({status.monthly_limit} per month)."
            # Месячный счётчик сбрасывается первого числа следующего месяца
            next_month = month_bounds(self._today())[1]
            reset_at = datetime.combine(next_month, time.min, tzinfo=timezone.utc)
        else:
            message = f"Daily analysis limit reached ({status.daily_limit} per day). Try again after midnight UTC."

        logger.warning(
            f"[USAGE] Analysis blocked for user_id={user_id}: {message}",
            extra={"daily_usage": status.daily_usage, "monthly_usage": status.monthly_usage},
        )
        retry_after = max(1, int((reset_at - self.clock()).total_seconds()))
        raise RateLimitError(
            message,
            retry_after=retry_after,
            details={
                "daily_usage": status.daily_usage,
                "daily_limit": status.daily_limit,
                "monthly_usage": status.monthly_usage,
                "monthly_limit": status.monthly_limit,
                "reset_time": reset_at.isoformat(),
            },
        )
