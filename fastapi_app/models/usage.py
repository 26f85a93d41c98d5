"""
Модель учёта использования анализов
"""

from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from .user import Base


class UsageLog(Base):
    """
    Счётчик анализов пользователя за календарный день (UTC).

    Attributes:
        id: Идентификатор записи
        user_id: ID пользователя
        usage_date: День (UTC), к которому относится счётчик
        analysis_count: Количество выполненных анализов за день
        created_at: Когда запись была создана
    """

    __tablename__ = "usage_logs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    usage_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    analysis_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        Index("idx_usage_logs_user_date", "user_id", "date"),
    )

    def __repr__(self) -> str:
        return f"<UsageLog(user_id={self.user_id}, date={self.usage_date}, count={self.analysis_count})>"
