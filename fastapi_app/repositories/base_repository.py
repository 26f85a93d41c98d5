"""
Общая основа репозиториев: сессия, модель и типовые запросы
"""

import logging
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Базовый репозиторий над одной моделью.

    Методы не вызывают commit(): транзакцию фиксирует вызывающий код
    (сервис или эндпоинт), здесь только flush().

    Example:
        >>> class FileRepository(BaseRepository[UploadedFile]):
        ...     def __init__(self, db: Session):
        ...         super().__init__(db, UploadedFile)
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model

    def get_by_id(self, id: Any) -> Optional[T]:
        """Объект по первичному ключу (int или UUID) или None"""
        return self.db.get(self.model, id)

    def create(self, **kwargs) -> T:
        obj = self.model(**kwargs)
        self.db.add(obj)
        self.db.flush()
        logger.debug(
            f"{self.model.__name__} created",
            extra={"model": self.model.__name__, "object_id": str(getattr(obj, "id", None))},
        )
        return obj

    def _first(self, *conditions) -> Optional[T]:
        return self.db.execute(select(self.model).where(*conditions)).scalars().first()

    def _list(
        self,
        *conditions,
        order_by: Any = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[T]:
        """
        Выборка объектов по условиям SQLAlchemy.

        Args:
            *conditions: Выражения для WHERE
            order_by: Выражение или кортеж выражений сортировки
            skip: Сколько строк пропустить
            limit: Максимум строк (None - без ограничения)
        """
        query = select(self.model).where(*conditions)
        if order_by is not None:
            query = query.order_by(*(order_by if isinstance(order_by, tuple) else (order_by,)))
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return list(self.db.execute(query).scalars().all())

    def _count(self, *conditions) -> int:
        query = select(func.count()).select_from(self.model).where(*conditions)
        return self.db.execute(query).scalar_one()
