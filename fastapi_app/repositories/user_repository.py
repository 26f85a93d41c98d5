"""
Репозиторий пользователей
"""

from datetime import datetime
from typing import Optional

from models import User
from sqlalchemy.orm import Session

from .base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """
    Поиск и сохранение пользователей.

    Email хранится в нижнем регистре, нормализацию делает схема запроса.
    """

    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_active(self, user_id: int) -> Optional[User]:
        """Пользователь по ID, если аккаунт не отключён"""
        return self._first(User.id == user_id, User.is_active.is_(True))

    def get_by_email(self, email: str) -> Optional[User]:
        """Любой пользователь с этим email, включая отключённых (для проверки уникальности)"""
        return self._first(User.email == email)

    def get_active_by_email(self, email: str) -> Optional[User]:
        return self._first(User.email == email, User.is_active.is_(True))

    def get_by_verification_token(self, token: str) -> Optional[User]:
        return self._first(User.verification_token == token)

    def create_unverified(
        self,
        email: str,
        hashed_password: str,
        name: Optional[str],
        verification_token: str,
        verification_token_expires_at: datetime,
    ) -> User:
        """
        Новый пользователь без подтверждённого email; транзакция фиксируется сразу.

        Args:
            email: Email (уже нормализованный)
            hashed_password: bcrypt хэш пароля
            name: Отображаемое имя
            verification_token: Токен для ссылки из письма
            verification_token_expires_at: Срок действия токена
        """
        user = self.create(
            email=email,
            name=name,
            hashed_password=hashed_password,
            verification_token=verification_token,
            verification_token_expires_at=verification_token_expires_at,
            is_active=True,
        )
        return self.save(user)

    def save(self, user: User) -> User:
        """Зафиксировать изменения пользователя"""
        self.db.commit()
        self.db.refresh(user)
        return user
