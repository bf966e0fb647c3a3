"""
FastAPI зависимости (dependencies).
"""

from collections.abc import AsyncGenerator
from typing import Annotated
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from .config import settings
from .database import db_manager
from .exceptions import AuthenticationError
from .logging import set_request_context
from .security import extract_user_id

# ==================== Security Scheme ====================

_bearer_scheme = HTTPBearer(auto_error=False)


# ==================== Database Dependency ====================


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency для получения сессии базы данных.

    Сессия коммитится после успешного запроса и откатывается при ошибке.

    Yields:
        AsyncSession: Асинхронная сессия SQLAlchemy.
    """
    async for session in db_manager.get_session():
        yield session


DatabaseSession = Annotated[AsyncSession, Depends(get_db)]


# ==================== Redis Dependency ====================


class RedisManager:
    """Менеджер Redis соединений."""

    _client: Redis | None = None

    @classmethod
    async def get_client(cls) -> Redis:
        """Получить клиент Redis."""
        if cls._client is None:
            cls._client = Redis.from_url(
                settings.redis.url,
                encoding="utf-8",
                decode_responses=True,
            )
        return cls._client

    @classmethod
    async def close(cls) -> None:
        """Закрыть соединение с Redis."""
        if cls._client is not None:
            await cls._client.aclose()
            cls._client = None

    @classmethod
    async def health_check(cls) -> bool:
        """Проверка доступности Redis."""
        try:
            client = await cls.get_client()
            return bool(await client.ping())
        except Exception:
            return False


# ==================== Authentication Dependencies ====================


async def get_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> str:
    """
    Извлечь bearer токен из заголовка Authorization.

    Raises:
        AuthenticationError: Токен не предоставлен.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authorization header is required")
    return credentials.credentials


async def get_current_user_id(token: str = Depends(get_token)) -> UUID:
    """
    Получить ID текущего пользователя из токена.

    Raises:
        TokenExpiredError: Токен истек.
        TokenInvalidError: Токен невалиден.
    """
    user_id = extract_user_id(token)
    set_request_context(user_id=str(user_id))
    return user_id


CurrentUserId = Annotated[UUID, Depends(get_current_user_id)]


# ==================== Lifecycle ====================


async def close_dependencies() -> None:
    """Закрыть зависимости при остановке приложения."""
    await RedisManager.close()
