"""
Проверка JWT токенов.

Токены выпускает внешний провайдер аутентификации. Сервис проверяет
подпись общим секретом и извлекает идентификатор пользователя из `sub`.
"""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import jwt
from pydantic import BaseModel

from .config import settings
from .exceptions import TokenExpiredError, TokenInvalidError


class TokenPayload(BaseModel):
    """Payload проверенного токена."""

    sub: str
    exp: datetime | None = None
    iat: datetime | None = None
    jti: str | None = None


def create_access_token(
    subject: UUID | str,
    expires_delta: timedelta | None = None,
    extra_claims: dict[str, Any] | None = None,
) -> str:
    """
    Создать access токен.

    Используется в тестах и локальной разработке вместо внешнего провайдера.

    Args:
        subject: ID пользователя.
        expires_delta: Время жизни токена (по умолчанию 1 час).
        extra_claims: Дополнительные claims.

    Returns:
        Закодированный JWT токен.
    """
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": str(subject),
        "iat": now,
        "exp": now + (expires_delta or timedelta(hours=1)),
    }
    if settings.jwt.audience:
        payload["aud"] = settings.jwt.audience
    if extra_claims:
        payload.update(extra_claims)

    return jwt.encode(
        payload,
        settings.jwt.secret_key,
        algorithm=settings.jwt.algorithm,
    )


def decode_token(token: str) -> TokenPayload:
    """
    Декодировать и валидировать JWT токен.

    Args:
        token: Закодированный JWT токен.

    Returns:
        Payload токена.

    Raises:
        TokenExpiredError: Токен истек.
        TokenInvalidError: Токен невалиден.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt.secret_key,
            algorithms=[settings.jwt.algorithm],
            audience=settings.jwt.audience or None,
            options={"require": ["sub"], "verify_aud": bool(settings.jwt.audience)},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError() from e
    except jwt.InvalidTokenError as e:
        raise TokenInvalidError() from e

    return TokenPayload(
        sub=str(payload["sub"]),
        exp=datetime.fromtimestamp(payload["exp"], tz=UTC) if "exp" in payload else None,
        iat=datetime.fromtimestamp(payload["iat"], tz=UTC) if "iat" in payload else None,
        jti=payload.get("jti"),
    )


def extract_user_id(token: str) -> UUID:
    """
    Извлечь ID пользователя из токена.

    Raises:
        TokenInvalidError: `sub` не является UUID.
    """
    payload = decode_token(token)
    try:
        return UUID(payload.sub)
    except ValueError as e:
        raise TokenInvalidError("Token subject is not a valid user id") from e
