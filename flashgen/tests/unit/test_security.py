"""Unit tests for JWT verification."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import jwt
import pytest

from flashgen.core.config import settings
from flashgen.core.exceptions import TokenExpiredError, TokenInvalidError
from flashgen.core.security import create_access_token, decode_token, extract_user_id


def _encode(payload: dict, secret: str | None = None) -> str:
    return jwt.encode(
        payload,
        secret or settings.jwt.secret_key,
        algorithm=settings.jwt.algorithm,
    )


class TestDecodeToken:
    """Tests for decode_token and extract_user_id."""

    def test_valid_token(self):
        user_id = uuid4()
        token = create_access_token(user_id, extra_claims={"jti": "abc"})

        payload = decode_token(token)

        assert payload.sub == str(user_id)
        assert payload.jti == "abc"
        assert payload.exp is not None and payload.exp > datetime.now(UTC)
        assert extract_user_id(token) == user_id

    def test_expired_token(self):
        token = create_access_token(uuid4(), expires_delta=timedelta(minutes=-5))

        with pytest.raises(TokenExpiredError) as exc_info:
            decode_token(token)

        assert exc_info.value.code == "authentication_error"

    def test_wrong_signature(self):
        token = _encode(
            {"sub": str(uuid4()), "exp": datetime.now(UTC) + timedelta(hours=1)},
            secret="another-secret-another-secret-another",
        )

        with pytest.raises(TokenInvalidError):
            decode_token(token)

    def test_missing_subject(self):
        token = _encode({"exp": datetime.now(UTC) + timedelta(hours=1)})

        with pytest.raises(TokenInvalidError):
            decode_token(token)

    def test_garbage(self):
        with pytest.raises(TokenInvalidError):
            decode_token("not.a.token")

    def test_subject_must_be_uuid(self):
        token = create_access_token("user-42")

        with pytest.raises(TokenInvalidError) as exc_info:
            extract_user_id(token)

        assert exc_info.value.message == "Token subject is not a valid user id"
