"""Credential issuer/verifier: bcrypt password hashes and signed JWT access tokens."""

from __future__ import annotations

from datetime import datetime
from datetime import timedelta
from datetime import timezone
from functools import lru_cache
from typing import Any

import bcrypt
import jwt

from app.core.config import get_settings

UTC = timezone.utc


class TokenDecodeError(Exception):
    """Raised when a token is malformed, badly signed or expired."""


def hash_password(password: str, *, rounds: int | None = None) -> str:
    """Hash a password with bcrypt (auto-salted)."""
    if rounds is None:
        rounds = get_settings().bcrypt_rounds
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except (ValueError, TypeError):
        return False


class TokenCodec:
    """Encode and decode signed access tokens."""

    def __init__(self, secret: str, *, algorithm: str = "HS256", ttl_seconds: int = 3600) -> None:
        self._secret = secret
        self.algorithm = algorithm
        self.ttl_seconds = ttl_seconds

    def encode(self, claims: dict[str, Any], *, expires_delta: timedelta | None = None) -> str:
        if expires_delta is None:
            expires_delta = timedelta(seconds=self.ttl_seconds)
        now = datetime.now(UTC)
        payload = {**claims, "iat": now, "exp": now + expires_delta}
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as exc:
            raise TokenDecodeError("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise TokenDecodeError("Invalid token") from exc


@lru_cache(maxsize=1)
def get_token_codec() -> TokenCodec:
    """Process-wide token codec built from settings."""
    settings = get_settings()
    return TokenCodec(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl_seconds=settings.jwt_ttl_seconds,
    )
