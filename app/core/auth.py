"""Bearer-token gate in front of protected routes."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from fastapi import Depends
from fastapi import Request
from fastapi import status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.security import TokenCodec
from app.core.security import TokenDecodeError
from app.core.security import get_token_codec
from app.db.base import get_db_session
from app.db.repository.users import get_user_by_email

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

UNAUTHORIZED_BODY = {
    "detail": "Missing credentials",
    "status": status.HTTP_401_UNAUTHORIZED,
    "type": "about:blank",
    "title": "Unauthorized",
}


@dataclass(frozen=True)
class AuthenticatedIdentity:
    """User resolved from a verified bearer token, valid for one request."""

    user_id: int
    email: str


class AuthGateRejected(Exception):
    """Raised by the gate to short-circuit a request with the fixed 401 response."""


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the raw token from an ``Authorization`` header, or ``None``.

    The prefix check is case-sensitive and happens before the header is split;
    the scheme comparison after splitting is not.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1] or None


def authenticate(
    authorization: str | None,
    *,
    session: Session,
    codec: TokenCodec,
) -> AuthenticatedIdentity | None:
    """Resolve the request's bearer token to a known user, or ``None`` to deny."""
    token = extract_bearer_token(authorization)
    if token is None:
        return None

    try:
        claims = codec.decode(token)
    except TokenDecodeError as exc:
        logger.info("Rejected bearer token: %s", exc)
        return None

    email = claims.get("email")
    if not isinstance(email, str):
        return None

    user = get_user_by_email(session, email)
    if user is None:
        logger.info("Rejected bearer token for unknown user")
        return None
    return AuthenticatedIdentity(user_id=user.id, email=user.email)


def require_bearer_token(
    request: Request,
    session: Session = Depends(get_db_session),
    codec: TokenCodec = Depends(get_token_codec),
) -> AuthenticatedIdentity:
    """Router dependency admitting only requests with a valid bearer token."""
    identity = authenticate(request.headers.get("Authorization"), session=session, codec=codec)
    if identity is None:
        raise AuthGateRejected()
    request.state.identity = identity
    return identity


def unauthorized_response() -> JSONResponse:
    """Fixed 401 body returned by the gate; served as plain application/json."""
    return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content=dict(UNAUTHORIZED_BODY))
