"""Access token issuance."""

from __future__ import annotations

import logging

from fastapi import status
from sqlalchemy.orm import Session

from app.core.problems import ProblemDetails
from app.core.problems import ProblemError
from app.core.security import TokenCodec
from app.core.security import verify_password
from app.db.repository.users import get_user_by_email
from app.schemas.token import TokenResponse

logger = logging.getLogger(__name__)


class InvalidCredentialsError(ProblemError):
    """Unknown user or wrong password; the two are indistinguishable to clients."""

    def __init__(self) -> None:
        super().__init__(
            ProblemDetails(status.HTTP_401_UNAUTHORIZED),
            headers={"WWW-Authenticate": "Basic"},
        )


def issue_token(
    session: Session,
    codec: TokenCodec,
    *,
    email: str | None,
    password: str | None,
) -> TokenResponse:
    """Exchange valid credentials for a signed token embedding the user's email."""
    if not email or password is None:
        raise InvalidCredentialsError()

    user = get_user_by_email(session, email)
    if user is None or not verify_password(password, user.password):
        logger.info("Token request rejected for invalid credentials")
        raise InvalidCredentialsError()

    return TokenResponse(token=codec.encode({"email": user.email}))
