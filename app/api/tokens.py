"""Token issuance route."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi import Depends
from fastapi.security import HTTPBasic
from fastapi.security import HTTPBasicCredentials
from sqlalchemy.orm import Session

from app.core.security import TokenCodec
from app.core.security import get_token_codec
from app.db.base import get_db_session
from app.schemas.error import PROBLEM_RESPONSES
from app.schemas.token import TokenResponse
from app.services.tokens import issue_token

router = APIRouter(tags=["tokens"], responses=PROBLEM_RESPONSES)

basic_auth = HTTPBasic(auto_error=False)


@router.post("/tokens", response_model=TokenResponse)
def create_token_endpoint(
    credentials: HTTPBasicCredentials | None = Depends(basic_auth),
    session: Session = Depends(get_db_session),
    codec: TokenCodec = Depends(get_token_codec),
) -> TokenResponse:
    """Exchange HTTP Basic credentials for a bearer token."""
    return issue_token(
        session,
        codec,
        email=credentials.username if credentials else None,
        password=credentials.password if credentials else None,
    )
