"""Unit tests for the bearer-token gate."""

from __future__ import annotations

from collections.abc import Generator
from datetime import timedelta

from fastapi import APIRouter
from fastapi import Depends
from fastapi import FastAPI
from fastapi import Request
from fastapi.testclient import TestClient
import pytest
from sqlalchemy.orm import Session
from sqlalchemy.orm import sessionmaker

from app.core.auth import AuthenticatedIdentity
from app.core.auth import authenticate
from app.core.auth import extract_bearer_token
from app.core.auth import require_bearer_token
from app.core.errors import register_error_handlers
from app.core.security import TokenCodec
from app.core.security import get_token_codec
from app.db.base import get_db_session
from app.db.models import User

SECRET = "gate-test-signing-key-with-enough-bytes"
UNAUTHORIZED_BODY = {
    "detail": "Missing credentials",
    "status": 401,
    "type": "about:blank",
    "title": "Unauthorized",
}


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(SECRET)


@pytest.fixture
def gate_client(session_factory: sessionmaker[Session], codec: TokenCodec) -> TestClient:
    app = FastAPI()
    register_error_handlers(app, docs_base_url="https://localhost:8000/docs")
    router = APIRouter(dependencies=[Depends(require_bearer_token)])

    @router.get("/protected")
    def protected(request: Request) -> dict[str, str]:
        return {"email": request.state.identity.email}

    app.include_router(router)

    def _session_override() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db_session] = _session_override
    app.dependency_overrides[get_token_codec] = lambda: codec
    return TestClient(app)


@pytest.mark.parametrize(
    ("header", "token"),
    [
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        (None, None),
        ("", None),
        ("bearer abc", None),
        ("NotBearer xyz", None),
        ("Bearer ", None),
        ("Bearer a b", None),
        ("Bearer  abc", None),
        ("Basic YWRtaW46c2VjcmV0", None),
    ],
)
def test_extract_bearer_token(header: str | None, token: str | None) -> None:
    assert extract_bearer_token(header) == token


def test_authenticate_resolves_known_user(db_session: Session, user: User, codec: TokenCodec) -> None:
    token = codec.encode({"email": user.email})

    identity = authenticate(f"Bearer {token}", session=db_session, codec=codec)

    assert identity == AuthenticatedIdentity(user_id=user.id, email=user.email)


def test_authenticate_denies_unknown_user(db_session: Session, user: User, codec: TokenCodec) -> None:
    token = codec.encode({"email": "ghost@example.com"})

    assert authenticate(f"Bearer {token}", session=db_session, codec=codec) is None


def test_authenticate_denies_token_without_email(db_session: Session, user: User, codec: TokenCodec) -> None:
    token = codec.encode({"sub": "1"})

    assert authenticate(f"Bearer {token}", session=db_session, codec=codec) is None


def test_authenticate_denies_expired_token(db_session: Session, user: User, codec: TokenCodec) -> None:
    token = codec.encode({"email": user.email}, expires_delta=timedelta(seconds=-5))

    assert authenticate(f"Bearer {token}", session=db_session, codec=codec) is None


def test_gate_forwards_authorized_requests(gate_client: TestClient, user: User, codec: TokenCodec) -> None:
    token = codec.encode({"email": user.email})

    response = gate_client.get("/protected", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json() == {"email": user.email}


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": "NotBearer xyz"},
        {"Authorization": "Bearer not-a-jwt"},
    ],
)
def test_gate_rejects_with_fixed_body(gate_client: TestClient, user: User, headers: dict[str, str]) -> None:
    response = gate_client.get("/protected", headers=headers)

    assert response.status_code == 401
    assert response.headers["content-type"] == "application/json"
    assert response.json() == UNAUTHORIZED_BODY


def test_gate_rejects_unknown_user(gate_client: TestClient, user: User, codec: TokenCodec) -> None:
    token = codec.encode({"email": "ghost@example.com"})

    response = gate_client.get("/protected", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json() == UNAUTHORIZED_BODY
