"""Shared pytest fixtures for widget API test suites."""

from collections.abc import Generator
import os
from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("WIDGETS_DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("WIDGETS_BCRYPT_ROUNDS", "4")

from app.core.security import hash_password  # noqa: E402
from app.db.base import get_db_session  # noqa: E402
from app.db.models import Base  # noqa: E402
from app.db.models import User  # noqa: E402
from app.db.repository.users import create_user  # noqa: E402

USER_EMAIL = "admin@example.com"
USER_PASSWORD = "secret"


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Provide a fresh in-memory database with the full schema."""
    test_engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, class_=Session)


@pytest.fixture
def db_session(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db_session: Session) -> User:
    """Persist the default API user."""
    created = create_user(
        db_session,
        email=USER_EMAIL,
        password_hash=hash_password(USER_PASSWORD, rounds=4),
    )
    db_session.commit()
    return created


@pytest.fixture
def client(session_factory: sessionmaker[Session]) -> Generator[TestClient, None, None]:
    """Provide an API test client bound to the in-memory database."""
    from app.main import app

    def _session_override() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db_session] = _session_override
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client: TestClient, user: User) -> dict[str, str]:
    """Bearer headers for the default user, obtained through the token endpoint."""
    response = client.post("/tokens", auth=(USER_EMAIL, USER_PASSWORD))
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
