"""Repository primitives for user entities."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models.user import User


def create_user(session: Session, *, email: str, password_hash: str) -> User:
    """Create and return a user row."""
    user = User(email=email, password=password_hash)
    session.add(user)
    session.flush()
    session.refresh(user)
    return user


def get_user_by_email(session: Session, email: str) -> User | None:
    """Fetch a user by email."""
    return session.scalars(select(User).where(User.email == email)).first()
