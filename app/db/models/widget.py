"""SQLAlchemy model for widgets."""

from __future__ import annotations

from sqlalchemy import Integer
from sqlalchemy import PrimaryKeyConstraint
from sqlalchemy import String
from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import mapped_column

WIDGET_NAME_MAX_LENGTH = 20
WIDGET_DESCRIPTION_MAX_LENGTH = 100


class Base(DeclarativeBase):
    """Declarative base for widget API ORM models."""


class Widget(Base):
    """Widget record."""

    __tablename__ = "widgets"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="pk_widgets"),
        UniqueConstraint("name", name="uq_widgets_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(WIDGET_NAME_MAX_LENGTH), nullable=False)
    description: Mapped[str | None] = mapped_column(String(WIDGET_DESCRIPTION_MAX_LENGTH), nullable=True)
