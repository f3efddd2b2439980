"""Repository primitives for widget entities."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models.widget import Widget


def create_widget(session: Session, *, name: str, description: str | None = None) -> Widget:
    """Create and return a widget row."""
    widget = Widget(name=name, description=description)
    session.add(widget)
    session.flush()
    session.refresh(widget)
    return widget


def get_widget(session: Session, widget_id: int) -> Widget | None:
    """Fetch a widget by id."""
    return session.get(Widget, widget_id)


def get_widget_by_name(session: Session, name: str) -> Widget | None:
    """Fetch a widget by its unique name."""
    return session.scalars(select(Widget).where(Widget.name == name)).first()


def list_widgets(session: Session) -> list[Widget]:
    """List all widgets in id order."""
    return list(session.scalars(select(Widget).order_by(Widget.id)))


def update_widget(
    session: Session,
    widget: Widget,
    *,
    name: str,
    description: str | None,
) -> Widget:
    """Replace the mutable widget fields."""
    widget.name = name
    widget.description = description
    session.flush()
    session.refresh(widget)
    return widget


def delete_widget(session: Session, widget: Widget) -> None:
    """Delete a widget row."""
    session.delete(widget)
    session.flush()
