"""Service helpers for widget API operations."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.problems import NotFoundError
from app.core.validation import Violation
from app.core.validation import raise_validation_problem
from app.core.validation import violations_from_pydantic
from app.db.models.widget import Widget
from app.db.repository.widgets import create_widget
from app.db.repository.widgets import delete_widget
from app.db.repository.widgets import get_widget
from app.db.repository.widgets import get_widget_by_name
from app.db.repository.widgets import list_widgets
from app.db.repository.widgets import update_widget
from app.schemas.widget import NAME_TAKEN_MESSAGE
from app.schemas.widget import WidgetInput
from app.schemas.widget import normalize_text

NAME_TAKEN = Violation(loc=("name",), message=NAME_TAKEN_MESSAGE)
MAX_WIDGET_ID = 2**31 - 1


def _parse_widget_id(raw_id: str) -> int | None:
    if not (raw_id.isascii() and raw_id.isdigit()):
        return None
    widget_id = int(raw_id)
    if widget_id > MAX_WIDGET_ID:
        return None
    return widget_id


def _find_widget(session: Session, raw_id: str) -> Widget | None:
    widget_id = _parse_widget_id(raw_id)
    if widget_id is None:
        return None
    return get_widget(session, widget_id)


def bind_widget_data(
    submitted: Mapping[str, Any],
    *,
    current: Widget | None = None,
    clear_missing: bool = True,
) -> dict[str, Any]:
    """Merge submitted fields onto a widget-shaped mapping.

    With ``clear_missing`` the submission replaces the widget wholesale;
    without it, fields the client left out keep their current values.
    """
    data: dict[str, Any] = {}
    if current is not None and not clear_missing:
        data = {"name": current.name, "description": current.description}
    data.update(submitted)
    return data


def validate_widget_data(
    session: Session,
    data: Mapping[str, Any],
    *,
    widget_id: int | None = None,
) -> WidgetInput:
    """Validate bound widget data, raising a validation problem on failure.

    Field constraints and name uniqueness are checked together so a single
    problem reports every violation.
    """
    payload: WidgetInput | None = None
    violations: list[Violation] = []
    try:
        payload = WidgetInput.model_validate(data)
    except ValidationError as exc:
        violations = violations_from_pydantic(exc)

    name_failed = any(violation.loc == NAME_TAKEN.loc for violation in violations)
    name = normalize_text(data.get("name"))
    if not name_failed and isinstance(name, str):
        existing = get_widget_by_name(session, name)
        if existing is not None and existing.id != widget_id:
            violations.insert(0, NAME_TAKEN)

    if payload is None or violations:
        raise_validation_problem(WidgetInput, violations)
    return payload


def create_widget_service(session: Session, submitted: Mapping[str, Any]) -> Widget:
    """Validate and persist a new widget."""
    payload = validate_widget_data(session, bind_widget_data(submitted))
    try:
        widget = create_widget(session, name=payload.name, description=payload.description)
        session.commit()
        return widget
    except IntegrityError:
        session.rollback()
        raise_validation_problem(WidgetInput, [NAME_TAKEN])


def list_widgets_service(session: Session) -> list[Widget]:
    """List every widget."""
    return list_widgets(session)


def get_widget_service(session: Session, raw_id: str) -> Widget:
    """Fetch a widget or raise not found."""
    widget = _find_widget(session, raw_id)
    if widget is None:
        raise NotFoundError(detail=f"No widget found for id {raw_id}")
    return widget


def update_widget_service(
    session: Session,
    widget: Widget,
    submitted: Mapping[str, Any],
    *,
    partial: bool,
) -> Widget:
    """Replace (PUT) or merge (PATCH) the fields of an existing widget."""
    data = bind_widget_data(submitted, current=widget, clear_missing=not partial)
    payload = validate_widget_data(session, data, widget_id=widget.id)
    try:
        widget = update_widget(session, widget, name=payload.name, description=payload.description)
        session.commit()
        return widget
    except IntegrityError:
        session.rollback()
        raise_validation_problem(WidgetInput, [NAME_TAKEN])


def delete_widget_service(session: Session, raw_id: str) -> None:
    """Delete a widget if it exists; a missing widget is not an error."""
    widget = _find_widget(session, raw_id)
    if widget is None:
        return
    delete_widget(session, widget)
    session.commit()
