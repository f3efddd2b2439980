"""Unit tests for widget binding and store-level uniqueness handling."""

from __future__ import annotations

import pytest
from sqlalchemy.orm import Session

from app.core.problems import ProblemError
from app.db.models import Widget
from app.db.repository.widgets import create_widget
from app.schemas.widget import normalize_text
from app.services import widgets as widget_service


def test_full_replace_binding_ignores_current_values() -> None:
    current = Widget(id=1, name="gear", description="teeth")

    data = widget_service.bind_widget_data({"name": "cog"}, current=current, clear_missing=True)

    assert data == {"name": "cog"}


def test_partial_binding_merges_onto_current_values() -> None:
    current = Widget(id=1, name="gear", description="teeth")

    data = widget_service.bind_widget_data({"name": "cog"}, current=current, clear_missing=False)

    assert data == {"name": "cog", "description": "teeth"}


def test_partial_binding_can_clear_a_field_explicitly() -> None:
    current = Widget(id=1, name="gear", description="teeth")

    data = widget_service.bind_widget_data({"description": None}, current=current, clear_missing=False)

    assert data == {"name": "gear", "description": None}


def test_store_unique_violation_surfaces_as_validation_problem(
    db_session: Session,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    create_widget(db_session, name="taken")
    db_session.commit()
    monkeypatch.setattr(widget_service, "get_widget_by_name", lambda *_: None)

    with pytest.raises(ProblemError) as exc_info:
        widget_service.create_widget_service(db_session, {"name": "taken"})

    payload = exc_info.value.problem.to_dict()
    assert payload["status"] == 400
    assert payload["type"] == "validation_error"
    assert payload["errors"] == {"name": ["That name is taken!"]}
    assert [widget.name for widget in widget_service.list_widgets_service(db_session)] == ["taken"]


@pytest.mark.parametrize("raw_id", ["fake", "-1", "1.5", "99999999999999999999"])
def test_unparseable_ids_are_not_found(db_session: Session, raw_id: str) -> None:
    with pytest.raises(ProblemError) as exc_info:
        widget_service.get_widget_service(db_session, raw_id)

    assert exc_info.value.problem.to_dict()["detail"] == f"No widget found for id {raw_id}"


def test_delete_of_unknown_widget_is_a_no_op(db_session: Session) -> None:
    widget_service.delete_widget_service(db_session, "42")

    assert widget_service.list_widgets_service(db_session) == []


@pytest.mark.parametrize(
    ("submitted", "bound"),
    [
        ("  gear ", "gear"),
        ("   ", None),
        ("", None),
        (7, "7"),
        (2.5, "2.5"),
        (True, True),
        (None, None),
    ],
)
def test_text_binding(submitted: object, bound: object) -> None:
    assert normalize_text(submitted) == bound


def test_uniqueness_is_checked_alongside_field_constraints(db_session: Session) -> None:
    create_widget(db_session, name="gear", description=None)
    db_session.commit()

    with pytest.raises(ProblemError) as excinfo:
        widget_service.validate_widget_data(db_session, {"name": "gear", "description": "x" * 101})

    assert excinfo.value.problem.to_dict()["errors"] == {
        "name": ["That name is taken!"],
        "description": ["Description can not be longer then 100 characters!"],
    }


def test_invalid_name_skips_uniqueness_lookup(db_session: Session, monkeypatch: pytest.MonkeyPatch) -> None:
    def _fail(*_: object) -> None:
        raise AssertionError("name lookup should not run")

    monkeypatch.setattr(widget_service, "get_widget_by_name", _fail)

    with pytest.raises(ProblemError) as excinfo:
        widget_service.validate_widget_data(db_session, {"name": "n" * 21})

    assert excinfo.value.problem.to_dict()["errors"] == {
        "name": ["Name can not be longer then 20 characters!"],
    }
