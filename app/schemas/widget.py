"""Pydantic schemas for widget API payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator
from pydantic_core import PydanticCustomError

from app.db.models.widget import WIDGET_DESCRIPTION_MAX_LENGTH
from app.db.models.widget import WIDGET_NAME_MAX_LENGTH

NAME_BLANK_MESSAGE = "Name field should not be blank"
NAME_TOO_LONG_MESSAGE = "Name can not be longer then {limit} characters!"
NAME_TAKEN_MESSAGE = "That name is taken!"
DESCRIPTION_TOO_LONG_MESSAGE = "Description can not be longer then {limit} characters!"


def normalize_text(value: Any) -> Any:
    """Bind a submitted scalar the way a text form field does.

    Numbers become their string form, strings are trimmed, and an empty
    result binds as ``None``. Anything else is left for field validation.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    return value


class WidgetInput(BaseModel):
    """Submitted widget fields, validated after binding."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, validate_default=True)
    description: str | None = None

    @field_validator("name", "description", mode="before")
    @classmethod
    def _bind_text(cls, value: Any) -> Any:
        return normalize_text(value)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str | None) -> str | None:
        if not value:
            raise PydanticCustomError("not_blank", NAME_BLANK_MESSAGE)
        if len(value) > WIDGET_NAME_MAX_LENGTH:
            raise PydanticCustomError(
                "too_long",
                NAME_TOO_LONG_MESSAGE,
                {"limit": WIDGET_NAME_MAX_LENGTH},
            )
        return value

    @field_validator("description")
    @classmethod
    def _check_description(cls, value: str | None) -> str | None:
        if value is not None and len(value) > WIDGET_DESCRIPTION_MAX_LENGTH:
            raise PydanticCustomError(
                "too_long",
                DESCRIPTION_TOO_LONG_MESSAGE,
                {"limit": WIDGET_DESCRIPTION_MAX_LENGTH},
            )
        return value


class Widget(BaseModel):
    """Widget response payload."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None


class WidgetListResponse(BaseModel):
    """List response envelope for widgets."""

    widgets: list[Widget]
