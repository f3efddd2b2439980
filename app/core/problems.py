"""Problem details values and their application/problem+json rendering."""

from __future__ import annotations

from collections.abc import Mapping
from http import HTTPStatus
from types import MappingProxyType
from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse

PROBLEM_CONTENT_TYPE = "application/problem+json"
BLANK_TYPE = "about:blank"
UNKNOWN_STATUS_TITLE = "Unknown status code"

TYPE_VALIDATION_ERROR = "validation_error"
TYPE_INVALID_BODY_FORMAT = "invalid_body_format"

PROBLEM_TITLES: Mapping[str, str] = MappingProxyType(
    {
        TYPE_VALIDATION_ERROR: "There was a validation error",
        TYPE_INVALID_BODY_FORMAT: "Invalid JSON format sent",
    }
)


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return UNKNOWN_STATUS_TITLE


class ProblemDetails:
    """Structured API error: status, type, title and extension members.

    A ``type`` of ``None`` means no specific category; the problem then uses
    ``about:blank`` and the standard reason phrase of the status as title.
    Any other type must be registered in ``PROBLEM_TITLES``.
    """

    def __init__(self, status_code: int, type: str | None = None) -> None:
        if type is None:
            type = BLANK_TYPE
            title = _reason_phrase(status_code)
        else:
            if type not in PROBLEM_TITLES:
                raise ValueError(f"No title for type {type}")
            title = PROBLEM_TITLES[type]

        self._status_code = status_code
        self._type = type
        self._title = title
        self._extra_data: dict[str, Any] = {}

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def type(self) -> str:
        return self._type

    @property
    def title(self) -> str:
        return self._title

    def set(self, name: str, value: Any) -> None:
        """Store an extension member; the last write for a name wins."""
        self._extra_data[name] = value

    def to_dict(self) -> dict[str, Any]:
        """Return the payload with extension members first and the fixed trio last."""
        return {
            **self._extra_data,
            "status": self._status_code,
            "type": self._type,
            "title": self._title,
        }

    def __repr__(self) -> str:
        return f"ProblemDetails(status_code={self._status_code!r}, type={self._type!r})"


class ProblemError(Exception):
    """Carry a problem up to the boundary that renders it."""

    def __init__(self, problem: ProblemDetails, *, headers: Mapping[str, str] | None = None) -> None:
        super().__init__(problem.title)
        self.problem = problem
        self.headers = dict(headers) if headers else None


class NotFoundError(ProblemError):
    """Convenience exception for missing resources."""

    def __init__(self, *, detail: str) -> None:
        problem = ProblemDetails(status.HTTP_404_NOT_FOUND)
        problem.set("detail", detail)
        super().__init__(problem)


class ProblemResponseBuilder:
    """Render problems as ``application/problem+json`` responses."""

    def __init__(self, docs_base_url: str) -> None:
        self.docs_base_url = docs_base_url.rstrip("/")

    def type_url(self, type: str) -> str:
        if type == BLANK_TYPE:
            return type
        return f"{self.docs_base_url}/errors#{type}"

    def build(self, problem: ProblemDetails, headers: Mapping[str, str] | None = None) -> JSONResponse:
        payload = problem.to_dict()
        payload["type"] = self.type_url(payload["type"])
        return JSONResponse(
            status_code=problem.status_code,
            content=payload,
            headers=dict(headers) if headers else None,
            media_type=PROBLEM_CONTENT_TYPE,
        )
