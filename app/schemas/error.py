"""Problem response schemas for OpenAPI documentation."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict


class Problem(BaseModel):
    """application/problem+json body; extension members are allowed."""

    model_config = ConfigDict(extra="allow")

    status: int
    type: str
    title: str
    detail: str | None = None


class ValidationProblem(Problem):
    """Problem carrying a per-field ``errors`` tree."""

    errors: dict[str, Any] | list[str]


PROBLEM_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ValidationProblem, "description": "Invalid body or validation error"},
    401: {"model": Problem, "description": "Missing or invalid credentials"},
}
