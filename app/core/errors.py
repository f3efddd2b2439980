"""Problem response boundary and exception handler registration."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.auth import AuthGateRejected
from app.core.auth import unauthorized_response
from app.core.problems import ProblemDetails
from app.core.problems import ProblemError
from app.core.problems import ProblemResponseBuilder
from app.core.problems import TYPE_VALIDATION_ERROR
from app.core.validation import FormNode
from app.core.validation import collect_errors

logger = logging.getLogger(__name__)

PARAMETER_SOURCES = frozenset({"body", "query", "path", "header", "cookie"})


def _builder(request: Request) -> ProblemResponseBuilder:
    return request.app.state.problem_builder


def _parameter_name(location: Any) -> str:
    """Name an invalid request parameter by its location minus the source prefix."""
    parts = list(location) if isinstance(location, (tuple, list)) else [location]
    if parts and parts[0] in PARAMETER_SOURCES:
        source, parts = parts[0], parts[1:]
        return ".".join(str(part) for part in parts) or str(source)
    return ".".join(str(part) for part in parts) or "request"


def _request_validation_tree(exc: RequestValidationError) -> FormNode:
    messages: dict[str, list[str]] = {}
    for issue in exc.errors():
        field = _parameter_name(issue.get("loc", ()))
        messages.setdefault(field, []).append(str(issue.get("msg", "Invalid value")))
    children = tuple(FormNode(name=field, errors=tuple(issues)) for field, issues in messages.items())
    return FormNode(name="", children=children)


async def problem_error_handler(request: Request, exc: ProblemError) -> JSONResponse:
    """Render explicitly raised problems."""

    return _builder(request).build(exc.problem, headers=exc.headers)


async def auth_gate_rejected_handler(_: Request, __: AuthGateRejected) -> JSONResponse:
    """Answer gate rejections with the fixed unauthorized body."""

    return unauthorized_response()


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Normalize FastAPI parameter validation errors to a validation problem."""

    problem = ProblemDetails(status.HTTP_400_BAD_REQUEST, TYPE_VALIDATION_ERROR)
    problem.set("errors", collect_errors(_request_validation_tree(exc)))
    return _builder(request).build(problem)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Normalize HTTP exceptions (unknown routes, wrong methods) to blank problems."""

    problem = ProblemDetails(exc.status_code)
    if isinstance(exc.detail, str) and exc.detail:
        problem.set("detail", exc.detail)
    return _builder(request).build(problem, headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Avoid leaking internal exceptions while keeping the problem shape."""

    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _builder(request).build(ProblemDetails(status.HTTP_500_INTERNAL_SERVER_ERROR))


def register_error_handlers(app: FastAPI, *, docs_base_url: str) -> None:
    """Attach the problem builder and all error handlers to a FastAPI app instance."""

    app.state.problem_builder = ProblemResponseBuilder(docs_base_url)
    app.add_exception_handler(ProblemError, problem_error_handler)
    app.add_exception_handler(AuthGateRejected, auth_gate_rejected_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
