"""Raw request body decoding."""

from __future__ import annotations

import json
from typing import Any

from fastapi import Request
from fastapi import status

from app.core.problems import ProblemDetails
from app.core.problems import ProblemError
from app.core.problems import TYPE_INVALID_BODY_FORMAT


def _invalid_body_format() -> ProblemError:
    return ProblemError(ProblemDetails(status.HTTP_400_BAD_REQUEST, TYPE_INVALID_BODY_FORMAT))


def decode_json_body(raw_body: bytes) -> Any:
    """Parse a request body as JSON or raise an ``invalid_body_format`` problem.

    Empty bodies and a literal ``null`` count as invalid: neither carries
    anything that could be bound.
    """
    try:
        data = json.loads(raw_body)
    except (ValueError, TypeError) as exc:
        raise _invalid_body_format() from exc
    if data is None:
        raise _invalid_body_format()
    return data


def decode_json_object(raw_body: bytes) -> dict[str, Any]:
    """Decode a body that must be a JSON object to be bound onto a resource."""
    data = decode_json_body(raw_body)
    if not isinstance(data, dict):
        raise _invalid_body_format()
    return data


async def read_raw_body(request: Request) -> bytes:
    """Dependency exposing the unparsed request body to sync endpoints."""
    return await request.body()
