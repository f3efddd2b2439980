"""Pydantic schemas for token issuance."""

from __future__ import annotations

from pydantic import BaseModel


class TokenResponse(BaseModel):
    """Signed access token payload."""

    token: str
