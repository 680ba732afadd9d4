"""Shared FastAPI dependencies: caller token, upstream client, JSON body."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Any

from fastapi import Depends, Header, Request

from bao_console.client import OpenBaoClient, Upstream
from bao_console.errors import AuthError, ValidationError
from bao_console.session import TOKEN_HEADER


def get_upstream() -> Upstream:
    """The upstream target. Overridden in tests with a stub transport."""
    return Upstream()


def require_token(token: str | None = Header(default=None, alias=TOKEN_HEADER)) -> str:
    """Reject the request before any upstream contact when no token is sent."""
    if not token:
        raise AuthError("Unauthorized")
    return token


async def get_client(
    token: str = Depends(require_token),
    upstream: Upstream = Depends(get_upstream),
) -> AsyncGenerator[OpenBaoClient, None]:
    """A client bound to the caller's token, closed after the response."""
    async with upstream.client(token) as client:
        yield client


async def json_body(request: Request) -> dict[str, Any]:
    """Parse the request body as a JSON object."""
    try:
        body = await request.json()
    except ValueError as exc:
        raise ValidationError("Invalid JSON body") from exc
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def require_fields(body: dict[str, Any], *fields: str, message: str) -> None:
    """Structural presence check; empty values count as missing."""
    if any(not body.get(field) for field in fields):
        raise ValidationError(message)
