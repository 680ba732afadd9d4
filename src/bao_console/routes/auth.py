"""Login: validate a token, or exchange userpass credentials for one."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from bao_console.client import Upstream
from bao_console.deps import get_upstream, json_body, require_fields
from bao_console.errors import AuthError, ValidationError
from bao_console.models import LoginResult

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=LoginResult)
async def login(
    body: dict[str, Any] = Depends(json_body),
    upstream: Upstream = Depends(get_upstream),
) -> LoginResult:
    """Log in with ``method`` either ``token`` or ``userpass``."""
    method = body.get("method")

    if method == "token":
        require_fields(body, "token", message="Token is required")
        token = body["token"]
        if not isinstance(token, str) or not await upstream.validate_token(token):
            raise AuthError("Invalid token")
        return LoginResult(token=token)

    if method == "userpass":
        require_fields(
            body, "username", "password", message="Username and password are required"
        )
        username, password = body["username"], body["password"]
        if not isinstance(username, str) or not isinstance(password, str):
            raise ValidationError("Username and password must be strings")
        async with upstream.client("") as client:
            token = await client.login(username, password)
        return LoginResult(token=token)

    raise ValidationError("Invalid login method")
