"""Userpass accounts: list, read, create, update, and delete."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from bao_console.client import OpenBaoClient
from bao_console.deps import get_client, json_body, require_fields
from bao_console.errors import UpstreamError, ValidationError, error_response
from bao_console.models import StepResult, SuccessResponse, UserUpdateResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


def _policy_list(body: dict[str, Any]) -> list[str]:
    policies = body.get("policies") or []
    if not isinstance(policies, list) or not all(isinstance(p, str) for p in policies):
        raise ValidationError("Policies must be a list of names")
    return policies


@router.get("")
async def list_users(client: OpenBaoClient = Depends(get_client)) -> dict:
    result = await client.list_users()
    return result.model_dump(exclude_unset=True)


@router.post("")
async def create_user(
    client: OpenBaoClient = Depends(get_client),
    body: dict[str, Any] = Depends(json_body),
) -> dict:
    """Create an account; ``policies`` is optional."""
    require_fields(
        body, "username", "password", message="Username and password are required"
    )
    return await client.create_user(body["username"], body["password"], _policy_list(body))


@router.get("/{username}")
async def get_user(username: str, client: OpenBaoClient = Depends(get_client)) -> dict:
    result = await client.get_user(username)
    return result.model_dump(exclude_unset=True)


@router.put("/{username}", response_model=UserUpdateResult)
async def update_user(
    username: str,
    client: OpenBaoClient = Depends(get_client),
    body: dict[str, Any] = Depends(json_body),
) -> UserUpdateResult | JSONResponse:
    """Apply a password change and/or a policy change, in that order.

    The two upstream writes are independent and not atomic. Each applied
    step is reported; on failure the remaining steps are skipped and nothing
    is rolled back.
    """
    steps: list[tuple[str, Callable[[], Awaitable[Any]]]] = []
    if body.get("password"):
        steps.append(
            ("password", lambda: client.set_user_password(username, body["password"]))
        )
    if body.get("policies") is not None:
        policies = _policy_list(body)
        steps.append(("policies", lambda: client.set_user_policies(username, policies)))

    result = UserUpdateResult()
    for operation, call in steps:
        try:
            await call()
        except UpstreamError as exc:
            logger.warning("Update user %s: %s step failed: %s", username, operation, exc.message)
            result.success = False
            result.steps.append(StepResult(operation=operation, ok=False, error=exc.message))
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                exc.message,
                **result.model_dump(),
            )
        result.steps.append(StepResult(operation=operation, ok=True))
    return result


@router.delete("/{username}", response_model=SuccessResponse)
async def delete_user(
    username: str, client: OpenBaoClient = Depends(get_client)
) -> SuccessResponse:
    await client.delete_user(username)
    return SuccessResponse()
