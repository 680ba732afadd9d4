"""KV v2 secrets: list a prefix, read, write, and delete leaves."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from bao_console.client import OpenBaoClient
from bao_console.deps import get_client, json_body, require_fields
from bao_console.errors import ValidationError
from bao_console.models import SuccessResponse

router = APIRouter(prefix="/api/secrets", tags=["secrets"])


def _secret_data(body: dict[str, Any]) -> dict[str, Any]:
    data = body["data"]
    if not isinstance(data, dict):
        raise ValidationError("Data must be an object")
    return data


@router.get("")
async def list_secrets(path: str = "", client: OpenBaoClient = Depends(get_client)) -> dict:
    """List the children of ``path`` (root when empty)."""
    result = await client.list_secrets(path)
    return result.model_dump(exclude_unset=True)


@router.post("")
async def create_secret(
    client: OpenBaoClient = Depends(get_client),
    body: dict[str, Any] = Depends(json_body),
) -> dict:
    """Create a secret at ``body.path``."""
    require_fields(body, "path", "data", message="Path and data are required")
    return await client.put_secret(body["path"], _secret_data(body))


@router.get("/{path:path}")
async def get_secret(path: str, client: OpenBaoClient = Depends(get_client)) -> dict:
    """Read the current version of a secret."""
    result = await client.get_secret(path)
    return result.model_dump(exclude_unset=True)


@router.put("/{path:path}")
async def update_secret(
    path: str,
    client: OpenBaoClient = Depends(get_client),
    body: dict[str, Any] = Depends(json_body),
) -> dict:
    """Write a new version of a secret."""
    require_fields(body, "data", message="Data is required")
    return await client.put_secret(path, _secret_data(body))


@router.delete("/{path:path}", response_model=SuccessResponse)
async def delete_secret(
    path: str, client: OpenBaoClient = Depends(get_client)
) -> SuccessResponse:
    """Delete a secret and all of its versions."""
    await client.delete_secret(path)
    return SuccessResponse()
