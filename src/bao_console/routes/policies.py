"""Read-only policy views."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from bao_console.client import OpenBaoClient
from bao_console.deps import get_client

router = APIRouter(prefix="/api/policies", tags=["policies"])


@router.get("")
async def list_policies(client: OpenBaoClient = Depends(get_client)) -> dict:
    result = await client.list_policies()
    return result.model_dump(exclude_unset=True)


@router.get("/{name}")
async def get_policy(name: str, client: OpenBaoClient = Depends(get_client)) -> dict:
    result = await client.get_policy(name)
    return result.model_dump(exclude_unset=True)
