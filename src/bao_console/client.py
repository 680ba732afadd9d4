"""Async client for the OpenBao HTTP API, bound to one caller token."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

import httpx
import pydantic
from pydantic import BaseModel

from bao_console.config import settings
from bao_console.errors import AuthError, UpstreamError
from bao_console.models import KeyList, LoginResponse, PolicyRead, SecretRead, UserRead

logger = logging.getLogger(__name__)

UPSTREAM_TOKEN_HEADER = "X-Vault-Token"

ModelT = TypeVar("ModelT", bound=BaseModel)


class OpenBaoClient:
    """Translates console operations into upstream API calls.

    One instance per inbound request; it carries only the caller's token and
    holds no other state. Use as an async context manager.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.openbao_addr).rstrip("/")
        self.token = token
        self._http = httpx.AsyncClient(base_url=self.base_url, transport=transport)

    async def __aenter__(self) -> OpenBaoClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, body: dict | None = None) -> dict[str, Any]:
        """Issue one upstream call and return its decoded JSON body."""
        headers = {UPSTREAM_TOKEN_HEADER: self.token} if self.token else {}
        try:
            response = await self._http.request(method, path, headers=headers, json=body)
        except httpx.HTTPError as exc:
            logger.warning("%s %s could not reach upstream: %s", method, path, exc)
            raise UpstreamError(f"Upstream unreachable: {exc}") from exc
        except (TypeError, UnicodeEncodeError) as exc:
            # httpx refuses header values that are not ASCII strings
            logger.warning("%s %s not sent: token is not a valid header value", method, path)
            raise UpstreamError("Invalid token") from exc
        logger.debug("%s %s -> %d", method, path, response.status_code)

        if not response.is_success:
            message = _error_message(response)
            logger.warning("%s %s failed (%d): %s", method, path, response.status_code, message)
            raise UpstreamError(message, upstream_status=response.status_code)

        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError("Unexpected response from upstream") from exc

    async def _request_as(
        self, model: type[ModelT], method: str, path: str, body: dict | None = None
    ) -> ModelT:
        payload = await self._request(method, path, body)
        try:
            return model.model_validate(payload)
        except pydantic.ValidationError as exc:
            logger.warning("%s %s returned an unexpected shape: %s", method, path, exc)
            raise UpstreamError("Unexpected response from upstream") from exc

    # --- Auth ---

    async def login_userpass(self, username: str, password: str) -> LoginResponse:
        return await self._request_as(
            LoginResponse,
            "POST",
            f"/v1/auth/userpass/login/{username}",
            {"password": password},
        )

    async def login(self, username: str, password: str) -> str:
        """Exchange userpass credentials for a session token."""
        try:
            response = await self.login_userpass(username, password)
        except UpstreamError as exc:
            raise AuthError(exc.message) from exc
        return response.auth.client_token

    # --- KV v2 ---

    async def list_secrets(self, prefix: str = "") -> KeyList:
        """List the immediate children of a prefix; folders end with ``/``."""
        list_path = f"/v1/secret/metadata/{prefix}" if prefix else "/v1/secret/metadata"
        return await self._request_as(KeyList, "LIST", f"{list_path}?list=true")

    async def get_secret(self, path: str) -> SecretRead:
        return await self._request_as(SecretRead, "GET", f"/v1/secret/data/{path}")

    async def put_secret(self, path: str, data: dict[str, Any]) -> dict[str, Any]:
        """Create or overwrite a leaf. Versioning is the upstream's concern."""
        return await self._request("POST", f"/v1/secret/data/{path}", {"data": data})

    async def delete_secret(self, path: str) -> dict[str, Any]:
        """Delete a leaf along with its version history."""
        return await self._request("DELETE", f"/v1/secret/metadata/{path}")

    # --- Userpass users ---

    async def list_users(self) -> KeyList:
        return await self._request_as(KeyList, "LIST", "/v1/auth/userpass/users?list=true")

    async def get_user(self, username: str) -> UserRead:
        return await self._request_as(UserRead, "GET", f"/v1/auth/userpass/users/{username}")

    async def create_user(
        self, username: str, password: str, policies: Iterable[str] = ()
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            f"/v1/auth/userpass/users/{username}",
            {"password": password, "policies": ",".join(policies)},
        )

    async def set_user_password(self, username: str, password: str) -> dict[str, Any]:
        return await self._request(
            "POST",
            f"/v1/auth/userpass/users/{username}/password",
            {"password": password},
        )

    async def set_user_policies(self, username: str, policies: Iterable[str]) -> dict[str, Any]:
        return await self._request(
            "POST",
            f"/v1/auth/userpass/users/{username}",
            {"policies": ",".join(policies)},
        )

    async def delete_user(self, username: str) -> dict[str, Any]:
        return await self._request("DELETE", f"/v1/auth/userpass/users/{username}")

    # --- Policies ---

    async def list_policies(self) -> KeyList:
        return await self._request_as(KeyList, "LIST", "/v1/sys/policy?list=true")

    async def get_policy(self, name: str) -> PolicyRead:
        return await self._request_as(PolicyRead, "GET", f"/v1/sys/policy/{name}")


def _error_message(response: httpx.Response) -> str:
    """Pull ``errors[0]`` from an upstream error body, else the status text."""
    try:
        errors = response.json().get("errors")
    except (ValueError, AttributeError):
        errors = None
    if isinstance(errors, list) and errors:
        return str(errors[0])
    return response.reason_phrase or "Request failed"


async def validate_token(
    token: str,
    *,
    base_url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bool:
    """Check that a token reaches the server via ``/v1/sys/health``.

    A presence check, not a capability check: 429 (sealed or standby) still
    counts as valid, and network failures count as invalid.
    """
    base = (base_url or settings.openbao_addr).rstrip("/")
    try:
        async with httpx.AsyncClient(base_url=base, transport=transport) as http:
            response = await http.get(
                "/v1/sys/health", headers={UPSTREAM_TOKEN_HEADER: token}
            )
    except httpx.HTTPError:
        logger.debug("Token validation could not reach %s", base, exc_info=True)
        return False
    except (TypeError, UnicodeEncodeError):
        logger.debug("Token is not a valid header value")
        return False
    return response.is_success or response.status_code == 429


@dataclass
class Upstream:
    """Where and how to reach the secrets server; one per application."""

    base_url: str | None = None
    transport: httpx.AsyncBaseTransport | None = None

    def client(self, token: str) -> OpenBaoClient:
        return OpenBaoClient(token, base_url=self.base_url, transport=self.transport)

    async def validate_token(self, token: str) -> bool:
        return await validate_token(token, base_url=self.base_url, transport=self.transport)
