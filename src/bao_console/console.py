"""Console-side client for the gateway routes.

Everything the console shows goes through here: each call attaches the
session's token header and turns both transport failures and non-2xx
answers into a single readable ``GatewayError``. Nothing is retried.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from bao_console.config import settings
from bao_console.errors import ConsoleError
from bao_console.models import (
    KeyList,
    LoginResult,
    PolicyRead,
    SecretRead,
    UserRead,
    UserUpdateResult,
)
from bao_console.session import Session

logger = logging.getLogger(__name__)


class GatewayError(ConsoleError):
    """A gateway call failed; ``message`` is what the console shows."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code


def _name_segment(name: str, kind: str) -> str:
    """Quote a user or policy name for use as one path segment."""
    if "/" in name:
        raise GatewayError(f"{kind} must not contain '/'")
    return quote(name)


class GatewayClient:
    """Synchronous client for the bao-console gateway."""

    def __init__(
        self,
        session: Session,
        base_url: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.session = session
        self.base_url = (base_url or settings.gateway_url).rstrip("/")
        self._http = httpx.Client(base_url=self.base_url, transport=transport)

    def __enter__(self) -> GatewayClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        fallback: str,
        authenticated: bool = True,
        **kwargs: Any,
    ) -> Any:
        headers = self.session.headers() if authenticated else {}
        try:
            response = self._http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.debug("%s %s failed", method, path, exc_info=True)
            raise GatewayError(f"{fallback}: {exc}") from exc

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.is_success:
            message = payload.get("error") if isinstance(payload, dict) else None
            details = payload if isinstance(payload, dict) else None
            raise GatewayError(message or fallback, response.status_code, details)
        return payload if payload is not None else {}

    # --- Auth ---

    def login_with_token(self, token: str) -> str:
        return self._login({"method": "token", "token": token})

    def login_with_userpass(self, username: str, password: str) -> str:
        return self._login({"method": "userpass", "username": username, "password": password})

    def _login(self, body: dict[str, str]) -> str:
        payload = self._request(
            "POST", "/api/auth/login", json=body, fallback="Login failed", authenticated=False
        )
        result = LoginResult.model_validate(payload)
        self.session.login(result.token)
        return result.token

    # --- Secrets ---

    def list_secrets(self, path: str = "") -> list[str]:
        params = {"path": path} if path else None
        payload = self._request(
            "GET", "/api/secrets", params=params, fallback="Failed to fetch secrets"
        )
        return KeyList.model_validate(payload).keys

    def get_secret(self, path: str) -> SecretRead:
        payload = self._request(
            "GET", f"/api/secrets/{quote(path)}", fallback="Failed to fetch secret"
        )
        return SecretRead.model_validate(payload)

    def create_secret(self, path: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._request(
            "POST",
            "/api/secrets",
            json={"path": path, "data": data},
            fallback="Failed to save secret",
        )

    def update_secret(self, path: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._request(
            "PUT",
            f"/api/secrets/{quote(path)}",
            json={"data": data},
            fallback="Failed to save secret",
        )

    def delete_secret(self, path: str) -> None:
        self._request(
            "DELETE", f"/api/secrets/{quote(path)}", fallback="Failed to delete secret"
        )

    # --- Users ---

    def list_users(self) -> list[str]:
        payload = self._request("GET", "/api/users", fallback="Failed to fetch users")
        return KeyList.model_validate(payload).keys

    def get_user(self, username: str) -> UserRead:
        user = _name_segment(username, "Username")
        payload = self._request("GET", f"/api/users/{user}", fallback="Failed to fetch user")
        return UserRead.model_validate(payload)

    def create_user(
        self, username: str, password: str, policies: list[str] | None = None
    ) -> dict[str, Any]:
        return self._request(
            "POST",
            "/api/users",
            json={"username": username, "password": password, "policies": policies or []},
            fallback="Failed to save user",
        )

    def update_user(
        self,
        username: str,
        password: str | None = None,
        policies: list[str] | None = None,
    ) -> UserUpdateResult:
        body: dict[str, Any] = {}
        if password:
            body["password"] = password
        if policies is not None:
            body["policies"] = policies
        payload = self._request(
            "PUT",
            f"/api/users/{_name_segment(username, 'Username')}",
            json=body,
            fallback="Failed to save user",
        )
        return UserUpdateResult.model_validate(payload)

    def delete_user(self, username: str) -> None:
        self._request(
            "DELETE",
            f"/api/users/{_name_segment(username, 'Username')}",
            fallback="Failed to delete user",
        )

    # --- Policies ---

    def list_policies(self) -> list[str]:
        payload = self._request("GET", "/api/policies", fallback="Failed to fetch policies")
        return KeyList.model_validate(payload).keys

    def get_policy(self, name: str) -> PolicyRead:
        policy = _name_segment(name, "Policy name")
        payload = self._request("GET", f"/api/policies/{policy}", fallback="Failed to fetch policy")
        return PolicyRead.model_validate(payload)
