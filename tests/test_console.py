"""Tests for the console-side gateway client."""

import json

import httpx
import pytest

from bao_console.console import GatewayClient, GatewayError
from bao_console.errors import AuthError
from bao_console.session import TOKEN_HEADER, Session

GATEWAY_URL = "http://gateway.test"


def _gateway(session: Session, handler) -> GatewayClient:
    return GatewayClient(session, base_url=GATEWAY_URL, transport=httpx.MockTransport(handler))


class TestLogin:
    def test_userpass_login_stores_token(self, session: Session) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"success": True, "token": "T"})

        with _gateway(session, handler) as gateway:
            assert gateway.login_with_userpass("alice", "pw") == "T"

        assert session.token == "T"
        assert session.store.load() == "T"
        assert seen[0].url.path == "/api/auth/login"
        assert TOKEN_HEADER not in seen[0].headers
        assert json.loads(seen[0].content) == {
            "method": "userpass",
            "username": "alice",
            "password": "pw",
        }

    def test_failed_login_keeps_session_empty(self, session: Session) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": "Invalid token"})

        with _gateway(session, handler) as gateway:
            with pytest.raises(GatewayError, match="Invalid token"):
                gateway.login_with_token("bad")
        assert not session.is_authenticated


class TestCalls:
    def test_token_header_attached(self, session: Session) -> None:
        session.login("T")
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": {"keys": ["db/", "api-key"]}})

        with _gateway(session, handler) as gateway:
            assert gateway.list_secrets("app") == ["db/", "api-key"]

        assert seen[0].headers[TOKEN_HEADER] == "T"
        assert seen[0].url.params["path"] == "app"

    def test_error_field_becomes_message(self, session: Session) -> None:
        session.login("T")

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": "permission denied"})

        with _gateway(session, handler) as gateway:
            with pytest.raises(GatewayError) as exc_info:
                gateway.list_policies()
        assert exc_info.value.message == "permission denied"
        assert exc_info.value.status_code == 500

    def test_non_json_error_uses_fallback(self, session: Session) -> None:
        session.login("T")

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="Bad Gateway")

        with _gateway(session, handler) as gateway:
            with pytest.raises(GatewayError, match="Failed to fetch users"):
                gateway.list_users()

    def test_network_failure_is_normalized(self, session: Session) -> None:
        session.login("T")

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with _gateway(session, handler) as gateway:
            with pytest.raises(GatewayError, match="Failed to fetch secrets"):
                gateway.list_secrets()

    def test_partial_update_details(self, session: Session) -> None:
        session.login("T")
        steps = [
            {"operation": "password", "ok": True, "error": None},
            {"operation": "policies", "ok": False, "error": "unknown policy"},
        ]

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                500, json={"error": "unknown policy", "success": False, "steps": steps}
            )

        with _gateway(session, handler) as gateway:
            with pytest.raises(GatewayError) as exc_info:
                gateway.update_user("alice", password="new", policies=["nope"])
        assert exc_info.value.details["steps"] == steps

    def test_secret_path_in_url(self, session: Session) -> None:
        session.login("T")
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200, json={"data": {"data": {"user": "admin"}, "metadata": {"version": 1}}}
            )

        with _gateway(session, handler) as gateway:
            secret = gateway.get_secret("app/db")
        assert seen[0].url.path == "/api/secrets/app/db"
        assert secret.values == {"user": "admin"}

    def test_logged_out_session_never_calls(self, session: Session) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("gateway should not be called")

        with _gateway(session, handler) as gateway:
            with pytest.raises(AuthError, match="Not logged in"):
                gateway.list_users()


class TestNameSegments:
    def test_username_with_slash_is_rejected(self, session: Session) -> None:
        session.login("T")

        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("gateway should not be called")

        with _gateway(session, handler) as gateway:
            with pytest.raises(GatewayError, match="Username must not contain '/'"):
                gateway.get_user("team/alice")
            with pytest.raises(GatewayError, match="Policy name must not contain '/'"):
                gateway.get_policy("a/b")

    def test_username_is_quoted(self, session: Session) -> None:
        session.login("T")
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": {"policies": []}})

        with _gateway(session, handler) as gateway:
            gateway.get_user("alice smith")
        assert seen[0].url.raw_path == b"/api/users/alice%20smith"
