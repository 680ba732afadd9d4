"""Tests for the login route."""

from fastapi.testclient import TestClient

from conftest import StubUpstream


class TestTokenLogin:
    """method=token validates the token against /v1/sys/health."""

    def test_valid_token_is_echoed(self, client: TestClient, upstream: StubUpstream) -> None:
        upstream.on("GET", "/v1/sys/health", json={"initialized": True})
        response = client.post("/api/auth/login", json={"method": "token", "token": "T"})
        assert response.status_code == 200
        assert response.json() == {"success": True, "token": "T"}
        assert upstream.calls[0].headers["X-Vault-Token"] == "T"

    def test_sealed_server_still_accepts(self, client: TestClient, upstream: StubUpstream) -> None:
        upstream.on("GET", "/v1/sys/health", status_code=429, json={})
        response = client.post("/api/auth/login", json={"method": "token", "token": "T"})
        assert response.status_code == 200

    def test_invalid_token(self, client: TestClient, upstream: StubUpstream) -> None:
        upstream.on("GET", "/v1/sys/health", status_code=403, json={})
        response = client.post("/api/auth/login", json={"method": "token", "token": "bad"})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid token"}

    def test_missing_token(self, client: TestClient, upstream: StubUpstream) -> None:
        response = client.post("/api/auth/login", json={"method": "token"})
        assert response.status_code == 400
        assert response.json() == {"error": "Token is required"}
        assert upstream.calls == []


class TestUserpassLogin:
    """method=userpass exchanges credentials for a token."""

    def test_end_to_end(self, client: TestClient, upstream: StubUpstream) -> None:
        upstream.on(
            "POST", "/v1/auth/userpass/login/alice", json={"auth": {"client_token": "T"}}
        )
        response = client.post(
            "/api/auth/login",
            json={"method": "userpass", "username": "alice", "password": "pw"},
        )
        assert response.status_code == 200
        assert response.json() == {"success": True, "token": "T"}
        assert upstream.body() == {"password": "pw"}

    def test_rejected_credentials(self, client: TestClient, upstream: StubUpstream) -> None:
        upstream.on(
            "POST",
            "/v1/auth/userpass/login/alice",
            status_code=400,
            json={"errors": ["invalid username or password"]},
        )
        response = client.post(
            "/api/auth/login",
            json={"method": "userpass", "username": "alice", "password": "nope"},
        )
        assert response.status_code == 401
        assert response.json() == {"error": "invalid username or password"}

    def test_missing_password(self, client: TestClient, upstream: StubUpstream) -> None:
        response = client.post(
            "/api/auth/login", json={"method": "userpass", "username": "alice"}
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Username and password are required"}
        assert upstream.calls == []


class TestLoginErrors:
    def test_unknown_method(self, client: TestClient) -> None:
        response = client.post("/api/auth/login", json={"method": "ldap"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid login method"}

    def test_malformed_body(self, client: TestClient) -> None:
        response = client.post(
            "/api/auth/login",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON body"}


class TestLoginValueTypes:
    """Values httpx cannot put in a header are rejected, not crashed on."""

    def test_non_ascii_token(self, client: TestClient, upstream: StubUpstream) -> None:
        response = client.post("/api/auth/login", json={"method": "token", "token": "tök"})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid token"}
        assert upstream.calls == []

    def test_non_string_token(self, client: TestClient, upstream: StubUpstream) -> None:
        response = client.post("/api/auth/login", json={"method": "token", "token": 123})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid token"}
        assert upstream.calls == []

    def test_non_string_credentials(self, client: TestClient, upstream: StubUpstream) -> None:
        response = client.post(
            "/api/auth/login",
            json={"method": "userpass", "username": ["alice"], "password": "pw"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Username and password must be strings"}
        assert upstream.calls == []
