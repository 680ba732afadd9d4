"""Session token carrier for the console side.

A token obtained at login is kept in a durable store that survives restarts
and in an explicit ``Session`` object that is passed to whatever talks to
the gateway. The gateway itself keeps no session state.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from bao_console.errors import AuthError

logger = logging.getLogger(__name__)

# Request header carrying the caller's token on every gateway call.
TOKEN_HEADER = "x-openbao-token"


class SessionNotLoaded(RuntimeError):
    """A protected view was reached before the session was rehydrated."""


class TokenStore:
    """Durable single-token store backed by a file readable only by its owner."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> str | None:
        if not self.path.exists():
            return None
        token = self.path.read_text().strip()
        return token or None

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w") as f:
            f.write(token + "\n")

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


class Session:
    """In-memory session state for one console process."""

    def __init__(self, store: TokenStore) -> None:
        self.store = store
        self.token: str | None = None
        self.loaded = False

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def rehydrate(self) -> Session:
        """Load a previously stored token, if any."""
        self.token = self.store.load()
        self.loaded = True
        logger.debug("Session rehydrated (authenticated=%s)", self.is_authenticated)
        return self

    def login(self, token: str) -> None:
        self.token = token
        self.loaded = True
        self.store.save(token)

    def logout(self) -> None:
        """Forget the token locally. The upstream is not told."""
        self.token = None
        self.loaded = True
        self.store.clear()

    def require_token(self) -> str:
        if not self.loaded:
            raise SessionNotLoaded("Session has not been rehydrated yet")
        if self.token is None:
            raise AuthError("Not logged in. Run 'bao-console login' first.")
        return self.token

    def headers(self) -> dict[str, str]:
        """Headers to attach to a gateway call."""
        return {TOKEN_HEADER: self.require_token()}
