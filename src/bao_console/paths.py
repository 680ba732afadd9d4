"""Folder-tree navigation over the flat KV prefix-listing API.

Listing keys carry a trailing ``/`` for folders. That slash is a display
convention: the navigable path value never ends with one, and the empty
string is the root.
"""

from __future__ import annotations

from dataclasses import dataclass

from bao_console.client import OpenBaoClient


@dataclass(frozen=True)
class Breadcrumb:
    """One segment of the current path."""

    name: str
    path: str
    navigable: bool


def is_folder(key: str) -> bool:
    return key.endswith("/")


def normalize_folder_path(path: str) -> str:
    """Strip exactly one trailing slash from a folder key."""
    return path[:-1] if path.endswith("/") else path


def child_path(current_path: str, key: str) -> str:
    """Full path of a key listed under ``current_path``."""
    return f"{current_path}/{key}" if current_path else key


def breadcrumbs(current_path: str) -> list[Breadcrumb]:
    """Split a path into segments; only the last one is non-navigable."""
    if not current_path:
        return []
    parts = current_path.split("/")
    last = len(parts) - 1
    return [
        Breadcrumb(name=part, path="/".join(parts[: i + 1]), navigable=i != last)
        for i, part in enumerate(parts)
    ]


async def list_children(client: OpenBaoClient, current_path: str) -> list[str]:
    """Raw child keys of ``current_path``; folders keep their trailing slash."""
    result = await client.list_secrets(current_path)
    return result.keys


@dataclass
class SecretBrowser:
    """Navigation state of a secrets view."""

    current_path: str = ""

    def enter(self, key: str) -> str:
        """Navigate into a key listed at the current location."""
        self.current_path = normalize_folder_path(child_path(self.current_path, key))
        return self.current_path

    def go_to(self, path: str) -> str:
        """Jump to a breadcrumb or any absolute path."""
        self.current_path = normalize_folder_path(path.lstrip("/"))
        return self.current_path

    def root(self) -> str:
        self.current_path = ""
        return self.current_path

    def breadcrumbs(self) -> list[Breadcrumb]:
        return breadcrumbs(self.current_path)

    def child_path(self, key: str) -> str:
        return child_path(self.current_path, key)
