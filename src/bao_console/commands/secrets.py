"""bao-console secrets - browse and edit KV secrets."""

from __future__ import annotations

import argparse
import json

from bao_console.commands import BOLD, CYAN, DIM, RESET, open_gateway
from bao_console.errors import ValidationError
from bao_console.paths import SecretBrowser, is_folder


def _parse_pairs(pairs: list[str]) -> dict[str, str]:
    """Turn KEY=VALUE arguments into a mapping."""
    data: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValidationError(f"Expected KEY=VALUE, got '{pair}'")
        data[key] = value
    return data


def _format_breadcrumbs(browser: SecretBrowser) -> str:
    parts = ["Root"]
    for crumb in browser.breadcrumbs():
        parts.append(crumb.name if crumb.navigable else f"{BOLD}{crumb.name}{RESET}")
    return " > ".join(parts)


def run_secrets(args: argparse.Namespace) -> int:
    command = args.secrets_command
    if command == "ls":
        return _list(args)
    if command == "get":
        return _get(args)
    if command in ("create", "update"):
        return _write(args)
    if command == "rm":
        return _remove(args)
    print("Usage: bao-console secrets {ls,get,create,update,rm}")
    return 1


def _list(args: argparse.Namespace) -> int:
    browser = SecretBrowser()
    browser.go_to(args.path or "")
    with open_gateway(args) as gateway:
        keys = gateway.list_secrets(browser.current_path)

    if args.json:
        print(json.dumps({"path": browser.current_path, "keys": keys}, indent=2))
        return 0

    print(_format_breadcrumbs(browser))
    if not keys:
        print(f"  {DIM}No secrets found.{RESET}")
        return 0
    # Folders first, as the listing groups them
    for key in sorted(keys, key=lambda k: (not is_folder(k), k)):
        if is_folder(key):
            print(f"  {CYAN}{key}{RESET}")
        else:
            print(f"  {key}  {DIM}{browser.child_path(key)}{RESET}")
    return 0


def _get(args: argparse.Namespace) -> int:
    with open_gateway(args) as gateway:
        secret = gateway.get_secret(args.path)

    if args.json:
        print(json.dumps(secret.model_dump(), indent=2))
        return 0

    meta = secret.metadata
    print(f"\n{BOLD}{args.path}{RESET}")
    print(f"{'─' * 40}")
    print(f"  {BOLD}version{RESET}:   {meta.version}")
    if meta.created_time:
        print(f"  {BOLD}created{RESET}:   {meta.created_time}")
    if meta.destroyed:
        print(f"  {BOLD}destroyed{RESET}: yes")
    print()
    for key, value in secret.values.items():
        print(f"  {key} = {value}")
    return 0


def _write(args: argparse.Namespace) -> int:
    data = _parse_pairs(args.pairs)
    if not data:
        raise ValidationError("At least one KEY=VALUE pair is required")
    with open_gateway(args) as gateway:
        if args.secrets_command == "create":
            gateway.create_secret(args.path, data)
        else:
            gateway.update_secret(args.path, data)
    print(f"Saved {args.path}")
    return 0


def _remove(args: argparse.Namespace) -> int:
    with open_gateway(args) as gateway:
        gateway.delete_secret(args.path)
    print(f"Deleted {args.path}")
    return 0
