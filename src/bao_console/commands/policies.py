"""bao-console policies - view access-control policies."""

from __future__ import annotations

import argparse
import json

from bao_console.commands import BOLD, DIM, RESET, YELLOW, open_gateway
from bao_console.models import BUILTIN_POLICIES


def run_policies(args: argparse.Namespace) -> int:
    if args.policies_command == "ls":
        return _list(args)
    if args.policies_command == "get":
        return _get(args)
    print("Usage: bao-console policies {ls,get}")
    return 1


def _list(args: argparse.Namespace) -> int:
    with open_gateway(args) as gateway:
        names = gateway.list_policies()
    if args.json:
        print(json.dumps(names))
        return 0
    for name in names:
        suffix = f"  {DIM}(built-in){RESET}" if name in BUILTIN_POLICIES else ""
        print(f"{name}{suffix}")
    return 0


def _get(args: argparse.Namespace) -> int:
    with open_gateway(args) as gateway:
        policy = gateway.get_policy(args.name)
    if args.json:
        print(json.dumps(policy.model_dump(), indent=2))
        return 0
    print(f"\n{BOLD}{policy.name}{RESET}")
    if policy.builtin:
        print(f"{YELLOW}built-in policy, read-only{RESET}")
    print(f"{'─' * 40}")
    print(policy.rules)
    return 0
