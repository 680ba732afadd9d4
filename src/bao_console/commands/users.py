"""bao-console users - manage userpass accounts."""

from __future__ import annotations

import argparse
import getpass
import json

from bao_console.commands import BOLD, DIM, GREEN, RED, RESET, open_gateway
from bao_console.console import GatewayError


def run_users(args: argparse.Namespace) -> int:
    command = args.users_command
    if command == "ls":
        return _list(args)
    if command == "get":
        return _get(args)
    if command == "create":
        return _create(args)
    if command == "update":
        return _update(args)
    if command == "rm":
        return _remove(args)
    print("Usage: bao-console users {ls,get,create,update,rm}")
    return 1


def _list(args: argparse.Namespace) -> int:
    with open_gateway(args) as gateway:
        users = gateway.list_users()
    if args.json:
        print(json.dumps(users))
        return 0
    if not users:
        print(f"{DIM}No users found.{RESET}")
    for name in users:
        print(name)
    return 0


def _get(args: argparse.Namespace) -> int:
    with open_gateway(args) as gateway:
        user = gateway.get_user(args.name)
    if args.json:
        print(json.dumps(user.model_dump(), indent=2))
        return 0
    print(f"\n{BOLD}{args.name}{RESET}")
    print(f"{'─' * 40}")
    print(f"  {BOLD}policies{RESET}: {', '.join(user.policies) or '-'}")
    return 0


def _create(args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass(f"Password for {args.name}: ")
    with open_gateway(args) as gateway:
        gateway.create_user(args.name, password, args.policy or [])
    print(f"Created user {args.name}")
    return 0


def _update(args: argparse.Namespace) -> int:
    password = args.password
    if args.ask_password:
        password = getpass.getpass(f"New password for {args.name}: ")
    policies = [] if args.clear_policies else args.policy

    with open_gateway(args) as gateway:
        try:
            result = gateway.update_user(args.name, password=password, policies=policies)
        except GatewayError as exc:
            # Partial updates are reported step by step
            for step in exc.details.get("steps", []):
                mark = f"{GREEN}ok{RESET}" if step.get("ok") else f"{RED}failed{RESET}"
                print(f"  {step.get('operation')}: {mark}")
            raise

    if not result.steps:
        print(f"{DIM}Nothing to update.{RESET}")
    for step in result.steps:
        print(f"  {step.operation}: {GREEN}ok{RESET}")
    return 0


def _remove(args: argparse.Namespace) -> int:
    with open_gateway(args) as gateway:
        gateway.delete_user(args.name)
    print(f"Deleted user {args.name}")
    return 0
