"""bao-console login / logout / whoami."""

from __future__ import annotations

import argparse
import getpass

from bao_console.commands import BOLD, DIM, GREEN, RESET, load_session, open_gateway


def run_login(args: argparse.Namespace) -> int:
    """Log in with a token or with userpass credentials."""
    with open_gateway(args) as gateway:
        if args.username:
            password = args.password or getpass.getpass(f"Password for {args.username}: ")
            gateway.login_with_userpass(args.username, password)
        else:
            token = args.token or getpass.getpass("Token: ")
            gateway.login_with_token(token)

    print(f"{GREEN}Logged in.{RESET}")
    return 0


def run_logout(args: argparse.Namespace) -> int:
    """Forget the stored token. The server is not contacted."""
    session = load_session(args)
    session.logout()
    print("Logged out.")
    return 0


def run_whoami(args: argparse.Namespace) -> int:
    session = load_session(args)
    if not session.is_authenticated:
        print(f"{DIM}not logged in{RESET}")
        return 1
    print(f"{BOLD}logged in{RESET}  {DIM}({session.store.path}){RESET}")
    return 0
