"""bao-console CLI entry point."""

from __future__ import annotations

import argparse
import logging
import sys

from bao_console import __version__
from bao_console.config import settings, setup_logging
from bao_console.errors import ConsoleError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="bao-console",
        description="OpenBao admin console - secrets, users, and policies",
    )
    parser.add_argument(
        "--version", action="version", version=f"bao-console {__version__}"
    )
    parser.add_argument("--gateway", help="Gateway URL (default: from settings)")
    parser.add_argument("--session-file", help="Where the session token is stored")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # bao-console serve
    serve_parser = subparsers.add_parser("serve", help="Run the gateway")
    serve_parser.add_argument("--host", help="Bind address")
    serve_parser.add_argument("--port", type=int, help="Port number")

    # bao-console login / logout / whoami
    login_parser = subparsers.add_parser("login", help="Log in and store the token")
    login_parser.add_argument("--token", help="Existing token (prompted if omitted)")
    login_parser.add_argument("--username", help="Userpass username")
    login_parser.add_argument("--password", help="Userpass password (prompted if omitted)")
    subparsers.add_parser("logout", help="Forget the stored token")
    subparsers.add_parser("whoami", help="Show session status")

    # bao-console secrets
    secrets_parser = subparsers.add_parser("secrets", help="Browse and edit secrets")
    secrets_sub = secrets_parser.add_subparsers(dest="secrets_command")
    ls_parser = secrets_sub.add_parser("ls", help="List a folder")
    ls_parser.add_argument("path", nargs="?", default="", help="Folder path (default: root)")
    ls_parser.add_argument("--json", action="store_true", help="Output as JSON")
    get_parser = secrets_sub.add_parser("get", help="Show a secret")
    get_parser.add_argument("path", help="Secret path")
    get_parser.add_argument("--json", action="store_true", help="Output as JSON")
    for name, help_text in (("create", "Create a secret"), ("update", "Write a new version")):
        write_parser = secrets_sub.add_parser(name, help=help_text)
        write_parser.add_argument("path", help="Secret path")
        write_parser.add_argument("pairs", nargs="*", metavar="KEY=VALUE", help="Secret data")
    rm_parser = secrets_sub.add_parser("rm", help="Delete a secret and its history")
    rm_parser.add_argument("path", help="Secret path")

    # bao-console users
    users_parser = subparsers.add_parser("users", help="Manage userpass users")
    users_sub = users_parser.add_subparsers(dest="users_command")
    users_ls = users_sub.add_parser("ls", help="List users")
    users_ls.add_argument("--json", action="store_true", help="Output as JSON")
    users_get = users_sub.add_parser("get", help="Show a user's policies")
    users_get.add_argument("name", help="Username")
    users_get.add_argument("--json", action="store_true", help="Output as JSON")
    users_create = users_sub.add_parser("create", help="Create a user")
    users_create.add_argument("name", help="Username")
    users_create.add_argument("--password", help="Password (prompted if omitted)")
    users_create.add_argument(
        "--policy", action="append", help="Policy to attach (repeatable)"
    )
    users_update = users_sub.add_parser("update", help="Change password and/or policies")
    users_update.add_argument("name", help="Username")
    users_update.add_argument("--password", help="New password")
    users_update.add_argument(
        "--ask-password", action="store_true", help="Prompt for the new password"
    )
    users_update.add_argument(
        "--policy", action="append", help="Replace policies (repeatable)"
    )
    users_update.add_argument(
        "--clear-policies", action="store_true", help="Detach all policies"
    )
    users_rm = users_sub.add_parser("rm", help="Delete a user")
    users_rm.add_argument("name", help="Username")

    # bao-console policies
    policies_parser = subparsers.add_parser("policies", help="View policies")
    policies_sub = policies_parser.add_subparsers(dest="policies_command")
    policies_ls = policies_sub.add_parser("ls", help="List policies")
    policies_ls.add_argument("--json", action="store_true", help="Output as JSON")
    policies_get = policies_sub.add_parser("get", help="Show a policy's rules")
    policies_get.add_argument("name", help="Policy name")
    policies_get.add_argument("--json", action="store_true", help="Output as JSON")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "serve":
        from bao_console.main import run

        if args.verbose:
            settings.log_level = "DEBUG"
        run(host=args.host, port=args.port)
        return 0

    setup_logging("DEBUG" if args.verbose else "WARNING")

    try:
        # Import command handlers lazily to keep startup fast
        if args.command == "login":
            from bao_console.commands.auth import run_login

            return run_login(args)

        elif args.command == "logout":
            from bao_console.commands.auth import run_logout

            return run_logout(args)

        elif args.command == "whoami":
            from bao_console.commands.auth import run_whoami

            return run_whoami(args)

        elif args.command == "secrets":
            from bao_console.commands.secrets import run_secrets

            return run_secrets(args)

        elif args.command == "users":
            from bao_console.commands.users import run_users

            return run_users(args)

        elif args.command == "policies":
            from bao_console.commands.policies import run_policies

            return run_policies(args)

    except ConsoleError as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {exc.message}")
        return 1

    parser.print_help()
    return 1


def cli() -> None:
    """Entry point for the CLI."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
