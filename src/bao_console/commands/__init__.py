"""Console subcommands and the helpers they share."""

from __future__ import annotations

import argparse
from pathlib import Path

from bao_console.config import settings
from bao_console.console import GatewayClient
from bao_console.session import Session, TokenStore

# Terminal colors
BOLD = "\033[1m"
RESET = "\033[0m"
CYAN = "\033[96m"
DIM = "\033[2m"
GREEN = "\033[92m"
RED = "\033[91m"
YELLOW = "\033[93m"


def load_session(args: argparse.Namespace) -> Session:
    """Rehydrate the stored session before anything protected runs."""
    path = getattr(args, "session_file", None) or settings.session_file
    return Session(TokenStore(Path(path))).rehydrate()


def open_gateway(args: argparse.Namespace) -> GatewayClient:
    """Gateway client bound to the rehydrated session."""
    return GatewayClient(load_session(args), base_url=getattr(args, "gateway", None))
