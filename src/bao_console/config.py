"""Configuration for bao-console."""

import logging
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Service settings loaded from environment variables."""

    # Upstream secrets server (OPENBAO_ADDR is honored for parity with the bao CLI)
    openbao_addr: str = Field(
        default="http://localhost:8200",
        validation_alias=AliasChoices("BAO_CONSOLE_OPENBAO_ADDR", "OPENBAO_ADDR"),
    )

    host: str = "0.0.0.0"
    port: int = 9030
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"

    # Console side: where the gateway lives and where the token is kept
    gateway_url: str = "http://localhost:9030"
    session_file: Path = Path.home() / ".bao-console" / "session"

    model_config = {
        "env_prefix": "BAO_CONSOLE_",
        "env_file": ".env",
        "extra": "ignore",
        "populate_by_name": True,
    }


settings = Settings()


def setup_logging(level: str | int = "INFO") -> None:
    """Configure root logging once for the gateway or the CLI."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
