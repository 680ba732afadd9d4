"""bao-console gateway — relays console requests to the OpenBao API."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bao_console import __version__
from bao_console.config import settings, setup_logging
from bao_console.errors import register_error_handlers
from bao_console.routes.auth import router as auth_router
from bao_console.routes.policies import router as policies_router
from bao_console.routes.secrets import router as secrets_router
from bao_console.routes.users import router as users_router

logger = logging.getLogger(__name__)

app = FastAPI(
    title="bao-console",
    description="Gateway between the console and an OpenBao/Vault-compatible server",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(auth_router)
app.include_router(policies_router)
app.include_router(secrets_router)
app.include_router(users_router)


@app.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


def run(host: str | None = None, port: int | None = None) -> None:
    """Run the gateway with uvicorn."""
    setup_logging(settings.log_level)
    logger.info("Relaying to %s", settings.openbao_addr)
    uvicorn.run(
        "bao_console.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=False,
    )


if __name__ == "__main__":
    run()
