"""ASGI entrypoint for running with uvicorn."""

from __future__ import annotations

import uvicorn

from .factory import create_app
from .settings import get_settings


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "ticketbridge.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":  # pragma: no cover
    run()
