"""Programmatic uvicorn entry point.

Usage:
    python -m chat_backend.run
    chat-backend              # via pyproject.toml [project.scripts]

Host and port come from HOST / PORT in the environment or ``.env``.
"""

from __future__ import annotations

import uvicorn

from chat_backend.config import settings


def main() -> None:
    """Start the API server on the configured host and port."""
    uvicorn.run(
        "chat_backend.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
