"""Local entry point: serve userapi with uvicorn.

Run with:
    userapi            (console script)
    python -m userapi.server
"""

from __future__ import annotations

import logging

import uvicorn

from userapi.core.config import SETTINGS
from userapi.main import app

logger = logging.getLogger(__name__)

ENDPOINTS = (
    ("GET", "/health", "Health check"),
    ("GET", "/version", "Architecture label"),
    ("POST", "/users", "Create a user"),
    ("GET", "/users", "List users"),
    ("GET", "/users/{id}", "Get a user by id"),
    ("DELETE", "/users/{id}", "Delete a user by id"),
)


def main() -> None:
    logger.info(
        "Serving %s on http://0.0.0.0:%d", SETTINGS.architecture, SETTINGS.port
    )
    for method, path, description in ENDPOINTS:
        logger.info("  %-6s %-12s %s", method, path, description)

    # uvicorn handles SIGINT/SIGTERM and drains in-flight requests.
    # log_config=None keeps the handlers set up by setup_logging().
    uvicorn.run(app, host="0.0.0.0", port=SETTINGS.port, log_config=None)


if __name__ == "__main__":
    main()
