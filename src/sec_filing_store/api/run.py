"""
Entry point for the ``sec-store-api`` console script.

Usage::

    sec-store-api                            # host/port from API_HOST, API_PORT
    sec-store-api --port 8080 --reload       # development server
    sec-store-api --log-level DEBUG
    uvicorn sec_filing_store.api.app:app     # plain uvicorn
"""

import argparse

import uvicorn

from sec_filing_store.config import get_settings
from sec_filing_store.core.logging import (
    configure_logging,
    resolve_level,
    suppress_third_party_loggers,
)


def main() -> None:
    """Parse arguments, set up logging and hand the app to uvicorn."""
    api = get_settings().api

    parser = argparse.ArgumentParser(description="SEC Filing Store API server")
    parser.add_argument("--host", default=api.host, help=f"Bind host (default: {api.host})")
    parser.add_argument(
        "--port", type=int, default=api.port, help=f"Port number (default: {api.port})"
    )
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument(
        "--log-level", default=None, help="Package log level (default: LOG_LEVEL or INFO)"
    )
    args = parser.parse_args()

    configure_logging(args.log_level)
    suppress_third_party_loggers()

    uvicorn.run(
        "sec_filing_store.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=logging_name(resolve_level(args.log_level)),
    )


def logging_name(level: int) -> str:
    """Lower-case uvicorn level name for a ``logging`` level."""
    for name, value in (("debug", 10), ("info", 20), ("warning", 30), ("error", 40)):
        if level <= value:
            return name
    return "critical"
