"""Development entrypoint for the Munda Manager HTTP API."""

from __future__ import annotations

import argparse
import logging

import uvicorn

from mundamanager.config import get_settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the Munda Manager API server")
    parser.add_argument("--host", default="127.0.0.1", help="Host interface to bind")
    parser.add_argument("--port", type=int, default=8000, help="TCP port to listen on")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable autoreload (dev mode)",
    )
    parser.add_argument(
        "--reset-db",
        action="store_true",
        help="Drop and recreate every table before starting",
    )
    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.reset_db:
        from mundamanager.database import reset_database

        reset_database()

    uvicorn.run(
        "mundamanager.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
