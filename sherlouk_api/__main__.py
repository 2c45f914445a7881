"""
Run the API with uvicorn.

Usage:
    python -m sherlouk_api --port 4000 --data-file ./db.json
"""

from __future__ import annotations

import argparse
import dataclasses
from pathlib import Path

import uvicorn

from sherlouk_api.app import create_app
from sherlouk_api.core.config import get_settings


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Sherlouk back-office API server.")
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"TCP port (default: {settings.port})")
    parser.add_argument("--data-file", type=Path, default=settings.data_file, help="JSON document backing the store")
    args = parser.parse_args(argv)

    if args.port <= 0 or args.port > 65535:
        parser.error("Port must be between 1 and 65535.")

    settings = dataclasses.replace(settings, host=args.host, port=args.port, data_file=args.data_file)
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
