"""
Process entry point.

Connects to the database, then runs either the interactive menu (stdin is a
terminal) or the HTTP API (unattended/containerized runs). VAULT_MODE=cli or
VAULT_MODE=server overrides the detection.
"""

from __future__ import annotations

import logging
import signal
import sys

import uvicorn
from sqlalchemy.exc import SQLAlchemyError

from vault.app import create_app
from vault.cli import FAREWELL, MenuController
from vault.core.config import Settings, get_settings
from vault.core.log import setup_logging
from vault.db.session import Database
from vault.repositories.sql_repository import SQLRepository
from vault.services.record_service import RecordService, StoreConnectionError

logger = logging.getLogger(__name__)

ENDPOINTS = [
    ("GET ", "/", "API status"),
    ("GET ", "/records", "View all records"),
    ("POST", "/records", "Add new record"),
    ("PUT ", "/records/{id}", "Rename a record"),
    ("DEL ", "/records/{id}", "Delete a record"),
    ("GET ", "/search?keyword=term", "Search records"),
    ("GET ", "/sort?field=name&order=asc", "Sort records"),
    ("GET ", "/stats", "View statistics"),
    ("GET ", "/export", "Export data to file"),
]


def select_mode(settings: Settings, stdin=None) -> str:
    if settings.mode in ("cli", "server"):
        return settings.mode
    stream = stdin if stdin is not None else sys.stdin
    try:
        interactive = bool(stream and stream.isatty())
    except ValueError:
        interactive = False
    return "cli" if interactive else "server"


def _install_signal_handlers() -> None:
    def _handle(signum, _frame):
        if signum == signal.SIGTERM:
            print("\nReceived SIGTERM, shutting down...")
        else:
            print("\nShutting down gracefully...")
        print(FAREWELL)
        sys.exit(0)

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)


def connect(settings: Settings) -> RecordService:
    """Open the database and build the service; exits with status 1 when unreachable."""
    database = Database.from_settings(settings)
    service = RecordService.from_settings(settings, SQLRepository(database))
    try:
        database.create_all()
        service.connect()
    except StoreConnectionError as exc:
        logger.error("%s", exc.message)
        raise SystemExit(1) from exc
    except SQLAlchemyError as exc:
        logger.error("Database connection error: %s", exc)
        raise SystemExit(1) from exc
    logger.info("Connected to database %s", database.url.render_as_string(hide_password=True))
    return service


def run_server(settings: Settings, service: RecordService) -> None:
    print("Server running in non-interactive mode")
    print(f"API available at: http://localhost:{settings.port}")
    print("Available endpoints:")
    for method, path, label in ENDPOINTS:
        print(f"   {method} {path:<28} - {label}")
    # uvicorn restores these handlers on shutdown and re-raises the signal it caught
    _install_signal_handlers()
    uvicorn.run(create_app(settings, record_service=service), host=settings.host, port=settings.port)
    print(f"\nShutting down gracefully...\n{FAREWELL}")


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)
    print("=== Secure Data Vault ===")
    print("Starting application...")
    service = connect(settings)

    if select_mode(settings) == "server":
        run_server(settings, service)
        return

    _install_signal_handlers()
    print("Interactive mode detected - starting CLI application")
    MenuController(service).run()


if __name__ == "__main__":
    main()
