"""Utility script to create the records table."""
from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from vault.core.config import get_settings

from .session import Database


def create_all(database: Database | None = None) -> None:
    database = database or Database.from_settings(get_settings())
    database.create_all()


if __name__ == "__main__":
    try:
        create_all()
        print("Database tables created successfully.")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
