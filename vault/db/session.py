"""Engine/session helpers for the SQL backend."""
from __future__ import annotations

from contextlib import contextmanager

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from vault.core.config import Settings

Base = declarative_base()


def build_url(database_url: str, database_name: str = "") -> URL:
    """Parse the connection string, filling in the database name when it names none."""
    url = make_url((database_url or "").strip())
    if not url.database and database_name:
        url = url.set(database=database_name)
    return url


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _register_sqlite_functions(dbapi_connection, _connection_record) -> None:
    # SQLite's built-in lower() only folds ASCII
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


class Database:
    """Explicit connection handle shared by the repository and the controllers."""

    def __init__(self, url: str | URL, **engine_kwargs) -> None:
        self.url = make_url(url) if isinstance(url, str) else url
        self.engine = create_engine(self.url, future=True, pool_pre_ping=True, **engine_kwargs)
        if self.url.get_backend_name() == "sqlite":
            event.listen(self.engine, "connect", _register_sqlite_functions)
        self._sessionmaker = sessionmaker(
            bind=self.engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
            future=True,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(build_url(settings.database_url, settings.database_name))

    @contextmanager
    def session(self) -> Session:
        session: Session = self._sessionmaker()
        try:
            yield session
        finally:
            session.close()

    def ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def create_all(self) -> None:
        from . import models  # noqa: F401  # ensure models are imported for metadata

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()
