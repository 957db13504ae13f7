"""Database helpers (connection handle, models export)."""

from .session import Base, Database, build_url
from .models import Record

__all__ = ["Base", "Database", "Record", "build_url"]
