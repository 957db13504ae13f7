"""
Configuration helpers for the vault.

Routers, services and the entry point read a single Settings object instead of
fetching os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    database_name: str
    records_table: str
    host: str
    port: int
    backup_dir: str
    export_file: str
    log_level: str
    mode: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        database_url=(os.getenv("DATABASE_URL") or "postgresql+psycopg://localhost:5432").strip(),
        database_name=(os.getenv("DATABASE_NAME") or "vaultdb").strip(),
        records_table=(os.getenv("RECORDS_TABLE") or "records").strip(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int(os.getenv("PORT", "3000"), 3000),
        backup_dir=os.getenv("BACKUP_DIR", "backups"),
        export_file=os.getenv("EXPORT_FILE", "export.txt"),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        mode=(os.getenv("VAULT_MODE") or "").strip().lower(),
    )
