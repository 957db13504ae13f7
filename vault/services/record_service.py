"""Record use cases shared by the interactive menu and the HTTP routes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from vault.core.config import Settings
from vault.db.models import Record
from vault.repositories.sql_repository import SQLRepository, parse_identifier
from vault.services.backup_service import BackupService
from vault.services import report_service

logger = logging.getLogger(__name__)

FIELD_ALIASES = {
    "name": "name",
    "created": "created",
    "date": "created",
}
DESCENDING = {"desc", "descending"}


class VaultError(Exception):
    """Base exception for record workflows."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StoreConnectionError(VaultError):
    """Raised when the database cannot be reached at startup."""


class StoreError(VaultError):
    """Raised when a database operation fails."""


class RecordNotFoundError(VaultError):
    """Raised when no record matches an id or name."""


class ValidationError(VaultError):
    """Raised when required input is missing or malformed."""


@dataclass
class SortResult:
    records: list[Record]
    field: str
    direction: str
    fallback: bool = False

    @property
    def warning(self) -> Optional[str]:
        if not self.fallback:
            return None
        return 'Invalid field. Use "name" or "date". Showing records sorted by name (ascending).'


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class RecordService:
    """Validates input, calls the repository and triggers a snapshot after each mutation."""

    def __init__(
        self,
        repository: SQLRepository,
        backups: BackupService,
        *,
        export_file: str | Path = "export.txt",
    ) -> None:
        self.repository = repository
        self.backups = backups
        self.export_file = Path(export_file)
        self.last_modified = _now_iso()

    @classmethod
    def from_settings(cls, settings: Settings, repository: SQLRepository) -> "RecordService":
        return cls(
            repository,
            BackupService(repository, settings.backup_dir),
            export_file=settings.export_file,
        )

    # -------------------------------------- helpers --------------------------------------
    def _store(self, action: str, func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SQLAlchemyError as exc:
            logger.exception("Store error while %s", action)
            raise StoreError(f"Error {action}: {exc.__class__.__name__}") from exc

    def _after_mutation(self) -> Optional[Path]:
        self.last_modified = _now_iso()
        return self.backups.write_snapshot()

    @staticmethod
    def _clean_name(name: str | None) -> str:
        if name is not None and not isinstance(name, str):
            raise ValidationError("Name must be text")
        value = (name or "").strip()
        if not value:
            raise ValidationError("Name is required")
        return value

    def connect(self) -> int:
        """Check connectivity and return the number of stored records."""
        try:
            self.repository.ping()
            total = self.repository.count()
        except SQLAlchemyError as exc:
            raise StoreConnectionError(f"Database connection error: {exc}") from exc
        logger.info("Loaded %d records from database", total)
        return total

    def resolve(self, token: str | int | None) -> Record:
        """
        Find a record by id, falling back to a case-insensitive name match.

        Integer-shaped tokens are tried as ids first; names that look like
        numbers are still reachable through the fallback.
        """
        value = str(token if token is not None else "").strip()
        if not value:
            raise ValidationError("Record id or name is required")
        record_id = parse_identifier(value)
        if record_id is not None:
            record = self._store("loading record", self.repository.get_record, record_id)
            if record:
                return record
        record = self._store("loading record", self.repository.find_by_name, value)
        if not record:
            raise RecordNotFoundError(f"No record matches '{value}'")
        return record

    # -------------------------------------- reads --------------------------------------
    def list_records(self) -> list[Record]:
        return self._store("loading records", self.repository.list_records)

    def search(self, keyword: str | None) -> list[Record]:
        value = (keyword or "").strip()
        if not value:
            raise ValidationError("Search keyword is required")
        return self._store("searching records", self.repository.find_by_keyword, value)

    def sort_records(self, field: str | None, direction: str | None = "asc") -> SortResult:
        field_value = FIELD_ALIASES.get((field or "").strip().lower())
        descending = (direction or "").strip().lower() in DESCENDING
        fallback = field_value is None
        if fallback:
            logger.warning("Unknown sort field %r; falling back to name ascending", field)
            field_value = "name"
            descending = False
        records = self._store("sorting records", self.repository.sort_by, field_value, descending)
        return SortResult(
            records=records,
            field=field_value,
            direction="desc" if descending else "asc",
            fallback=fallback,
        )

    def statistics(self) -> report_service.VaultStats:
        records = self.list_records()
        return report_service.compute_stats(records, self.last_modified)

    def export(self, path: str | Path | None = None) -> Path:
        target = Path(path) if path else self.export_file
        records = self.list_records()
        content = report_service.render_export(records, _now_iso(), target.name)
        try:
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise StoreError(f"Error exporting data: {exc}") from exc
        return target

    # -------------------------------------- writes --------------------------------------
    def add_record(
        self,
        name: str | None,
        record_id: str | int | None = None,
        created: date | None = None,
    ) -> Record:
        clean_name = self._clean_name(name)
        identifier = None
        if record_id not in (None, ""):
            identifier = parse_identifier(record_id)
            if identifier is None:
                raise ValidationError("Record id must be a 64-bit integer")
        record = self._store("adding record", self.repository.insert, clean_name, created, identifier)
        self._after_mutation()
        return record

    def update_record(self, token: str | int | None, name: str | None) -> Record:
        clean_name = self._clean_name(name)
        record = self.resolve(token)
        updated = self._store("updating record", self.repository.rename, record.id, clean_name)
        if not updated:
            raise RecordNotFoundError(f"No record matches '{token}'")
        self._after_mutation()
        return updated

    def delete_record(self, token: str | int | None) -> Record:
        record = self.resolve(token)
        deleted = self._store("deleting record", self.repository.delete, record.id)
        if not deleted:
            raise RecordNotFoundError(f"No record matches '{token}'")
        self._after_mutation()
        return record
