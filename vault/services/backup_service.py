"""JSON snapshots of the whole record set, written after every mutation."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from vault.repositories.sql_repository import SQLRepository
from vault.services.report_service import record_to_dict

logger = logging.getLogger(__name__)


def snapshot_stamp(moment: datetime) -> str:
    """ISO timestamp with ``:`` and ``.`` replaced so it is safe in file names."""
    return moment.isoformat().replace(":", "-").replace(".", "-")


class BackupService:
    """Writes backup_<timestamp>.json files into the backup directory."""

    def __init__(self, repository: SQLRepository, backup_dir: str | Path) -> None:
        self.repository = repository
        self.backup_dir = Path(backup_dir)

    def _target_path(self, moment: datetime) -> Path:
        stem = f"backup_{snapshot_stamp(moment)}"
        path = self.backup_dir / f"{stem}.json"
        suffix = 1
        while path.exists():
            path = self.backup_dir / f"{stem}_{suffix}.json"
            suffix += 1
        return path

    def write_snapshot(self) -> Optional[Path]:
        """
        Dump every record to a new snapshot file.

        Failures are logged and reported as None; the mutation that triggered
        the snapshot has already been committed.
        """
        try:
            records = self.repository.list_records()
            moment = datetime.now(timezone.utc)
            document = {
                "timestamp": moment.isoformat(),
                "totalRecords": len(records),
                "records": [record_to_dict(record) for record in records],
            }
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            path = self._target_path(moment)
            path.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
        except Exception as exc:
            logger.warning("Backup creation failed: %s", exc)
            return None
        logger.info("Backup created: %s", path)
        return path
