from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the vault package importable when running the tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from vault.core import config as core_config  # noqa: E402
from vault.db.session import Database  # noqa: E402
from vault.repositories.sql_repository import SQLRepository  # noqa: E402
from vault.services.backup_service import BackupService  # noqa: E402
from vault.services.record_service import RecordService  # noqa: E402


@pytest.fixture()
def database(tmp_path, monkeypatch):
    """Temporary SQLite database, disposed after the test so the file is not left locked."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    core_config.get_settings.cache_clear()

    # route handlers run in a worker thread under TestClient
    db = Database(f"sqlite:///{db_file}", connect_args={"check_same_thread": False})
    db.drop_all()
    db.create_all()

    yield db

    db.drop_all()
    db.dispose()
    core_config.get_settings.cache_clear()


@pytest.fixture()
def repo(database):
    return SQLRepository(database)


@pytest.fixture()
def backup_dir(tmp_path):
    return tmp_path / "backups"


@pytest.fixture()
def service(repo, backup_dir, tmp_path):
    return RecordService(repo, BackupService(repo, backup_dir), export_file=tmp_path / "export.txt")
