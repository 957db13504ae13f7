from __future__ import annotations

import io

import pytest

from vault.core import config as core_config
from vault.db.session import build_url
from vault.main import select_mode


@pytest.fixture()
def fresh_settings(monkeypatch):
    for name in ("DATABASE_URL", "DATABASE_NAME", "PORT", "VAULT_MODE", "BACKUP_DIR"):
        monkeypatch.delenv(name, raising=False)
    core_config.get_settings.cache_clear()
    yield core_config.get_settings
    core_config.get_settings.cache_clear()


def test_defaults(fresh_settings):
    settings = fresh_settings()
    assert settings.port == 3000
    assert settings.database_name == "vaultdb"
    assert settings.backup_dir == "backups"
    assert settings.export_file == "export.txt"
    assert settings.records_table == "records"


def test_invalid_port_falls_back(fresh_settings, monkeypatch):
    monkeypatch.setenv("PORT", "not-a-port")
    assert fresh_settings().port == 3000


def test_database_name_fills_missing_database():
    url = build_url("postgresql+psycopg://localhost:5432", "vaultdb")
    assert url.database == "vaultdb"
    assert url.port == 5432


def test_database_name_does_not_override_url():
    url = build_url("postgresql+psycopg://localhost:5432/other", "vaultdb")
    assert url.database == "other"


class _Stream(io.StringIO):
    def __init__(self, tty: bool):
        super().__init__()
        self._tty = tty

    def isatty(self) -> bool:
        return self._tty


def test_mode_follows_terminal(fresh_settings):
    settings = fresh_settings()
    assert select_mode(settings, _Stream(True)) == "cli"
    assert select_mode(settings, _Stream(False)) == "server"


def test_mode_override(fresh_settings, monkeypatch):
    monkeypatch.setenv("VAULT_MODE", "server")
    fresh_settings.cache_clear()
    assert select_mode(fresh_settings(), _Stream(True)) == "server"
