from __future__ import annotations

import json
from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from vault.services.record_service import (
    RecordNotFoundError,
    StoreConnectionError,
    StoreError,
    ValidationError,
)


def _backups(directory):
    return sorted(directory.glob("backup_*.json"))


def test_add_then_list_has_one_record_created_today(service):
    service.add_record("alice")
    records = service.list_records()
    assert [r.name for r in records] == ["alice"]
    assert records[0].created == date.today()


def test_add_rejects_empty_name(service, backup_dir):
    with pytest.raises(ValidationError):
        service.add_record("   ")
    assert service.list_records() == []
    assert _backups(backup_dir) == []


def test_add_rejects_non_integer_id(service):
    with pytest.raises(ValidationError):
        service.add_record("alice", record_id="abc")


def test_add_strips_name_and_accepts_string_id(service):
    record = service.add_record("  bob  ", record_id="15")
    assert record.id == 15
    assert record.name == "bob"


def test_duplicate_id_is_a_store_error(service):
    service.add_record("one", record_id=1)
    with pytest.raises(StoreError):
        service.add_record("two", record_id=1)


def test_search_matches_name_case_insensitively(service):
    service.add_record("alice")
    service.add_record("bob")
    assert [r.name for r in service.search("ALICE")] == ["alice"]


def test_search_matches_numeric_identifier(service):
    service.add_record("carol", record_id=31)
    service.add_record("dave")
    assert [r.name for r in service.search("31")] == ["carol"]


def test_search_requires_keyword(service):
    with pytest.raises(ValidationError):
        service.search("")


def test_sort_ascending_and_descending_are_reversed(service):
    for name in ("mike", "anna", "zoe"):
        service.add_record(name)
    asc = service.sort_records("name", "asc")
    desc = service.sort_records("name", "desc")
    assert [r.name for r in asc.records] == ["anna", "mike", "zoe"]
    assert [r.name for r in desc.records] == ["zoe", "mike", "anna"]
    assert desc.direction == "desc"
    assert asc.warning is None


def test_sort_accepts_date_alias(service):
    service.add_record("late", created=date(2021, 6, 1))
    service.add_record("early", created=date(2020, 1, 1))
    result = service.sort_records("date", "descending")
    assert result.field == "created"
    assert [r.name for r in result.records] == ["late", "early"]


def test_sort_unknown_field_falls_back_to_name_ascending(service):
    service.add_record("bravo")
    service.add_record("alpha")
    result = service.sort_records("colour", "desc")
    assert result.fallback is True
    assert result.field == "name"
    assert result.direction == "asc"
    assert result.warning
    assert [r.name for r in result.records] == ["alpha", "bravo"]


def test_every_mutation_writes_one_backup_with_current_count(service, backup_dir):
    first = service.add_record("alice")
    assert len(_backups(backup_dir)) == 1
    service.add_record("bob")
    assert len(_backups(backup_dir)) == 2
    service.update_record(first.id, "alicia")
    assert len(_backups(backup_dir)) == 3
    service.delete_record("bob")

    files = _backups(backup_dir)
    assert len(files) == 4
    counts = sorted(json.loads(path.read_text(encoding="utf-8"))["totalRecords"] for path in files)
    assert counts == [1, 1, 2, 2]


def test_delete_by_name_removes_one_record(service):
    service.add_record("twin")
    service.add_record("Twin")
    deleted = service.delete_record("TWIN")
    assert deleted.name == "twin"
    assert [r.name for r in service.list_records()] == ["Twin"]


def test_delete_missing_record_reports_not_found(service, backup_dir):
    service.add_record("alice")
    before = len(_backups(backup_dir))
    with pytest.raises(RecordNotFoundError):
        service.delete_record("999")
    with pytest.raises(RecordNotFoundError):
        service.delete_record("nobody")
    assert len(service.list_records()) == 1
    assert len(_backups(backup_dir)) == before


def test_resolve_falls_back_to_name_for_numeric_names(service):
    service.add_record("2024", record_id=1)
    assert service.resolve("2024").id == 1


def test_update_renames_and_refreshes_last_modified(service):
    record = service.add_record("eve")
    before = service.last_modified
    updated = service.update_record("eve", "evelyn")
    assert updated.id == record.id
    assert updated.name == "evelyn"
    assert service.last_modified >= before


def test_update_requires_name(service):
    service.add_record("eve")
    with pytest.raises(ValidationError):
        service.update_record("eve", "")


def test_statistics_over_empty_vault(service):
    stats = service.statistics()
    assert stats.total_records == 0
    assert stats.is_empty
    assert stats.longest_name is None


def test_statistics_over_two_records(service):
    service.add_record("ann", created=date(2020, 1, 1))
    service.add_record("barnabus", created=date(2021, 6, 1))
    stats = service.statistics()
    assert stats.total_records == 2
    assert stats.longest_name == "barnabus"
    assert stats.longest_name_length == 8
    assert stats.earliest == date(2020, 1, 1)
    assert stats.latest == date(2021, 6, 1)


def test_export_overwrites_file(service, tmp_path):
    service.add_record("alice")
    path = service.export()
    assert path == tmp_path / "export.txt"
    first = path.read_text(encoding="utf-8")
    assert "Total Records: 1" in first
    assert "1. ID: " in first

    service.add_record("bob")
    second = service.export().read_text(encoding="utf-8")
    assert "Total Records: 2" in second
    assert "2. ID: " in second


def test_backup_failure_does_not_abort_insert(service, backup_dir):
    backup_dir.write_text("not a directory", encoding="utf-8")
    record = service.add_record("alice")
    assert record.id is not None
    assert [r.name for r in service.list_records()] == ["alice"]


def test_connect_reports_record_count(service):
    service.add_record("alice")
    assert service.connect() == 1


def test_connect_wraps_database_failure(service, monkeypatch):
    def _fail():
        raise OperationalError("SELECT 1", {}, Exception("unreachable"))

    monkeypatch.setattr(service.repository, "ping", _fail)
    with pytest.raises(StoreConnectionError):
        service.connect()


def test_add_rejects_non_text_name(service, backup_dir):
    with pytest.raises(ValidationError):
        service.add_record(123)
    assert service.list_records() == []
    assert _backups(backup_dir) == []


def test_update_rejects_non_text_name(service):
    service.add_record("eve")
    with pytest.raises(ValidationError):
        service.update_record("eve", 42)
    assert [r.name for r in service.list_records()] == ["eve"]


def test_add_rejects_id_beyond_64_bits(service):
    with pytest.raises(ValidationError):
        service.add_record("alice", record_id="99999999999999999999")
