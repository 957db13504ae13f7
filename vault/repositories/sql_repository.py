"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import delete, func, select

from vault.db.models import Record
from vault.db.session import Database

ID_MIN = -(2 ** 63)
ID_MAX = 2 ** 63 - 1

SORTABLE_COLUMNS = {
    "name": Record.name,
    "created": Record.created,
}


def parse_identifier(value: str | int | None) -> Optional[int]:
    """Return ``value`` as an integer id, or None when it is not integer-shaped or exceeds 64 bits."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        parsed = value
    else:
        try:
            parsed = int(str(value).strip())
        except (TypeError, ValueError):
            return None
    if not ID_MIN <= parsed <= ID_MAX:
        return None
    return parsed


class SQLRepository:
    """CRUD helpers wrapping the SQLAlchemy session."""

    def __init__(self, database: Database) -> None:
        self.database = database

    # -------------------------- reads --------------------------
    def list_records(self) -> list[Record]:
        with self.database.session() as session:
            stmt = select(Record).order_by(Record.id)
            return list(session.execute(stmt).scalars().all())

    def count(self) -> int:
        with self.database.session() as session:
            return int(session.execute(select(func.count()).select_from(Record)).scalar_one())

    def get_record(self, record_id: int) -> Optional[Record]:
        with self.database.session() as session:
            return session.get(Record, record_id)

    def find_by_name(self, name: str) -> Optional[Record]:
        name_value = (name or "").strip().lower()
        if not name_value:
            return None
        with self.database.session() as session:
            stmt = select(Record).where(func.lower(Record.name) == name_value).order_by(Record.id).limit(1)
            return session.execute(stmt).scalars().first()

    def find_by_keyword(self, keyword: str) -> list[Record]:
        keyword_value = (keyword or "").strip()
        condition = func.lower(Record.name).contains(keyword_value.lower(), autoescape=True)
        record_id = parse_identifier(keyword_value)
        if record_id is not None:
            condition = condition | (Record.id == record_id)
        with self.database.session() as session:
            stmt = select(Record).where(condition).order_by(Record.id)
            return list(session.execute(stmt).scalars().all())

    def sort_by(self, field: str, descending: bool = False) -> list[Record]:
        column = SORTABLE_COLUMNS[field]
        order = column.desc() if descending else column.asc()
        tie_break = Record.id.desc() if descending else Record.id.asc()
        with self.database.session() as session:
            stmt = select(Record).order_by(order, tie_break)
            return list(session.execute(stmt).scalars().all())

    # -------------------------- writes --------------------------
    def insert(self, name: str, created: date | None = None, record_id: int | None = None) -> Record:
        entity = Record(
            id=record_id,
            name=name,
            created=created or date.today(),
        )
        with self.database.session() as session:
            session.add(entity)
            session.commit()
            if record_id is not None and self.database.engine.dialect.name == "postgresql":
                self._sync_id_sequence(session)
            session.refresh(entity)
            return entity

    def _sync_id_sequence(self, session) -> None:
        """Move the id sequence past explicitly supplied ids so automatic ids do not collide."""
        table = Record.__table__
        highest = select(func.max(Record.id)).scalar_subquery()
        stmt = select(
            func.setval(
                func.pg_get_serial_sequence(table.fullname, "id"),
                func.greatest(func.coalesce(highest, 1), 1),
            )
        )
        session.execute(stmt)
        session.commit()

    def rename(self, record_id: int, name: str) -> Optional[Record]:
        with self.database.session() as session:
            entity = session.get(Record, record_id)
            if not entity:
                return None
            entity.name = name
            session.commit()
            session.refresh(entity)
            return entity

    def delete(self, record_id: int) -> bool:
        with self.database.session() as session:
            result = session.execute(delete(Record).where(Record.id == record_id))
            session.commit()
            return bool(result.rowcount)

    def ping(self) -> None:
        self.database.ping()
