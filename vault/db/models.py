"""SQLAlchemy model for the records table."""
from __future__ import annotations

from datetime import date

from sqlalchemy import BigInteger, Column, Date, Integer, String

from vault.core.config import get_settings

from .session import Base


class Record(Base):
    __tablename__ = get_settings().records_table

    # BIGSERIAL on PostgreSQL; SQLite only autoincrements a plain INTEGER primary key
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    created = Column(Date, nullable=False, default=date.today)

    def __repr__(self) -> str:
        return f"Record(id={self.id!r}, name={self.name!r}, created={self.created!r})"
