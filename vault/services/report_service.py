"""
Rendering helpers for record listings, exports and vault statistics.

Everything here is a pure function over record collections; writing files and
reading the database is left to the callers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence

EXPORT_TITLE = "SECURE DATA VAULT EXPORT"
NO_RECORDS_MESSAGE = "No records found."


@dataclass
class VaultStats:
    total_records: int
    last_modified: str
    longest_name: Optional[str] = None
    longest_name_length: Optional[int] = None
    earliest: Optional[date] = None
    latest: Optional[date] = None
    average_name_length: Optional[float] = None
    span_days: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return self.total_records == 0


def _created_text(value) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return str(value or "")


def record_to_dict(record) -> dict:
    return {
        "id": record.id,
        "name": record.name,
        "created": _created_text(record.created),
    }


def format_record_line(index: int, record) -> str:
    return f"{index}. ID: {record.id} | Name: {record.name} | Created: {_created_text(record.created)}"


def format_records(records: Iterable) -> list[str]:
    """Render one line per record, numbered from 1."""
    return [format_record_line(index, record) for index, record in enumerate(records, start=1)]


def render_export(records: Sequence, exported_at: str, filename: str) -> str:
    lines = [
        EXPORT_TITLE,
        f"Export Date: {exported_at}",
        f"Total Records: {len(records)}",
        f"File: {filename}",
        "",
    ]
    lines.extend(format_records(records))
    return "\n".join(lines) + "\n"


def compute_stats(records: Sequence, last_modified: str) -> VaultStats:
    """
    Aggregate the record set.

    The longest name is picked by a left-to-right scan that only replaces the
    current winner on a strictly longer name, so the first record wins ties.
    """
    stats = VaultStats(total_records=len(records), last_modified=last_modified)
    if not records:
        return stats

    longest = records[0]
    for current in records[1:]:
        if len(current.name) > len(longest.name):
            longest = current

    dates = [record.created for record in records]
    earliest = min(dates)
    latest = max(dates)

    stats.longest_name = longest.name
    stats.longest_name_length = len(longest.name)
    stats.earliest = earliest
    stats.latest = latest
    stats.average_name_length = round(sum(len(record.name) for record in records) / len(records), 2)
    stats.span_days = (latest - earliest).days
    return stats


def render_stats(stats: VaultStats) -> list[str]:
    lines = [
        f"Total Records: {stats.total_records}",
        f"Last Modified: {stats.last_modified}",
    ]
    if stats.is_empty:
        lines.append(NO_RECORDS_MESSAGE)
        return lines
    lines.extend(
        [
            f"Longest Name: {stats.longest_name} ({stats.longest_name_length} characters)",
            f"Earliest Record: {stats.earliest.isoformat()}",
            f"Latest Record: {stats.latest.isoformat()}",
            f"Average Name Length: {stats.average_name_length:.2f}",
            f"Days Between First and Last: {stats.span_days}",
        ]
    )
    return lines


def stats_to_dict(stats: VaultStats) -> dict:
    data = {
        "totalRecords": stats.total_records,
        "lastModified": stats.last_modified,
    }
    if stats.is_empty:
        data["message"] = NO_RECORDS_MESSAGE
        return data
    data.update(
        {
            "longestName": f"{stats.longest_name} ({stats.longest_name_length} characters)",
            "longestNameLength": stats.longest_name_length,
            "earliestRecord": stats.earliest.isoformat(),
            "latestRecord": stats.latest.isoformat(),
            "averageNameLength": stats.average_name_length,
            "spanDays": stats.span_days,
        }
    )
    return data
