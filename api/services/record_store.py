"""
In-process record store used by the review and vehicle handlers.

Records are plain dicts keyed by a 24-hex identifier (same shape as the ids
the validation layer accepts). Nothing is persisted across restarts.
"""

from __future__ import annotations

import copy
import math
import secrets
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

Record = dict[str, Any]


def new_identifier() -> str:
    """Generate a 24-character hex identifier."""
    return secrets.token_hex(12)


def utc_now() -> str:
    return datetime.now(UTC).isoformat()


def deep_merge(target: Record, changes: Record) -> Record:
    """Merge ``changes`` into ``target``, descending into nested objects."""
    for key, value in changes.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            deep_merge(target[key], value)
        else:
            target[key] = copy.deepcopy(value)
    return target


class RecordStore:
    """Dict-backed collection with filter, sort and page support"""

    def __init__(self, name: str) -> None:
        self.name = name
        self._records: dict[str, Record] = {}

    def __len__(self) -> int:
        return len(self._records)

    def create(self, data: Record) -> Record:
        now = utc_now()
        record = copy.deepcopy(data)
        record["_id"] = new_identifier()
        record["createdAt"] = now
        record["updatedAt"] = now
        self._records[record["_id"]] = record
        return copy.deepcopy(record)

    def get(self, record_id: str) -> Record | None:
        record = self._records.get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def update(self, record_id: str, changes: Record) -> Record | None:
        record = self._records.get(record_id)
        if record is None:
            return None
        deep_merge(record, changes)
        record["updatedAt"] = utc_now()
        return copy.deepcopy(record)

    def delete(self, record_id: str) -> bool:
        return self._records.pop(record_id, None) is not None

    def find(self, predicate: Callable[[Record], bool] | None = None) -> list[Record]:
        return [copy.deepcopy(r) for r in self._records.values() if predicate is None or predicate(r)]

    def page(
        self,
        predicate: Callable[[Record], bool] | None,
        sort_key: Callable[[Record], Any],
        descending: bool,
        page: int,
        limit: int,
    ) -> tuple[list[Record], dict[str, int]]:
        """Filter, sort and slice records.

        Returns:
            The records on the requested page and a pagination summary
        """
        matches = sorted(self.find(predicate), key=sort_key, reverse=descending)
        start = (page - 1) * limit
        pagination = {
            "page": page,
            "limit": limit,
            "total": len(matches),
            "pages": math.ceil(len(matches) / limit) if limit else 0,
        }
        return matches[start : start + limit], pagination
