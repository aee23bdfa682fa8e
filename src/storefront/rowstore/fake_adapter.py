"""Configurable fake row store for development and testing.

Keeps every table as a list of dicts in memory. Failures can be injected per
table and operation at runtime, which is how tests simulate a dropped network
call between the order header write and the line-item write. Uniqueness rules
the hosted schema enforces (one review per customer per product) are declared
with ``unique_on``.
"""

import copy
from datetime import UTC, datetime
from uuid import uuid4

from storefront.rowstore.port import RowConflictError, RowNotFoundError, RowStore, RowStoreError


class FakeRowStore(RowStore):
    """Dict-backed row store with failure injection."""

    def __init__(self, tables: dict[str, list[dict]] | None = None) -> None:
        super().__init__()
        self.tables: dict[str, list[dict]] = {name: [dict(r) for r in rows] for name, rows in (tables or {}).items()}
        self.calls: list[dict] = []
        self._failures: dict[tuple[str, str], str] = {}
        self._unique: dict[str, list[tuple[str, ...]]] = {}

    # -------------------------------------------------------------------
    # Failure injection
    # -------------------------------------------------------------------
    def fail_on(self, table: str, operation: str, reason: str = "Network request failed") -> None:
        """Make every ``operation`` against ``table`` raise ``RowStoreError``."""
        self._failures[(table, operation)] = reason

    def clear_failures(self) -> None:
        self._failures.clear()

    def _check(self, table: str, operation: str, **details) -> None:
        self.calls.append({"method": operation, "table": table, **details})
        reason = self._failures.get((table, operation))
        if reason is not None:
            raise RowStoreError(reason, table=table)

    # -------------------------------------------------------------------
    # Uniqueness
    # -------------------------------------------------------------------
    def unique_on(self, table: str, *columns: str) -> None:
        """Reject inserts into ``table`` that repeat an existing ``columns`` combination."""
        self._unique.setdefault(table, []).append(columns)

    def _check_unique(self, table: str, rows: list[dict]) -> None:
        existing = self.tables.get(table, [])
        for columns in self._unique.get(table, []):
            seen = {tuple(r.get(c) for c in columns) for r in existing}
            for row in rows:
                key = tuple(row.get(c) for c in columns)
                if key in seen:
                    raise RowConflictError(
                        f"Duplicate key value violates unique constraint on {table} {columns}",
                        table=table,
                    )
                seen.add(key)

    # -------------------------------------------------------------------
    # RowStore
    # -------------------------------------------------------------------
    def query(self, table, filters=None, order=None, limit=None):
        self._check(table, "query", filters=filters, order=order, limit=limit)
        rows = [r for r in self.tables.get(table, []) if _matches(r, filters)]
        for column in reversed(order or []):
            descending = column.startswith("-")
            key = column.lstrip("-")
            rows.sort(key=lambda r, k=key: (r.get(k) is None, r.get(k)), reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return copy.deepcopy(rows)

    def insert(self, table, record):
        self._check(table, "insert", record=record)
        self._check_unique(table, [record])
        row = self._stamp(record)
        self.tables.setdefault(table, []).append(row)
        self._notify_inserted(table, [copy.deepcopy(row)])
        return copy.deepcopy(row)

    def insert_many(self, table, records):
        self._check(table, "insert_many", records=records)
        self._check_unique(table, records)
        rows = [self._stamp(record) for record in records]
        self.tables.setdefault(table, []).extend(rows)
        self._notify_inserted(table, copy.deepcopy(rows))
        return copy.deepcopy(rows)

    def update(self, table, row_id, patch):
        self._check(table, "update", row_id=row_id, patch=patch)
        for row in self.tables.get(table, []):
            if str(row.get("id")) == str(row_id):
                row.update(patch)
                row["updated_at"] = datetime.now(UTC).isoformat()
                return copy.deepcopy(row)
        raise RowNotFoundError(f"No row with id {row_id} in {table}", table=table)

    def delete(self, table, filters):
        self._check(table, "delete", filters=filters)
        rows = self.tables.get(table, [])
        kept = [r for r in rows if not _matches(r, filters)]
        self.tables[table] = kept
        return len(rows) - len(kept)

    @staticmethod
    def _stamp(record: dict) -> dict:
        row = dict(record)
        row.setdefault("id", str(uuid4()))
        row.setdefault("created_at", datetime.now(UTC).isoformat())
        return row


def _matches(row: dict, filters: dict | None) -> bool:
    if not filters:
        return True
    return all(row.get(column) == value for column, value in filters.items())
