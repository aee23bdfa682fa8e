"""Row-store port (abstract interface).

The storefront never talks to a database directly. Every read and write goes
through this table-oriented contract, which matches what the hosted backend
exposes: filtered/sorted reads, single and bulk inserts that return the stored
rows, partial updates by id and filtered deletes.

Adapters:
- ProteanRowStore — tables persisted through Protean repositories
- FakeRowStore — dict-backed, with runtime failure injection for tests
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

InsertListener = Callable[[str, dict], None]


class RowStoreError(Exception):
    """A read or write against the row store failed."""

    def __init__(self, message: str, table: str | None = None) -> None:
        super().__init__(message)
        self.table = table


class RowNotFoundError(RowStoreError):
    """An update targeted a row id that does not exist."""


class RowConflictError(RowStoreError):
    """A write would break one of the table's uniqueness rules."""


class RowStore(ABC):
    """Abstract row-store interface."""

    def __init__(self) -> None:
        self._insert_listeners: list[InsertListener] = []

    def add_insert_listener(self, listener: InsertListener) -> None:
        """Register a callable invoked with ``(table, row)`` after every insert."""
        self._insert_listeners.append(listener)

    def remove_insert_listener(self, listener: InsertListener) -> None:
        if listener in self._insert_listeners:
            self._insert_listeners.remove(listener)

    def _notify_inserted(self, table: str, rows: list[dict]) -> None:
        for row in rows:
            for listener in list(self._insert_listeners):
                listener(table, row)

    @abstractmethod
    def query(
        self,
        table: str,
        filters: dict | None = None,
        order: list[str] | None = None,
        limit: int | None = None,
    ) -> list[dict]:
        """Fetch rows matching every ``filters`` equality, sorted by ``order``.

        ``order`` lists column names; a ``-`` prefix sorts that column descending.
        """
        ...

    @abstractmethod
    def insert(self, table: str, record: dict) -> dict:
        """Create one row and return it with its assigned ``id``."""
        ...

    @abstractmethod
    def insert_many(self, table: str, records: list[dict]) -> list[dict]:
        """Create several rows in one call. Either all are stored or none are."""
        ...

    @abstractmethod
    def update(self, table: str, row_id: str, patch: dict) -> dict:
        """Apply ``patch`` to the row with ``row_id`` and return the updated row."""
        ...

    @abstractmethod
    def delete(self, table: str, filters: dict) -> int:
        """Delete rows matching ``filters`` and return how many were removed."""
        ...
