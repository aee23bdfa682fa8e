"""Row-store factory.

Provides get_row_store() / set_row_store() to swap implementations:
- ProteanRowStore for the running application (Protean providers do the storage)
- FakeRowStore for tests that need to simulate backend failures
"""

from storefront.rowstore.port import RowNotFoundError, RowStore, RowStoreError

_current_row_store: RowStore | None = None


def get_row_store() -> RowStore:
    """Return the current row store. Defaults to ProteanRowStore."""
    global _current_row_store
    if _current_row_store is None:
        from storefront.rowstore.protean_adapter import ProteanRowStore

        _current_row_store = ProteanRowStore()
    return _current_row_store


def set_row_store(row_store: RowStore) -> None:
    """Override the active row store (useful for tests)."""
    global _current_row_store
    _current_row_store = row_store


def reset_row_store() -> None:
    """Reset to the default row store."""
    global _current_row_store
    _current_row_store = None


__all__ = [
    "RowNotFoundError",
    "RowStore",
    "RowStoreError",
    "get_row_store",
    "reset_row_store",
    "set_row_store",
]
