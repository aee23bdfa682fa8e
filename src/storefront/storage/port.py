"""Client storage port (abstract interface).

Durable, device-local key/value storage owned by one shopper's session. Only
the cart ledger snapshot lives here.
"""

from abc import ABC, abstractmethod


class ClientStorage(ABC):
    """Abstract client-local storage."""

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the bytes stored under ``key``, or None when absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...
