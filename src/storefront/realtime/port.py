"""Abstract realtime channel port.

A channel pushes newly inserted rows to subscribers, optionally narrowed to
rows whose columns equal the given filter values.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

RowCallback = Callable[[dict], None]


class Subscription:
    """Handle returned by ``RealtimeChannel.subscribe``."""

    def __init__(self, channel: "RealtimeChannel", table: str, callback: RowCallback, filters: dict | None = None):
        self.channel = channel
        self.table = table
        self.callback = callback
        self.filters = dict(filters or {})
        self.active = True

    def matches(self, table: str, row: dict) -> bool:
        if not self.active or table != self.table:
            return False
        return all(str(row.get(column)) == str(value) for column, value in self.filters.items())

    def unsubscribe(self) -> None:
        """Stop receiving rows. Safe to call more than once."""
        if not self.active:
            return
        self.active = False
        self.channel._remove(self)


class RealtimeChannel(ABC):
    @abstractmethod
    def subscribe(self, table: str, callback: RowCallback, filters: dict | None = None) -> Subscription:
        """Call ``callback(row)`` for every new row in ``table`` matching ``filters``."""

    @abstractmethod
    def _remove(self, subscription: Subscription) -> None:
        """Forget ``subscription``."""
