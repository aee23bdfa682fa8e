"""In-process realtime channel fed by a row store's insert listeners."""

import threading

import structlog

from storefront.realtime.port import RealtimeChannel, RowCallback, Subscription
from storefront.rowstore.port import RowStore

logger = structlog.get_logger(__name__)


class InMemoryRealtimeChannel(RealtimeChannel):
    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []
        self._lock = threading.Lock()

    def subscribe(self, table: str, callback: RowCallback, filters: dict | None = None) -> Subscription:
        subscription = Subscription(self, table, callback, filters)
        with self._lock:
            self._subscriptions.append(subscription)
        logger.debug("Realtime subscription opened", table=table, filters=subscription.filters)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def publish(self, table: str, row: dict) -> int:
        """Deliver ``row`` to every matching subscriber; returns how many received it."""
        with self._lock:
            targets = [s for s in self._subscriptions if s.matches(table, row)]
        for subscription in targets:
            subscription.callback(dict(row))
        return len(targets)

    def attach(self, row_store: RowStore) -> None:
        """Publish every row ``row_store`` inserts from now on."""
        row_store.add_insert_listener(self._on_inserted)

    def detach(self, row_store: RowStore) -> None:
        row_store.remove_insert_listener(self._on_inserted)

    def _on_inserted(self, table: str, row: dict) -> None:
        self.publish(table, row)
