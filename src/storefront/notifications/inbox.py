"""Order notification inbox for a signed-in customer.

Loads the most recent notifications from ``order_notifications`` and, once
started on a realtime channel, prepends every new row addressed to the
customer as it is inserted.
"""

import threading

import structlog

from storefront.realtime.port import RealtimeChannel, Subscription
from storefront.rowstore.port import RowStore, RowStoreError

logger = structlog.get_logger(__name__)

INBOX_SIZE = 20


class NotificationInbox:
    def __init__(self, row_store: RowStore, user_id: str | None) -> None:
        self.row_store = row_store
        self.user_id = str(user_id) if user_id else None
        self._notifications: list[dict] = []
        self._subscription: Subscription | None = None
        self._lock = threading.Lock()

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    @property
    def notifications(self) -> list[dict]:
        with self._lock:
            return [dict(n) for n in self._notifications]

    @property
    def unread_count(self) -> int:
        with self._lock:
            return sum(1 for n in self._notifications if not n.get("is_read"))

    def refresh(self) -> list[dict]:
        """Reload the latest notifications, newest first."""
        if self.user_id is None:
            rows = []
        else:
            rows = self.row_store.query(
                "order_notifications",
                filters={"user_id": self.user_id},
                order=["-created_at"],
                limit=INBOX_SIZE,
            )
        with self._lock:
            self._notifications = rows
        return self.notifications

    # -------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------
    def mark_as_read(self, notification_id) -> bool:
        notification_id = str(notification_id)
        try:
            self.row_store.update("order_notifications", notification_id, {"is_read": True})
        except RowStoreError as exc:
            logger.warning("Could not mark notification as read", notification_id=notification_id, error=str(exc))
            return False

        with self._lock:
            for notification in self._notifications:
                if str(notification.get("id")) == notification_id:
                    notification["is_read"] = True
        return True

    def mark_all_as_read(self) -> bool:
        """Mark every unread notification as read.

        Stops at the first failed write; notifications already written stay
        read locally, the rest are left as they were.
        """
        with self._lock:
            unread = [str(n["id"]) for n in self._notifications if not n.get("is_read")]
        for notification_id in unread:
            if not self.mark_as_read(notification_id):
                return False
        return True

    # -------------------------------------------------------------------
    # Live updates
    # -------------------------------------------------------------------
    def start(self, channel: RealtimeChannel) -> None:
        if self.user_id is None or self._subscription is not None:
            return
        self._subscription = channel.subscribe(
            "order_notifications",
            self._on_notification,
            filters={"user_id": self.user_id},
        )

    def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    @property
    def is_live(self) -> bool:
        return self._subscription is not None

    def _on_notification(self, row: dict) -> None:
        with self._lock:
            if any(str(n.get("id")) == str(row.get("id")) for n in self._notifications):
                return
            self._notifications.insert(0, row)
        logger.debug("Notification received", user_id=self.user_id, order_id=row.get("order_id"))

    def __enter__(self) -> "NotificationInbox":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
