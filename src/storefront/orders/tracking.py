"""Order tracking — what the customer sees on the order status page."""

from dataclasses import dataclass, field

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.orders.status import TRACKING_STEPS, OrderStatus
from storefront.rowstore.port import RowStore

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OrderTracking:
    order: dict
    items: list[dict] = field(default_factory=list)
    history: list[dict] = field(default_factory=list)

    @property
    def status(self) -> str:
        return self.order.get("status") or OrderStatus.PENDING.value

    @property
    def reference(self) -> str:
        return str(self.order["id"])[:8].upper()

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED.value

    @property
    def current_step(self) -> int:
        """Index of the status in the tracking steps, ``-1`` when it is off the track."""
        for index, step in enumerate(TRACKING_STEPS):
            if step.value == self.status:
                return index
        return -1


class OrderTracker:
    def __init__(self, row_store: RowStore) -> None:
        self.row_store = row_store

    def track(self, order_id: str) -> OrderTracking:
        order_id = (order_id or "").strip()
        if not order_id:
            raise ValidationError({"order_id": ["Please enter an order ID"]})

        orders = self.row_store.query("orders", filters={"id": order_id}, limit=1)
        if not orders:
            logger.info("Order lookup missed", order_id=order_id)
            raise ObjectNotFoundError(f"Order {order_id} not found")

        items = self.row_store.query("order_items", filters={"order_id": order_id}, order=["created_at"])
        history = self.row_store.query(
            "order_status_history",
            filters={"order_id": order_id},
            order=["created_at"],
        )
        return OrderTracking(order=orders[0], items=items, history=history)
