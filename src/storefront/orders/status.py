"""Order status — the lifecycle vocabulary and the admin status change.

An order is created ``pending`` by checkout. After that only the shop admin
moves it, and every move is recorded in ``order_status_history``. When the
order belongs to a signed-in customer, they also get an ``order_notifications``
row, which the realtime channel pushes to their inbox.
"""

from enum import Enum

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text

from storefront.domain import storefront
from storefront.rowstore import get_row_store
from storefront.rowstore.port import RowNotFoundError, RowStore
from storefront.rowstore.tables import Order

logger = structlog.get_logger(__name__)


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


STATUS_LABELS = {
    OrderStatus.PENDING: "Order Placed",
    OrderStatus.CONFIRMED: "Confirmed",
    OrderStatus.PROCESSING: "Processing",
    OrderStatus.SHIPPED: "Shipped",
    OrderStatus.DELIVERED: "Delivered",
    OrderStatus.CANCELLED: "Cancelled",
}

# Progress shown to the customer; cancelled orders are off this track
TRACKING_STEPS = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
)


def parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError({"status": [f"Unknown order status: {value!r}"]}) from None


def change_order_status(row_store: RowStore, order_id: str, status: str, notes: str | None = None) -> dict:
    """Move an order to ``status``, record the change, and notify its owner.

    Raises ``ObjectNotFoundError`` when no order has ``order_id``.
    """
    new_status = parse_status(status)

    try:
        order = row_store.update("orders", order_id, {"status": new_status.value})
    except RowNotFoundError as exc:
        raise ObjectNotFoundError(f"Order {order_id} not found") from exc

    row_store.insert(
        "order_status_history",
        {"order_id": str(order_id), "status": new_status.value, "notes": notes},
    )

    if order.get("user_id"):
        reference = str(order_id)[:8].upper()
        row_store.insert(
            "order_notifications",
            {
                "user_id": str(order["user_id"]),
                "order_id": str(order_id),
                "notification_type": "status_update",
                "message": f"Your order #{reference} is now {STATUS_LABELS[new_status]}.",
                "is_read": False,
            },
        )

    logger.info("Order status changed", order_id=str(order_id), status=new_status.value)
    return order


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    notes = Text()


@storefront.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        return change_order_status(
            get_row_store(),
            order_id=command.order_id,
            status=command.status,
            notes=command.notes,
        )
