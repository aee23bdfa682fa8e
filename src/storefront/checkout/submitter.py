"""Checkout submission — turns the cart and a shipping form into an order.

Flow:
    1. Refuse an empty cart or a negative delivery charge (ValidationError).
    2. Write one ``orders`` row: status pending, total = subtotal + delivery.
    3. Write one ``order_items`` row per cart line, tagged with the new order id.
    4. Clear the cart and hand back the order id.

A failure at step 2 leaves nothing behind and the cart untouched. A failure at
step 3 leaves the order header without items: it is reported as
``PartialOrderCommit`` with the orphaned order id, and the cart is kept so the
shopper still has it. Nothing is retried automatically.
"""

import threading
from dataclasses import dataclass

import structlog
from protean.exceptions import ValidationError

from storefront.cart.ledger import CartLedger
from storefront.checkout.errors import CheckoutInProgress, OrderWriteFailed, PartialOrderCommit
from storefront.checkout.form import ShippingForm
from storefront.orders.status import OrderStatus
from storefront.rowstore.port import RowStore, RowStoreError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OrderConfirmation:
    """What the shopper is shown once the order is stored."""

    order_id: str
    total_amount: int

    @property
    def reference(self) -> str:
        """Short order reference shown on the confirmation screen."""
        return self.order_id[:8].upper()


class CheckoutSubmitter:
    """Submits the cart in ``ledger`` as an order through ``row_store``.

    One submitter serves one cart. While a submission is waiting on the
    backend, a second one is refused with ``CheckoutInProgress`` instead of
    creating a duplicate order.
    """

    def __init__(self, ledger: CartLedger, row_store: RowStore) -> None:
        self.ledger = ledger
        self.row_store = row_store
        self._in_flight = threading.Lock()

    @property
    def is_submitting(self) -> bool:
        return self._in_flight.locked()

    def submit(self, form: ShippingForm, delivery_charge: int, user_id: str | None = None) -> OrderConfirmation:
        if not self._in_flight.acquire(blocking=False):
            raise CheckoutInProgress("An order for this cart is already being placed")
        try:
            return self._submit(form, delivery_charge, user_id)
        finally:
            self._in_flight.release()

    def _submit(self, form: ShippingForm, delivery_charge: int, user_id: str | None) -> OrderConfirmation:
        lines = self.ledger.lines
        if not lines:
            raise ValidationError({"cart": ["Your cart is empty"]})
        if delivery_charge is None or delivery_charge < 0:
            raise ValidationError({"delivery_charge": ["Delivery charge cannot be negative"]})

        subtotal = sum(line.line_total for line in lines)
        grand_total = subtotal + delivery_charge

        order_record = {
            **form.order_fields(),
            "user_id": user_id,
            "status": OrderStatus.PENDING.value,
            "subtotal": subtotal,
            "delivery_charge": delivery_charge,
            "total_amount": grand_total,
        }
        try:
            order = self.row_store.insert("orders", order_record)
        except RowStoreError as exc:
            logger.warning("Order could not be placed", error=str(exc), total_amount=grand_total)
            raise OrderWriteFailed("Failed to place order. Please try again.") from exc

        order_id = str(order["id"])
        # Frozen copy of each line; later catalogue price changes never touch it
        items = [
            {
                "order_id": order_id,
                "product_id": str(line.product_id),
                "product_name": line.name,
                "quantity": line.quantity,
                "price": line.unit_price,
            }
            for line in lines
        ]
        try:
            self.row_store.insert_many("order_items", items)
        except RowStoreError as exc:
            logger.error(
                "Order stored without its items",
                order_id=order_id,
                item_count=len(items),
                error=str(exc),
            )
            raise PartialOrderCommit("Failed to place order. Please try again.", order_id=order_id) from exc

        self.ledger.clear()
        logger.info(
            "Order placed",
            order_id=order_id,
            subtotal=subtotal,
            delivery_charge=delivery_charge,
            total_amount=grand_total,
        )
        return OrderConfirmation(order_id=order_id, total_amount=grand_total)
