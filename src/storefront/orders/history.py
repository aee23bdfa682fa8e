"""Order history — a customer's past orders on their profile page.

Orders are matched on the email given at checkout, so guest orders placed
with the same address show up once the customer signs in.
"""

from dataclasses import dataclass

from protean.exceptions import ValidationError

from storefront.orders.status import STATUS_LABELS, OrderStatus
from storefront.rowstore.port import RowStore


@dataclass(frozen=True)
class OrderSummary:
    order_id: str
    status: str
    total_amount: int
    created_at: str | None = None

    @classmethod
    def from_row(cls, row: dict) -> "OrderSummary":
        return cls(
            order_id=str(row["id"]),
            status=row.get("status") or "pending",
            total_amount=row["total_amount"],
            created_at=str(row["created_at"]) if row.get("created_at") else None,
        )

    @property
    def reference(self) -> str:
        return self.order_id[:8].upper()

    @property
    def status_label(self) -> str:
        try:
            return STATUS_LABELS[OrderStatus(self.status)]
        except ValueError:
            return self.status.title()


def order_history(row_store: RowStore, customer_email: str | None) -> list[OrderSummary]:
    email = (customer_email or "").strip()
    if not email:
        raise ValidationError({"customer_email": ["Please sign in to see your orders"]})

    rows = row_store.query("orders", filters={"customer_email": email}, order=["-created_at"])
    return [OrderSummary.from_row(row) for row in rows]
