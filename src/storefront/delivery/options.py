"""Delivery options configured by the shop admin in ``delivery_settings``."""

import structlog
from protean.exceptions import ValidationError
from protean.fields import Boolean, Integer, String

from storefront.domain import storefront
from storefront.rowstore.port import RowStore

logger = structlog.get_logger(__name__)


@storefront.value_object
class DeliveryOption:
    """A shipping option as read from the backend. Amounts are paise.

    ``min_order_amount`` only matters for free options: a free option with a
    minimum is free once the cart reaches it, and one without a minimum is
    always free.
    """

    option_id = String(required=True, max_length=64)
    name = String(required=True, max_length=100)
    charge = Integer(required=True, min_value=0)
    min_order_amount = Integer(min_value=0)
    is_free = Boolean(default=False)
    is_active = Boolean(default=True)
    display_order = Integer(default=0)

    @classmethod
    def from_row(cls, row: dict) -> "DeliveryOption":
        return cls(
            option_id=row.get("id"),
            name=row.get("name"),
            charge=row.get("charge") or 0,
            min_order_amount=row.get("min_order_amount"),
            is_free=bool(row.get("is_free", False)),
            is_active=bool(row.get("is_active", True)),
            display_order=row.get("display_order") or 0,
        )


def fetch_active_options(row_store: RowStore) -> list[DeliveryOption]:
    """Active delivery options in display order.

    Rows that fail validation are left out rather than allowed to reach the
    resolver.
    """
    rows = row_store.query("delivery_settings", filters={"is_active": True}, order=["display_order"])
    options = []
    for row in rows:
        try:
            options.append(DeliveryOption.from_row(row))
        except ValidationError as exc:
            logger.warning("Skipping malformed delivery option", option_id=row.get("id"), errors=exc.messages)
    return options
