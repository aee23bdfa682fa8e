"""Cart ledger — the shopper's cart, owned by their client session.

The ledger keeps one line per product and writes a full snapshot of its lines
to client storage after every change, so the cart survives reloads on the same
device. There is no server-side cart.

The ledger never raises for ordinary shopper input: unknown product ids,
zero or negative quantities and unreadable snapshots all degrade to no-ops or
an empty cart.
"""

import json

import structlog
from protean.exceptions import ValidationError
from protean.fields import Integer, String, Text

from storefront.domain import storefront
from storefront.storage.port import ClientStorage

logger = structlog.get_logger(__name__)

CART_STORAGE_KEY = "ratnaya-cart"

_LINE_FIELDS = ("product_id", "name", "unit_price", "image_ref", "quantity")


@storefront.value_object
class CartLine:
    """One product in the cart. Prices are paise."""

    product_id = String(required=True, max_length=64)
    name = String(required=True, max_length=255)
    unit_price = Integer(required=True, min_value=0)
    image_ref = Text()
    quantity = Integer(required=True, min_value=1)

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity

    def with_quantity(self, quantity: int) -> "CartLine":
        return CartLine(
            product_id=self.product_id,
            name=self.name,
            unit_price=self.unit_price,
            image_ref=self.image_ref,
            quantity=quantity,
        )

    def snapshot(self) -> dict:
        return {
            "product_id": str(self.product_id),
            "name": self.name,
            "unit_price": self.unit_price,
            "image_ref": self.image_ref or "",
            "quantity": self.quantity,
        }


class CartLedger:
    """Cart lines keyed by product id, persisted to client storage.

    Pass the ledger explicitly to whatever needs the cart; each session owns
    exactly one and is its only writer.
    """

    def __init__(self, storage: ClientStorage, key: str = CART_STORAGE_KEY) -> None:
        self.storage = storage
        self.key = key
        self._lines: dict[str, CartLine] = self._load()

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    def line(self, product_id: str) -> CartLine | None:
        return self._lines.get(str(product_id))

    def subtotal(self) -> int:
        """Sum of ``unit_price * quantity`` over every line, in paise."""
        return sum(line.line_total for line in self._lines.values())

    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, product_id) -> bool:
        return str(product_id) in self._lines

    def __iter__(self):
        return iter(self.lines)

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add(self, product, quantity: int = 1) -> None:
        """Put ``quantity`` of ``product`` in the cart, merging with an existing line.

        ``product`` is anything carrying ``product_id``, ``name``, ``unit_price``
        and ``image_ref``, usually a ``ProductSnapshot``.
        """
        if quantity < 1:
            return

        product_id = str(product.product_id)
        existing = self._lines.get(product_id)
        if existing:
            self._lines[product_id] = existing.with_quantity(existing.quantity + quantity)
        else:
            self._lines[product_id] = CartLine(
                product_id=product_id,
                name=product.name,
                unit_price=product.unit_price,
                image_ref=product.image_ref or "",
                quantity=quantity,
            )
        self._save()

    def set_quantity(self, product_id: str, quantity: int) -> None:
        """Overwrite a line's quantity; anything below 1 removes the line."""
        if quantity < 1:
            self.remove(product_id)
            return

        existing = self._lines.get(str(product_id))
        if existing is None or existing.quantity == quantity:
            return
        self._lines[str(product_id)] = existing.with_quantity(quantity)
        self._save()

    def remove(self, product_id: str) -> None:
        if self._lines.pop(str(product_id), None) is not None:
            self._save()

    def clear(self) -> None:
        self._lines.clear()
        self._save()

    # -------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------
    def _save(self) -> None:
        payload = [line.snapshot() for line in self._lines.values()]
        self.storage.set(self.key, json.dumps(payload).encode("utf-8"))

    def _load(self) -> dict[str, CartLine]:
        raw = self.storage.get(self.key)
        if raw is None:
            return {}

        try:
            payload = json.loads(raw)
            if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
                raise ValueError("cart snapshot must be a list of objects")
            lines = [CartLine(**{field: item.get(field) for field in _LINE_FIELDS}) for item in payload]
        except (ValueError, ValidationError) as exc:
            logger.warning("Discarding unreadable cart snapshot", key=self.key, error=str(exc))
            return {}

        return {str(line.product_id): line for line in lines}
