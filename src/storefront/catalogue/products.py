"""Product snapshots read from the catalogue table.

Rows coming back from the row store are validated here before any of them can
reach the cart ledger.
"""

import structlog
from protean.exceptions import ValidationError
from protean.fields import Integer, String, Text

from storefront.domain import storefront
from storefront.rowstore.port import RowStore

logger = structlog.get_logger(__name__)

ALL_CATEGORIES = "all"
CATEGORIES = ("necklaces", "earrings", "rings", "bracelets", "bangles", "pendants")


def discount_percent(price: int, original_price: int | None) -> int:
    """Whole-percent markdown from ``original_price`` to ``price``, rounded half up."""
    if not original_price or original_price <= price:
        return 0
    saved = original_price - price
    return (200 * saved + original_price) // (2 * original_price)


@storefront.value_object
class ProductSnapshot:
    """A product as the shopper sees it at the moment it is put in the cart."""

    product_id = String(required=True, max_length=64)
    name = String(required=True, max_length=255)
    unit_price = Integer(required=True, min_value=0)
    image_ref = Text()
    category = String(max_length=50)
    original_price = Integer(min_value=0)

    @classmethod
    def from_row(cls, row: dict) -> "ProductSnapshot":
        return cls(
            product_id=row.get("id"),
            name=row.get("name"),
            unit_price=row.get("price"),
            image_ref=row.get("image_url") or "",
            category=row.get("category"),
            original_price=row.get("original_price"),
        )

    @property
    def discount_percent(self) -> int:
        return discount_percent(self.unit_price, self.original_price)


def list_products(row_store: RowStore, category: str | None = None) -> list[ProductSnapshot]:
    """Newest products first, optionally restricted to one category."""
    filters = {}
    if category and category != ALL_CATEGORIES:
        filters["category"] = category

    products = []
    for row in row_store.query("products", filters=filters, order=["-created_at"]):
        try:
            products.append(ProductSnapshot.from_row(row))
        except ValidationError as exc:
            logger.warning("Skipping malformed product row", product_id=row.get("id"), errors=exc.messages)
    return products


def get_product(row_store: RowStore, product_id: str) -> ProductSnapshot | None:
    rows = row_store.query("products", filters={"id": product_id}, limit=1)
    return ProductSnapshot.from_row(rows[0]) if rows else None
