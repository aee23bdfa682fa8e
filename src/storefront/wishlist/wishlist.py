"""Per-customer wishlist kept in the ``wishlist`` table."""

import structlog
from protean.exceptions import ValidationError

from storefront.rowstore.port import RowStore

logger = structlog.get_logger(__name__)


class Wishlist:
    """Product ids a signed-in customer has saved.

    Anonymous visitors (``user_id=None``) read an empty wishlist and cannot
    change it.
    """

    def __init__(self, row_store: RowStore, user_id: str | None) -> None:
        self.row_store = row_store
        self.user_id = str(user_id) if user_id else None
        self._product_ids: list[str] = []

    def refresh(self) -> list[str]:
        if self.user_id is None:
            self._product_ids = []
            return []
        rows = self.row_store.query("wishlist", filters={"user_id": self.user_id}, order=["-created_at"])
        self._product_ids = [str(row["product_id"]) for row in rows]
        return list(self._product_ids)

    @property
    def product_ids(self) -> list[str]:
        return list(self._product_ids)

    def contains(self, product_id) -> bool:
        return str(product_id) in self._product_ids

    def add(self, product_id) -> bool:
        """Save ``product_id``. Returns ``False`` if it was already saved."""
        self._require_user()
        product_id = str(product_id)
        if self.contains(product_id):
            return False
        self.row_store.insert("wishlist", {"user_id": self.user_id, "product_id": product_id})
        self._product_ids.insert(0, product_id)
        logger.info("Added to wishlist", user_id=self.user_id, product_id=product_id)
        return True

    def remove(self, product_id) -> bool:
        self._require_user()
        product_id = str(product_id)
        deleted = self.row_store.delete("wishlist", {"user_id": self.user_id, "product_id": product_id})
        self._product_ids = [pid for pid in self._product_ids if pid != product_id]
        if deleted:
            logger.info("Removed from wishlist", user_id=self.user_id, product_id=product_id)
        return bool(deleted)

    def toggle(self, product_id) -> bool:
        """Add or remove ``product_id``; returns whether it is saved afterwards."""
        if self.contains(product_id):
            self.remove(product_id)
            return False
        self.add(product_id)
        return True

    def _require_user(self) -> None:
        if self.user_id is None:
            raise ValidationError({"user_id": ["Please login to use wishlist"]})
