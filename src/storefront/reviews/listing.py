"""Reviews shown under a product, newest first, with the rating summary."""

from dataclasses import dataclass, field

from storefront.rowstore.port import RowStore


@dataclass(frozen=True)
class ProductReviews:
    product_id: str
    reviews: list[dict] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.reviews)

    @property
    def average_rating(self) -> float:
        """Mean rating rounded to one decimal; ``0.0`` with no reviews."""
        if not self.reviews:
            return 0.0
        return round(sum(r["rating"] for r in self.reviews) / len(self.reviews), 1)

    def review_by(self, user_id: str | None) -> dict | None:
        """The customer's own review, which the form offers to update."""
        if not user_id:
            return None
        return next((r for r in self.reviews if str(r["user_id"]) == str(user_id)), None)


def list_reviews(row_store: RowStore, product_id: str) -> ProductReviews:
    rows = row_store.query(
        "product_reviews",
        filters={"product_id": str(product_id)},
        order=["-created_at"],
    )
    return ProductReviews(product_id=str(product_id), reviews=rows)
