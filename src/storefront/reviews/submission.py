"""SubmitReview — a signed-in customer reviews a product.

One review per customer per product. The handler checks for an existing row
first; a concurrent duplicate that slips past the check is still refused by
the backend's unique index and reported the same way.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, Text

from storefront.domain import storefront
from storefront.rowstore import get_row_store
from storefront.rowstore.port import RowConflictError, RowStore
from storefront.rowstore.tables import ProductReview

logger = structlog.get_logger(__name__)

ALREADY_REVIEWED = "You have already reviewed this product"


def check_rating(rating) -> int:
    if not rating:
        raise ValidationError({"rating": ["Please select a rating"]})
    if not 1 <= rating <= 5:
        raise ValidationError({"rating": ["Rating must be between 1 and 5"]})
    return rating


def require_reviewer(user_id) -> str:
    if not user_id:
        raise ValidationError({"user_id": ["Please sign in to leave a review"]})
    return str(user_id)


def submit_review(
    row_store: RowStore,
    product_id: str,
    user_id: str | None,
    rating: int | None,
    review_text: str | None = None,
) -> dict:
    user_id = require_reviewer(user_id)
    rating = check_rating(rating)
    product_id = str(product_id)

    existing = row_store.query(
        "product_reviews",
        filters={"product_id": product_id, "user_id": user_id},
        limit=1,
    )
    if existing:
        raise ValidationError({"review": [ALREADY_REVIEWED]})

    try:
        review = row_store.insert(
            "product_reviews",
            {
                "product_id": product_id,
                "user_id": user_id,
                "rating": rating,
                "review_text": review_text or None,
            },
        )
    except RowConflictError as exc:
        raise ValidationError({"review": [ALREADY_REVIEWED]}) from exc

    logger.info("Review submitted", product_id=product_id, user_id=user_id, rating=rating)
    return review


@storefront.command(part_of="ProductReview")
class SubmitReview:
    product_id = Identifier(required=True)
    user_id = Identifier()  # Empty for anonymous visitors, who are refused
    rating = Integer()
    review_text = Text()


@storefront.command_handler(part_of=ProductReview)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        review = submit_review(
            get_row_store(),
            product_id=command.product_id,
            user_id=command.user_id,
            rating=command.rating,
            review_text=command.review_text,
        )
        return str(review["id"])
