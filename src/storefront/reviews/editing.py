"""EditReview — the author changes their review in place.

Only the original author can edit. Rating and text are replaced together,
the way the review form resubmits both.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer, Text

from storefront.domain import storefront
from storefront.reviews.submission import check_rating, require_reviewer
from storefront.rowstore import get_row_store
from storefront.rowstore.port import RowStore
from storefront.rowstore.tables import ProductReview

logger = structlog.get_logger(__name__)


def edit_review(
    row_store: RowStore,
    review_id: str,
    user_id: str | None,
    rating: int | None,
    review_text: str | None = None,
) -> dict:
    user_id = require_reviewer(user_id)
    rating = check_rating(rating)

    reviews = row_store.query("product_reviews", filters={"id": str(review_id)}, limit=1)
    if not reviews:
        raise ObjectNotFoundError(f"Review {review_id} not found")

    if str(reviews[0]["user_id"]) != user_id:
        raise ValidationError({"user_id": ["Only the review author can edit this review"]})

    review = row_store.update(
        "product_reviews",
        str(review_id),
        {"rating": rating, "review_text": review_text or None},
    )
    logger.info("Review updated", review_id=str(review_id), rating=rating)
    return review


@storefront.command(part_of="ProductReview")
class EditReview:
    review_id = Identifier(required=True)
    user_id = Identifier()  # Must match original author
    rating = Integer()
    review_text = Text()


@storefront.command_handler(part_of=ProductReview)
class EditReviewHandler:
    @handle(EditReview)
    def edit_review(self, command):
        return edit_review(
            get_row_store(),
            review_id=command.review_id,
            user_id=command.user_id,
            rating=command.rating,
            review_text=command.review_text,
        )
