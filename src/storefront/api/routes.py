"""FastAPI routes for the storefront — catalogue, delivery, checkout, orders and reviews."""

from fastapi import APIRouter, HTTPException
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    CheckoutRequest,
    CheckoutResponse,
    DeliveryOptionResponse,
    DeliveryQuoteRequest,
    DeliveryQuoteResponse,
    EditReviewRequest,
    OrderSummaryResponse,
    OrderTrackingResponse,
    ProductResponse,
    ProductReviewsResponse,
    ReviewResponse,
    StatusResponse,
    SubmitReviewRequest,
    SubmitReviewResponse,
    UpdateOrderStatusRequest,
)
from storefront.cart.ledger import CartLedger
from storefront.catalogue.products import ProductSnapshot, list_products
from storefront.checkout.errors import OrderWriteFailed, PartialOrderCommit
from storefront.checkout.form import ShippingForm
from storefront.checkout.submitter import CheckoutSubmitter
from storefront.delivery.options import fetch_active_options
from storefront.delivery.resolver import default_option_id, quote_delivery, resolve_delivery_charge
from storefront.orders.history import order_history
from storefront.orders.status import UpdateOrderStatus
from storefront.orders.tracking import OrderTracker
from storefront.reviews.editing import EditReview
from storefront.reviews.listing import list_reviews
from storefront.reviews.submission import SubmitReview
from storefront.rowstore import get_row_store
from storefront.shared.money import format_inr
from storefront.storage.memory_adapter import MemoryClientStorage

# ---------------------------------------------------------------------------
# Catalogue Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("", response_model=list[ProductResponse])
async def get_products(category: str | None = None) -> list[ProductResponse]:
    return [
        ProductResponse(
            product_id=str(product.product_id),
            name=product.name,
            unit_price=product.unit_price,
            display_price=format_inr(product.unit_price),
            image_ref=product.image_ref,
            category=product.category,
            original_price=product.original_price,
            discount_percent=product.discount_percent,
        )
        for product in list_products(get_row_store(), category=category)
    ]


# ---------------------------------------------------------------------------
# Delivery Router
# ---------------------------------------------------------------------------
delivery_router = APIRouter(tags=["delivery"])


@delivery_router.get("/delivery-options", response_model=list[DeliveryOptionResponse])
async def get_delivery_options() -> list[DeliveryOptionResponse]:
    return [
        DeliveryOptionResponse(
            option_id=str(option.option_id),
            name=option.name,
            charge=option.charge,
            min_order_amount=option.min_order_amount,
            is_free=option.is_free,
            display_order=option.display_order,
        )
        for option in fetch_active_options(get_row_store())
    ]


@delivery_router.post("/delivery/quote", response_model=DeliveryQuoteResponse)
async def get_delivery_quote(body: DeliveryQuoteRequest) -> DeliveryQuoteResponse:
    options = fetch_active_options(get_row_store())
    selected_id = default_option_id(body.option_id, options)
    quote = quote_delivery(selected_id, body.subtotal, options)
    return DeliveryQuoteResponse(
        option_id=str(quote.option.option_id) if quote.option else None,
        charge=quote.charge,
        is_free=quote.is_free,
        amount_to_free_delivery=quote.amount_to_free_delivery,
    )


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post("", status_code=201, response_model=CheckoutResponse)
async def checkout(body: CheckoutRequest) -> CheckoutResponse:
    """Place an order for the posted cart.

    The cart is rebuilt per request, so duplicate-submit protection belongs to
    the client session that owns the cart; each POST is a new order.

    1. Rebuild the cart in a ledger scoped to this request
    2. Resolve the delivery charge from the active options
    3. Submit the order and its items
    """
    row_store = get_row_store()
    form = ShippingForm(**body.shipping.model_dump())

    ledger = CartLedger(MemoryClientStorage())
    for line in body.items:
        product = ProductSnapshot(
            product_id=line.product_id,
            name=line.name,
            unit_price=line.unit_price,
            image_ref=line.image_ref or "",
        )
        ledger.add(product, quantity=line.quantity)

    options = fetch_active_options(row_store)
    selected_id = default_option_id(body.delivery_option_id, options)
    delivery_charge = resolve_delivery_charge(selected_id, ledger.subtotal(), options)

    try:
        confirmation = CheckoutSubmitter(ledger, row_store).submit(
            form,
            delivery_charge=delivery_charge,
            user_id=body.user_id,
        )
    except PartialOrderCommit as exc:
        raise HTTPException(status_code=502, detail={"message": str(exc), "order_id": exc.order_id}) from exc
    except OrderWriteFailed as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return CheckoutResponse(
        order_id=confirmation.order_id,
        reference=confirmation.reference,
        total_amount=confirmation.total_amount,
    )


# ---------------------------------------------------------------------------
# Orders Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=list[OrderSummaryResponse])
async def get_order_history(email: str | None = None) -> list[OrderSummaryResponse]:
    return [
        OrderSummaryResponse(
            order_id=summary.order_id,
            reference=summary.reference,
            status=summary.status,
            status_label=summary.status_label,
            total_amount=summary.total_amount,
            created_at=summary.created_at,
        )
        for summary in order_history(get_row_store(), email)
    ]


@order_router.get("/{order_id}", response_model=OrderTrackingResponse)
async def track_order(order_id: str) -> OrderTrackingResponse:
    try:
        tracking = OrderTracker(get_row_store()).track(order_id)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Order not found") from exc

    return OrderTrackingResponse(
        order_id=str(tracking.order["id"]),
        reference=tracking.reference,
        status=tracking.status,
        current_step=tracking.current_step,
        is_cancelled=tracking.is_cancelled,
        order=tracking.order,
        items=tracking.items,
        history=tracking.history,
    )


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> StatusResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        notes=body.notes,
    )
    try:
        current_domain.process(command, asynchronous=False)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Order not found") from exc
    return StatusResponse()


# ---------------------------------------------------------------------------
# Reviews Router
# ---------------------------------------------------------------------------
review_router = APIRouter(tags=["reviews"])


def _review_response(row: dict) -> ReviewResponse:
    return ReviewResponse(
        review_id=str(row["id"]),
        product_id=str(row["product_id"]),
        user_id=str(row["user_id"]),
        rating=row["rating"],
        review_text=row.get("review_text"),
        created_at=str(row["created_at"]) if row.get("created_at") else None,
    )


@review_router.get("/products/{product_id}/reviews", response_model=ProductReviewsResponse)
async def get_product_reviews(product_id: str) -> ProductReviewsResponse:
    summary = list_reviews(get_row_store(), product_id)
    return ProductReviewsResponse(
        product_id=summary.product_id,
        count=summary.count,
        average_rating=summary.average_rating,
        reviews=[_review_response(row) for row in summary.reviews],
    )


@review_router.post("/products/{product_id}/reviews", status_code=201, response_model=SubmitReviewResponse)
async def submit_product_review(product_id: str, body: SubmitReviewRequest) -> SubmitReviewResponse:
    command = SubmitReview(
        product_id=product_id,
        user_id=body.user_id,
        rating=body.rating,
        review_text=body.review_text,
    )
    review_id = current_domain.process(command, asynchronous=False)
    return SubmitReviewResponse(review_id=review_id)


@review_router.put("/reviews/{review_id}", response_model=ReviewResponse)
async def edit_product_review(review_id: str, body: EditReviewRequest) -> ReviewResponse:
    command = EditReview(
        review_id=review_id,
        user_id=body.user_id,
        rating=body.rating,
        review_text=body.review_text,
    )
    try:
        review = current_domain.process(command, asynchronous=False)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Review not found") from exc
    return _review_response(review)
