"""Pydantic request/response schemas for the storefront API.

These are the external contracts; form and cart validation still happens in
the domain value objects they are turned into. Amounts are paise.
"""

from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Catalogue / delivery
# ---------------------------------------------------------------------------
class ProductResponse(BaseModel):
    product_id: str
    name: str
    unit_price: int
    display_price: str
    image_ref: str | None = None
    category: str | None = None
    original_price: int | None = None
    discount_percent: int = 0


class DeliveryOptionResponse(BaseModel):
    option_id: str
    name: str
    charge: int
    min_order_amount: int | None = None
    is_free: bool = False
    display_order: int = 0


class DeliveryQuoteRequest(BaseModel):
    option_id: str | None = None
    subtotal: int = Field(ge=0)


class DeliveryQuoteResponse(BaseModel):
    option_id: str | None = None
    charge: int
    is_free: bool
    amount_to_free_delivery: int = 0


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
class CartLineSchema(BaseModel):
    product_id: str
    name: str
    unit_price: int = Field(ge=0)
    image_ref: str | None = None
    quantity: int = Field(ge=1)


class ShippingSchema(BaseModel):
    customer_name: str
    customer_email: str
    customer_phone: str
    shipping_address: str
    city: str
    state: str
    pincode: str
    payment_method: str = "cod"


class CheckoutRequest(BaseModel):
    items: list[CartLineSchema]
    shipping: ShippingSchema
    delivery_option_id: str | None = None
    user_id: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {
                            "product_id": "prod-001",
                            "name": "Kundan Choker Necklace",
                            "unit_price": 250000,
                            "image_ref": "https://cdn.example.com/kundan-choker.jpg",
                            "quantity": 1,
                        }
                    ],
                    "shipping": {
                        "customer_name": "Asha Rao",
                        "customer_email": "asha@example.com",
                        "customer_phone": "+91 98765 43210",
                        "shipping_address": "12 MG Road",
                        "city": "Bengaluru",
                        "state": "Karnataka",
                        "pincode": "560001",
                        "payment_method": "cod",
                    },
                    "delivery_option_id": None,
                }
            ]
        }
    }


class CheckoutResponse(BaseModel):
    order_id: str
    reference: str
    total_amount: int


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderTrackingResponse(BaseModel):
    order_id: str
    reference: str
    status: str
    current_step: int
    is_cancelled: bool
    order: dict[str, Any]
    items: list[dict[str, Any]]
    history: list[dict[str, Any]]


class OrderSummaryResponse(BaseModel):
    order_id: str
    reference: str
    status: str
    status_label: str
    total_amount: int
    created_at: str | None = None


class UpdateOrderStatusRequest(BaseModel):
    status: str
    notes: str | None = None


class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------
class ReviewResponse(BaseModel):
    review_id: str
    product_id: str
    user_id: str
    rating: int
    review_text: str | None = None
    created_at: str | None = None


class ProductReviewsResponse(BaseModel):
    product_id: str
    count: int
    average_rating: float
    reviews: list[ReviewResponse]


class SubmitReviewRequest(BaseModel):
    user_id: str | None = None
    rating: int | None = None
    review_text: str | None = None


class EditReviewRequest(BaseModel):
    user_id: str | None = None
    rating: int | None = None
    review_text: str | None = None


class SubmitReviewResponse(BaseModel):
    review_id: str
