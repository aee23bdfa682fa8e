"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the storefront's validation rules
(ShippingForm invariants) and match the field names expected by the API's
Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker("en_IN")

PAYMENT_METHODS = ["cod", "upi", "card"]


def valid_email() -> str:
    local = fake.user_name()[:20]
    return f"{local}.{uuid.uuid4().hex[:4]}@{fake.free_email_domain()}"


def valid_phone() -> str:
    """Indian mobile numbers: +91 followed by ten digits starting 6-9."""
    return f"+91 {random.randint(6, 9)}{random.randint(0, 999999999):09d}"


def valid_pincode() -> str:
    return f"{random.randint(110001, 855999)}"


def shipping_data() -> dict:
    return {
        "customer_name": fake.name(),
        "customer_email": valid_email(),
        "customer_phone": valid_phone(),
        "shipping_address": fake.street_address(),
        "city": fake.city(),
        "state": fake.state(),
        "pincode": valid_pincode(),
        "payment_method": random.choice(PAYMENT_METHODS),
    }


def cart_line(product: dict, quantity: int | None = None) -> dict:
    """A checkout cart line for a product as returned by GET /products."""
    return {
        "product_id": product["product_id"],
        "name": product["name"],
        "unit_price": product["unit_price"],
        "image_ref": product.get("image_ref") or "",
        "quantity": quantity or random.randint(1, 3),
    }
