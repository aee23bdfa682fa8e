"""Storefront tables, declared as Protean aggregates.

Each aggregate is one table of the hosted backend's fixed schema. They are
plain records: the storefront reaches them only through the row-store port,
so none of them carries behaviour or raises events. Amounts are paise.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from storefront.domain import storefront


def utcnow():
    return datetime.now(UTC)


@storefront.aggregate(schema_name="products")
class Product:
    name = String(required=True, max_length=255)
    description = Text()
    price = Integer(required=True, min_value=0)
    original_price = Integer(min_value=0)
    image_url = Text()
    category = String(max_length=50)
    in_stock = Boolean(default=True)
    created_at = DateTime(default=utcnow)


@storefront.aggregate(schema_name="delivery_settings")
class DeliverySetting:
    name = String(required=True, max_length=100)
    charge = Integer(required=True, min_value=0)
    min_order_amount = Integer(min_value=0)  # Nullable: free option with no minimum
    is_free = Boolean(default=False)
    is_active = Boolean(default=True)
    display_order = Integer(default=0)
    created_at = DateTime(default=utcnow)


@storefront.aggregate(schema_name="orders")
class Order:
    user_id = Identifier()  # Nullable for guest checkout
    customer_name = String(required=True, max_length=255)
    customer_email = String(required=True, max_length=254)
    customer_phone = String(required=True, max_length=20)
    shipping_address = Text(required=True)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    pincode = String(required=True, max_length=10)
    payment_method = String(required=True, max_length=10)
    status = String(max_length=20, default="pending")
    subtotal = Integer(min_value=0)
    delivery_charge = Integer(min_value=0, default=0)
    total_amount = Integer(required=True, min_value=0)
    created_at = DateTime(default=utcnow)
    updated_at = DateTime(default=utcnow)


@storefront.aggregate(schema_name="order_items")
class OrderItem:
    order_id = Identifier(required=True)
    product_id = Identifier()
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    price = Integer(required=True, min_value=0)
    created_at = DateTime(default=utcnow)


@storefront.aggregate(schema_name="order_status_history")
class OrderStatusHistory:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    notes = Text()
    created_at = DateTime(default=utcnow)


@storefront.aggregate(schema_name="wishlist")
class WishlistEntry:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    created_at = DateTime(default=utcnow)


@storefront.aggregate(schema_name="order_notifications")
class OrderNotification:
    user_id = Identifier(required=True)
    order_id = Identifier(required=True)
    notification_type = String(required=True, max_length=50)
    message = Text(required=True)
    is_read = Boolean(default=False)
    created_at = DateTime(default=utcnow)


@storefront.aggregate(schema_name="product_reviews")
class ProductReview:
    # One row per (product_id, user_id); the backend holds the unique index
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True, min_value=1, max_value=5)
    review_text = Text()
    created_at = DateTime(default=utcnow)
    updated_at = DateTime(default=utcnow)


TABLES = {
    "products": Product,
    "delivery_settings": DeliverySetting,
    "orders": Order,
    "order_items": OrderItem,
    "order_status_history": OrderStatusHistory,
    "wishlist": WishlistEntry,
    "order_notifications": OrderNotification,
    "product_reviews": ProductReview,
}
