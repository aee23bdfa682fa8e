"""Storefront API package."""

from storefront.api.routes import checkout_router, delivery_router, order_router, product_router, review_router

__all__ = ["checkout_router", "delivery_router", "order_router", "product_router", "review_router"]
