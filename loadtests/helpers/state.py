"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state — no cross-user sharing.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks what a simulated shopper has seen and put in their cart."""

    products: list[dict] = field(default_factory=list)
    delivery_option_ids: list[str] = field(default_factory=list)
    cart: list[dict] = field(default_factory=list)
    order_ids: list[str] = field(default_factory=list)

    @property
    def subtotal(self) -> int:
        return sum(line["unit_price"] * line["quantity"] for line in self.cart)
