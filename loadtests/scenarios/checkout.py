"""Storefront load test scenarios.

Browsing is stateless and read-only. Checkout is a SequentialTaskSet journey:
browse products, pick delivery, quote, place the order, then track it. Steps
execute in order and each depends on the previous one succeeding.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, tag, task

from loadtests.data_generators import cart_line, shipping_data
from loadtests.helpers.state import ShopperState

CATEGORIES = ["all", "necklaces", "earrings", "rings", "bracelets", "bangles", "pendants"]


class BrowsingUser(HttpUser):
    """Window shopper: category pages and delivery options, never buys."""

    wait_time = between(1, 3)

    @tag("browse")
    @task(3)
    def browse_category(self):
        category = random.choice(CATEGORIES)
        self.client.get(f"/products?category={category}", name="GET /products?category=")

    @tag("browse")
    @task(1)
    def delivery_options(self):
        self.client.get("/delivery-options", name="GET /delivery-options")


class CheckoutJourney(SequentialTaskSet):
    """Browse -> Fill cart -> Quote delivery -> Checkout -> Track."""

    def on_start(self):
        self.state = ShopperState()

    @task
    def browse_products(self):
        with self.client.get("/products", catch_response=True, name="GET /products") as resp:
            if resp.status_code == 200 and resp.json():
                self.state.products = resp.json()
            else:
                resp.failure(f"No products to buy: {resp.status_code}")
                self.interrupt()

    @task
    def fill_cart(self):
        picks = random.sample(self.state.products, k=min(len(self.state.products), random.randint(1, 3)))
        self.state.cart = [cart_line(product) for product in picks]

    @task
    def load_delivery_options(self):
        with self.client.get("/delivery-options", catch_response=True, name="GET /delivery-options") as resp:
            if resp.status_code == 200:
                self.state.delivery_option_ids = [o["option_id"] for o in resp.json()]
            else:
                resp.failure(f"Delivery options failed: {resp.status_code}")

    @task
    def quote_delivery(self):
        option_id = random.choice(self.state.delivery_option_ids) if self.state.delivery_option_ids else None
        self.client.post(
            "/delivery/quote",
            json={"option_id": option_id, "subtotal": self.state.subtotal},
            name="POST /delivery/quote",
        )

    @task
    def checkout(self):
        payload = {
            "items": self.state.cart,
            "shipping": shipping_data(),
            "delivery_option_id": (
                random.choice(self.state.delivery_option_ids) if self.state.delivery_option_ids else None
            ),
        }
        with self.client.post("/checkout", json=payload, catch_response=True, name="POST /checkout") as resp:
            if resp.status_code == 201:
                self.state.order_ids.append(resp.json()["order_id"])
                self.state.cart = []
            else:
                resp.failure(f"Checkout failed: {resp.status_code}")
                self.interrupt()

    @task
    def track_order(self):
        order_id = self.state.order_ids[-1]
        self.client.get(f"/orders/{order_id}", name="GET /orders/{id}")
        self.interrupt()


class CheckoutUser(HttpUser):
    wait_time = between(1, 5)
    tasks = [CheckoutJourney]
