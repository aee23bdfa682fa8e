"""Shared BDD fixtures and step definitions for the storefront."""

import pytest
from pytest_bdd import given, parsers, then

from storefront.cart.ledger import CartLedger
from storefront.catalogue.products import ProductSnapshot
from storefront.delivery.options import DeliveryOption


def _product_named(name: str, price: int) -> ProductSnapshot:
    return ProductSnapshot(
        product_id=name.lower().replace(" ", "-"),
        name=name,
        unit_price=price,
        image_ref=f"{name.lower().replace(' ', '-')}.jpg",
    )


def _option_id_for(options: list[DeliveryOption], name: str) -> str:
    """Id of the option called ``name``; unknown names pass through as ids nothing matches."""
    return next((o.option_id for o in options if o.name == name), name)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation and checkout errors."""
    return {"exc": None}


@pytest.fixture()
def delivery_options():
    return []


@pytest.fixture()
def product_named():
    return _product_named


@pytest.fixture()
def option_id_for():
    return _option_id_for


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an empty cart", target_fixture="cart")
def empty_cart(storage):
    return CartLedger(storage)


@given(parsers.cfparse('the cart holds {quantity:d} of "{name}" priced {price:d}'))
def cart_holds(cart, quantity, name, price):
    cart.add(_product_named(name, price), quantity=quantity)


@given(parsers.cfparse("standard delivery costs {charge:d}"))
def standard_delivery(delivery_options, charge):
    delivery_options.append(
        DeliveryOption(option_id="opt-standard", name="Standard", charge=charge, display_order=1),
    )


@given(parsers.cfparse("delivery is free for orders of at least {minimum:d}"))
def free_delivery(delivery_options, minimum):
    delivery_options.append(
        DeliveryOption(
            option_id="opt-free",
            name="Free",
            charge=0,
            min_order_amount=minimum,
            is_free=True,
            display_order=2,
        ),
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the cart is empty")
def cart_is_empty(cart):
    assert cart.is_empty()
    assert cart.subtotal() == 0


@then(parsers.cfparse("the cart holds {count:d} items"))
def cart_item_count(cart, count):
    assert cart.item_count() == count


@then(parsers.cfparse("the cart subtotal is {subtotal:d}"))
def cart_subtotal(cart, subtotal):
    assert cart.subtotal() == subtotal
