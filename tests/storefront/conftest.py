import pytest
from protean.integrations.pytest import DomainFixture

from storefront.catalogue.products import ProductSnapshot
from storefront.checkout.form import ShippingForm
from storefront.delivery.options import DeliveryOption
from storefront.rowstore import reset_row_store, set_row_store
from storefront.rowstore.fake_adapter import FakeRowStore
from storefront.storage.memory_adapter import MemoryClientStorage


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield
    reset_row_store()


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------
@pytest.fixture()
def row_store():
    """A fake row store installed as the active one."""
    store = FakeRowStore()
    set_row_store(store)
    return store


@pytest.fixture()
def storage():
    return MemoryClientStorage()


# ---------------------------------------------------------------------------
# Sample data (amounts in paise)
# ---------------------------------------------------------------------------
@pytest.fixture()
def necklace():
    return ProductSnapshot(
        product_id="prod-necklace",
        name="Kundan Choker Necklace",
        unit_price=250000,
        image_ref="https://cdn.example.com/kundan-choker.jpg",
        category="necklaces",
    )


@pytest.fixture()
def earrings():
    return ProductSnapshot(
        product_id="prod-earrings",
        name="Pearl Drop Earrings",
        unit_price=50000,
        image_ref="https://cdn.example.com/pearl-drops.jpg",
        category="earrings",
    )


@pytest.fixture()
def standard_and_free_options():
    """₹99 standard delivery and free delivery above ₹2,000."""
    return [
        DeliveryOption(option_id="std", name="Standard Delivery", charge=9900, display_order=1),
        DeliveryOption(
            option_id="free",
            name="Free Delivery",
            charge=0,
            min_order_amount=200000,
            is_free=True,
            display_order=2,
        ),
    ]


def _make_form(**overrides) -> ShippingForm:
    values = {
        "customer_name": "Asha Rao",
        "customer_email": "asha@example.com",
        "customer_phone": "+91 98765 43210",
        "shipping_address": "12 MG Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "pincode": "560001",
        "payment_method": "cod",
    }
    values.update(overrides)
    return ShippingForm(**values)


@pytest.fixture()
def make_form():
    return _make_form


@pytest.fixture()
def shipping_form():
    return _make_form()
