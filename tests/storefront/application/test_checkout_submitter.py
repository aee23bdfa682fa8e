"""Tests for submitting a cart as an order through the row store."""

import threading

import pytest
from protean.exceptions import ValidationError

from storefront.cart.ledger import CartLedger
from storefront.catalogue.products import ProductSnapshot
from storefront.checkout.errors import CheckoutInProgress, OrderWriteFailed, PartialOrderCommit
from storefront.checkout.submitter import CheckoutSubmitter, OrderConfirmation
from storefront.delivery.options import DeliveryOption
from storefront.delivery.resolver import resolve_delivery_charge


@pytest.fixture()
def ledger(storage):
    return CartLedger(storage)


@pytest.fixture()
def submitter(ledger, row_store):
    return CheckoutSubmitter(ledger, row_store)


class TestSuccessfulCheckout:
    def test_cart_above_free_threshold_ships_free(
        self, ledger, submitter, row_store, necklace, shipping_form, standard_and_free_options
    ):
        ledger.add(necklace)
        charge = resolve_delivery_charge("free", ledger.subtotal(), standard_and_free_options)

        confirmation = submitter.submit(shipping_form, delivery_charge=charge)

        assert confirmation.total_amount == 250000
        [order] = row_store.tables["orders"]
        assert order["subtotal"] == 250000
        assert order["delivery_charge"] == 0
        assert order["total_amount"] == 250000

    def test_standard_delivery_is_added_to_total(
        self, ledger, submitter, row_store, necklace, shipping_form, standard_and_free_options
    ):
        ledger.add(necklace)
        charge = resolve_delivery_charge("std", ledger.subtotal(), standard_and_free_options)

        confirmation = submitter.submit(shipping_form, delivery_charge=charge)

        assert confirmation.total_amount == 259900
        [order] = row_store.tables["orders"]
        assert order["delivery_charge"] == 9900
        assert order["total_amount"] == order["subtotal"] + order["delivery_charge"]

    def test_order_row_carries_form_and_status(self, ledger, submitter, row_store, earrings, shipping_form):
        ledger.add(earrings)

        submitter.submit(shipping_form, delivery_charge=9900, user_id="user-1")

        [order] = row_store.tables["orders"]
        assert order["status"] == "pending"
        assert order["user_id"] == "user-1"
        assert order["customer_email"] == "asha@example.com"
        assert order["pincode"] == "560001"
        assert order["payment_method"] == "cod"

    def test_guest_order_has_no_user(self, ledger, submitter, row_store, earrings, shipping_form):
        ledger.add(earrings)

        submitter.submit(shipping_form, delivery_charge=0)

        assert row_store.tables["orders"][0]["user_id"] is None

    def test_one_item_row_per_cart_line(self, ledger, submitter, row_store, necklace, earrings, shipping_form):
        ledger.add(necklace)
        ledger.add(earrings, quantity=3)

        confirmation = submitter.submit(shipping_form, delivery_charge=0)

        items = row_store.tables["order_items"]
        assert [(i["product_id"], i["product_name"], i["quantity"], i["price"]) for i in items] == [
            ("prod-necklace", "Kundan Choker Necklace", 1, 250000),
            ("prod-earrings", "Pearl Drop Earrings", 3, 50000),
        ]
        assert all(i["order_id"] == confirmation.order_id for i in items)
        assert sum(i["price"] * i["quantity"] for i in items) == row_store.tables["orders"][0]["subtotal"]

    def test_cart_is_cleared(self, ledger, submitter, necklace, shipping_form, storage):
        ledger.add(necklace)

        submitter.submit(shipping_form, delivery_charge=0)

        assert ledger.is_empty()
        assert CartLedger(storage).is_empty()

    def test_writes_header_before_items(self, ledger, submitter, row_store, necklace, shipping_form):
        ledger.add(necklace)

        submitter.submit(shipping_form, delivery_charge=0)

        writes = [(c["method"], c["table"]) for c in row_store.calls]
        assert writes == [("insert", "orders"), ("insert_many", "order_items")]

    def test_confirmation_reference(self, ledger, submitter, necklace, shipping_form):
        ledger.add(necklace)

        confirmation = submitter.submit(shipping_form, delivery_charge=0)

        assert isinstance(confirmation, OrderConfirmation)
        assert confirmation.reference == confirmation.order_id[:8].upper()
        assert len(confirmation.reference) == 8


class TestWorkedOrders:
    """Two lines of 1000 and 500 (subtotal 2500) against a free option with a minimum."""

    @pytest.fixture()
    def ring(self):
        return ProductSnapshot(product_id="ring", name="Silver Toe Ring", unit_price=1000, image_ref="")

    @pytest.fixture()
    def anklet(self):
        return ProductSnapshot(product_id="anklet", name="Beaded Anklet", unit_price=500, image_ref="")

    @pytest.mark.parametrize(
        "minimum, charge, grand_total",
        [
            (3000, 99, 2599),
            (2000, 0, 2500),
        ],
    )
    def test_grand_total_is_subtotal_plus_delivery(
        self, ledger, submitter, row_store, shipping_form, ring, anklet, minimum, charge, grand_total
    ):
        options = [
            DeliveryOption(option_id="free", name="Free Delivery", charge=0, min_order_amount=minimum, is_free=True),
            DeliveryOption(option_id="std", name="Standard Delivery", charge=99, display_order=1),
        ]
        ledger.add(ring, quantity=2)
        ledger.add(anklet)

        delivery_charge = resolve_delivery_charge("free", ledger.subtotal(), options)
        confirmation = submitter.submit(shipping_form, delivery_charge=delivery_charge)

        assert delivery_charge == charge
        assert confirmation.total_amount == grand_total
        [order] = row_store.tables["orders"]
        assert order["total_amount"] == grand_total
        assert sum(i["price"] * i["quantity"] for i in row_store.tables["order_items"]) == 2500


class TestRejectedBeforeWriting:
    def test_empty_cart(self, submitter, row_store, shipping_form):
        with pytest.raises(ValidationError) as exc:
            submitter.submit(shipping_form, delivery_charge=0)

        assert "cart" in exc.value.messages
        assert row_store.calls == []

    def test_negative_delivery_charge(self, ledger, submitter, row_store, necklace, shipping_form):
        ledger.add(necklace)

        with pytest.raises(ValidationError) as exc:
            submitter.submit(shipping_form, delivery_charge=-100)

        assert "delivery_charge" in exc.value.messages
        assert row_store.calls == []
        assert len(ledger) == 1


class TestWriteFailures:
    def test_order_write_failure_keeps_cart(self, ledger, submitter, row_store, necklace, shipping_form):
        ledger.add(necklace, quantity=2)
        row_store.fail_on("orders", "insert")

        with pytest.raises(OrderWriteFailed) as exc:
            submitter.submit(shipping_form, delivery_charge=0)

        assert not isinstance(exc.value, PartialOrderCommit)
        assert str(exc.value) == "Failed to place order. Please try again."
        assert row_store.tables.get("orders", []) == []
        assert row_store.tables.get("order_items", []) == []
        assert ledger.line(necklace.product_id).quantity == 2

    def test_item_write_failure_reports_orphaned_order(
        self, ledger, submitter, row_store, necklace, earrings, shipping_form
    ):
        ledger.add(necklace)
        ledger.add(earrings)
        row_store.fail_on("order_items", "insert_many")

        with pytest.raises(PartialOrderCommit) as exc:
            submitter.submit(shipping_form, delivery_charge=9900)

        [order] = row_store.tables["orders"]
        assert exc.value.order_id == order["id"]
        assert row_store.tables.get("order_items", []) == []
        assert len(ledger) == 2

    def test_partial_commit_is_an_order_write_failure(self, ledger, submitter, row_store, necklace, shipping_form):
        ledger.add(necklace)
        row_store.fail_on("order_items", "insert_many")

        with pytest.raises(OrderWriteFailed):
            submitter.submit(shipping_form, delivery_charge=0)

    def test_retry_after_failure_succeeds(self, ledger, submitter, row_store, necklace, shipping_form):
        ledger.add(necklace)
        row_store.fail_on("orders", "insert")
        with pytest.raises(OrderWriteFailed):
            submitter.submit(shipping_form, delivery_charge=0)

        row_store.clear_failures()
        confirmation = submitter.submit(shipping_form, delivery_charge=0)

        assert confirmation.total_amount == 250000
        assert ledger.is_empty()


class TestConcurrentSubmission:
    def test_second_submit_while_in_flight_is_refused(self, ledger, row_store, necklace, shipping_form):
        ledger.add(necklace)
        entered = threading.Event()
        release = threading.Event()

        def slow_insert(table, row):
            if table == "orders":
                entered.set()
                release.wait(timeout=5)

        row_store.add_insert_listener(slow_insert)
        submitter = CheckoutSubmitter(ledger, row_store)
        results = {}

        def first():
            results["first"] = submitter.submit(shipping_form, delivery_charge=0)

        worker = threading.Thread(target=first)
        worker.start()
        assert entered.wait(timeout=5)
        assert submitter.is_submitting

        with pytest.raises(CheckoutInProgress):
            submitter.submit(shipping_form, delivery_charge=0)

        release.set()
        worker.join(timeout=5)

        assert len(row_store.tables["orders"]) == 1
        assert results["first"].total_amount == 250000
        assert not submitter.is_submitting
