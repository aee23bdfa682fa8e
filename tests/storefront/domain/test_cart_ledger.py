"""Tests for the cart ledger — line arithmetic and snapshot persistence."""

import json

import pytest
from protean.exceptions import ValidationError

from storefront.cart.ledger import CART_STORAGE_KEY, CartLedger, CartLine
from storefront.catalogue.products import ProductSnapshot
from storefront.storage.memory_adapter import MemoryClientStorage


def _snapshot(storage):
    return json.loads(storage.get(CART_STORAGE_KEY))


class TestCartLine:
    def test_line_total(self):
        line = CartLine(product_id="p1", name="Ring", unit_price=120000, quantity=3)
        assert line.line_total == 360000

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError) as exc:
            CartLine(product_id="p1", name="Ring", unit_price=120000, quantity=0)
        assert "quantity" in exc.value.messages

    def test_with_quantity_returns_new_line(self):
        line = CartLine(product_id="p1", name="Ring", unit_price=120000, quantity=1)
        changed = line.with_quantity(4)
        assert changed.quantity == 4
        assert line.quantity == 1


class TestAdd:
    def test_add_new_product(self, storage, necklace):
        ledger = CartLedger(storage)
        ledger.add(necklace)

        assert len(ledger) == 1
        assert necklace.product_id in ledger
        assert ledger.line(necklace.product_id).quantity == 1
        assert ledger.subtotal() == 250000

    def test_add_same_product_merges_quantity(self, storage, necklace):
        ledger = CartLedger(storage)
        ledger.add(necklace, quantity=2)
        ledger.add(necklace, quantity=3)

        assert len(ledger) == 1
        assert ledger.line(necklace.product_id).quantity == 5
        assert ledger.item_count() == 5

    def test_add_keeps_first_seen_price(self, storage, necklace):
        ledger = CartLedger(storage)
        ledger.add(necklace)
        repriced = ProductSnapshot(product_id=necklace.product_id, name=necklace.name, unit_price=1)
        ledger.add(repriced)

        assert ledger.line(necklace.product_id).unit_price == 250000

    @pytest.mark.parametrize("quantity", [0, -1, -10])
    def test_non_positive_quantity_is_ignored(self, storage, necklace, quantity):
        ledger = CartLedger(storage)
        ledger.add(necklace, quantity=quantity)

        assert ledger.is_empty()
        assert storage.get(CART_STORAGE_KEY) is None

    def test_lines_keep_insertion_order(self, storage, necklace, earrings):
        ledger = CartLedger(storage)
        ledger.add(earrings)
        ledger.add(necklace)
        ledger.add(earrings)

        assert [line.product_id for line in ledger] == [earrings.product_id, necklace.product_id]

    def test_many_additions_accumulate_exactly(self, earrings):
        ledger = CartLedger(MemoryClientStorage())
        for _ in range(2000):
            ledger.add(earrings)

        assert ledger.item_count() == 2000
        assert ledger.subtotal() == 2000 * earrings.unit_price

    @pytest.mark.slow
    def test_a_million_additions_have_no_rounding_drift(self):
        bead = ProductSnapshot(product_id="bead", name="Glass Bead", unit_price=33, image_ref="")
        ledger = CartLedger(MemoryClientStorage())
        for _ in range(1_000_000):
            ledger.add(bead)

        assert ledger.item_count() == 1_000_000
        assert ledger.subtotal() == 33_000_000


class TestSetQuantityAndRemove:
    def test_set_quantity(self, storage, necklace):
        ledger = CartLedger(storage)
        ledger.add(necklace)
        ledger.set_quantity(necklace.product_id, 4)

        assert ledger.line(necklace.product_id).quantity == 4
        assert ledger.subtotal() == 1000000

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_set_quantity_below_one_removes_line(self, storage, necklace, quantity):
        ledger = CartLedger(storage)
        ledger.add(necklace)
        ledger.set_quantity(necklace.product_id, quantity)

        assert necklace.product_id not in ledger
        assert _snapshot(storage) == []

    def test_set_quantity_for_unknown_product_is_noop(self, storage, necklace):
        ledger = CartLedger(storage)
        ledger.add(necklace)
        ledger.set_quantity("missing", 5)

        assert len(ledger) == 1
        assert ledger.item_count() == 1

    def test_remove(self, storage, necklace, earrings):
        ledger = CartLedger(storage)
        ledger.add(necklace)
        ledger.add(earrings)
        ledger.remove(necklace.product_id)

        assert [line.product_id for line in ledger.lines] == [earrings.product_id]

    def test_remove_unknown_product_is_noop(self, storage, necklace):
        ledger = CartLedger(storage)
        ledger.add(necklace)
        ledger.remove("missing")

        assert len(ledger) == 1

    def test_removing_twice_matches_removing_once(self, necklace, earrings):
        once_storage, twice_storage = MemoryClientStorage(), MemoryClientStorage()
        once, twice = CartLedger(once_storage), CartLedger(twice_storage)
        for ledger in (once, twice):
            ledger.add(necklace)
            ledger.add(earrings, quantity=2)

        once.remove(necklace.product_id)
        twice.remove(necklace.product_id)
        twice.remove(necklace.product_id)

        assert twice.lines == once.lines
        assert twice.subtotal() == once.subtotal() == 100000
        assert _snapshot(twice_storage) == _snapshot(once_storage)

    def test_clear(self, storage, necklace, earrings):
        ledger = CartLedger(storage)
        ledger.add(necklace)
        ledger.add(earrings)
        ledger.clear()

        assert ledger.is_empty()
        assert ledger.subtotal() == 0
        assert _snapshot(storage) == []


class TestSubtotal:
    def test_empty_cart(self, storage):
        ledger = CartLedger(storage)
        assert ledger.subtotal() == 0
        assert ledger.item_count() == 0

    def test_sum_of_line_totals(self, storage, necklace, earrings):
        ledger = CartLedger(storage)
        ledger.add(necklace, quantity=2)
        ledger.add(earrings, quantity=3)

        assert ledger.subtotal() == 2 * 250000 + 3 * 50000
        assert ledger.item_count() == 5


class TestPersistence:
    def test_snapshot_written_after_mutation(self, storage, necklace):
        ledger = CartLedger(storage)
        ledger.add(necklace, quantity=2)

        assert _snapshot(storage) == [
            {
                "product_id": "prod-necklace",
                "name": "Kundan Choker Necklace",
                "unit_price": 250000,
                "image_ref": "https://cdn.example.com/kundan-choker.jpg",
                "quantity": 2,
            }
        ]

    def test_reload_restores_lines(self, storage, necklace, earrings):
        ledger = CartLedger(storage)
        ledger.add(necklace, quantity=2)
        ledger.add(earrings)

        reloaded = CartLedger(storage)

        assert [(line.product_id, line.quantity) for line in reloaded] == [
            (necklace.product_id, 2),
            (earrings.product_id, 1),
        ]
        assert reloaded.subtotal() == ledger.subtotal()

    def test_missing_snapshot_starts_empty(self):
        assert CartLedger(MemoryClientStorage()).is_empty()

    @pytest.mark.parametrize(
        "raw",
        [
            b"not json",
            b'{"product_id": "p1"}',
            b"[1, 2, 3]",
            b'[{"product_id": "p1", "name": "Ring", "unit_price": 100, "quantity": 0}]',
            b'[{"product_id": "p1", "unit_price": 100, "quantity": 1}]',
            b"\xff\xfe",
        ],
    )
    def test_unreadable_snapshot_starts_empty(self, raw):
        storage = MemoryClientStorage({CART_STORAGE_KEY: raw})
        ledger = CartLedger(storage)

        assert ledger.is_empty()

    def test_custom_storage_key(self, storage, necklace):
        ledger = CartLedger(storage, key="other-cart")
        ledger.add(necklace)

        assert storage.get("other-cart") is not None
        assert storage.get(CART_STORAGE_KEY) is None
