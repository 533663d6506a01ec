"""Tests for quantity tiers, wholesale quotes and cart snapshots."""

from decimal import Decimal

import pytest
from checkout.pricing.errors import InvalidInput
from checkout.pricing.tiers import (
    CartSnapshot,
    LineItem,
    VolumeTier,
    normalize_quantity,
    parse_tiers,
    quote_volume_window,
    resolve_unit_price,
)

TIERS = [
    VolumeTier(min_quantity=10, unit_price=Decimal("90")),
    VolumeTier(min_quantity=50, unit_price=Decimal("80")),
]


class TestParseTiers:
    def test_accepts_both_key_spellings_and_sorts(self):
        tiers = parse_tiers([{"min": 50, "price": 80}, {"minQty": 10, "unitPrice": 90}])

        assert [t.min_quantity for t in tiers] == [10, 50]
        assert [t.unit_price for t in tiers] == [Decimal("90"), Decimal("80")]

    def test_accepts_json_string(self):
        tiers = parse_tiers('[{"minQty": 20, "unitPrice": "75.5"}]')
        assert tiers == [VolumeTier(min_quantity=20, unit_price=Decimal("75.5"))]

    def test_drops_malformed_entries(self):
        tiers = parse_tiers(
            [
                {"minQty": "abc", "unitPrice": 10},
                {"minQty": 0, "unitPrice": 10},
                {"minQty": 5, "unitPrice": -1},
                "not-a-tier",
                {"minQty": 5, "unitPrice": 10},
            ]
        )
        assert tiers == [VolumeTier(min_quantity=5, unit_price=Decimal("10"))]

    @pytest.mark.parametrize("raw", [None, "", "not json", "{}", {"minQty": 5}])
    def test_garbage_gives_no_tiers(self, raw):
        assert parse_tiers(raw) == []


class TestResolveUnitPrice:
    @pytest.mark.parametrize(
        "quantity, expected",
        [(1, Decimal("100")), (9, Decimal("100")), (10, Decimal("90")), (49, Decimal("90")), (50, Decimal("80"))],
    )
    def test_highest_tier_reached(self, quantity, expected):
        assert resolve_unit_price(100, TIERS, quantity) == expected

    def test_no_tiers(self):
        assert resolve_unit_price(100, [], 500) == Decimal("100")


class TestNormalizeQuantity:
    @pytest.mark.parametrize(
        "quantity, expected",
        [(None, 10), (0, 10), (3, 10), (10, 10), (63, 70), (70, 70), (101, 110)],
    )
    def test_snaps_up_to_step(self, quantity, expected):
        assert normalize_quantity(quantity) == expected

    def test_round_to_nearest_step(self):
        assert normalize_quantity(63, ceil=False) == 60
        assert normalize_quantity(65, ceil=False) == 70

    def test_custom_moq(self):
        assert normalize_quantity(12, moq=25, step=5) == 25


class TestVolumeQuote:
    def test_first_window(self):
        quote = quote_volume_window(100, TIERS, quantity=23)

        assert quote.normalized_quantity == 30
        assert quote.slab == "10-40"
        assert quote.unit_price == 90.0
        assert quote.over_limit is False

    def test_second_window(self):
        quote = quote_volume_window(100, TIERS, quantity=63)

        assert quote.normalized_quantity == 70
        assert quote.slab == "50-100"
        assert quote.unit_price_ex_gst == 80.0

    def test_window_without_tier_uses_base_price(self):
        quote = quote_volume_window(100, [VolumeTier(min_quantity=10, unit_price=Decimal("90"))], quantity=60)

        assert quote.slab == "50-100"
        assert quote.unit_price == 100.0

    def test_over_limit(self):
        quote = quote_volume_window(100, TIERS, quantity=150)

        assert quote.slab == ">100"
        assert quote.over_limit is True
        assert quote.unit_price == 100.0

    def test_with_tax_out_of_range(self):
        with pytest.raises(InvalidInput, match="base_price"):
            quote_volume_window(Decimal("1e300"), [], quantity=10, with_tax=True)

    def test_with_tax(self):
        quote = quote_volume_window(99.99, [], quantity=10, with_tax=True)

        assert quote.unit_price_ex_gst == 99.99
        assert quote.unit_price == 117.99


class TestCartSnapshot:
    def test_subtotal(self):
        cart = CartSnapshot.from_dicts(
            [
                {"product_id": "p1", "unit_price": 250.0, "quantity": 2},
                {"product_id": "p2", "unit_price": 0.1, "quantity": 3},
            ]
        )

        assert len(cart) == 2
        assert cart.subtotal() == Decimal("500.3")

    def test_empty_cart(self):
        assert CartSnapshot().subtotal() == Decimal("0")

    def test_round_trip_to_dicts(self):
        items = [{"product_id": "p1", "unit_price": 250.0, "quantity": 2}]
        assert CartSnapshot.from_dicts(items).to_dicts() == items

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, True])
    def test_rejects_bad_quantity(self, quantity):
        with pytest.raises(InvalidInput):
            LineItem(product_id="p1", unit_price=10, quantity=quantity)

    def test_rejects_negative_price(self):
        with pytest.raises(InvalidInput):
            LineItem(product_id="p1", unit_price=-10, quantity=1)
