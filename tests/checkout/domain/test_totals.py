"""Tests for the checkout totals breakdown."""

import json

import pytest
from checkout.pricing.config import PricingConfig
from checkout.pricing.discounts import DiscountSource
from checkout.pricing.errors import InvalidInput
from checkout.pricing.totals import (
    CashOnDeliveryCharges,
    OnlineGatewayCharges,
    PaymentMethod,
    PricingResult,
    compute_total,
    payment_charges,
    to_payment_method,
)
from protean.exceptions import ValidationError


def displayed_lines(result: PricingResult) -> int:
    return (
        result.effective_subtotal
        + result.tax_on_goods
        + result.shipping_fee
        + result.cod_surcharge
        + result.gift_wrap_fee
        + result.online_fee
        + result.online_fee_tax
    )


class TestOnlinePayment:
    def test_no_discount(self):
        result = compute_total(1000, 0, "online", False)

        assert result.effective_subtotal == 1000
        assert result.tax_on_goods == 180
        assert result.online_fee == 24
        assert result.online_fee_tax == 4
        assert result.cod_surcharge == 0
        assert result.total == 1208

    def test_first_order_discount(self):
        result = compute_total(1000, 100, PaymentMethod.ONLINE, False, source=DiscountSource.FIRST_ORDER)

        assert result.discount_amount == 100
        assert result.discount_source == "FirstOrder"
        assert result.effective_subtotal == 900
        assert result.tax_on_goods == 162
        assert result.online_fee == 21
        assert result.online_fee_tax == 4
        assert result.processing_fee == 25
        assert result.total == 1087

    def test_capped_coupon(self):
        result = compute_total(5000, 300, "online", False, source=DiscountSource.COUPON, label="WELCOME10 discount")

        assert result.effective_subtotal == 4700
        assert result.tax_on_goods == 846
        assert result.online_fee == 111
        assert result.online_fee_tax == 20
        assert result.total == 5677
        assert result.discount_label == "WELCOME10 discount"


class TestCashOnDelivery:
    def test_cod_with_gift_wrap_at_zero_fee(self):
        result = compute_total(2000, 0, "cod", True)

        assert result.tax_on_goods == 360
        assert result.cod_surcharge == 25
        assert result.gift_wrap_fee == 0
        assert result.online_fee == 0
        assert result.online_fee_tax == 0
        assert result.total == 2385

    def test_configured_cod_fee(self):
        result = compute_total(1000, 0, "cod", False, PricingConfig(cod_fee=40))

        assert result.cod_surcharge == 40
        assert result.total == 1220


class TestGiftWrap:
    def test_configured_gift_wrap_fee_enters_fee_base(self):
        result = compute_total(1000, 0, "online", True, PricingConfig(gift_wrap_fee=30))

        assert result.gift_wrap_fee == 30
        assert result.online_fee == 24
        assert result.total == 1238

    def test_gift_wrap_off(self):
        result = compute_total(1000, 0, "online", False, PricingConfig(gift_wrap_fee=30))
        assert result.gift_wrap_fee == 0


class TestShipping:
    def test_shipping_is_deferred_not_free(self):
        result = compute_total(1000, 0, "online", False)

        assert result.shipping_fee == 0
        assert result.shipping_deferred is True


class TestEdgeCases:
    def test_zero_subtotal(self):
        result = compute_total(0, 0, "online", False)

        assert result.effective_subtotal == 0
        assert result.total == 0

    def test_discount_larger_than_subtotal(self):
        result = compute_total(30, 50, "online", False)

        assert result.effective_subtotal == 0
        assert result.tax_on_goods == 0
        assert result.total == 0

    def test_fractional_subtotal_is_rounded(self):
        result = compute_total(999.5, 0, "cod", False)

        assert result.effective_subtotal == 1000
        assert result.raw_subtotal == 999.5

    @pytest.mark.parametrize("raw_subtotal", [-1, float("nan"), float("inf"), "1000", None])
    def test_rejects_bad_subtotal(self, raw_subtotal):
        with pytest.raises(InvalidInput):
            compute_total(raw_subtotal, 0, "online", False)

    def test_rejects_negative_discount(self):
        with pytest.raises(InvalidInput):
            compute_total(1000, -5, "online", False)

    def test_rejects_unknown_payment_method(self):
        with pytest.raises(InvalidInput):
            compute_total(1000, 0, "upi", False)

    def test_rejects_non_bool_gift_wrap(self):
        with pytest.raises(InvalidInput):
            compute_total(1000, 0, "online", "yes")


class TestPaymentCharges:
    def test_cod_charges(self):
        charges = payment_charges(PaymentMethod.COD, 1180)

        assert isinstance(charges, CashOnDeliveryCharges)
        assert charges.as_fields() == {"cod_surcharge": 25, "online_fee": 0, "online_fee_tax": 0}

    def test_online_charges(self):
        charges = payment_charges(PaymentMethod.ONLINE, 1180)

        assert isinstance(charges, OnlineGatewayCharges)
        assert charges.as_fields() == {"cod_surcharge": 0, "online_fee": 24, "online_fee_tax": 4}

    def test_to_payment_method(self):
        assert to_payment_method("cod") is PaymentMethod.COD
        assert to_payment_method(PaymentMethod.ONLINE) is PaymentMethod.ONLINE


class TestPricingResultInvariants:
    def test_total_must_match_lines(self):
        with pytest.raises(ValidationError) as exc_info:
            PricingResult(effective_subtotal=1000, tax_on_goods=180, total=1000, payment_method="cod", cod_surcharge=0)

        assert "Total must equal the sum of the displayed lines" in str(exc_info.value)

    def test_cod_and_online_fee_are_exclusive(self):
        with pytest.raises(ValidationError):
            PricingResult(
                effective_subtotal=100,
                cod_surcharge=25,
                online_fee=2,
                total=127,
                payment_method="cod",
            )

    def test_result_is_json_serializable(self):
        result = compute_total(1000, 100, "online", False, source=DiscountSource.FIRST_ORDER)

        payload = json.loads(json.dumps(result.to_dict()))
        assert payload["total"] == 1087
        assert payload["discount_source"] == "FirstOrder"


@pytest.mark.parametrize("raw_subtotal", [0, 1, 49.5, 250, 499, 999.99, 1000, 1234.56, 5000, 99999])
@pytest.mark.parametrize("discount", [0, 50, 100, 300, 2000])
@pytest.mark.parametrize("payment_method", ["online", "cod"])
@pytest.mark.parametrize("gift_wrap", [True, False])
def test_breakdown_properties(raw_subtotal, discount, payment_method, gift_wrap):
    config = PricingConfig(gift_wrap_fee=30)
    result = compute_total(raw_subtotal, discount, payment_method, gift_wrap, config)

    assert result.total == displayed_lines(result)
    assert result.total >= 0
    assert result.effective_subtotal >= 0
    assert not (result.cod_surcharge and result.online_fee)
    if payment_method == "cod":
        assert result.online_fee == 0 and result.online_fee_tax == 0
    else:
        assert result.cod_surcharge == 0
