"""Checkout totals — the line-by-line price breakdown.

Order of computation:

1. effective subtotal = raw subtotal - discount (never below zero)
2. GST on goods, on the effective subtotal
3. shipping (always 0 here; charged after the order is packed)
4. gift wrap
5. payment charges: a flat COD surcharge, or a convenience fee on
   everything above plus GST on that fee
6. total = sum of the lines

Each line is rounded on its own, so the displayed lines add up to the
displayed total.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Integer, String

from checkout.domain import checkout
from checkout.pricing.config import DEFAULT_PRICING_CONFIG, PricingConfig
from checkout.pricing.coupons import CouponApplication
from checkout.pricing.discounts import DiscountSource
from checkout.pricing.errors import InvalidInput
from checkout.pricing.money import round_half_up, to_amount


class PaymentMethod(Enum):
    ONLINE = "online"
    COD = "cod"


@dataclass(frozen=True)
class OnlineGatewayCharges:
    """Convenience fee for gateway payments, plus GST on the fee."""

    fee: int
    fee_tax: int

    def as_fields(self) -> dict:
        return {"cod_surcharge": 0, "online_fee": self.fee, "online_fee_tax": self.fee_tax}


@dataclass(frozen=True)
class CashOnDeliveryCharges:
    """Flat surcharge for cash on delivery."""

    surcharge: int

    def as_fields(self) -> dict:
        return {"cod_surcharge": self.surcharge, "online_fee": 0, "online_fee_tax": 0}


@checkout.value_object
class PricingResult:
    """Full price breakdown for one checkout.

    A new result is produced whenever any input changes; results are never
    edited. ``shipping_fee`` is always 0 and ``shipping_deferred`` is set,
    because shipping is charged after packing, not because it is free.
    """

    raw_subtotal = Float(default=0.0, min_value=0.0)
    discount_amount = Integer(default=0, min_value=0)
    discount_source = String(choices=DiscountSource, default=DiscountSource.NONE.value)
    discount_label = String(max_length=100, sanitize=False)
    coupon_code = String(max_length=50)
    coupon_free_shipping = Boolean(default=False)
    effective_subtotal = Integer(default=0, min_value=0)
    tax_on_goods = Integer(default=0, min_value=0)
    shipping_fee = Integer(default=0, min_value=0)
    shipping_deferred = Boolean(default=True)
    cod_surcharge = Integer(default=0, min_value=0)
    gift_wrap_fee = Integer(default=0, min_value=0)
    online_fee = Integer(default=0, min_value=0)
    online_fee_tax = Integer(default=0, min_value=0)
    total = Integer(default=0, min_value=0)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.ONLINE.value)
    currency = String(max_length=3, default="INR")
    gst_rate = Float(default=0.18)
    online_fee_rate = Float(default=0.02)
    online_fee_gst_rate = Float(default=0.18)

    @property
    def processing_fee(self) -> int:
        """Convenience fee and its GST, shown as one line."""
        return (self.online_fee or 0) + (self.online_fee_tax or 0)

    @invariant.post
    def payment_charges_are_mutually_exclusive(self):
        has_online = bool(self.online_fee or self.online_fee_tax)
        if self.cod_surcharge and has_online:
            raise ValidationError({"payment_method": ["COD surcharge and online fee cannot both apply"]})
        if self.payment_method == PaymentMethod.COD.value and has_online:
            raise ValidationError({"online_fee": ["Online fee does not apply to cash on delivery"]})
        if self.payment_method == PaymentMethod.ONLINE.value and self.cod_surcharge:
            raise ValidationError({"cod_surcharge": ["COD surcharge does not apply to online payment"]})

    @invariant.post
    def lines_add_up_to_total(self):
        lines = (
            self.effective_subtotal,
            self.tax_on_goods,
            self.shipping_fee,
            self.cod_surcharge,
            self.gift_wrap_fee,
            self.online_fee,
            self.online_fee_tax,
        )
        if sum(line or 0 for line in lines) != (self.total or 0):
            raise ValidationError({"total": ["Total must equal the sum of the displayed lines"]})


def to_payment_method(value) -> PaymentMethod:
    if isinstance(value, PaymentMethod):
        return value
    try:
        return PaymentMethod(value)
    except ValueError as exc:
        raise InvalidInput(f"Unknown payment method: {value!r}") from exc


def payment_charges(method: PaymentMethod, fee_base: int, config: PricingConfig = DEFAULT_PRICING_CONFIG):
    """Charges for ``method``; ``fee_base`` is everything except payment charges."""
    if method == PaymentMethod.COD:
        return CashOnDeliveryCharges(surcharge=config.cod_fee)

    fee = round_half_up(fee_base * Decimal(str(config.online_fee_rate)))
    fee_tax = round_half_up(fee * Decimal(str(config.online_fee_gst_rate)))
    return OnlineGatewayCharges(fee=fee, fee_tax=fee_tax)


def compute_total(
    raw_subtotal,
    discount,
    payment_method,
    gift_wrap: bool,
    config: PricingConfig = DEFAULT_PRICING_CONFIG,
    *,
    source: DiscountSource = DiscountSource.NONE,
    label: str | None = None,
    coupon: CouponApplication | None = None,
) -> PricingResult:
    """Compute the full breakdown for an already-validated discount."""
    subtotal = to_amount(raw_subtotal, "raw_subtotal")
    discount_amount = to_amount(discount, "discount")
    method = to_payment_method(payment_method)
    if not isinstance(gift_wrap, bool):
        raise InvalidInput(f"gift_wrap must be a bool, got {type(gift_wrap).__name__}")

    effective_subtotal = round_half_up(max(Decimal("0"), subtotal - discount_amount))
    tax_on_goods = round_half_up(effective_subtotal * Decimal(str(config.gst_rate)))
    shipping_fee = 0
    gift_wrap_fee = config.gift_wrap_fee if gift_wrap else 0

    charges = payment_charges(method, effective_subtotal + tax_on_goods + shipping_fee + gift_wrap_fee, config)
    charge_fields = charges.as_fields()

    total = max(
        0,
        effective_subtotal
        + tax_on_goods
        + shipping_fee
        + charge_fields["cod_surcharge"]
        + gift_wrap_fee
        + charge_fields["online_fee"]
        + charge_fields["online_fee_tax"],
    )

    return PricingResult(
        raw_subtotal=float(subtotal),
        discount_amount=round_half_up(discount_amount),
        discount_source=source.value,
        discount_label=label or None,
        coupon_code=coupon.code if coupon is not None else None,
        coupon_free_shipping=bool(coupon.free_shipping) if coupon is not None else False,
        effective_subtotal=effective_subtotal,
        tax_on_goods=tax_on_goods,
        shipping_fee=shipping_fee,
        shipping_deferred=True,
        gift_wrap_fee=gift_wrap_fee,
        total=total,
        payment_method=method.value,
        currency=config.currency,
        gst_rate=config.gst_rate,
        online_fee_rate=config.online_fee_rate,
        online_fee_gst_rate=config.online_fee_gst_rate,
        **charge_fields,
    )
