"""Discount resolution.

A checkout gets at most one monetary discount: either the applied coupon or
the automatic first-order discount, whichever is larger. They never stack.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from checkout.pricing.config import DEFAULT_PRICING_CONFIG, PricingConfig
from checkout.pricing.coupons import CouponApplication
from checkout.pricing.eligibility import BuyerContext
from checkout.pricing.money import round_half_up, to_amount

FIRST_ORDER_LABEL = "First order discount"


class DiscountSource(Enum):
    NONE = "None"
    COUPON = "Coupon"
    FIRST_ORDER = "FirstOrder"


@dataclass(frozen=True)
class ResolvedDiscount:
    amount: int = 0
    source: DiscountSource = DiscountSource.NONE
    label: str = ""
    coupon: CouponApplication | None = None


NO_DISCOUNT = ResolvedDiscount()


def compute_first_order_discount(
    raw_subtotal, buyer: BuyerContext, config: PricingConfig = DEFAULT_PRICING_CONFIG
) -> int:
    """10% of the subtotal, capped, for buyers on their first order."""
    subtotal = to_amount(raw_subtotal, "raw_subtotal")
    if not buyer.is_first_order_eligible or subtotal <= 0:
        return 0

    natural = round_half_up(subtotal * Decimal(str(config.first_order_rate)))
    return min(natural, config.first_order_cap)


def resolve_best_discount(
    applied_coupon: CouponApplication | None,
    raw_subtotal,
    buyer: BuyerContext,
    config: PricingConfig = DEFAULT_PRICING_CONFIG,
) -> ResolvedDiscount:
    """Pick the single discount that applies.

    The coupon wins ties: an equal first-order amount does not displace a
    coupon the buyer entered. A coupon worth nothing in money (free shipping)
    leaves the first-order discount in place.
    """
    first_order = compute_first_order_discount(raw_subtotal, buyer, config)
    coupon_amount = applied_coupon.amount if applied_coupon is not None else 0

    if applied_coupon is not None and coupon_amount > 0 and coupon_amount >= first_order:
        return ResolvedDiscount(
            amount=coupon_amount,
            source=DiscountSource.COUPON,
            label=f"{applied_coupon.code} discount",
            coupon=applied_coupon,
        )

    if first_order > 0:
        return ResolvedDiscount(
            amount=first_order,
            source=DiscountSource.FIRST_ORDER,
            label=FIRST_ORDER_LABEL,
            coupon=applied_coupon,
        )

    return ResolvedDiscount(coupon=applied_coupon)
