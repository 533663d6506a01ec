"""Checkout pricing: coupons, first-order discounts, GST and payment fees."""

from checkout.pricing.config import DEFAULT_PRICING_CONFIG, PricingConfig, load_pricing_config
from checkout.pricing.coupons import (
    DEFAULT_REGISTRY,
    CouponApplication,
    CouponDefinition,
    CouponKind,
    CouponRegistry,
    evaluate_coupon,
    load_coupon_registry,
)
from checkout.pricing.discounts import (
    DiscountSource,
    ResolvedDiscount,
    compute_first_order_discount,
    resolve_best_discount,
)
from checkout.pricing.eligibility import BuyerContext, resolve_buyer_context
from checkout.pricing.engine import PricingEngine, get_pricing_engine, reset_pricing_engine, set_pricing_engine
from checkout.pricing.errors import CouponError, CouponErrorReason, InvalidInput
from checkout.pricing.money import format_money, round_half_up
from checkout.pricing.totals import PaymentMethod, PricingResult, compute_total

__all__ = [
    "DEFAULT_PRICING_CONFIG",
    "DEFAULT_REGISTRY",
    "BuyerContext",
    "CouponApplication",
    "CouponDefinition",
    "CouponError",
    "CouponErrorReason",
    "CouponKind",
    "CouponRegistry",
    "DiscountSource",
    "InvalidInput",
    "PaymentMethod",
    "PricingConfig",
    "PricingEngine",
    "PricingResult",
    "ResolvedDiscount",
    "compute_first_order_discount",
    "compute_total",
    "evaluate_coupon",
    "format_money",
    "get_pricing_engine",
    "load_coupon_registry",
    "load_pricing_config",
    "resolve_best_discount",
    "reset_pricing_engine",
    "resolve_buyer_context",
    "round_half_up",
    "set_pricing_engine",
]
