"""Pricing engine — coupon evaluation, discount resolution and totals.

The engine is bound to one ``PricingConfig`` and one ``CouponRegistry``. It
holds no other state, so a single instance can serve any number of
concurrent checkouts.
"""

import structlog

from checkout.pricing.config import DEFAULT_PRICING_CONFIG, PricingConfig, load_pricing_config
from checkout.pricing.coupons import (
    DEFAULT_REGISTRY,
    CouponApplication,
    CouponRegistry,
    evaluate_coupon,
    load_coupon_registry,
)
from checkout.pricing.discounts import ResolvedDiscount, compute_first_order_discount, resolve_best_discount
from checkout.pricing.eligibility import BuyerContext
from checkout.pricing.totals import PricingResult, compute_total

logger = structlog.get_logger(__name__)


class PricingEngine:
    def __init__(self, config: PricingConfig = DEFAULT_PRICING_CONFIG, registry: CouponRegistry = DEFAULT_REGISTRY):
        self.config = config
        self.registry = registry

    @classmethod
    def from_domain(cls, domain=None) -> "PricingEngine":
        """Build an engine from the ``[custom]`` section of the domain config."""
        return cls(config=load_pricing_config(domain), registry=load_coupon_registry(domain))

    def evaluate_coupon(self, code: str | None, subtotal, buyer: BuyerContext) -> CouponApplication | None:
        return evaluate_coupon(code, subtotal, buyer, self.registry, currency=self.config.currency)

    def first_order_discount(self, raw_subtotal, buyer: BuyerContext) -> int:
        return compute_first_order_discount(raw_subtotal, buyer, self.config)

    def resolve_best_discount(
        self, applied_coupon: CouponApplication | None, raw_subtotal, buyer: BuyerContext
    ) -> ResolvedDiscount:
        return resolve_best_discount(applied_coupon, raw_subtotal, buyer, self.config)

    def compute_total(self, raw_subtotal, discount: ResolvedDiscount, payment_method, gift_wrap: bool) -> PricingResult:
        return compute_total(
            raw_subtotal,
            discount.amount,
            payment_method,
            gift_wrap,
            self.config,
            source=discount.source,
            label=discount.label,
            coupon=discount.coupon,
        )

    def reprice(
        self,
        raw_subtotal,
        applied_coupon: CouponApplication | None,
        payment_method,
        gift_wrap: bool,
        buyer: BuyerContext,
    ) -> PricingResult:
        """Price a checkout whose coupon (if any) has already been evaluated."""
        discount = self.resolve_best_discount(applied_coupon, raw_subtotal, buyer)
        return self.compute_total(raw_subtotal, discount, payment_method, gift_wrap)

    def price(
        self,
        raw_subtotal,
        coupon_code: str | None = None,
        payment_method="online",
        gift_wrap: bool = False,
        buyer: BuyerContext | None = None,
    ) -> PricingResult:
        """Evaluate ``coupon_code`` and price the checkout in one call.

        Raises ``CouponError`` if the code cannot be applied.
        """
        buyer = buyer or BuyerContext()
        coupon = self.evaluate_coupon(coupon_code, raw_subtotal, buyer)
        result = self.reprice(raw_subtotal, coupon, payment_method, gift_wrap, buyer)

        logger.debug(
            "Priced checkout",
            raw_subtotal=result.raw_subtotal,
            discount=result.discount_amount,
            discount_source=result.discount_source,
            payment_method=result.payment_method,
            total=result.total,
        )
        return result


_current_engine: PricingEngine | None = None


def get_pricing_engine() -> PricingEngine:
    """Return the active engine, building it from the current domain's config on first use."""
    global _current_engine
    if _current_engine is None:
        _current_engine = PricingEngine.from_domain()
    return _current_engine


def set_pricing_engine(engine: PricingEngine) -> None:
    """Override the active engine (useful for tests)."""
    global _current_engine
    _current_engine = engine


def reset_pricing_engine() -> None:
    global _current_engine
    _current_engine = None
