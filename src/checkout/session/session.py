"""CheckoutSession aggregate (CQRS) — one buyer's checkout, from cart to placed order.

The session holds the choices that affect the price (applied coupon, payment
method, gift wrap) and a ``PricingResult`` that is replaced on every change.
Coupon failures propagate to the caller and leave the session as it was.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, String, Text, ValueObject

from checkout.domain import checkout
from checkout.pricing.coupons import CouponApplication
from checkout.pricing.eligibility import BuyerContext
from checkout.pricing.engine import get_pricing_engine
from checkout.pricing.errors import CouponError
from checkout.pricing.tiers import CartSnapshot
from checkout.pricing.totals import PaymentMethod, PricingResult, to_payment_method
from checkout.session.events import (
    CheckoutCouponApplied,
    CheckoutCouponRemoved,
    CheckoutRepriced,
    CheckoutStarted,
    CheckoutSubmitted,
)


class CheckoutStatus(Enum):
    OPEN = "Open"
    SUBMITTED = "Submitted"


@checkout.aggregate
class CheckoutSession:
    customer_id = Identifier()
    line_items = Text(sanitize=False)  # JSON array of {product_id, unit_price, quantity}
    raw_subtotal = Float(default=0.0, min_value=0.0)
    first_order_eligible = Boolean(default=False)
    applied_coupon = ValueObject(CouponApplication)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.ONLINE.value)
    gift_wrap = Boolean(default=False)
    pricing = ValueObject(PricingResult)
    status = String(choices=CheckoutStatus, default=CheckoutStatus.OPEN.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def submitted_checkout_must_have_items(self):
        if self.status == CheckoutStatus.SUBMITTED.value and not self.cart().items:
            raise ValidationError({"line_items": ["Cannot submit a checkout with an empty cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, line_items, customer_id=None, first_order_eligible=False):
        cart = CartSnapshot.from_dicts(line_items)
        now = datetime.now(UTC)
        session = cls(
            customer_id=customer_id,
            line_items=json.dumps(cart.to_dicts()),
            raw_subtotal=float(cart.subtotal()),
            first_order_eligible=first_order_eligible,
            payment_method=PaymentMethod.ONLINE.value,
            gift_wrap=False,
            status=CheckoutStatus.OPEN.value,
            created_at=now,
            updated_at=now,
        )
        session.pricing = session._compute_pricing()

        session.raise_(
            CheckoutStarted(
                checkout_id=str(session.id),
                customer_id=str(customer_id) if customer_id else None,
                raw_subtotal=session.raw_subtotal,
                total=session.pricing.total,
            )
        )
        return session

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def cart(self) -> CartSnapshot:
        return CartSnapshot.from_dicts(json.loads(self.line_items) if self.line_items else [])

    def buyer(self) -> BuyerContext:
        return BuyerContext(is_first_order_eligible=bool(self.first_order_eligible))

    # -------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------
    def _compute_pricing(self) -> PricingResult:
        return get_pricing_engine().reprice(
            self.raw_subtotal,
            self.applied_coupon,
            self.payment_method,
            bool(self.gift_wrap),
            self.buyer(),
        )

    def _reprice(self, trigger):
        self.pricing = self._compute_pricing()
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CheckoutRepriced(
                checkout_id=str(self.id),
                trigger=trigger,
                discount_amount=self.pricing.discount_amount,
                total=self.pricing.total,
            )
        )

    def _ensure_open(self, action):
        if CheckoutStatus(self.status) != CheckoutStatus.OPEN:
            raise ValidationError({"status": [f"Cannot {action} a submitted checkout"]})

    # -------------------------------------------------------------------
    # Cart
    # -------------------------------------------------------------------
    def update_cart(self, line_items):
        """Replace the cart contents and re-check the applied coupon against the new subtotal."""
        self._ensure_open("change the cart of")

        cart = CartSnapshot.from_dicts(line_items)
        self.line_items = json.dumps(cart.to_dicts())
        self.raw_subtotal = float(cart.subtotal())

        if self.applied_coupon is not None:
            code = self.applied_coupon.code
            try:
                self.applied_coupon = get_pricing_engine().evaluate_coupon(code, self.raw_subtotal, self.buyer())
            except CouponError as exc:
                self.applied_coupon = None
                self.raise_(CheckoutCouponRemoved(checkout_id=str(self.id), coupon_code=code, reason=exc.message))

        self._reprice("cart_updated")

    # -------------------------------------------------------------------
    # Coupon management
    # -------------------------------------------------------------------
    def apply_coupon(self, coupon_code):
        """Apply a coupon code; an empty code clears the current coupon.

        Raises ``CouponError`` without touching the session when the code
        cannot be applied.
        """
        self._ensure_open("apply a coupon to")

        coupon = get_pricing_engine().evaluate_coupon(coupon_code, self.raw_subtotal, self.buyer())
        if coupon is None:
            self.clear_coupon()
            return

        self.applied_coupon = coupon
        self.raise_(
            CheckoutCouponApplied(
                checkout_id=str(self.id),
                coupon_code=coupon.code,
                amount=coupon.amount,
            )
        )
        self._reprice("coupon_applied")

    def clear_coupon(self):
        self._ensure_open("clear the coupon of")
        if self.applied_coupon is None:
            return

        code = self.applied_coupon.code
        self.applied_coupon = None
        self.raise_(CheckoutCouponRemoved(checkout_id=str(self.id), coupon_code=code, reason="Cleared by buyer"))
        self._reprice("coupon_cleared")

    # -------------------------------------------------------------------
    # Payment and extras
    # -------------------------------------------------------------------
    def select_payment_method(self, payment_method):
        self._ensure_open("change the payment method of")
        self.payment_method = to_payment_method(payment_method).value
        self._reprice("payment_method_selected")

    def set_gift_wrap(self, gift_wrap):
        self._ensure_open("change gift wrap on")
        self.gift_wrap = bool(gift_wrap)
        self._reprice("gift_wrap_changed")

    # -------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------
    def submit(self):
        """Lock the breakdown and hand it off for order creation."""
        self._ensure_open("submit")
        if not self.cart().items:
            raise ValidationError({"line_items": ["Cannot submit a checkout with an empty cart"]})

        self.pricing = self._compute_pricing()
        self.status = CheckoutStatus.SUBMITTED.value
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CheckoutSubmitted(
                checkout_id=str(self.id),
                customer_id=str(self.customer_id) if self.customer_id else None,
                line_items=self.line_items,
                pricing=json.dumps(self.pricing.to_dict()),
                total=self.pricing.total,
            )
        )
