"""Domain events for the CheckoutSession aggregate."""

from protean.fields import Float, Identifier, Integer, String, Text

from checkout.domain import checkout


@checkout.event(part_of="CheckoutSession")
class CheckoutStarted:
    """A buyer started checking out a cart."""

    checkout_id = Identifier(required=True)
    customer_id = Identifier()
    raw_subtotal = Float(required=True)
    total = Integer(required=True)


@checkout.event(part_of="CheckoutSession")
class CheckoutCouponApplied:
    """A coupon passed evaluation and was stored on the checkout."""

    checkout_id = Identifier(required=True)
    coupon_code = String(required=True)
    amount = Integer(required=True)


@checkout.event(part_of="CheckoutSession")
class CheckoutCouponRemoved:
    """The applied coupon was cleared by the buyer or stopped applying."""

    checkout_id = Identifier(required=True)
    coupon_code = String(required=True)
    reason = String(max_length=255, sanitize=False)


@checkout.event(part_of="CheckoutSession")
class CheckoutRepriced:
    """The price breakdown was recomputed after an input changed."""

    checkout_id = Identifier(required=True)
    trigger = String(required=True, max_length=50)
    discount_amount = Integer(required=True)
    total = Integer(required=True)


@checkout.event(part_of="CheckoutSession")
class CheckoutSubmitted:
    """The buyer placed the order; the breakdown is final."""

    checkout_id = Identifier(required=True)
    customer_id = Identifier()
    line_items = Text(required=True, sanitize=False)  # JSON
    pricing = Text(required=True, sanitize=False)  # JSON PricingResult
    total = Integer(required=True)
