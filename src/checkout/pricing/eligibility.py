"""First-order eligibility.

The storefront learns whether a buyer is on their first order from several
places: a client-side "has ordered before" flag and a handful of profile
fields. ``resolve_buyer_context`` folds them into one ``BuyerContext``.
"""

from dataclasses import dataclass

from checkout.pricing.config import DEFAULT_PRICING_CONFIG, PricingConfig


@dataclass(frozen=True)
class BuyerContext:
    """What the pricing engine knows about the buyer."""

    is_first_order_eligible: bool = False


def resolve_buyer_context(
    has_ordered_before: bool | None = None,
    orders_count: int | None = None,
    is_first_order: bool | None = None,
    first_order_done: bool | None = None,
    config: PricingConfig = DEFAULT_PRICING_CONFIG,
) -> BuyerContext:
    """Decide first-order eligibility from whatever signals are available.

    A local "already ordered" flag always wins. Otherwise any profile signal
    saying "first order" makes the buyer eligible, any signal saying
    otherwise makes them ineligible, and with no signals at all the
    configured default applies.
    """
    if has_ordered_before is True:
        return BuyerContext(is_first_order_eligible=False)

    says_first = orders_count == 0 or is_first_order is True or first_order_done is False
    if says_first:
        return BuyerContext(is_first_order_eligible=True)

    says_repeat = (orders_count is not None and orders_count > 0) or is_first_order is False or first_order_done is True
    if says_repeat:
        return BuyerContext(is_first_order_eligible=False)

    return BuyerContext(is_first_order_eligible=bool(config.assume_first_order_when_unknown))
