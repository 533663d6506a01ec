"""Checkout bounded context — pricing, coupons and checkout sessions.

Computes the price breakdown shown at checkout (discounts, GST, COD and
online-payment fees) and tracks the buyer's checkout choices until the
final breakdown is handed off for order creation.
"""

from protean.domain import Domain

from checkout.utils.logging import configure_logging, get_logger

configure_logging()

checkout = Domain(name="checkout")

logger = get_logger(__name__)
