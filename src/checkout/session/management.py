"""Checkout session management — commands and handler.

Handles starting a checkout, cart changes, payment method and gift-wrap
choices, and final submission.
"""

import json

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from checkout.domain import checkout
from checkout.session.session import CheckoutSession

logger = structlog.get_logger(__name__)


@checkout.command(part_of="CheckoutSession")
class StartCheckout:
    """Open a checkout for the given cart contents."""

    customer_id = Identifier()
    line_items = Text(required=True, sanitize=False)  # JSON: list of {product_id, unit_price, quantity}
    first_order_eligible = Boolean(default=False)


@checkout.command(part_of="CheckoutSession")
class UpdateCheckoutCart:
    """Replace the cart contents of an open checkout."""

    checkout_id = Identifier(required=True)
    line_items = Text(required=True, sanitize=False)


@checkout.command(part_of="CheckoutSession")
class SelectPaymentMethod:
    checkout_id = Identifier(required=True)
    payment_method = String(required=True, max_length=10)


@checkout.command(part_of="CheckoutSession")
class SetGiftWrap:
    checkout_id = Identifier(required=True)
    gift_wrap = Boolean(default=False)


@checkout.command(part_of="CheckoutSession")
class SubmitCheckout:
    """Lock the price breakdown and hand the checkout off for order creation."""

    checkout_id = Identifier(required=True)


def _load_items(raw):
    return json.loads(raw) if isinstance(raw, str) else raw


@checkout.command_handler(part_of=CheckoutSession)
class ManageCheckoutHandler:
    @handle(StartCheckout)
    def start_checkout(self, command):
        session = CheckoutSession.create(
            line_items=_load_items(command.line_items),
            customer_id=command.customer_id,
            first_order_eligible=bool(command.first_order_eligible),
        )
        current_domain.repository_for(CheckoutSession).add(session)

        logger.info(
            "Checkout started",
            checkout_id=str(session.id),
            customer_id=str(command.customer_id) if command.customer_id else None,
            raw_subtotal=session.raw_subtotal,
            total=session.pricing.total,
        )
        return str(session.id)

    @handle(UpdateCheckoutCart)
    def update_cart(self, command):
        repo = current_domain.repository_for(CheckoutSession)
        session = repo.get(command.checkout_id)
        session.update_cart(_load_items(command.line_items))
        repo.add(session)

    @handle(SelectPaymentMethod)
    def select_payment_method(self, command):
        repo = current_domain.repository_for(CheckoutSession)
        session = repo.get(command.checkout_id)
        session.select_payment_method(command.payment_method)
        repo.add(session)

    @handle(SetGiftWrap)
    def set_gift_wrap(self, command):
        repo = current_domain.repository_for(CheckoutSession)
        session = repo.get(command.checkout_id)
        session.set_gift_wrap(bool(command.gift_wrap))
        repo.add(session)

    @handle(SubmitCheckout)
    def submit_checkout(self, command):
        repo = current_domain.repository_for(CheckoutSession)
        session = repo.get(command.checkout_id)
        session.submit()
        repo.add(session)

        logger.info(
            "Checkout submitted",
            checkout_id=str(session.id),
            payment_method=session.pricing.payment_method,
            total=session.pricing.total,
        )
