"""Checkout coupon management — commands and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from checkout.domain import checkout
from checkout.pricing.errors import CouponError
from checkout.session.session import CheckoutSession

logger = structlog.get_logger(__name__)


@checkout.command(part_of="CheckoutSession")
class ApplyCheckoutCoupon:
    """Apply a coupon code to an open checkout."""

    checkout_id = Identifier(required=True)
    coupon_code = String(max_length=100)


@checkout.command(part_of="CheckoutSession")
class ClearCheckoutCoupon:
    checkout_id = Identifier(required=True)


@checkout.command_handler(part_of=CheckoutSession)
class CheckoutCouponHandler:
    @handle(ApplyCheckoutCoupon)
    def apply_coupon(self, command):
        repo = current_domain.repository_for(CheckoutSession)
        session = repo.get(command.checkout_id)
        try:
            session.apply_coupon(command.coupon_code)
        except CouponError as exc:
            logger.info(
                "Coupon rejected",
                checkout_id=str(command.checkout_id),
                coupon_code=exc.code,
                reason=exc.reason.value,
            )
            raise
        repo.add(session)

    @handle(ClearCheckoutCoupon)
    def clear_coupon(self, command):
        repo = current_domain.repository_for(CheckoutSession)
        session = repo.get(command.checkout_id)
        session.clear_coupon()
        repo.add(session)
