"""Pricing errors.

Coupon failures are recoverable and shown to the buyer; ``InvalidInput`` is a
caller defect and is never shown to the buyer.
"""

from enum import Enum

from protean.exceptions import ValidationError


class CouponErrorReason(Enum):
    INVALID_COUPON = "InvalidCoupon"
    COUPON_MINIMUM_NOT_MET = "CouponMinimumNotMet"
    COUPON_NOT_ELIGIBLE = "CouponNotEligible"


class CouponError(ValidationError):
    """A coupon code that cannot be applied to the current checkout.

    ``required_minimum`` is set for ``COUPON_MINIMUM_NOT_MET`` so the
    storefront can tell the buyer how much more to add.
    """

    def __init__(self, reason: CouponErrorReason, message: str, code: str | None = None, required_minimum=None):
        self.reason = reason
        self.message = message
        self.code = code
        self.required_minimum = required_minimum
        super().__init__({"coupon_code": [message]})

    def to_dict(self) -> dict:
        return {
            "reason": self.reason.value,
            "message": self.message,
            "code": self.code,
            "required_minimum": self.required_minimum,
        }


class InvalidInput(ValueError):
    """A malformed amount was passed to the pricing engine."""
