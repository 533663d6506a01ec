"""Shared BDD fixtures and step definitions for the Checkout domain."""

import pytest
from checkout.pricing.errors import CouponError
from checkout.session.events import (
    CheckoutCouponApplied,
    CheckoutCouponRemoved,
    CheckoutRepriced,
    CheckoutStarted,
    CheckoutSubmitted,
)
from checkout.session.session import CheckoutSession
from pytest_bdd import given, parsers, then

_CHECKOUT_EVENT_CLASSES = {
    "CheckoutStarted": CheckoutStarted,
    "CheckoutCouponApplied": CheckoutCouponApplied,
    "CheckoutCouponRemoved": CheckoutCouponRemoved,
    "CheckoutRepriced": CheckoutRepriced,
    "CheckoutSubmitted": CheckoutSubmitted,
}


def _items_worth(amount):
    return [{"product_id": "prod-001", "unit_price": float(amount), "quantity": 1}]


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured coupon errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps: checkout session
# ---------------------------------------------------------------------------
@given(parsers.cfparse("a checkout worth {amount:d} for a returning buyer"), target_fixture="session")
def returning_buyer_checkout(amount):
    session = CheckoutSession.create(line_items=_items_worth(amount), customer_id="cust-001")
    session._events.clear()
    return session


@given(parsers.cfparse("a checkout worth {amount:d} for a first-order buyer"), target_fixture="session")
def first_order_checkout(amount):
    session = CheckoutSession.create(
        line_items=_items_worth(amount), customer_id="cust-001", first_order_eligible=True
    )
    session._events.clear()
    return session


@given(parsers.cfparse('the coupon "{code}" is applied'), target_fixture="session")
def checkout_with_coupon(session, code):
    session.apply_coupon(code)
    session._events.clear()
    return session


# ---------------------------------------------------------------------------
# Then steps: shared
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the coupon is rejected with "{reason}"'))
def coupon_rejected(error, reason):
    assert error["exc"] is not None, "Expected a coupon error but none was raised"
    assert isinstance(error["exc"], CouponError)
    assert error["exc"].reason.value == reason


@then(parsers.cfparse('the rejection message is "{message}"'))
def rejection_message(error, message):
    assert error["exc"].message == message


@then(parsers.cfparse("a {event_type} checkout event is raised"))
def checkout_event_raised(session, event_type):
    event_cls = _CHECKOUT_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in session._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in session._events]}"
