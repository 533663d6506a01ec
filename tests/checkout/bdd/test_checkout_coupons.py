"""BDD tests for coupons on a checkout session."""

from checkout.pricing.errors import CouponError
from pytest_bdd import parsers, scenarios, then, when

scenarios("features/checkout_coupons.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the buyer applies coupon "{code}"'))
def apply_coupon(session, code, error):
    try:
        session.apply_coupon(code)
    except CouponError as exc:
        error["exc"] = exc


@when("the buyer clears the coupon")
def clear_coupon(session):
    session.clear_coupon()


@when(parsers.cfparse("the cart changes to a subtotal of {amount:d}"))
def change_cart(session, amount):
    session.update_cart([{"product_id": "prod-002", "unit_price": float(amount), "quantity": 1}])


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the applied coupon is "{code}"'))
def applied_coupon_is(session, code):
    assert session.applied_coupon is not None
    assert session.applied_coupon.code == code


@then("no coupon is applied")
def no_coupon(session):
    assert session.applied_coupon is None
    assert session.pricing.coupon_code is None


@then(parsers.cfparse('the checkout discount comes from "{source}"'))
def discount_source_is(session, source):
    assert session.pricing.discount_source == source


@then(parsers.cfparse("the checkout total is {amount:d}"))
def checkout_total_is(session, amount):
    assert session.pricing.total == amount
