"""Checkout load test scenarios.

Two journeys: a buyer who opens a checkout and works through coupon,
payment and gift-wrap choices before submitting, and a shopper who only
asks for quotes from the product and cart pages.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    checkout_data,
    coupon_code,
    evaluate_coupon_data,
    line_items,
    quote_data,
    volume_quote_data,
)
from loadtests.helpers.response import extract_error_detail, is_coupon_rejection
from loadtests.helpers.state import CheckoutState


class CheckoutJourney(SequentialTaskSet):
    """Start -> View Pricing -> Apply Coupon -> Change Cart -> Payment Method ->
    Gift Wrap -> Submit.

    Coupon rejections are an expected outcome of buyer input and are not
    counted as failures.
    Generates events: CheckoutStarted, CheckoutCouponApplied or nothing,
    CheckoutRepriced (x4+), CheckoutCouponRemoved (sometimes), CheckoutSubmitted.
    """

    def on_start(self):
        self.state = CheckoutState()

    @task
    def start_checkout(self):
        with self.client.post(
            "/checkouts",
            json=checkout_data(),
            catch_response=True,
            name="POST /checkouts",
        ) as resp:
            if resp.status_code == 201:
                self.state.checkout_id = resp.json()["checkout_id"]
            else:
                resp.failure(f"Start checkout failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def view_pricing(self):
        with self.client.get(
            f"/checkouts/{self.state.checkout_id}/pricing",
            catch_response=True,
            name="GET /checkouts/{id}/pricing",
        ) as resp:
            if resp.status_code == 200:
                self.state.last_total = resp.json()["pricing"]["total"]
            else:
                resp.failure(f"View pricing failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def apply_coupon(self):
        code = coupon_code()
        with self.client.post(
            f"/checkouts/{self.state.checkout_id}/coupon",
            json={"coupon_code": code},
            catch_response=True,
            name="POST /checkouts/{id}/coupon",
        ) as resp:
            if resp.status_code == 200:
                self.state.coupon_code = code.upper()
            elif is_coupon_rejection(resp):
                resp.success()
            else:
                resp.failure(f"Apply coupon failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def change_cart(self):
        with self.client.put(
            f"/checkouts/{self.state.checkout_id}/cart",
            json={"items": line_items()},
            catch_response=True,
            name="PUT /checkouts/{id}/cart",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Change cart failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def select_payment_method(self):
        method = random.choice(["online", "cod"])
        with self.client.put(
            f"/checkouts/{self.state.checkout_id}/payment-method",
            json={"payment_method": method},
            catch_response=True,
            name="PUT /checkouts/{id}/payment-method",
        ) as resp:
            if resp.status_code == 200:
                self.state.payment_method = method
            else:
                resp.failure(f"Select payment failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def set_gift_wrap(self):
        with self.client.put(
            f"/checkouts/{self.state.checkout_id}/gift-wrap",
            json={"gift_wrap": random.random() < 0.2},
            catch_response=True,
            name="PUT /checkouts/{id}/gift-wrap",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Set gift wrap failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def submit(self):
        with self.client.post(
            f"/checkouts/{self.state.checkout_id}/submit",
            catch_response=True,
            name="POST /checkouts/{id}/submit",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = "Submitted"
            else:
                resp.failure(f"Submit failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class QuoteBrowsingJourney(SequentialTaskSet):
    """Quote -> Evaluate Coupon -> Volume Quote.

    Read-only pricing traffic from product and cart pages. No events.
    """

    @task
    def quote(self):
        with self.client.post(
            "/pricing/quote",
            json=quote_data(),
            catch_response=True,
            name="POST /pricing/quote",
        ) as resp:
            if resp.status_code == 200 or is_coupon_rejection(resp):
                resp.success()
            else:
                resp.failure(f"Quote failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def evaluate_coupon(self):
        with self.client.post(
            "/pricing/coupons/evaluate",
            json=evaluate_coupon_data(),
            catch_response=True,
            name="POST /pricing/coupons/evaluate",
        ) as resp:
            if resp.status_code == 200 or is_coupon_rejection(resp):
                resp.success()
            else:
                resp.failure(f"Evaluate coupon failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def volume_quote(self):
        with self.client.post(
            "/pricing/volume-quote",
            json=volume_quote_data(),
            catch_response=True,
            name="POST /pricing/volume-quote",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Volume quote failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class CheckoutUser(HttpUser):
    """Locust user simulating storefront checkout traffic.

    Weighted distribution:
    - 60% Quote browsing (product and cart pages)
    - 40% Full checkout session through submission
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        QuoteBrowsingJourney: 3,
        CheckoutJourney: 2,
    }
