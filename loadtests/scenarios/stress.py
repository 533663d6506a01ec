"""Stress test scenarios for the pricing endpoints.

QuoteFloodUser hammers the stateless quote endpoints; CheckoutSpikeUser
opens and immediately reprices checkouts to stress the repository and
event recording.
"""

from locust import HttpUser, constant_pacing, task

from loadtests.data_generators import checkout_data, evaluate_coupon_data, quote_data


class QuoteFloodUser(HttpUser):
    """Stress test: maximum quote throughput.

    Quotes are pure computations, so latency here is the pricing engine
    plus request validation and nothing else.
    """

    wait_time = constant_pacing(0.1)  # ~10 requests/sec per user

    @task(5)
    def quote(self):
        with self.client.post(
            "/pricing/quote",
            json=quote_data(),
            catch_response=True,
            name="[STRESS] POST /pricing/quote",
        ) as resp:
            if resp.status_code in (200, 400):
                resp.success()

    @task(2)
    def evaluate_coupon(self):
        with self.client.post(
            "/pricing/coupons/evaluate",
            json=evaluate_coupon_data(),
            catch_response=True,
            name="[STRESS] POST /pricing/coupons/evaluate",
        ) as resp:
            if resp.status_code in (200, 400):
                resp.success()


class CheckoutSpikeUser(HttpUser):
    """Stress test: burst of new checkouts, each repriced once."""

    wait_time = constant_pacing(0.2)

    @task
    def start_and_switch_to_cod(self):
        resp = self.client.post("/checkouts", json=checkout_data(), name="[STRESS] POST /checkouts")
        if resp.status_code != 201:
            return
        checkout_id = resp.json()["checkout_id"]
        self.client.put(
            f"/checkouts/{checkout_id}/payment-method",
            json={"payment_method": "cod"},
            name="[STRESS] PUT /checkouts/{id}/payment-method",
        )
