"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state — no cross-user sharing.
State tracks the checkout ID returned by the creation endpoint so follow-up
operations can reference it.
"""

from dataclasses import dataclass


@dataclass
class CheckoutState:
    """Tracks state for a single simulated checkout session."""

    checkout_id: str | None = None
    coupon_code: str | None = None
    payment_method: str = "online"
    last_total: int | None = None
    current_status: str = "Open"
