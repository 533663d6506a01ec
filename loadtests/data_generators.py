"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the API's Pydantic request
schemas. Cart values are spread across the coupon minimums (₹499, ₹1,499)
and the first-order cap (₹3,000) so every pricing branch gets traffic.
"""

import random
import uuid

from faker import Faker

fake = Faker("en_IN")

KNOWN_COUPONS = ["WELCOME10", "SAVE50", "FREESHIP", "NKD150"]


def customer_id() -> str:
    return f"cust-lt-{uuid.uuid4().hex[:8]}"


def line_item() -> dict:
    """Generate one LineItemSchema payload."""
    return {
        "product_id": f"prod-{fake.lexify('????').lower()}-{random.randint(100, 999)}",
        "unit_price": float(random.choice([99, 149, 249, 399, 499, 799, 1299, 2499])),
        "quantity": random.randint(1, 4),
    }


def line_items(count: int | None = None) -> list[dict]:
    return [line_item() for _ in range(count or random.randint(1, 5))]


def coupon_code() -> str:
    """Mostly known codes in mixed case, occasionally junk."""
    if random.random() < 0.15:
        return fake.bothify("???###").upper()
    code = random.choice(KNOWN_COUPONS)
    return code.lower() if random.random() < 0.3 else code


def buyer() -> dict:
    return {"is_first_order_eligible": random.random() < 0.35}


def payment_method() -> str:
    return random.choices(["online", "cod"], weights=[7, 3])[0]


def quote_data() -> dict:
    """Generate PricingQuoteRequest payload."""
    payload = {
        "payment_method": payment_method(),
        "gift_wrap": random.random() < 0.1,
        "buyer": buyer(),
    }
    if random.random() < 0.5:
        payload["raw_subtotal"] = round(random.uniform(100, 6000), 2)
    else:
        payload["items"] = line_items()
    if random.random() < 0.6:
        payload["coupon_code"] = coupon_code()
    return payload


def evaluate_coupon_data() -> dict:
    """Generate EvaluateCouponRequest payload."""
    return {
        "coupon_code": coupon_code(),
        "subtotal": round(random.uniform(100, 4000), 2),
        "buyer": buyer(),
    }


def volume_quote_data() -> dict:
    """Generate VolumeQuoteRequest payload with two wholesale tiers."""
    base = float(random.randint(50, 500))
    return {
        "base_price": base,
        "tiers": [
            {"min_quantity": 10, "unit_price": round(base * 0.9, 2)},
            {"min_quantity": 50, "unit_price": round(base * 0.8, 2)},
        ],
        "quantity": random.randint(1, 150),
        "with_tax": random.random() < 0.5,
    }


def checkout_data() -> dict:
    """Generate StartCheckoutRequest payload."""
    return {
        "customer_id": customer_id(),
        "items": line_items(),
        "first_order_eligible": random.random() < 0.35,
    }
