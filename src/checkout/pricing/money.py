"""Money helpers shared by the pricing engine.

Amounts enter as ``int``, ``float`` or ``Decimal`` and are converted to
``Decimal`` through their string form, so ``0.1`` stays ``0.1``. Every
displayed line is rounded half-up to a whole currency unit.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

import structlog

from checkout.pricing.errors import InvalidInput

logger = structlog.get_logger(__name__)

_WHOLE_UNIT = Decimal("1")

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}


def to_amount(value, name: str = "amount") -> Decimal:
    """Convert ``value`` to a non-negative finite ``Decimal`` or raise ``InvalidInput``."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        logger.error("Rejected non-numeric pricing input", field=name, value=repr(value))
        raise InvalidInput(f"{name} must be a number, got {type(value).__name__}")

    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as exc:
        logger.error("Rejected unparseable pricing input", field=name, value=repr(value))
        raise InvalidInput(f"{name} is not a valid amount: {value!r}") from exc

    if not amount.is_finite():
        logger.error("Rejected non-finite pricing input", field=name, value=repr(value))
        raise InvalidInput(f"{name} must be finite, got {value!r}")

    if amount < 0:
        logger.error("Rejected negative pricing input", field=name, value=repr(value))
        raise InvalidInput(f"{name} must not be negative, got {value!r}")

    return amount


def round_half_up(value) -> int:
    """Round to the nearest whole currency unit, halves away from zero.

    Raises ``InvalidInput`` when the value is too large to quantize.
    """
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    try:
        return int(amount.quantize(_WHOLE_UNIT, rounding=ROUND_HALF_UP))
    except InvalidOperation as exc:
        logger.error("Rejected out-of-range pricing amount", value=str(amount))
        raise InvalidInput(f"amount is out of range: {amount}") from exc


def format_money(amount, currency: str = "INR") -> str:
    """Format a whole-unit amount for display, e.g. ``₹1,499``."""
    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    return f"{symbol}{max(0, round_half_up(amount)):,}"
