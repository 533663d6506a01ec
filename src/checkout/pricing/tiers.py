"""Quantity-tier pricing and cart subtotals.

Products may carry volume tiers (``minQty`` / ``unitPrice`` pairs). The unit
price for a quantity is the price of the highest tier the quantity reaches.
Wholesale quotes snap the quantity to the minimum order and step size and
price it from the 10–40 or 50–100 window.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal, InvalidOperation

from protean.fields import Boolean, Float, Integer, String

from checkout.domain import checkout
from checkout.pricing.errors import InvalidInput
from checkout.pricing.money import to_amount

_CENT = Decimal("0.01")

# (lowest tier minimum, highest tier minimum, slab label)
_WINDOWS = ((10, 40, "10-40"), (50, 100, "50-100"))
_QUOTE_LIMIT = 100


@dataclass(frozen=True)
class VolumeTier:
    min_quantity: int
    unit_price: Decimal


@dataclass(frozen=True)
class LineItem:
    product_id: str
    unit_price: Decimal
    quantity: int

    def __post_init__(self):
        object.__setattr__(self, "unit_price", to_amount(self.unit_price, "unit_price"))
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            raise InvalidInput(f"quantity must be a positive integer, got {self.quantity!r}")

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class CartSnapshot:
    """The cart as it stood when pricing was requested."""

    items: tuple[LineItem, ...] = field(default_factory=tuple)

    @classmethod
    def from_dicts(cls, items: Iterable[dict]) -> "CartSnapshot":
        return cls(
            tuple(
                LineItem(product_id=str(item["product_id"]), unit_price=item["unit_price"], quantity=item["quantity"])
                for item in items
            )
        )

    def subtotal(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    def to_dicts(self) -> list[dict]:
        return [
            {"product_id": item.product_id, "unit_price": float(item.unit_price), "quantity": item.quantity}
            for item in self.items
        ]

    def __len__(self) -> int:
        return len(self.items)


@checkout.value_object
class VolumeQuote:
    """Wholesale quote for a quantity of one product."""

    normalized_quantity = Integer(required=True, min_value=1)
    slab = String(required=True, max_length=20, sanitize=False)
    unit_price_ex_gst = Float(required=True, min_value=0.0)
    unit_price = Float(required=True, min_value=0.0)
    gst_rate = Float(default=0.18)
    over_limit = Boolean(default=False)


def _number(value):
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def parse_tiers(raw) -> list[VolumeTier]:
    """Normalize tiers from a list or JSON string of ``{minQty, unitPrice}``/``{min, price}``."""
    if not raw:
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            return []
    if not isinstance(raw, list):
        return []

    tiers = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        min_quantity = _number(entry.get("minQty", entry.get("min", 0)))
        unit_price = _number(entry.get("unitPrice", entry.get("price", 0)))
        if min_quantity is None or unit_price is None:
            continue
        if min_quantity <= 0 or unit_price < 0:
            continue
        tiers.append(VolumeTier(min_quantity=int(min_quantity), unit_price=unit_price))

    return sorted(tiers, key=lambda tier: tier.min_quantity)


def resolve_unit_price(base_price, tiers: Iterable[VolumeTier], quantity: int) -> Decimal:
    """Unit price for ``quantity``: the highest tier reached, else the base price."""
    unit = to_amount(base_price, "base_price")
    for tier in sorted(tiers, key=lambda t: t.min_quantity):
        if quantity >= tier.min_quantity:
            unit = tier.unit_price
        else:
            break
    return unit


def normalize_quantity(quantity: int | None, moq: int = 10, step: int = 10, ceil: bool = True) -> int:
    """Snap ``quantity`` to the minimum order and a multiple of ``step`` (63 -> 70)."""
    minimum = max(1, moq)
    if not quantity or quantity < minimum:
        return minimum

    steps = Decimal(quantity) / Decimal(step)
    multiple = int(steps.to_integral_value(rounding=ROUND_CEILING if ceil else ROUND_HALF_UP))
    return max(minimum, multiple * step)


def quote_volume_window(
    base_price,
    tiers: Iterable[VolumeTier] = (),
    quantity: int | None = None,
    gst_rate: float = 0.18,
    with_tax: bool = False,
    moq: int = 10,
    step: int = 10,
    ceil: bool = True,
) -> VolumeQuote:
    base = to_amount(base_price, "base_price")
    tiers = list(tiers)
    normalized = normalize_quantity(quantity, moq=moq, step=step, ceil=ceil)

    unit_ex_gst = base
    slab = "base"
    for low, high, label in _WINDOWS:
        if low <= normalized <= high:
            window_tier = next((t for t in tiers if low <= t.min_quantity <= high), None)
            unit_ex_gst = window_tier.unit_price if window_tier else base
            slab = label
            break
    else:
        if normalized > _QUOTE_LIMIT:
            slab = f">{_QUOTE_LIMIT}"

    unit = unit_ex_gst
    if with_tax:
        try:
            unit = (unit_ex_gst * (1 + Decimal(str(gst_rate)))).quantize(_CENT, rounding=ROUND_HALF_UP)
        except InvalidOperation as exc:
            raise InvalidInput(f"base_price is out of range: {base_price!r}") from exc

    return VolumeQuote(
        normalized_quantity=normalized,
        slab=slab,
        unit_price_ex_gst=float(unit_ex_gst),
        unit_price=float(unit),
        gst_rate=gst_rate,
        over_limit=normalized > _QUOTE_LIMIT,
    )
