"""Coupon registry and coupon evaluation.

The registry is an immutable lookup table of coupon definitions keyed by
upper-cased code. ``evaluate_coupon`` checks a buyer-entered code against it
and either returns the resulting ``CouponApplication`` or raises
``CouponError``; it never stores anything.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from types import MappingProxyType

import structlog
from protean.fields import Boolean, Integer, String

from checkout.domain import checkout
from checkout.pricing.config import custom_config
from checkout.pricing.eligibility import BuyerContext
from checkout.pricing.errors import CouponError, CouponErrorReason
from checkout.pricing.money import format_money, round_half_up, to_amount

logger = structlog.get_logger(__name__)


class CouponKind(Enum):
    FLAT_AMOUNT = "FlatAmount"
    PERCENT_WITH_CAP = "PercentWithCap"
    FREE_SHIPPING = "FreeShipping"


def normalize_code(code: str | None) -> str:
    return (code or "").strip().upper()


@dataclass(frozen=True)
class CouponDefinition:
    """One entry of the coupon registry.

    ``value`` is a flat amount for ``FLAT_AMOUNT`` and a fraction (``0.10``)
    for ``PERCENT_WITH_CAP``; it is ignored for ``FREE_SHIPPING``.
    """

    code: str
    kind: CouponKind
    value: Decimal = Decimal("0")
    cap: int | None = None
    minimum_subtotal: int | None = None
    first_order_only: bool = False
    description: str = ""

    def __post_init__(self):
        if not self.code or self.code != normalize_code(self.code):
            raise ValueError(f"Coupon code must be non-empty upper case, got {self.code!r}")
        if self.value < 0:
            raise ValueError(f"Coupon {self.code} has a negative value")
        if self.kind == CouponKind.PERCENT_WITH_CAP and self.cap is None:
            raise ValueError(f"Percent coupon {self.code} needs a cap")

    def monetary_amount(self, subtotal: Decimal) -> int:
        if self.kind == CouponKind.FLAT_AMOUNT:
            return round_half_up(self.value)
        if self.kind == CouponKind.PERCENT_WITH_CAP:
            return min(round_half_up(subtotal * self.value), self.cap)
        return 0

    @classmethod
    def from_mapping(cls, data: Mapping) -> "CouponDefinition":
        """Build a definition from config data (``kind`` by enum name or value)."""
        raw_kind = data["kind"]
        kind = CouponKind[raw_kind] if raw_kind in CouponKind.__members__ else CouponKind(raw_kind)
        return cls(
            code=normalize_code(data["code"]),
            kind=kind,
            value=Decimal(str(data.get("value", 0))),
            cap=data.get("cap"),
            minimum_subtotal=data.get("minimum_subtotal"),
            first_order_only=bool(data.get("first_order_only", False)),
            description=data.get("description", ""),
        )


class CouponRegistry:
    """Read-only mapping of coupon code to definition."""

    def __init__(self, definitions: Iterable[CouponDefinition] = ()):
        table = {}
        for definition in definitions:
            if definition.code in table:
                raise ValueError(f"Duplicate coupon code: {definition.code}")
            table[definition.code] = definition
        self._table = MappingProxyType(table)

    def get(self, code: str | None) -> CouponDefinition | None:
        return self._table.get(normalize_code(code))

    def extended(self, definitions: Iterable[CouponDefinition]) -> "CouponRegistry":
        """Return a new registry with ``definitions`` added."""
        return CouponRegistry([*self._table.values(), *definitions])

    def __contains__(self, code) -> bool:
        return normalize_code(code) in self._table

    def __iter__(self):
        return iter(self._table.values())

    def __len__(self) -> int:
        return len(self._table)


DEFAULT_COUPONS = (
    CouponDefinition(
        code="WELCOME10",
        kind=CouponKind.PERCENT_WITH_CAP,
        value=Decimal("0.10"),
        cap=300,
        first_order_only=True,
        description="10% off (up to ₹300) for your first order",
    ),
    CouponDefinition(
        code="SAVE50",
        kind=CouponKind.FLAT_AMOUNT,
        value=Decimal("50"),
        minimum_subtotal=499,
        description="₹50 off",
    ),
    CouponDefinition(
        code="FREESHIP",
        kind=CouponKind.FREE_SHIPPING,
        description="Free shipping applied",
    ),
    CouponDefinition(
        code="NKD150",
        kind=CouponKind.FLAT_AMOUNT,
        value=Decimal("150"),
        minimum_subtotal=1499,
        description="₹150 off",
    ),
)

DEFAULT_REGISTRY = CouponRegistry(DEFAULT_COUPONS)


@checkout.value_object
class CouponApplication:
    """A coupon that passed evaluation against a subtotal and buyer."""

    code = String(required=True, max_length=50)
    amount = Integer(default=0, min_value=0)
    free_shipping = Boolean(default=False)
    description = String(max_length=255, sanitize=False)


def evaluate_coupon(
    code: str | None,
    subtotal,
    buyer: BuyerContext,
    registry: CouponRegistry = DEFAULT_REGISTRY,
    currency: str = "INR",
) -> CouponApplication | None:
    """Check ``code`` against the registry for this subtotal and buyer.

    Returns ``None`` for an empty code. Raises ``CouponError`` when the code
    is unknown, the subtotal is below the coupon's minimum, or the buyer is
    not eligible, checked in that order.
    """
    normalized = normalize_code(code)
    if not normalized:
        return None

    amount = to_amount(subtotal, "subtotal")

    definition = registry.get(normalized)
    if definition is None:
        raise CouponError(
            CouponErrorReason.INVALID_COUPON,
            "Invalid or unsupported coupon code",
            code=normalized,
        )

    if definition.minimum_subtotal is not None and amount < definition.minimum_subtotal:
        raise CouponError(
            CouponErrorReason.COUPON_MINIMUM_NOT_MET,
            f"{normalized} requires minimum order of {format_money(definition.minimum_subtotal, currency)}",
            code=normalized,
            required_minimum=definition.minimum_subtotal,
        )

    if definition.first_order_only and not buyer.is_first_order_eligible:
        raise CouponError(
            CouponErrorReason.COUPON_NOT_ELIGIBLE,
            f"{normalized} is only valid on your first order",
            code=normalized,
        )

    return CouponApplication(
        code=normalized,
        amount=definition.monetary_amount(amount),
        free_shipping=definition.kind == CouponKind.FREE_SHIPPING,
        description=definition.description,
    )


def load_coupon_registry(domain=None) -> CouponRegistry:
    """Default registry extended with ``[custom] coupons`` from the domain config."""
    extra = [CouponDefinition.from_mapping(item) for item in custom_config(domain).get("coupons") or []]
    if extra:
        logger.info("Loaded configured coupons", codes=[item.code for item in extra])
    return DEFAULT_REGISTRY.extended(extra)
