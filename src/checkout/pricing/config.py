"""Pricing configuration.

Defaults are the storefront's published rates. Deployments override them in
the domain config::

    [tool.protean.custom.pricing]
    cod_fee = 40
    gift_wrap_fee = 30
"""

import structlog
from protean.fields import Boolean, Float, Integer, String
from protean.utils.globals import current_domain

from checkout.domain import checkout

logger = structlog.get_logger(__name__)


@checkout.value_object
class PricingConfig:
    """Rates and flat fees used to price a checkout.

    Rates are fractions (``0.18`` is 18%); fees are whole currency units.
    """

    currency = String(max_length=3, default="INR")
    gst_rate = Float(default=0.18, min_value=0.0)
    first_order_rate = Float(default=0.10, min_value=0.0)
    first_order_cap = Integer(default=300, min_value=0)
    cod_fee = Integer(default=25, min_value=0)
    gift_wrap_fee = Integer(default=0, min_value=0)
    online_fee_rate = Float(default=0.02, min_value=0.0)
    online_fee_gst_rate = Float(default=0.18, min_value=0.0)
    assume_first_order_when_unknown = Boolean(default=False)


_CONFIG_KEYS = (
    "currency",
    "gst_rate",
    "first_order_rate",
    "first_order_cap",
    "cod_fee",
    "gift_wrap_fee",
    "online_fee_rate",
    "online_fee_gst_rate",
    "assume_first_order_when_unknown",
)

DEFAULT_PRICING_CONFIG = PricingConfig()


def pricing_config_from_mapping(values: dict | None) -> PricingConfig:
    """Build a ``PricingConfig`` from a plain mapping, ignoring unknown keys."""
    values = dict(values or {})
    unknown = sorted(set(values) - set(_CONFIG_KEYS))
    if unknown:
        logger.warning("Ignoring unknown pricing config keys", keys=unknown)

    return PricingConfig(**{key: values[key] for key in _CONFIG_KEYS if key in values})


def custom_config(domain=None) -> dict:
    """Return the ``[custom]`` section of the domain config (empty if absent)."""
    domain = domain or current_domain
    return domain.config.get("custom") or {}


def load_pricing_config(domain=None) -> PricingConfig:
    return pricing_config_from_mapping(custom_config(domain).get("pricing"))
