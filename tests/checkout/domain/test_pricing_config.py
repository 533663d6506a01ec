from types import SimpleNamespace

import pytest
from checkout.pricing.config import (
    DEFAULT_PRICING_CONFIG,
    PricingConfig,
    custom_config,
    load_pricing_config,
    pricing_config_from_mapping,
)
from protean.exceptions import ValidationError
from structlog.testing import capture_logs


def test_defaults():
    assert DEFAULT_PRICING_CONFIG.currency == "INR"
    assert DEFAULT_PRICING_CONFIG.gst_rate == 0.18
    assert DEFAULT_PRICING_CONFIG.first_order_rate == 0.10
    assert DEFAULT_PRICING_CONFIG.first_order_cap == 300
    assert DEFAULT_PRICING_CONFIG.cod_fee == 25
    assert DEFAULT_PRICING_CONFIG.gift_wrap_fee == 0
    assert DEFAULT_PRICING_CONFIG.online_fee_rate == 0.02
    assert DEFAULT_PRICING_CONFIG.online_fee_gst_rate == 0.18
    assert DEFAULT_PRICING_CONFIG.assume_first_order_when_unknown is False


def test_negative_fee_rejected():
    with pytest.raises(ValidationError):
        PricingConfig(cod_fee=-1)


def test_from_mapping_overrides_known_keys():
    config = pricing_config_from_mapping({"cod_fee": 40, "gift_wrap_fee": 30})

    assert config.cod_fee == 40
    assert config.gift_wrap_fee == 30
    assert config.gst_rate == 0.18


def test_from_mapping_warns_on_unknown_keys():
    with capture_logs() as logs:
        config = pricing_config_from_mapping({"cod_fee": 40, "shipping_fee": 99})

    assert config.cod_fee == 40
    assert any(entry["event"] == "Ignoring unknown pricing config keys" for entry in logs)


def test_from_mapping_none():
    assert pricing_config_from_mapping(None) == DEFAULT_PRICING_CONFIG


def test_custom_config_of_domain():
    domain = SimpleNamespace(config={"custom": {"pricing": {"cod_fee": 35}}})

    assert custom_config(domain) == {"pricing": {"cod_fee": 35}}
    assert load_pricing_config(domain).cod_fee == 35


def test_current_domain_config_loads():
    assert load_pricing_config().cod_fee == 25
