import dataclasses
import pytest
from rewardpool.config import (
    ONE_MONTH_SECONDS,
    TierConfig,
    CurveConfig,
    FeeConfig,
    ScenarioSettings,
    default_configs
)


def test_defaults():
    tier, curve, fees = default_configs(1_700_000_000)
    assert tier.reward_basis_points == 2000
    assert tier.price_per_period == 5
    assert curve.num_periods == 60
    assert curve.formula_base == 1.2
    assert curve.start_timestamp == 1_700_000_000
    assert (fees.protocol_bps, fees.client_bps) == (100, 500)
    assert ONE_MONTH_SECONDS == 2_592_000

    settings = ScenarioSettings()
    assert settings.initial_subscribers == 50
    assert settings.avg_subscription_days == 360
    assert settings.test_address == "test-subscriber"


def test_configs_are_immutable():
    tier, _, _ = default_configs(0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        tier.price_per_period = 10


def test_invalid_configs():
    with pytest.raises(ValueError):
        TierConfig(reward_basis_points=10_001, initial_mint_price=0, price_per_period=5)
    with pytest.raises(ValueError):
        TierConfig(reward_basis_points=2000, initial_mint_price=-1, price_per_period=5)
    with pytest.raises(ValueError):
        CurveConfig(num_periods=0, formula_base=1.2, start_timestamp=0)
    with pytest.raises(ValueError):
        CurveConfig(num_periods=60, formula_base=1.0, start_timestamp=0)
    with pytest.raises(ValueError):
        CurveConfig(num_periods=60, formula_base=1.2, start_timestamp=0, min_multiplier=-1)
    with pytest.raises(ValueError):
        FeeConfig(protocol_bps=-1, client_bps=500)
    with pytest.raises(ValueError):
        FeeConfig(protocol_bps=6000, client_bps=5000)
    with pytest.raises(ValueError):
        ScenarioSettings(initial_subscribers=0)
    with pytest.raises(ValueError):
        ScenarioSettings(initial_subscribers=100, max_subscribers=10)
