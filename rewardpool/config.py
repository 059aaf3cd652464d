from dataclasses import dataclass
from typing import Tuple

MAX_BPS = 10_000
ONE_YEAR_DAYS = 365
ONE_MONTH_DAYS = 30
ONE_MONTH_SECONDS = ONE_MONTH_DAYS * 24 * 60 * 60
AVG_SUB_MONTHS = 12
INITIAL_SUBSCRIBERS = 50
TEST_SUBSCRIBER = "test-subscriber"


def _check_bps(name: str, value: float) -> None:
    if value < 0 or value > MAX_BPS:
        raise ValueError(f"{name} must be between 0 and {MAX_BPS} bps")


@dataclass(frozen=True)
class TierConfig:
    reward_basis_points: int  # share of net payment routed to the reward pool
    initial_mint_price: float  # one-time fee
    price_per_period: float    # fee per 30 day period

    def __post_init__(self):
        _check_bps("reward_basis_points", self.reward_basis_points)
        if self.initial_mint_price < 0:
            raise ValueError("Initial mint price cannot be negative")
        if self.price_per_period < 0:
            raise ValueError("Price per period cannot be negative")


@dataclass(frozen=True)
class CurveConfig:
    num_periods: int        # curve horizon in months
    formula_base: float     # per-period decay base
    start_timestamp: int    # epoch seconds marking period 0
    min_multiplier: float = 0.0

    def __post_init__(self):
        if self.num_periods < 1:
            raise ValueError("Number of periods must be positive")
        if self.formula_base <= 1:
            raise ValueError("Formula base must be greater than 1")
        if self.min_multiplier < 0:
            raise ValueError("Minimum multiplier cannot be negative")
        try:
            self.formula_base ** self.num_periods
        except OverflowError:
            raise ValueError(
                f"Multiplier {self.formula_base}^{self.num_periods} overflows; shorten the curve or lower the base"
            ) from None


@dataclass(frozen=True)
class FeeConfig:
    protocol_bps: int
    client_bps: int

    def __post_init__(self):
        _check_bps("protocol_bps", self.protocol_bps)
        _check_bps("client_bps", self.client_bps)
        if self.protocol_bps + self.client_bps > MAX_BPS:
            raise ValueError("Combined fees cannot exceed the gross payment")


@dataclass(frozen=True)
class ScenarioSettings:
    initial_subscribers: int = INITIAL_SUBSCRIBERS
    avg_subscription_months: int = AVG_SUB_MONTHS
    test_address: str = TEST_SUBSCRIBER
    max_subscribers: int = 2_000_000  # guard against runaway growth rates

    def __post_init__(self):
        if self.initial_subscribers < 1:
            raise ValueError("Initial cohort must have at least one subscriber")
        if self.avg_subscription_months <= 0:
            raise ValueError("Average subscription length must be positive")
        if self.max_subscribers < self.initial_subscribers:
            raise ValueError("Subscriber limit is smaller than the initial cohort")

    @property
    def avg_subscription_days(self) -> int:
        return self.avg_subscription_months * ONE_MONTH_DAYS


def default_configs(start_timestamp: int) -> Tuple[TierConfig, CurveConfig, FeeConfig]:
    """Launch parameters: 20% of net revenue to the pool, $5 per period,
    a five year curve decaying by 1.2x per month, 1% protocol and 5% client fees."""
    tier = TierConfig(
        reward_basis_points=2_000,
        initial_mint_price=0,
        price_per_period=5,
    )
    curve = CurveConfig(
        num_periods=60,
        formula_base=1.2,
        start_timestamp=start_timestamp,
        min_multiplier=0,
    )
    fees = FeeConfig(
        protocol_bps=100,
        client_bps=500,
    )
    return tier, curve, fees
