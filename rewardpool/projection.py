"""
Closed-form projection of a single hypothetical subscriber.

Unlike the scenario simulator this does not admit individual subscribers: the
population follows a smooth compound growth curve derived from an annual
growth multiple, and each month the subscriber receives an even slice of that
month's pool contribution.
"""

from dataclasses import dataclass, field
from typing import List

import numpy as np

from rewardpool.config import MAX_BPS
from rewardpool.errors import InvalidStateError


def monthly_growth_rate(annual_multiplier: float) -> float:
    # 10x per year means multiplying by the 12th root of 10 every month
    if annual_multiplier <= 0:
        raise ValueError("Annual growth multiple must be positive")
    return annual_multiplier ** (1 / 12) - 1


@dataclass(frozen=True)
class ProjectionConfig:
    monthly_fee: float = 5.0
    reward_pool_bps: int = 2_000
    client_fee_bps: int = 500
    protocol_fee_bps: int = 100
    initial_subscribers: int = 30
    annual_growth_multiple: float = 10.0
    months: int = 60
    formula_base: float = 1.2
    min_multiplier: float = 0.0
    subscriber_start_month: int = 0
    subscriber_months: int = 60

    def __post_init__(self):
        if self.months <= 0:
            raise ValueError("Months must be positive")
        if self.initial_subscribers <= 0:
            raise ValueError("Initial subscribers must be positive")
        if self.client_fee_bps + self.protocol_fee_bps > MAX_BPS:
            raise ValueError("Combined fees cannot exceed the gross payment")
        if not 0 <= self.reward_pool_bps <= MAX_BPS:
            raise ValueError(f"Reward pool share must be between 0 and {MAX_BPS} bps")


@dataclass(frozen=True)
class MonthBreakdown:
    month: int
    subscribers: int
    reward_pool_contribution: float  # per subscriber
    multiplier: float
    rewards_earned: float


@dataclass
class ProjectionResult:
    total_paid: float
    total_rewards: float
    roi: float
    monthly: List[MonthBreakdown] = field(default_factory=list)


def curve_multipliers(config: ProjectionConfig) -> np.ndarray:
    months_passed = np.arange(config.months)
    multipliers = np.power(config.formula_base, (config.months - months_passed).astype(float))
    return np.maximum(multipliers, config.min_multiplier)


def project_rewards(config: ProjectionConfig = ProjectionConfig()) -> ProjectionResult:
    growth = monthly_growth_rate(config.annual_growth_multiple)

    fee_multiplier = (MAX_BPS - config.client_fee_bps - config.protocol_fee_bps) / MAX_BPS
    contribution = config.monthly_fee * fee_multiplier * config.reward_pool_bps / MAX_BPS

    months = np.arange(config.months)
    subscribers = config.initial_subscribers * np.power(1 + growth, months)
    multipliers = curve_multipliers(config)
    pools = subscribers * contribution

    end_month = config.subscriber_start_month + config.subscriber_months
    subscribed = (months >= config.subscriber_start_month) & (months < end_month)

    # Every subscriber in a month carries the same multiplier, so the weighted
    # share reduces to an even split of that month's pool
    rewards = np.where(subscribed, pools / subscribers, 0.0)

    total_paid = float(config.monthly_fee * np.count_nonzero(subscribed))
    total_rewards = float(rewards.sum())
    if total_paid == 0:
        raise InvalidStateError("Hypothetical subscriber is never subscribed; ROI is undefined")

    monthly = [
        MonthBreakdown(
            month=int(m),
            subscribers=int(np.floor(subs + 0.5)),
            reward_pool_contribution=contribution,
            multiplier=float(mult),
            rewards_earned=float(reward)
        )
        for m, subs, mult, reward in zip(months, subscribers, multipliers, rewards)
    ]

    return ProjectionResult(
        total_paid=total_paid,
        total_rewards=total_rewards,
        roi=(total_rewards - total_paid) / total_paid * 100,
        monthly=monthly
    )
