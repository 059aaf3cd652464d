import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple

from rewardpool.config import (
    MAX_BPS,
    ONE_MONTH_DAYS,
    ONE_MONTH_SECONDS,
    CurveConfig,
    FeeConfig,
    TierConfig,
)
from rewardpool.errors import DuplicateSubscriberError, InvalidStateError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentQuote:
    subscription_months: float
    payment: float         # gross charge
    protocol_fee: float
    client_fee: float
    net_payment: float
    reward_amount: float   # contribution to the reward pool

    @property
    def creator_amount(self) -> float:
        return self.net_payment - self.reward_amount


@dataclass(frozen=True)
class Subscriber:
    subscription_start: int
    expires_at: float
    reward_shares: float
    total_spent: float

    # Admission breakdown, kept so totals can be recomputed from records
    reward_amount: float = 0.0
    multiplier: float = 0.0
    protocol_fee: float = 0.0
    client_fee: float = 0.0

    def is_active(self, timestamp: float) -> bool:
        return self.subscription_start <= timestamp < self.expires_at


@dataclass
class SubscriptionState:
    subscribers: Dict[str, Subscriber] = field(default_factory=dict)
    reward_pool: float = 0.0
    total_shares: float = 0.0
    creator_balance: float = 0.0
    protocol_earnings: float = 0.0
    client_earnings: float = 0.0

    def drift(self) -> Tuple[float, float]:
        """Absolute difference between the incremental (pool, shares) totals
        and the same totals recomputed from the subscriber records."""
        pool = math.fsum(s.reward_amount for s in self.subscribers.values())
        shares = math.fsum(s.reward_shares for s in self.subscribers.values())
        return abs(self.reward_pool - pool), abs(self.total_shares - shares)


class RewardStatus(Enum):
    UNKNOWN = "unknown"
    NOT_STARTED = "not_started"
    NO_SHARES = "no_shares"
    COMPUTED = "computed"


@dataclass(frozen=True)
class RewardOutcome:
    status: RewardStatus
    amount: float = 0.0

    @property
    def computed(self) -> bool:
        return self.status is RewardStatus.COMPUTED


@dataclass(frozen=True)
class RoiResult:
    roi: float      # percent gain or loss on the gross amount paid
    spent: float
    rewards: float


class SubscriptionModel:
    def __init__(
        self,
        tier: TierConfig,
        curve: CurveConfig,
        fees: FeeConfig,
        allow_overwrite: bool = False
    ):
        self.tier = tier
        self.curve = curve
        self.fees = fees
        # Re-admitting an address replaces its record but keeps its old
        # contribution in every cumulative total
        self.allow_overwrite = allow_overwrite
        self.state = SubscriptionState()

    def reset(self) -> SubscriptionState:
        self.state = SubscriptionState()
        return self.state

    def calculate_multiplier(self, timestamp: float) -> float:
        periods_elapsed = int((timestamp - self.curve.start_timestamp) // ONE_MONTH_SECONDS)

        if periods_elapsed >= self.curve.num_periods:
            return self.curve.min_multiplier

        exponent = self.curve.num_periods - periods_elapsed
        try:
            multiplier = self.curve.formula_base ** exponent
        except OverflowError:
            # Only reachable for admissions long before the curve starts
            raise InvalidStateError(
                f"Multiplier overflows {exponent} periods before the curve horizon"
            ) from None
        return max(multiplier, self.curve.min_multiplier)

    def quote(self, subscription_days: float) -> PaymentQuote:
        if subscription_days <= 0:
            raise ValueError("Subscription length must be positive")

        subscription_months = subscription_days / ONE_MONTH_DAYS
        payment = self.tier.initial_mint_price + subscription_months * self.tier.price_per_period

        protocol_fee = payment * self.fees.protocol_bps / MAX_BPS
        client_fee = payment * self.fees.client_bps / MAX_BPS
        net_payment = payment - protocol_fee - client_fee
        reward_amount = net_payment * self.tier.reward_basis_points / MAX_BPS

        return PaymentQuote(
            subscription_months=subscription_months,
            payment=payment,
            protocol_fee=protocol_fee,
            client_fee=client_fee,
            net_payment=net_payment,
            reward_amount=reward_amount
        )

    def add_subscriber(self, address: str, timestamp: int, subscription_days: float) -> Subscriber:
        if address in self.state.subscribers:
            if not self.allow_overwrite:
                raise DuplicateSubscriberError(address)
            logger.warning(
                "Overwriting subscriber %s; its previous contribution stays in the pool totals",
                address
            )

        quote = self.quote(subscription_days)
        multiplier = self.calculate_multiplier(timestamp)
        # Longer commitments earn proportionally more shares
        shares = quote.reward_amount * multiplier * (quote.subscription_months / 12)

        subscriber = Subscriber(
            subscription_start=timestamp,
            expires_at=timestamp + quote.subscription_months * ONE_MONTH_SECONDS,
            reward_shares=shares,
            total_spent=quote.payment,
            reward_amount=quote.reward_amount,
            multiplier=multiplier,
            protocol_fee=quote.protocol_fee,
            client_fee=quote.client_fee
        )
        self.state.subscribers[address] = subscriber

        self.state.total_shares += shares
        self.state.reward_pool += quote.reward_amount
        self.state.creator_balance += quote.creator_amount
        self.state.protocol_earnings += quote.protocol_fee
        self.state.client_earnings += quote.client_fee

        logger.debug(
            "Admitted %s: paid %.4f, multiplier %.4f, shares %.4f",
            address, quote.payment, multiplier, shares
        )
        return subscriber

    def reward_outcome(self, address: str, current_timestamp: float) -> RewardOutcome:
        subscriber = self.state.subscribers.get(address)
        if subscriber is None:
            return RewardOutcome(RewardStatus.UNKNOWN)

        # Expired subscribers keep their frozen weight against the live pool
        if current_timestamp < subscriber.subscription_start:
            return RewardOutcome(RewardStatus.NOT_STARTED)

        if self.state.total_shares == 0:
            return RewardOutcome(RewardStatus.NO_SHARES)

        share_percentage = subscriber.reward_shares / self.state.total_shares
        return RewardOutcome(RewardStatus.COMPUTED, self.state.reward_pool * share_percentage)

    def calculate_rewards(self, address: str, current_timestamp: float) -> float:
        return self.reward_outcome(address, current_timestamp).amount

    def calculate_roi(self, address: str, current_timestamp: float) -> RoiResult:
        subscriber = self.state.subscribers.get(address)
        if subscriber is None:
            return RoiResult(roi=0.0, spent=0.0, rewards=0.0)

        if subscriber.total_spent == 0:
            raise InvalidStateError(f"Subscriber {address!r} paid nothing; ROI is undefined")

        rewards = self.calculate_rewards(address, current_timestamp)
        return RoiResult(
            roi=(rewards / subscriber.total_spent - 1) * 100,
            spent=subscriber.total_spent,
            rewards=rewards
        )
