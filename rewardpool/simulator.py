"""
Month-by-month scenario driver for the subscription reward pool.

A run seeds an initial cohort, adds one distinguished test subscriber and then
grows the regular population geometrically, recording pool-wide economics at
the end of every month. Each run starts from a fresh SubscriptionState.
"""

import logging
import math
import numbers
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Iterable, List, Optional

import pandas as pd

from rewardpool.config import ONE_MONTH_SECONDS, ScenarioSettings
from rewardpool.engine import SubscriptionModel
from rewardpool.errors import RewardPoolError, SimulationLimitError

logger = logging.getLogger(__name__)


class SimulatorStatus(Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"


@dataclass(frozen=True)
class MonthSnapshot:
    month: int
    subscribers: int            # regular subscribers, test subscriber excluded
    new_subscribers: int
    avg_roi: float
    creator_earnings: float
    protocol_earnings: float
    client_earnings: float
    subscriber_rewards: float   # whole pool, test subscriber included
    test_subscriber_roi: float
    test_subscriber_rewards: float
    reward_pool: float
    total_shares: float


class ScenarioSimulator:
    def __init__(self, model: SubscriptionModel, settings: Optional[ScenarioSettings] = None):
        self.model = model
        self.settings = settings or ScenarioSettings()
        self.status = SimulatorStatus.UNINITIALIZED
        self.history: List[MonthSnapshot] = []
        self._regular_count = 0

    def simulate_scenario(
        self,
        start_timestamp: int,
        months: int,
        monthly_growth_rate: float,
        test_subscription_days: float
    ) -> List[MonthSnapshot]:
        if not isinstance(months, numbers.Integral) or isinstance(months, bool) or months <= 0:
            raise ValueError("Months must be a positive integer")
        if monthly_growth_rate < 0:
            raise ValueError("Monthly growth rate cannot be negative")
        if test_subscription_days <= 0:
            raise ValueError("Test subscription length must be positive")

        self.model.reset()
        self.history = []
        self._regular_count = 0
        self.status = SimulatorStatus.RUNNING

        logger.info(
            "Starting scenario: %d months, %.2f%% monthly growth, %s day test subscription",
            months, monthly_growth_rate * 100, test_subscription_days
        )

        try:
            self._admit_regular(self.settings.initial_subscribers, start_timestamp)
            self.model.add_subscriber(
                self.settings.test_address, start_timestamp, test_subscription_days
            )

            for month in range(1, months + 1):
                timestamp = start_timestamp + month * ONE_MONTH_SECONDS
                # Growth compounds on the regular population only
                new_subs = math.floor(self._regular_count * monthly_growth_rate)
                self._admit_regular(new_subs, timestamp)
                self.history.append(self._snapshot(month, new_subs, timestamp))
        except RewardPoolError:
            # A partial run is never left behind as if it were complete
            logger.warning("Scenario aborted after %d months; discarding partial run", len(self.history))
            self.model.reset()
            self.history = []
            self._regular_count = 0
            self.status = SimulatorStatus.UNINITIALIZED
            raise

        final = self.history[-1]
        logger.info(
            "Scenario finished: %d subscribers, avg ROI %.2f%%, test ROI %.2f%%",
            final.subscribers, final.avg_roi, final.test_subscriber_roi
        )
        return list(self.history)

    def _admit_regular(self, count: int, timestamp: int) -> None:
        if self._regular_count + count > self.settings.max_subscribers:
            raise SimulationLimitError(
                f"Admitting {count} subscribers would exceed the limit of "
                f"{self.settings.max_subscribers}; lower the growth rate or horizon"
            )

        for _ in range(count):
            self._regular_count += 1
            self.model.add_subscriber(
                f"subscriber-{self._regular_count}",
                timestamp,
                self.settings.avg_subscription_days
            )

    def _snapshot(self, month: int, new_subs: int, timestamp: int) -> MonthSnapshot:
        state = self.model.state
        test_address = self.settings.test_address

        total_roi = 0.0
        total_rewards = 0.0
        for address in state.subscribers:
            if address == test_address:
                continue
            analysis = self.model.calculate_roi(address, timestamp)
            total_roi += analysis.roi
            total_rewards += analysis.rewards

        test_analysis = self.model.calculate_roi(test_address, timestamp)

        snapshot = MonthSnapshot(
            month=month,
            subscribers=self._regular_count,
            new_subscribers=new_subs,
            avg_roi=total_roi / self._regular_count,
            creator_earnings=state.creator_balance,
            protocol_earnings=state.protocol_earnings,
            client_earnings=state.client_earnings,
            subscriber_rewards=total_rewards + test_analysis.rewards,
            test_subscriber_roi=test_analysis.roi,
            test_subscriber_rewards=test_analysis.rewards,
            reward_pool=state.reward_pool,
            total_shares=state.total_shares
        )

        logger.debug(
            "Month %d: %d subscribers (+%d), avg ROI %.2f%%, pool %.4f",
            month, snapshot.subscribers, new_subs, snapshot.avg_roi, snapshot.reward_pool
        )
        return snapshot

    def to_frame(self) -> pd.DataFrame:
        return snapshots_to_frame(self.history)


def snapshots_to_frame(snapshots: Iterable[MonthSnapshot]) -> pd.DataFrame:
    df = pd.DataFrame([asdict(s) for s in snapshots])
    if df.empty:
        return df
    return df.set_index("month")
