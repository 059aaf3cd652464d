import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Iterable, List

import pandas as pd

from rewardpool.config import ONE_MONTH_SECONDS
from rewardpool.engine import SubscriptionModel
from rewardpool.simulator import ScenarioSimulator, snapshots_to_frame

__all__ = ["format_num", "snapshots_to_frame", "compare_subscription_lengths", "summary_lines"]

# Wide enough to quantize any finite float
_CONTEXT = Context(prec=400, rounding=ROUND_HALF_UP)


def format_num(value: float, decimals: int = 2) -> str:
    """Thousands separators, two to `decimals` fraction digits, ties rounded
    away from zero."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "∞" if value > 0 else "-∞"

    decimals = max(decimals, 2)
    # str() gives the shortest repr, so 0.125 and 1.005 round up as written
    rounded = Decimal(str(value)).quantize(Decimal(1).scaleb(-decimals), context=_CONTEXT)
    if rounded == 0:
        rounded = abs(rounded)
    text = f"{rounded:,.{decimals}f}"
    # Trim padding beyond the two decimals always shown
    whole, _, fraction = text.partition(".")
    fraction = fraction[:2] + fraction[2:].rstrip("0")
    return f"{whole}.{fraction}"


def compare_subscription_lengths(
    simulator: ScenarioSimulator,
    subscription_lengths: Iterable[float],
    start_timestamp: int,
    months: int,
    monthly_growth_rate: float
) -> pd.DataFrame:
    """Run one scenario per test subscription length and summarise the final month.

    Test subscriber rewards are read at the end of the decay curve, after
    that run's population has been admitted.
    """
    model: SubscriptionModel = simulator.model
    test_address = simulator.settings.test_address
    horizon = model.curve.start_timestamp + model.curve.num_periods * ONE_MONTH_SECONDS

    rows: List[dict] = []
    for days in subscription_lengths:
        results = simulator.simulate_scenario(
            start_timestamp=start_timestamp,
            months=months,
            monthly_growth_rate=monthly_growth_rate,
            test_subscription_days=days
        )
        final = results[-1]
        test_sub = model.state.subscribers[test_address]

        rows.append({
            "subscription_days": days,
            "final_subscribers": final.subscribers,
            "avg_roi": final.avg_roi,
            "test_spent": test_sub.total_spent,
            "test_shares": test_sub.reward_shares,
            "test_rewards": model.calculate_rewards(test_address, horizon),
            "test_roi": final.test_subscriber_roi,
            "creator_earnings": final.creator_earnings,
            "subscriber_rewards": final.subscriber_rewards,
        })

    return pd.DataFrame(rows)


def summary_lines(row: dict) -> List[str]:
    return [
        f"{row['subscription_days']} day subscription scenario:",
        f"- Final subscriber count: {format_num(row['final_subscribers'])}",
        f"- Average ROI for regular subscribers: {format_num(row['avg_roi'])}%",
        f"- Test subscriber spent: ${format_num(row['test_spent'])}",
        f"- Test subscriber shares: {format_num(row['test_shares'])}",
        f"- Test subscriber rewards: ${format_num(row['test_rewards'])}",
        f"- Test subscriber ROI: {format_num(row['test_roi'])}%",
        f"- Creator earnings: ${format_num(row['creator_earnings'])}",
        f"- Total subscriber rewards: ${format_num(row['subscriber_rewards'])}",
    ]
