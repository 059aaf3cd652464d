import argparse
import logging
import time

from rewardpool.config import ONE_YEAR_DAYS, default_configs
from rewardpool.engine import SubscriptionModel
from rewardpool.projection import ProjectionConfig, project_rewards
from rewardpool.report import compare_subscription_lengths, format_num, summary_lines
from rewardpool.simulator import ScenarioSimulator

SUBSCRIPTION_LENGTHS = [
    60,                  # 2 months
    180,                 # 6 months
    ONE_YEAR_DAYS,       # 1 year
    ONE_YEAR_DAYS * 2,   # 2 years
    ONE_YEAR_DAYS * 25,  # all-in
]


def parse_args():
    parser = argparse.ArgumentParser(description="Subscription reward pool scenarios")
    parser.add_argument("--growth", type=float, default=0.15, help="Monthly growth rate of regular subscribers")
    parser.add_argument("--months", type=int, default=None, help="Months to simulate (defaults to the curve horizon)")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args()


def run_scenarios(growth: float, months=None) -> None:
    start_time = int(time.time())
    tier, curve, fees = default_configs(start_time)

    simulator = ScenarioSimulator(SubscriptionModel(tier, curve, fees))
    summary = compare_subscription_lengths(
        simulator,
        SUBSCRIPTION_LENGTHS,
        start_timestamp=start_time,
        months=months or curve.num_periods,
        monthly_growth_rate=growth
    )

    print("\nAnalyzing scenarios with different subscription lengths:")
    for row in summary.to_dict("records"):
        print()
        print("\n".join(summary_lines(row)))


def run_projection() -> None:
    result = project_rewards(ProjectionConfig(
        initial_subscribers=100,
        annual_growth_multiple=10,
        months=24,
        subscriber_months=24
    ))

    print("\nGrowth and Economics Summary:")
    print(f"Initial Subscribers: {result.monthly[0].subscribers}")
    print(f"Final Subscribers: {result.monthly[-1].subscribers}")
    print(f"Total Paid: ${format_num(result.total_paid)}")
    print(f"Total Rewards Earned: ${format_num(result.total_rewards)}")
    print(f"ROI: {format_num(result.roi)}%")

    print("\nDetailed Monthly Breakdown (first 12 months):")
    for month in result.monthly[:12]:
        print(
            f"Month {month.month}: {month.subscribers} subs, "
            f"{month.multiplier:.2f}x multiplier, ${month.rewards_earned:.2f} earned"
        )


if __name__ == "__main__":
    args = parse_args()
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    run_scenarios(args.growth, args.months)
    run_projection()
