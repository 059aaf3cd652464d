import math
import pytest
from rewardpool.config import ONE_MONTH_SECONDS, TierConfig, CurveConfig, FeeConfig
from rewardpool.engine import SubscriptionModel, RewardStatus
from rewardpool.errors import DuplicateSubscriberError, InvalidStateError

START = 1_700_000_000


def make_model(**kwargs):
    tier = TierConfig(reward_basis_points=2000, initial_mint_price=0, price_per_period=5)
    curve = CurveConfig(num_periods=60, formula_base=1.2, start_timestamp=START, min_multiplier=0)
    fees = FeeConfig(protocol_bps=100, client_bps=500)
    return SubscriptionModel(tier, curve, fees, **kwargs)


def test_single_subscriber_worked_example():
    model = make_model()
    model.add_subscriber("alice", START, 360)

    quote = model.quote(360)
    assert pytest.approx(quote.payment) == 60
    assert pytest.approx(quote.protocol_fee) == 0.6
    assert pytest.approx(quote.client_fee) == 3.0
    assert pytest.approx(quote.net_payment) == 56.4
    assert pytest.approx(quote.reward_amount) == 11.28

    alice = model.state.subscribers["alice"]
    assert pytest.approx(alice.multiplier) == 1.2 ** 60
    assert pytest.approx(alice.reward_shares) == 11.28 * 1.2 ** 60
    assert alice.total_spent == pytest.approx(60)
    assert alice.expires_at == START + 12 * ONE_MONTH_SECONDS
    assert model.state.total_shares == alice.reward_shares

    # Sole subscriber owns the whole pool
    assert model.calculate_rewards("alice", START) == model.state.reward_pool
    assert model.calculate_rewards("alice", START + 10 * ONE_MONTH_SECONDS) == pytest.approx(11.28)

    assert pytest.approx(model.state.creator_balance) == 56.4 - 11.28
    assert pytest.approx(model.state.protocol_earnings) == 0.6
    assert pytest.approx(model.state.client_earnings) == 3.0


def test_multiplier_boundaries():
    model = make_model()
    horizon = START + 60 * ONE_MONTH_SECONDS

    assert model.calculate_multiplier(horizon) == 0
    assert pytest.approx(model.calculate_multiplier(horizon - ONE_MONTH_SECONDS)) == 1.2
    assert model.calculate_multiplier(horizon + 5 * ONE_MONTH_SECONDS) == 0

    # Partial months round down to the period they started in
    assert model.calculate_multiplier(START + ONE_MONTH_SECONDS - 1) == model.calculate_multiplier(START)
    assert pytest.approx(model.calculate_multiplier(START + ONE_MONTH_SECONDS)) == 1.2 ** 59


def test_multiplier_respects_floor():
    tier = TierConfig(reward_basis_points=2000, initial_mint_price=0, price_per_period=5)
    curve = CurveConfig(num_periods=10, formula_base=1.1, start_timestamp=START, min_multiplier=1.5)
    model = SubscriptionModel(tier, curve, FeeConfig(protocol_bps=0, client_bps=0))

    assert model.calculate_multiplier(START + 9 * ONE_MONTH_SECONDS) == 1.5
    assert model.calculate_multiplier(START + 10 * ONE_MONTH_SECONDS) == 1.5
    assert pytest.approx(model.calculate_multiplier(START)) == 1.1 ** 10


def test_curve_too_long_to_represent_is_rejected():
    with pytest.raises(ValueError):
        CurveConfig(num_periods=4000, formula_base=1.2, start_timestamp=START)

    # Largest horizons that still fit in a float are accepted
    CurveConfig(num_periods=3800, formula_base=1.2, start_timestamp=START)


def test_admission_long_before_curve_start():
    model = make_model()

    # Earlier admissions still earn a larger multiplier
    assert pytest.approx(model.calculate_multiplier(START - ONE_MONTH_SECONDS)) == 1.2 ** 61

    early = START - 5000 * ONE_MONTH_SECONDS
    with pytest.raises(InvalidStateError):
        model.calculate_multiplier(early)
    with pytest.raises(InvalidStateError):
        model.add_subscriber("early", early, 360)
    assert not model.state.subscribers
    assert model.state.reward_pool == 0


def test_longer_subscription_earns_proportional_shares():
    model = make_model()
    one_year = model.add_subscriber("one-year", START, 360)
    two_year = model.add_subscriber("two-year", START, 720)

    # Twice the payment and twice the length scaling
    assert pytest.approx(two_year.reward_shares) == 4 * one_year.reward_shares


def test_pool_totals_monotonic_and_conserved():
    model = make_model()
    contributions = []
    prev_pool, prev_shares = 0.0, 0.0

    for i in range(24):
        sub = model.add_subscriber(f"sub-{i}", START + i * ONE_MONTH_SECONDS, 30 * (i % 5 + 1))
        contributions.append(sub.reward_amount)

        assert model.state.reward_pool >= prev_pool
        assert model.state.total_shares >= prev_shares
        prev_pool, prev_shares = model.state.reward_pool, model.state.total_shares

    assert pytest.approx(model.state.reward_pool) == math.fsum(contributions)
    pool_drift, share_drift = model.state.drift()
    assert pool_drift < 1e-9
    assert share_drift < 1e-9 * model.state.total_shares


def test_rewards_zero_before_subscription_start():
    model = make_model()
    model.add_subscriber("early", START, 360)
    model.add_subscriber("late", START + 3 * ONE_MONTH_SECONDS, 360)

    before = START + 3 * ONE_MONTH_SECONDS - 1
    assert model.calculate_rewards("late", before) == 0
    assert model.reward_outcome("late", before).status is RewardStatus.NOT_STARTED
    assert model.calculate_rewards("early", before) > 0


def test_reward_outcomes_are_tagged():
    model = make_model()
    assert model.reward_outcome("nobody", START).status is RewardStatus.UNKNOWN
    assert model.calculate_rewards("nobody", START) == 0

    # Admitted after the curve horizon with a zero floor: no shares anywhere
    late = START + 61 * ONE_MONTH_SECONDS
    model.add_subscriber("after-horizon", late, 360)
    outcome = model.reward_outcome("after-horizon", late)
    assert outcome.status is RewardStatus.NO_SHARES
    assert outcome.amount == 0
    assert not outcome.computed

    model.add_subscriber("early", START, 360)
    outcome = model.reward_outcome("after-horizon", late)
    assert outcome.computed
    assert outcome.amount == 0


def test_rewards_sum_to_pool():
    model = make_model()
    for i in range(10):
        model.add_subscriber(f"sub-{i}", START + i * ONE_MONTH_SECONDS, 360)

    now = START + 10 * ONE_MONTH_SECONDS
    total = sum(model.calculate_rewards(f"sub-{i}", now) for i in range(10))
    assert pytest.approx(total) == model.state.reward_pool


def test_rewards_grow_with_pool_but_weight_is_frozen():
    model = make_model()
    model.add_subscriber("first", START, 360)
    shares = model.state.subscribers["first"].reward_shares
    now = START + 2 * ONE_MONTH_SECONDS

    before = model.calculate_rewards("first", now)
    model.add_subscriber("second", now, 360)
    after = model.calculate_rewards("first", now)

    assert model.state.subscribers["first"].reward_shares == shares
    assert after > before


def test_expired_subscriber_keeps_pool_share():
    # Open question: rewards are not cut off at expiry
    model = make_model()
    model.add_subscriber("short", START, 60)
    expired = model.state.subscribers["short"].expires_at + ONE_MONTH_SECONDS

    assert not model.state.subscribers["short"].is_active(expired)
    assert model.calculate_rewards("short", expired) == pytest.approx(model.state.reward_pool)


def test_roi():
    model = make_model()
    model.add_subscriber("alice", START, 360)

    result = model.calculate_roi("alice", START)
    assert result.spent == pytest.approx(60)
    assert result.rewards == pytest.approx(11.28)
    assert result.roi == pytest.approx((11.28 / 60 - 1) * 100)

    unknown = model.calculate_roi("nobody", START)
    assert (unknown.roi, unknown.spent, unknown.rewards) == (0, 0, 0)


def test_roi_zero_when_rewards_match_spend():
    # Full pool share and no fees: rewards equal the payment exactly
    tier = TierConfig(reward_basis_points=10_000, initial_mint_price=0, price_per_period=5)
    curve = CurveConfig(num_periods=60, formula_base=1.2, start_timestamp=START)
    model = SubscriptionModel(tier, curve, FeeConfig(protocol_bps=0, client_bps=0))
    model.add_subscriber("alice", START, 360)

    assert model.calculate_rewards("alice", START) == model.state.subscribers["alice"].total_spent
    assert model.calculate_roi("alice", START).roi == 0


def test_roi_undefined_for_zero_spend():
    tier = TierConfig(reward_basis_points=2000, initial_mint_price=0, price_per_period=0)
    curve = CurveConfig(num_periods=60, formula_base=1.2, start_timestamp=START)
    model = SubscriptionModel(tier, curve, FeeConfig(protocol_bps=100, client_bps=500))
    model.add_subscriber("free", START, 360)

    with pytest.raises(InvalidStateError):
        model.calculate_roi("free", START)


def test_duplicate_subscriber_rejected():
    model = make_model()
    model.add_subscriber("alice", START, 360)
    pool = model.state.reward_pool

    with pytest.raises(DuplicateSubscriberError):
        model.add_subscriber("alice", START + ONE_MONTH_SECONDS, 360)
    assert model.state.reward_pool == pool


def test_duplicate_overwrite_double_counts():
    model = make_model(allow_overwrite=True)
    model.add_subscriber("alice", START, 360)
    model.add_subscriber("alice", START, 360)

    assert len(model.state.subscribers) == 1
    assert pytest.approx(model.state.reward_pool) == 2 * 11.28
    pool_drift, share_drift = model.state.drift()
    assert pytest.approx(pool_drift) == 11.28
    assert share_drift > 0


def test_non_positive_subscription_rejected():
    model = make_model()
    with pytest.raises(ValueError):
        model.add_subscriber("alice", START, 0)
    assert not model.state.subscribers


def test_reset_discards_state():
    model = make_model()
    model.add_subscriber("alice", START, 360)
    old_state = model.state

    state = model.reset()
    assert state is model.state
    assert state is not old_state
    assert not state.subscribers
    assert state.reward_pool == 0
    assert state.total_shares == 0
    assert model.calculate_rewards("alice", START) == 0


def run_tests():
    test_single_subscriber_worked_example()
    test_multiplier_boundaries()
    test_pool_totals_monotonic_and_conserved()
    print("All tests passed!")

if __name__ == "__main__":
    run_tests()
