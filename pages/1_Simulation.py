import time

import streamlit as st
import altair as alt
import pandas as pd
from rewardpool.config import (
    ONE_YEAR_DAYS,
    TierConfig,
    CurveConfig,
    FeeConfig,
    ScenarioSettings
)
from rewardpool.engine import SubscriptionModel
from rewardpool.errors import RewardPoolError
from rewardpool.projection import ProjectionConfig, project_rewards
from rewardpool.report import compare_subscription_lengths, snapshots_to_frame
from rewardpool.simulator import ScenarioSimulator

st.set_page_config(layout="wide")

def create_simulation_inputs():
    st.sidebar.header("Simulation Parameters")

    with st.sidebar.expander("Tier Parameters"):
        reward_bps = st.slider(
            "Reward Pool Share (bps)",
            0, 10_000, 2_000, 100,
            help="Share of the net payment routed to the reward pool."
        )
        initial_mint_price = st.number_input(
            "Initial Mint Price",
            value=0.0,
            min_value=0.0,
            step=1.0,
            help="One-time fee charged at admission.",
            key="initial_mint_price"
        )
        price_per_period = st.number_input(
            "Price per Period",
            value=5.0,
            min_value=0.0,
            step=1.0,
            help="Fee per 30 day period.",
            key="price_per_period"
        )

    with st.sidebar.expander("Fee Parameters"):
        protocol_bps = st.slider("Protocol Fee (bps)", 0, 2_000, 100, 10)
        client_bps = st.slider("Client Fee (bps)", 0, 2_000, 500, 10)

    with st.sidebar.expander("Curve Parameters"):
        num_periods = st.number_input(
            "Curve Horizon (months)",
            value=60,
            min_value=1,
            step=1,
            help="Number of months before the multiplier reaches its floor."
        )
        formula_base = st.slider(
            "Formula Base",
            1.01, 2.0, 1.2, 0.01,
            help="Per-month decay base. Higher values reward early subscribers more strongly."
        )
        min_multiplier = st.number_input("Minimum Multiplier", value=0.0, min_value=0.0, step=0.1)

    with st.sidebar.expander("Scenario Parameters"):
        months = st.number_input("Months to Simulate", value=60, min_value=1, step=1, key="months")
        growth = st.slider(
            "Monthly Growth Rate",
            0.0, 0.5, 0.15, 0.01,
            help="New regular subscribers each month as a fraction of the current regular population."
        )
        test_days = st.number_input(
            "Test Subscription (days)",
            value=ONE_YEAR_DAYS,
            min_value=1,
            step=30
        )
        initial_subscribers = st.number_input("Initial Subscribers", value=50, min_value=1, step=10)

    with st.sidebar.expander("Projection Parameters"):
        annual_growth = st.slider(
            "Annual Growth Multiple",
            1.0, 20.0, 10.0, 0.5,
            help="Subscriber growth per year used by the closed-form projection.",
            key="annual_growth_multiple"
        )

    return {
        "tier": TierConfig(
            reward_basis_points=reward_bps,
            initial_mint_price=initial_mint_price,
            price_per_period=price_per_period
        ),
        "fees": FeeConfig(protocol_bps=protocol_bps, client_bps=client_bps),
        "curve": {
            "num_periods": int(num_periods),
            "formula_base": formula_base,
            "min_multiplier": min_multiplier
        },
        "scenario": {
            "months": int(months),
            "growth": growth,
            "test_days": test_days,
            "initial_subscribers": int(initial_subscribers)
        },
        "projection": {
            "annual_growth_multiple": annual_growth
        }
    }

def create_simulator(config, start_time):
    curve = CurveConfig(start_timestamp=start_time, **config["curve"])
    model = SubscriptionModel(config["tier"], curve, config["fees"])
    settings = ScenarioSettings(initial_subscribers=config["scenario"]["initial_subscribers"])
    return ScenarioSimulator(model, settings)

def create_earnings_tab(df):
    st.header("Earnings")

    col1, col2 = st.columns(2)

    with col1:
        earnings_chart = alt.Chart(df).transform_fold(
            ['creator_earnings', 'protocol_earnings', 'client_earnings', 'subscriber_rewards'],
            as_=['metric', 'value']
        ).mark_line().encode(
            x=alt.X('month:Q', title='Month'),
            y=alt.Y('value:Q', title='Cumulative Amount'),
            color=alt.Color('metric:N', title='Recipient')
        ).properties(
            title='Cumulative Earnings',
            width=400,
            height=300
        )
        st.altair_chart(earnings_chart, use_container_width=True)

    with col2:
        subs_chart = alt.Chart(df).mark_line().encode(
            x=alt.X('month:Q', title='Month'),
            y=alt.Y('subscribers:Q', title='Regular Subscribers'),
        ).properties(
            title='Subscriber Growth',
            width=400,
            height=300
        )
        st.altair_chart(subs_chart, use_container_width=True)

def create_roi_tab(df):
    st.header("Subscriber ROI")

    roi_chart = alt.Chart(df).transform_fold(
        ['avg_roi', 'test_subscriber_roi'],
        as_=['metric', 'value']
    ).mark_line().encode(
        x=alt.X('month:Q', title='Month'),
        y=alt.Y('value:Q', title='ROI %'),
        color=alt.Color('metric:N', title='Subscriber')
    ).properties(
        title='Average vs Test Subscriber ROI',
        width=800,
        height=350
    )
    st.altair_chart(roi_chart, use_container_width=True)

def create_comparison_tab(simulator, config, start_time):
    st.header("Subscription Length Comparison")

    lengths = [60, 180, ONE_YEAR_DAYS, ONE_YEAR_DAYS * 2, ONE_YEAR_DAYS * 25]
    try:
        summary = compare_subscription_lengths(
            simulator,
            lengths,
            start_timestamp=start_time,
            months=config["scenario"]["months"],
            monthly_growth_rate=config["scenario"]["growth"]
        )
    except (ValueError, RewardPoolError) as e:
        st.error(str(e))
        return
    st.dataframe(summary, use_container_width=True)

def create_projection_tab(config):
    st.header("Closed-form Projection")

    try:
        result = project_rewards(ProjectionConfig(
            monthly_fee=config["tier"].price_per_period,
            reward_pool_bps=config["tier"].reward_basis_points,
            client_fee_bps=config["fees"].client_bps,
            protocol_fee_bps=config["fees"].protocol_bps,
            annual_growth_multiple=config["projection"]["annual_growth_multiple"],
            months=config["scenario"]["months"],
            subscriber_months=config["scenario"]["months"],
            formula_base=config["curve"]["formula_base"],
            min_multiplier=config["curve"]["min_multiplier"]
        ))
    except (ValueError, RewardPoolError) as e:
        st.error(str(e))
        return

    col1, col2, col3 = st.columns(3)
    col1.metric("Total Paid", f"${result.total_paid:,.2f}")
    col2.metric("Total Rewards", f"${result.total_rewards:,.2f}")
    col3.metric("ROI", f"{result.roi:,.2f}%")

    proj_df = pd.DataFrame([vars(m) for m in result.monthly])
    chart = alt.Chart(proj_df).mark_line().encode(
        x=alt.X('month:Q', title='Month'),
        y=alt.Y('subscribers:Q', title='Subscribers'),
    ).properties(
        title='Projected Subscribers',
        width=800,
        height=300
    )
    st.altair_chart(chart, use_container_width=True)

def main():
    st.title("Subscription Reward Pool Simulation")

    inputs = create_simulation_inputs()

    if st.sidebar.button("Run Simulation"):
        start_time = int(time.time())
        try:
            simulator = create_simulator(inputs, start_time)
            simulator.simulate_scenario(
                start_timestamp=start_time,
                months=inputs["scenario"]["months"],
                monthly_growth_rate=inputs["scenario"]["growth"],
                test_subscription_days=inputs["scenario"]["test_days"]
            )
        except (ValueError, RewardPoolError) as e:
            st.error(str(e))
            st.stop()

        df = snapshots_to_frame(simulator.history).reset_index()

        tab1, tab2, tab3, tab4 = st.tabs(["Earnings", "ROI", "Subscription Lengths", "Projection"])

        with tab1:
            create_earnings_tab(df)

        with tab2:
            create_roi_tab(df)

        with tab3:
            create_comparison_tab(simulator, inputs, start_time)

        with tab4:
            create_projection_tab(inputs)

if __name__ == "__main__":
    main()
