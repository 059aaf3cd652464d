import streamlit as st

st.set_page_config(
    page_title="Subscription Reward Pool Simulation",
    layout="wide",
)

st.markdown("""
# Subscription Reward Pool Overview

This simulation models a subscription-funded reward economy. Subscribers pay a recurring fee, a share of the
net revenue funds a shared reward pool, and each subscriber's claim on that pool is weighted by how early they
joined, how much they paid and how long they committed for. Use it to explore how fee splits, growth, the decay
curve and subscription length affect subscriber ROI and creator, protocol and client earnings before launch.

## Core Components

### 1. Payment Split
Every admission charges a gross payment:

- payment = initial mint price + months * price per period (months = days / 30)
- protocol fee = payment * protocol bps / 10000
- client fee = payment * client bps / 10000
- net payment = payment - protocol fee - client fee
- reward amount = net payment * reward bps / 10000, added to the reward pool
- the rest of the net payment is creator revenue

### 2. Early Adopter Multiplier
Periods are fixed 30 day months counted from the curve start:

- periods elapsed = floor((t - start) / 30 days)
- multiplier = max(base ^ (N - periods elapsed), floor) while periods elapsed < N
- multiplier = floor once the N period horizon has passed

The multiplier is evaluated once, when the subscriber is admitted, and frozen into their shares.

### 3. Reward Shares
- shares = reward amount * multiplier * (months / 12)
- rewards = reward pool * shares / total shares

A subscriber's weight never changes, but the pool and the total share count keep growing as new subscribers
join, so their rewards are a live view of an ever growing pool. Rewards are not cut off when a subscription
expires.

### 4. ROI
- ROI = (rewards / payment - 1) * 100

## Simulation Flow
Each scenario starts from an empty pool:

1. **Seed** 50 regular subscribers with 12 month subscriptions at the start time
2. **Test subscriber** admitted at the start time with the chosen subscription length
3. **Every month**
   - new regular subscribers = floor(regular subscribers * monthly growth)
   - average ROI over the regular population
   - test subscriber ROI and rewards
   - cumulative creator, protocol and client earnings

The test subscriber counts toward total pool rewards but not toward growth or the regular averages.
""")
