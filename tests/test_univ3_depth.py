import dataclasses

import pytest

from v3sim.univ3_depth import build_active_liquidity_profile, depth_curve_from_profile
from v3sim.univ3_execution import simulate_swap
from v3sim.univ3_pool import make_v3_pool


def test_profile_columns_and_cumsum(eth_usdc_pool):
    prof = build_active_liquidity_profile(eth_usdc_pool)
    assert list(prof.columns) == ["tick", "price", "sqrt_price", "liquidity_net", "active_liquidity"]
    assert prof["tick"].is_monotonic_increasing
    assert list(prof["active_liquidity"]) == [600_000.0, 1_600_000.0, 3_200_000.0, 1_600_000.0, 600_000.0, 0.0]
    row = prof[prof["tick"] <= eth_usdc_pool.tick_current].iloc[-1]
    assert row["active_liquidity"] == eth_usdc_pool.liquidity


def test_depth_curve_shape(eth_usdc_pool):
    curve = depth_curve_from_profile(eth_usdc_pool, pct_moves=[-0.02, -0.01, 0.01, 0.02])
    assert list(curve.columns) == ["pct_move", "price_target", "token_in", "amount_in"]
    assert list(curve["token_in"]) == ["WETH", "WETH", "USDC", "USDC"]
    assert (curve["amount_in"] > 0).all()
    down = curve[curve["pct_move"] < 0].sort_values("pct_move")
    up = curve[curve["pct_move"] > 0].sort_values("pct_move")
    assert down["amount_in"].is_monotonic_decreasing
    assert up["amount_in"].is_monotonic_increasing


@pytest.mark.parametrize("pct_move", [-0.08, -0.01, 0.01, 0.05])
def test_depth_matches_swap_engine(eth_usdc_pool, pct_move):
    fee_free = dataclasses.replace(eth_usdc_pool, fee=0.0)
    curve = depth_curve_from_profile(fee_free, pct_moves=[pct_move])
    amount = float(curve["amount_in"].iloc[0])
    res = simulate_swap(fee_free, amount, zero_for_one=pct_move < 0)
    assert res.new_sqrt ** 2 == pytest.approx(float(curve["price_target"].iloc[0]), rel=1e-9)


def test_empty_pool(tokens):
    pool = make_v3_pool("empty", tokens.get("WETH"), tokens.get("USDC"), -1.0, 0.003, 60)
    assert build_active_liquidity_profile(pool).empty
    curve = depth_curve_from_profile(pool)
    assert (curve["amount_in"] == 0.0).all()
