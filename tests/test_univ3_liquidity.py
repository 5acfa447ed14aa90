import pytest

from v3sim.univ3_liquidity import (
    Position,
    amounts_from_liquidity,
    liquidity_from_amounts,
    open_position,
    position_amounts,
)
from v3sim.univ3_math import tick_to_sqrt_price

SQRT_A = 2.0
SQRT_B = 3.0


class TestLiquidityFromAmounts:

    def test_below_range_uses_token0_only(self):
        L = liquidity_from_amounts(1.5, SQRT_A, SQRT_B, 10.0, 999.0)
        assert L == pytest.approx(10.0 / (1 / SQRT_A - 1 / SQRT_B))

    def test_above_range_uses_token1_only(self):
        L = liquidity_from_amounts(3.5, SQRT_A, SQRT_B, 999.0, 10.0)
        assert L == pytest.approx(10.0 / (SQRT_B - SQRT_A))

    def test_in_range_takes_limiting_side(self):
        sqrt_p = 2.5
        l0 = 10.0 / (1 / sqrt_p - 1 / SQRT_B)
        l1 = 10.0 / (sqrt_p - SQRT_A)
        assert liquidity_from_amounts(sqrt_p, SQRT_A, SQRT_B, 10.0, 10.0) == pytest.approx(min(l0, l1))

    def test_swapped_bounds(self):
        assert liquidity_from_amounts(2.5, SQRT_B, SQRT_A, 4.0, 7.0) == liquidity_from_amounts(
            2.5, SQRT_A, SQRT_B, 4.0, 7.0
        )

    def test_empty_range(self):
        assert liquidity_from_amounts(2.0, 2.0, 2.0, 1.0, 1.0) == 0.0
        assert amounts_from_liquidity(2.0, 2.0, 2.0, 100.0) == (0.0, 0.0)


class TestRoundTrip:

    def test_midpoint_amounts_to_liquidity_to_amounts(self):
        sqrt_p = (SQRT_A + SQRT_B) / 2
        L = 12_345.0
        amt0, amt1 = amounts_from_liquidity(sqrt_p, SQRT_A, SQRT_B, L)
        assert amt0 > 0 and amt1 > 0
        assert liquidity_from_amounts(sqrt_p, SQRT_A, SQRT_B, amt0, amt1) == pytest.approx(L, rel=1e-12)

        back0, back1 = amounts_from_liquidity(
            sqrt_p, SQRT_A, SQRT_B, liquidity_from_amounts(sqrt_p, SQRT_A, SQRT_B, amt0, amt1)
        )
        assert back0 == pytest.approx(amt0, rel=1e-12)
        assert back1 == pytest.approx(amt1, rel=1e-12)

    @pytest.mark.parametrize("sqrt_p", [1.0, 2.0, 3.0, 4.0])
    def test_out_of_range(self, sqrt_p):
        L = 777.0
        amt0, amt1 = amounts_from_liquidity(sqrt_p, SQRT_A, SQRT_B, L)
        assert amt0 == 0.0 or amt1 == 0.0
        assert liquidity_from_amounts(sqrt_p, SQRT_A, SQRT_B, amt0, amt1) == pytest.approx(L, rel=1e-12)


class TestPosition:

    def test_open_position_in_range(self, eth_usdc_pool):
        tick0 = eth_usdc_pool.tick_current
        pos = open_position(eth_usdc_pool, tick0 - 605, tick0 + 601, 1.0, 10_000.0)
        assert isinstance(pos, Position)
        assert pos.pool_id == eth_usdc_pool.id
        assert (pos.lower_tick, pos.upper_tick) == (tick0 - 660, tick0 + 600)
        assert pos.liquidity > 0
        # WETH is the scarce side here, so all of it is used
        assert pos.deposited0 == pytest.approx(1.0)
        assert 0 < pos.deposited1 < 10_000.0

    def test_open_position_below_price(self, eth_usdc_pool):
        tick0 = eth_usdc_pool.tick_current
        pos = open_position(eth_usdc_pool, tick0 - 120, tick0 - 600, 5.0, 5_000.0)
        assert pos.lower_tick < pos.upper_tick
        assert pos.deposited0 == 0.0
        assert pos.deposited1 == pytest.approx(5_000.0)

    def test_position_amounts(self, eth_usdc_pool):
        tick0 = eth_usdc_pool.tick_current
        pos = open_position(eth_usdc_pool, tick0 - 600, tick0 + 600, 2.0, 6_000.0)
        amt0, amt1 = position_amounts(eth_usdc_pool, pos)
        assert amt0 == pytest.approx(pos.deposited0)
        assert amt1 == pytest.approx(pos.deposited1)
        assert amounts_from_liquidity(
            eth_usdc_pool.sqrt_price,
            tick_to_sqrt_price(pos.lower_tick),
            tick_to_sqrt_price(pos.upper_tick),
            pos.liquidity,
        ) == (amt0, amt1)
