"""
Swap execution simulator.

Purpose:
Walk a pool's initialized ticks to estimate the output of an exact-input swap.
This is a floating point preview used when a live on-chain quote is not
available, NOT a bit-exact reproduction of the Uniswap v3 contracts.

Known simplification:
when active liquidity drops to zero the walk stops and any remaining input is
dropped. It does not bridge an empty gap to the next initialized range.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable

import numpy as np
import pandas as pd

from .config import DefaultSimConfig
from .exceptions import SwapStepLimitError
from .logging import logger
from .univ3_math import dx_from_to, dy_from_to, price_to_tick, tick_to_sqrt_price
from .univ3_pool import BoundaryIndex, V3Pool

# Uniswap v3 tick domain; synthetic boundaries never leave it
MIN_TICK = -887272
MAX_TICK = 887272

# active liquidity this small relative to the book is float residue
LIQUIDITY_REL_TOL = 1e-12


@dataclass(frozen=True)
class SwapResult:
    """
    Hypothetical pool state after a swap. The input pool is left untouched.
    """
    amount_out: float
    new_sqrt: float
    new_tick: int
    new_l: float


@dataclass(frozen=True)
class SwapEvent:
    pool_id: str
    zero_for_one: bool
    amount_in: float
    amount_out: float
    price_after: float
    time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def _settle(liquidity: float, dust: float) -> float:
    return 0.0 if abs(liquidity) <= dust else liquidity


def simulate_swap(
    pool: V3Pool,
    amount_in: float,
    zero_for_one: bool,
    config: DefaultSimConfig = DefaultSimConfig(),
) -> SwapResult:
    """
    Simulate an exact-input swap against `pool`.

    Parameters
    ----------
    pool         : pool snapshot, read only.
    amount_in    : input amount in token0 (zero_for_one) or token1 units.
    zero_for_one : True sells token0 for token1 and moves the price down,
                   False sells token1 for token0 and moves the price up.
    config       : supplies the step limit and the synthetic boundary distance.

    Returns
    -------
    SwapResult with the accumulated output and the final sqrt price, tick and
    active liquidity.

    The fee is taken once from the whole input before any curve math. Between
    boundaries the price moves along the constant-liquidity curve; on reaching
    a boundary its liquidity_net is added (upward) or subtracted (downward).
    After a downward crossing of boundary b the tick becomes b - 1 so active
    liquidity stays equal to the sum of nets at or below the tick. That sum is
    read from exact prefix sums rather than accumulated step by step, so a
    fully drained book ends at exactly zero liquidity.

    Raises SwapStepLimitError when the walk does not finish within
    `config.max_swap_steps` boundary steps.
    """
    sqrt_p = pool.sqrt_price
    liquidity = pool.liquidity
    tick = pool.tick_current

    if amount_in <= 0 or liquidity <= 0 or sqrt_p <= 0:
        return SwapResult(amount_out=0.0, new_sqrt=sqrt_p, new_tick=tick, new_l=liquidity)

    remaining_in = amount_in * (1.0 - pool.fee)
    amount_out = 0.0
    bidx = BoundaryIndex(pool.ticks)
    far = pool.tick_spacing * config.far_tick_spacings
    # liquidity not explained by the tick list (hand-built snapshots); 0.0 for consistent pools
    base_l = liquidity - bidx.active_at(tick)
    dust = LIQUIDITY_REL_TOL * max(bidx.gross, abs(liquidity))

    steps = 0
    while remaining_in > 0 and liquidity > 0:
        if steps >= config.max_swap_steps:
            raise SwapStepLimitError(steps)
        steps += 1

        if zero_for_one:
            nxt = bidx.next_down(tick)
            if nxt is None:
                nxt = max(tick - far, MIN_TICK)
                if nxt >= tick:
                    break
            sqrt_next = tick_to_sqrt_price(nxt)
            dx_needed = dx_from_to(liquidity, sqrt_next, sqrt_p)

            if remaining_in < dx_needed:
                new_sqrt = 1.0 / (1.0 / sqrt_p + remaining_in / liquidity)
                amount_out += dy_from_to(liquidity, new_sqrt, sqrt_p)
                sqrt_p = new_sqrt
                tick = min(tick, max(nxt, price_to_tick(new_sqrt * new_sqrt)))
                remaining_in = 0.0
                break

            remaining_in -= dx_needed
            amount_out += dy_from_to(liquidity, sqrt_next, sqrt_p)
            sqrt_p = sqrt_next
            tick = nxt - 1
            liquidity = _settle(base_l + bidx.active_at(tick), dust)
        else:
            nxt = bidx.next_up(tick)
            if nxt is None:
                nxt = min(tick + far, MAX_TICK)
                if nxt <= tick:
                    break
            sqrt_next = tick_to_sqrt_price(nxt)
            dy_needed = dy_from_to(liquidity, sqrt_p, sqrt_next)

            if remaining_in < dy_needed:
                new_sqrt = sqrt_p + remaining_in / liquidity
                amount_out += dx_from_to(liquidity, sqrt_p, new_sqrt)
                sqrt_p = new_sqrt
                tick = max(tick, min(nxt - 1, price_to_tick(new_sqrt * new_sqrt)))
                remaining_in = 0.0
                break

            remaining_in -= dy_needed
            amount_out += dx_from_to(liquidity, sqrt_p, sqrt_next)
            sqrt_p = sqrt_next
            tick = nxt
            liquidity = _settle(base_l + bidx.active_at(tick), dust)

    if remaining_in > 0:
        logger.warning(
            "Pool %s: swap stopped at tick %d with liquidity %.6g, %.6g input left unfilled",
            pool.id, tick, liquidity, remaining_in,
        )
    logger.debug("Pool %s: swap finished after %d steps, out=%.6g", pool.id, steps, amount_out)

    tick = min(max(tick, MIN_TICK), MAX_TICK)
    return SwapResult(amount_out=amount_out, new_sqrt=sqrt_p, new_tick=tick, new_l=liquidity)


def quote_exact_input(
    pool: V3Pool,
    amount_in: float,
    zero_for_one: bool,
    config: DefaultSimConfig = DefaultSimConfig(),
) -> float:
    """Amount out only, for callers that display a quote."""
    return simulate_swap(pool, amount_in, zero_for_one, config).amount_out


def swap_event(pool: V3Pool, amount_in: float, zero_for_one: bool, result: SwapResult) -> SwapEvent:
    return SwapEvent(
        pool_id=pool.id,
        zero_for_one=zero_for_one,
        amount_in=float(amount_in),
        amount_out=result.amount_out,
        price_after=result.new_sqrt * result.new_sqrt,
    )


def price_impact_table(
    pool: V3Pool,
    trade_sizes: Iterable[float] | None = None,
    zero_for_one: bool = True,
    config: DefaultSimConfig = DefaultSimConfig(),
) -> pd.DataFrame:
    """
    Quote a range of trade sizes against the same pool snapshot.

    Returns
    -------
    DataFrame with columns:
    - trade_size
    - amount_out
    - exec_price   (token1 per token0 actually paid/received)
    - price_after  (token1 per token0 after the swap)
    - price_impact (price_after / price - 1)
    """
    if trade_sizes is None:
        trade_sizes = config.trade_sizes
    sizes = np.asarray(list(trade_sizes), dtype=float)
    price0 = pool.price

    out = []
    for q in sizes:
        res = simulate_swap(pool, float(q), zero_for_one, config)
        price_after = res.new_sqrt * res.new_sqrt
        if res.amount_out <= 0:
            exec_price = float("nan")
        elif zero_for_one:
            exec_price = res.amount_out / float(q)
        else:
            exec_price = float(q) / res.amount_out
        impact = price_after / price0 - 1.0 if price0 > 0 else float("nan")
        out.append(
            {
                "trade_size": float(q),
                "amount_out": float(res.amount_out),
                "exec_price": float(exec_price),
                "price_after": float(price_after),
                "price_impact": float(impact),
            }
        )
    return pd.DataFrame(out, columns=["trade_size", "amount_out", "exec_price", "price_after", "price_impact"])
