"""
Liquidity depth curve construction.

Goal:
Given a pool's tick-level liquidity map, compute how much input the pool
absorbs for a given price move up/down.

- liquidity_net is the change in active liquidity when crossing a tick upward.
- the active liquidity profile is the cumulative sum of liquidity_net in tick order.
"""

from __future__ import annotations
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from .config import DefaultSimConfig
from .univ3_math import (
    dx_from_to,
    dy_from_to,
    pct_move_to_price,
    price_to_sqrt_price,
    tick_to_price,
    tick_to_sqrt_price,
)
from .univ3_pool import BoundaryIndex, V3Pool


def build_active_liquidity_profile(pool: V3Pool) -> pd.DataFrame:
    """
    Build the active liquidity profile of a pool.

    Returns dataframe with one row per initialized tick:
    - tick
    - price
    - sqrt_price
    - liquidity_net
    - active_liquidity (liquidity active from this tick up to the next one)
    """
    # duplicate indices are merged into one boundary
    bidx = BoundaryIndex(pool.ticks)
    ticks = np.asarray(bidx.keys, dtype=np.int64)

    df = pd.DataFrame(
        {
            "tick": ticks,
            "price": np.array([tick_to_price(int(t)) for t in ticks], dtype=float),
            "sqrt_price": np.array([tick_to_sqrt_price(int(t)) for t in ticks], dtype=float),
            "liquidity_net": np.array([bidx.net_at(int(t)) for t in ticks], dtype=float),
        }
    )
    df["active_liquidity"] = df["liquidity_net"].cumsum()
    return df


def _input_to_reach(pool: V3Pool, profile: pd.DataFrame, sqrt_target: float) -> float:
    sqrt_p = pool.sqrt_price
    liquidity = pool.liquidity
    amount = 0.0

    if sqrt_target >= sqrt_p:
        above = profile[profile["tick"] > pool.tick_current]
        lo = sqrt_p
        for row in above.itertuples(index=False):
            if row.sqrt_price >= sqrt_target:
                break
            amount += dy_from_to(max(liquidity, 0.0), lo, row.sqrt_price)
            lo = row.sqrt_price
            liquidity += row.liquidity_net
        return amount + dy_from_to(max(liquidity, 0.0), lo, sqrt_target)

    below = profile[profile["tick"] <= pool.tick_current].iloc[::-1]
    hi = sqrt_p
    for row in below.itertuples(index=False):
        if row.sqrt_price <= sqrt_target:
            break
        amount += dx_from_to(max(liquidity, 0.0), row.sqrt_price, hi)
        hi = row.sqrt_price
        liquidity -= row.liquidity_net
    return amount + dx_from_to(max(liquidity, 0.0), sqrt_target, hi)


def depth_curve_from_profile(
    pool: V3Pool,
    profile: Optional[pd.DataFrame] = None,
    pct_moves: Optional[Iterable[float]] = None,
    config: DefaultSimConfig = DefaultSimConfig(),
) -> pd.DataFrame:
    """
    Compute the depth curve of a pool:
    for each pct_move, the input (before fees) needed to move the price from
    current to current * (1 + pct_move).

    Upward moves are paid in token1, downward moves in token0.

    Returns columns:
    - pct_move
    - price_target
    - token_in (symbol)
    - amount_in
    """
    if profile is None:
        profile = build_active_liquidity_profile(pool)
    if pct_moves is None:
        pct_moves = config.pct_moves

    current_price = pool.price
    out = []
    for pm in np.asarray(list(pct_moves), dtype=float):
        price_target = pct_move_to_price(current_price, float(pm))
        if current_price <= 0 or price_target <= 0:
            amount = 0.0
        else:
            amount = _input_to_reach(pool, profile, price_to_sqrt_price(price_target))
        token_in = pool.token1.symbol if pm >= 0 else pool.token0.symbol
        out.append(
            {"pct_move": float(pm), "price_target": float(price_target), "token_in": token_in, "amount_in": float(amount)}
        )
    return pd.DataFrame(out, columns=["pct_move", "price_target", "token_in", "amount_in"])
