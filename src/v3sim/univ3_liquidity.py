"""
Liquidity <-> token amount conversion for a price range.

Given a range [sqrt_a, sqrt_b] and the pool's current sqrt price:
- price below the range: the position holds only token0
- price above the range: the position holds only token1
- price inside the range: both, and the scarcer token limits liquidity
"""

from __future__ import annotations
from dataclasses import dataclass

from .univ3_math import round_to_spacing, tick_to_sqrt_price
from .univ3_pool import V3Pool


@dataclass(frozen=True)
class Position:
    """LP position sized against a pool snapshot."""
    pool_id: str
    lower_tick: int
    upper_tick: int
    liquidity: float
    deposited0: float
    deposited1: float


def _ordered(sqrt_a: float, sqrt_b: float) -> tuple[float, float]:
    if sqrt_a > sqrt_b:
        return sqrt_b, sqrt_a
    return sqrt_a, sqrt_b


def liquidity_from_amounts(
    sqrt_p: float, sqrt_a: float, sqrt_b: float, amt0: float, amt1: float
) -> float:
    """
    Maximum liquidity the amounts can provide over [sqrt_a, sqrt_b].

    In range, liquidity is computed from each token independently and the
    smaller value wins; the excess of the other token is left unused.
    An empty range (sqrt_a == sqrt_b) provides no liquidity.
    """
    sqrt_a, sqrt_b = _ordered(sqrt_a, sqrt_b)
    if sqrt_a == sqrt_b:
        return 0.0

    if sqrt_p <= sqrt_a:
        return amt0 / (1.0 / sqrt_a - 1.0 / sqrt_b)
    if sqrt_p >= sqrt_b:
        return amt1 / (sqrt_b - sqrt_a)

    l0 = amt0 / (1.0 / sqrt_p - 1.0 / sqrt_b)
    l1 = amt1 / (sqrt_p - sqrt_a)
    return min(l0, l1)


def amounts_from_liquidity(
    sqrt_p: float, sqrt_a: float, sqrt_b: float, liquidity: float
) -> tuple[float, float]:
    """
    Token amounts (amt0, amt1) backing `liquidity` over [sqrt_a, sqrt_b].
    """
    sqrt_a, sqrt_b = _ordered(sqrt_a, sqrt_b)
    if sqrt_a == sqrt_b:
        return 0.0, 0.0

    if sqrt_p <= sqrt_a:
        return liquidity * (1.0 / sqrt_a - 1.0 / sqrt_b), 0.0
    if sqrt_p >= sqrt_b:
        return 0.0, liquidity * (sqrt_b - sqrt_a)
    return liquidity * (1.0 / sqrt_p - 1.0 / sqrt_b), liquidity * (sqrt_p - sqrt_a)


def open_position(
    pool: V3Pool, lower_tick: int, upper_tick: int, amt0: float, amt1: float
) -> Position:
    """
    Size a deposit into [lower_tick, upper_tick) at the pool's current price.

    Bounds are aligned down to the pool's tick spacing. The recorded deposits
    are the amounts the liquidity actually uses, which may be less than offered.
    """
    lower = round_to_spacing(min(lower_tick, upper_tick), pool.tick_spacing)
    upper = round_to_spacing(max(lower_tick, upper_tick), pool.tick_spacing)
    sqrt_a = tick_to_sqrt_price(lower)
    sqrt_b = tick_to_sqrt_price(upper)

    liquidity = liquidity_from_amounts(pool.sqrt_price, sqrt_a, sqrt_b, amt0, amt1)
    used0, used1 = amounts_from_liquidity(pool.sqrt_price, sqrt_a, sqrt_b, liquidity)
    return Position(
        pool_id=pool.id,
        lower_tick=lower,
        upper_tick=upper,
        liquidity=liquidity,
        deposited0=used0,
        deposited1=used1,
    )


def position_amounts(pool: V3Pool, position: Position) -> tuple[float, float]:
    """Current token amounts of `position` at the pool's price."""
    return amounts_from_liquidity(
        pool.sqrt_price,
        tick_to_sqrt_price(position.lower_tick),
        tick_to_sqrt_price(position.upper_tick),
        position.liquidity,
    )
