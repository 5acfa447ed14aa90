"""
Uniswap v3 math utilities.

Note:
- tick <-> price mapping assumes token1/token0 price convention.
- Everything is plain floating point; these are preview numbers, not
  bit-exact reproductions of the on-chain fixed point math.
"""

import math

TICK_BASE = 1.0001
LN_TICK_BASE = math.log(TICK_BASE)


def tick_to_price(tick: int) -> float:
    """
    Convert tick to price using Uniswap v3 convention:
    price = 1.0001^tick

    This returns token1 per token0 (commonly quote per base).
    """
    return TICK_BASE ** tick


def price_to_tick(price: float) -> int:
    """
    Convert price to the tick at or below it.
    """
    if price <= 0:
        raise ValueError("Price must be positive.")
    return math.floor(math.log(price) / LN_TICK_BASE)


def tick_to_sqrt_price(tick: int) -> float:
    return math.sqrt(tick_to_price(tick))


def price_to_sqrt_price(price: float) -> float:
    return math.sqrt(price)


def sqrt_price_to_price(sqrt_price: float) -> float:
    return sqrt_price * sqrt_price


def round_to_spacing(tick: int, spacing: int) -> int:
    """
    Align a tick to the multiple of `spacing` at or below it.

    Floors toward negative infinity, so -1 with spacing 60 becomes -60.
    """
    return (tick // spacing) * spacing


def dx_from_to(liquidity: float, sqrt_a: float, sqrt_b: float) -> float:
    """
    Token0 delta for moving sqrt price from sqrt_a to sqrt_b at constant liquidity.

    dx = L * (1/sqrt_a - 1/sqrt_b), positive when the price rises.
    """
    return liquidity * (1.0 / sqrt_a - 1.0 / sqrt_b)


def dy_from_to(liquidity: float, sqrt_a: float, sqrt_b: float) -> float:
    """
    Token1 delta for the same move.

    dy = L * (sqrt_b - sqrt_a), positive when the price rises.
    """
    return liquidity * (sqrt_b - sqrt_a)


def pct_move_to_price(price0: float, pct_move: float) -> float:
    """
    Apply a percentage move to price.
    pct_move = +0.01 means +1%.
    """
    return price0 * (1.0 + pct_move)
