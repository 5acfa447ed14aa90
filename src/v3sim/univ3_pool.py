"""
Pool state for the Uniswap v3 style simulator.

A pool is a fixed-time view: generated once, then only read. Swaps return
new state values and `apply_swap_result` builds the next snapshot from one.
"""

from __future__ import annotations
import dataclasses
import math
from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

from .config import DefaultSimConfig
from .exceptions import PoolInvariantError
from .logging import logger
from .tokens import Token
from .univ3_math import price_to_tick, round_to_spacing, tick_to_sqrt_price

if TYPE_CHECKING:
    from .univ3_execution import SwapResult


@dataclass(frozen=True)
class Tick:
    """
    Initialized boundary.

    `liquidity_net` is added to active liquidity when the price crosses the
    boundary upward and subtracted when it crosses downward. It is positive
    at a range's lower boundary and negative at its upper boundary.
    """
    index: int
    sqrt_price: float
    liquidity_net: float

    @classmethod
    def at(cls, index: int, liquidity_net: float) -> "Tick":
        return cls(index=index, sqrt_price=tick_to_sqrt_price(index), liquidity_net=liquidity_net)


@dataclass(frozen=True)
class V3Pool:
    """
    Snapshot of a concentrated liquidity pool.

    Invariants (checked by `validate`):
    - ticks are sorted ascending by index
    - liquidity == sum of liquidity_net over ticks with index <= tick_current
    - liquidity_net sums to zero over the whole tick list
    - tick_current is within one tick of the tick implied by sqrt_price
    """
    id: str
    token0: Token
    token1: Token
    fee: float
    tick_spacing: int
    sqrt_price: float
    tick_current: int
    liquidity: float
    ticks: tuple[Tick, ...]
    volume_24h_usd: float = 0.0

    @property
    def price(self) -> float:
        return self.sqrt_price * self.sqrt_price

    @property
    def net_liquidity(self) -> float:
        """Exact sum of liquidity_net over all ticks; 0.0 for matched ranges."""
        return math.fsum(t.liquidity_net for t in self.ticks)

    def validate(self, rel_tol: float = 1e-9) -> None:
        indices = [t.index for t in self.ticks]
        if indices != sorted(indices):
            raise PoolInvariantError(f"Pool {self.id}: ticks are not sorted by index.")

        gross = math.fsum(abs(t.liquidity_net) for t in self.ticks)
        tol = rel_tol * max(gross, 1.0)

        total = self.net_liquidity
        if abs(total) > tol:
            raise PoolInvariantError(f"Pool {self.id}: liquidity_net sums to {total}, expected 0.")

        active = active_liquidity_at(self.ticks, self.tick_current)
        if abs(active - self.liquidity) > tol:
            raise PoolInvariantError(
                f"Pool {self.id}: liquidity {self.liquidity} does not match "
                f"{active} implied by ticks at or below {self.tick_current}."
            )

        # a price sitting exactly on a tick may floor to either side of it
        if self.sqrt_price > 0:
            implied = price_to_tick(self.price)
            if not implied - 1 <= self.tick_current <= implied + 1:
                raise PoolInvariantError(
                    f"Pool {self.id}: tick {self.tick_current} is inconsistent with "
                    f"sqrt price {self.sqrt_price} (tick {implied})."
                )


class BoundaryIndex:
    """
    Sorted index over a pool's initialized ticks.

    Purpose:
      • O(log B) lookup of the next boundary upward/downward from a tick.
      • Net liquidity per index, summing duplicate entries.
      • Active liquidity at any tick from exact (fsum) prefix sums, so
        matched +L/-L pairs cancel to exactly zero whatever their magnitude.
    """
    def __init__(self, ticks: Iterable[Tick]):
        raw: dict[int, list[float]] = {}
        for t in ticks:
            raw.setdefault(t.index, []).append(t.liquidity_net)
        self.keys = sorted(raw)
        self.net = {k: math.fsum(raw[k]) for k in self.keys}
        self.gross = math.fsum(abs(v) for vals in raw.values() for v in vals)

        seen: list[float] = []
        self.prefix: list[float] = []
        for k in self.keys:
            seen.extend(raw[k])
            self.prefix.append(math.fsum(seen))

    def next_up(self, tick: int) -> Optional[int]:
        """Smallest boundary strictly above `tick`."""
        i = bisect_right(self.keys, tick)
        return self.keys[i] if i < len(self.keys) else None

    def next_down(self, tick: int) -> Optional[int]:
        """Largest boundary at or below `tick`."""
        i = bisect_right(self.keys, tick) - 1
        return self.keys[i] if i >= 0 else None

    def net_at(self, index: int) -> float:
        return self.net.get(index, 0.0)

    def active_at(self, tick: int) -> float:
        """Sum of liquidity_net over boundaries at or below `tick`."""
        i = bisect_right(self.keys, tick)
        return self.prefix[i - 1] if i > 0 else 0.0

    def __contains__(self, index: int) -> bool:
        i = bisect_left(self.keys, index)
        return i < len(self.keys) and self.keys[i] == index


def active_liquidity_at(ticks: Iterable[Tick], tick: int) -> float:
    """Sum of liquidity_net over boundaries at or below `tick`."""
    return math.fsum(t.liquidity_net for t in ticks if t.index <= tick)


def make_v3_pool(
    id: str,
    token0: Token,
    token1: Token,
    mid_price: float,
    fee: float,
    tick_spacing: int,
    volume_24h_usd: float = 0.0,
    config: DefaultSimConfig = DefaultSimConfig(),
) -> V3Pool:
    """
    Build a synthetic pool around `mid_price`.

    Every range in `config.synthetic_ranges` is centred on the spacing-aligned
    mid tick and contributes +L at its lower boundary and -L at its upper one,
    which approximates liquidity concentrated near the current price.

    A non-positive mid price has no tick; an empty pool with zero liquidity
    is returned instead.
    """
    if mid_price <= 0:
        logger.warning("Pool %s: non-positive mid price %s, returning an empty pool", id, mid_price)
        return V3Pool(
            id=id,
            token0=token0,
            token1=token1,
            fee=fee,
            tick_spacing=tick_spacing,
            sqrt_price=0.0,
            tick_current=0,
            liquidity=0.0,
            ticks=(),
            volume_24h_usd=volume_24h_usd,
        )

    tick0 = round_to_spacing(price_to_tick(mid_price), tick_spacing)

    ticks: list[Tick] = []
    for half_width, multiplier in config.synthetic_ranges:
        amount = config.base_liquidity * multiplier
        ticks.append(Tick.at(tick0 - half_width, +amount))
        ticks.append(Tick.at(tick0 + half_width, -amount))
    ticks.sort(key=lambda t: t.index)

    liquidity = active_liquidity_at(ticks, tick0)
    logger.debug(
        "Pool %s: tick0=%d, %d boundaries, active liquidity %.6g", id, tick0, len(ticks), liquidity
    )

    return V3Pool(
        id=id,
        token0=token0,
        token1=token1,
        fee=fee,
        tick_spacing=tick_spacing,
        sqrt_price=tick_to_sqrt_price(tick0),
        tick_current=tick0,
        liquidity=liquidity,
        ticks=tuple(ticks),
        volume_24h_usd=volume_24h_usd,
    )


def apply_swap_result(pool: V3Pool, result: SwapResult) -> V3Pool:
    """
    Return a new pool snapshot positioned where `result` left the price.
    """
    return dataclasses.replace(
        pool,
        sqrt_price=result.new_sqrt,
        tick_current=result.new_tick,
        liquidity=result.new_l,
    )
