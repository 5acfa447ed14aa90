"""
Central configuration and defaults.

Keep ALL defaults here so callers stay minimal and reproducible.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class DefaultSimConfig:
    # Synthetic pool liquidity (virtual L units)
    base_liquidity: float = 1_000_000.0

    # Synthetic ranges around the mid tick: (half width in ticks, multiplier of base_liquidity)
    synthetic_ranges: tuple[tuple[int, float], ...] = ((600, 1.0), (300, 1.6), (1200, 0.6))

    # Swap walk termination guard
    max_swap_steps: int = 10_000

    # Synthetic boundary used when no initialized tick exists in the direction of travel
    far_tick_spacings: int = 1000

    # Default trade sizes for quote tables (token in units)
    trade_sizes: tuple[float, ...] = (0.1, 1.0, 10.0, 100.0)

    # Default price moves for depth curves (+0.01 means +1%)
    pct_moves: tuple[float, ...] = (-0.05, -0.02, -0.01, 0.01, 0.02, 0.05)
