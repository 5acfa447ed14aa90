"""
v3sim package

This package contains a small concentrated-liquidity AMM simulator:
- Token registry (symbol -> name/decimals lookup)
- Tick <-> price <-> sqrt-price math
- Synthetic Uniswap v3 style pool generation around a mid price
- Swap execution across initialized ticks (fallback quoting)
- Liquidity <-> token amount conversion for LP ranges
- Active liquidity profiles and depth curves
"""
