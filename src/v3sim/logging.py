"""
Package logger for v3sim.

Pool generation and swap walks log here: debug lines for normal progress,
warnings for degenerate pools and swaps that leave input unfilled. The
logger writes to stderr on its own and does not propagate to the root logger.
"""

import logging

logger = logging.getLogger("v3sim")
logger.propagate = False
logger.setLevel(logging.INFO)
logger.addHandler(logging.StreamHandler())
