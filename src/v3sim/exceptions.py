class V3SimError(Exception):
    """
    Root of the v3sim exception hierarchy.

    Only structural problems raise: an unknown token symbol, a tick list that
    breaks the pool invariants, a swap walk that never terminates. Degenerate
    numbers (zero liquidity, non-positive amounts or prices) give neutral
    results instead. The formatted text is kept on `.message`.
    """

    message: str | None = None

    def __init__(self, message: str | None = None) -> None:
        if message:
            self.message = message
            super().__init__(message)


class UnknownTokenError(V3SimError, KeyError):
    """
    Exception raised when a symbol is not present in a token registry.
    """

    def __init__(self, symbol: str) -> None:
        self.symbol = symbol
        super().__init__(f"Unknown token {symbol}")


class PoolInvariantError(V3SimError, ValueError):
    """
    Exception raised when a pool's tick list or active liquidity is inconsistent.
    """


class SwapStepLimitError(V3SimError):
    """
    Exception raised when a swap walk exceeds its step limit without terminating.
    """

    def __init__(self, steps: int) -> None:
        self.steps = steps
        super().__init__(f"Swap did not terminate after {steps} steps")
