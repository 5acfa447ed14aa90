"""
Token registry.

Tokens are immutable records looked up by symbol. The registry is an explicit
object handed to callers, there is no module-level lookup state.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator

from .exceptions import UnknownTokenError


@dataclass(frozen=True)
class Token:
    symbol: str
    name: str
    decimals: int


DEFAULT_TOKENS: tuple[Token, ...] = (
    Token("WETH", "Wrapped Ether", 18),
    Token("USDC", "USD Coin", 6),
    Token("WBTC", "Wrapped Bitcoin", 8),
)


class TokenRegistry:
    """
    Lookup table of tokens keyed by symbol.

    Later entries with the same symbol replace earlier ones.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._by_symbol: dict[str, Token] = {tok.symbol: tok for tok in tokens}

    def get(self, symbol: str) -> Token:
        try:
            return self._by_symbol[symbol]
        except KeyError:
            raise UnknownTokenError(symbol) from None

    def symbols(self) -> list[str]:
        return list(self._by_symbol)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._by_symbol

    def __iter__(self) -> Iterator[Token]:
        return iter(self._by_symbol.values())

    def __len__(self) -> int:
        return len(self._by_symbol)


def default_registry() -> TokenRegistry:
    return TokenRegistry(DEFAULT_TOKENS)
