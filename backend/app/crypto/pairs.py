"""Tracked trading pairs and the upstream symbol table."""

from __future__ import annotations

from enum import IntEnum
from types import MappingProxyType


class TradingPair(IntEnum):
    """The closed set of pairs the backend tracks.

    The integer value doubles as the pair's slot in the aggregator's
    fixed-size table, so declaration order is also broadcast order.
    """

    ETH_USDC = 0
    ETH_USDT = 1
    ETH_BTC = 2

    @property
    def display(self) -> str:
        """Human-readable name, e.g. 'ETH/USDC'."""
        return _DISPLAY_NAMES[self]

    @classmethod
    def from_display(cls, name: str) -> TradingPair:
        """Look up a pair by display name. Raises KeyError if unknown."""
        for pair, display in _DISPLAY_NAMES.items():
            if display == name:
                return pair
        raise KeyError(name)

    @classmethod
    def coerce(cls, pair: TradingPair | str) -> TradingPair:
        """Accept either a TradingPair or its display name."""
        if isinstance(pair, TradingPair):
            return pair
        return cls.from_display(pair)

    def __str__(self) -> str:
        return self.display


_DISPLAY_NAMES: dict[TradingPair, str] = {
    TradingPair.ETH_USDC: "ETH/USDC",
    TradingPair.ETH_USDT: "ETH/USDT",
    TradingPair.ETH_BTC: "ETH/BTC",
}

# Upstream (Finnhub) symbol -> pair. Order matches TradingPair declaration.
PAIR_TABLE: MappingProxyType[str, TradingPair] = MappingProxyType(
    {
        "BINANCE:ETHUSDC": TradingPair.ETH_USDC,
        "BINANCE:ETHUSDT": TradingPair.ETH_USDT,
        "BINANCE:ETHBTC": TradingPair.ETH_BTC,
    }
)

# Retention window for the hourly average, in milliseconds
HISTORY_WINDOW_MS = 3_600_000
