"""Data models for crypto price data."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .pairs import TradingPair


@dataclass(frozen=True, slots=True)
class Trade:
    """A single normalized trade from the upstream feed."""

    pair: TradingPair
    price: float
    timestamp_ms: int  # Unix milliseconds

    def __post_init__(self) -> None:
        if not math.isfinite(self.price) or self.price <= 0:
            raise ValueError(f"Trade price must be positive and finite, got {self.price!r}")


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Point-in-time read of one pair's price state. Never stored."""

    pair: TradingPair
    price: float
    average: float
    timestamp_ms: int  # Read time, Unix milliseconds

    def to_dict(self) -> dict:
        """Serialize for JSON / SSE transmission."""
        return {
            "symbol": self.pair.display,
            "price": self.price,
            "average": self.average,
            "timestamp": self.timestamp_ms,
        }
