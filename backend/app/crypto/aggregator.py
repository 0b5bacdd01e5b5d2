"""Per-pair current price and rolling one-hour history."""

from __future__ import annotations

import time
from collections.abc import Callable

from .models import Snapshot
from .pairs import HISTORY_WINDOW_MS, TradingPair


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class _PriceState:
    """Mutable state for one pair. Owned by PriceAggregator."""

    __slots__ = ("current_price", "history")

    def __init__(self) -> None:
        self.current_price: float = 0.0
        self.history: list[tuple[float, int]] = []  # (price, timestamp_ms)


class PriceAggregator:
    """In-memory price state for the fixed set of trading pairs.

    Writer: the active TradeFeed (Finnhub or simulator).
    Readers: BroadcastScheduler ticks and the REST snapshot route.

    All access happens on the event loop and no method awaits, so
    handle_trade() and get_all_data() never interleave mid-call.

    History is pruned only when a trade arrives for that pair. A pair that
    goes quiet for more than an hour keeps serving its last average until
    the next trade.
    """

    def __init__(
        self,
        clock: Callable[[], int] = _wall_clock_ms,
        window_ms: int = HISTORY_WINDOW_MS,
    ) -> None:
        self._clock = clock
        self._window_ms = window_ms
        # One slot per pair, indexed by TradingPair value
        self._states: tuple[_PriceState, ...] = tuple(_PriceState() for _ in TradingPair)

    def handle_trade(self, pair: TradingPair | str, price: float, timestamp_ms: int) -> None:
        """Record a trade: overwrite the current price, append, then prune.

        The cutoff is computed from the wall clock at call time, not from the
        trade's own timestamp.
        """
        state = self._state(pair)
        state.current_price = price
        state.history.append((price, timestamp_ms))

        cutoff = self._clock() - self._window_ms
        state.history = [entry for entry in state.history if entry[1] > cutoff]

    def get_current_price(self, pair: TradingPair | str) -> float:
        """Last recorded price, or 0.0 if the pair has never traded."""
        return self._state(pair).current_price

    def get_hourly_average(self, pair: TradingPair | str) -> float:
        """Unweighted mean of retained prices, or 0.0 with no history."""
        history = self._state(pair).history
        if not history:
            return 0.0
        return sum(price for price, _ in history) / len(history)

    def get_all_data(self) -> list[Snapshot]:
        """One snapshot per pair in declaration order, stamped with read time."""
        return [
            Snapshot(
                pair=pair,
                price=self.get_current_price(pair),
                average=self.get_hourly_average(pair),
                timestamp_ms=self._clock(),
            )
            for pair in TradingPair
        ]

    def history_size(self, pair: TradingPair | str) -> int:
        """Number of retained history entries for a pair."""
        return len(self._state(pair).history)

    def _state(self, pair: TradingPair | str) -> _PriceState:
        return self._states[TradingPair.coerce(pair)]
