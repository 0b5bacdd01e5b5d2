"""Abstract interface for trade feeds."""

from __future__ import annotations

from abc import ABC, abstractmethod


class TradeFeed(ABC):
    """Contract for upstream trade providers.

    Implementations push every trade they receive into a shared
    PriceAggregator. Downstream code never talks to the feed for prices,
    it reads from the aggregator.

    Lifecycle:
        feed = create_trade_feed(aggregator)
        await feed.start()
        # ... app runs ...
        await feed.stop()
    """

    @abstractmethod
    async def start(self) -> None:
        """Begin producing trades in a background task.

        Must be called exactly once. Returns without waiting for the first
        trade.
        """

    @abstractmethod
    async def stop(self) -> None:
        """Cancel the background task and release resources.

        Safe to call multiple times. After stop(), the feed will not write
        to the aggregator again.
        """

    @property
    @abstractmethod
    def running(self) -> bool:
        """Whether the background task is alive."""
