"""Factory for creating trade feeds."""

from __future__ import annotations

import logging

from ..config import Settings
from .aggregator import PriceAggregator
from .interface import TradeFeed

logger = logging.getLogger(__name__)


def create_trade_feed(aggregator: PriceAggregator, settings: Settings | None = None) -> TradeFeed:
    """Create the appropriate trade feed based on settings.

    - FINNHUB_API_KEY set and non-empty → FinnhubFeed (real trades)
    - No key and CRYPTO_SIMULATOR enabled → SimulatorFeed (GBM simulation)
    - Otherwise → FinnhubFeed without a key, which logs and stays idle

    Returns an unstarted feed. Caller must await feed.start().
    """
    settings = settings or Settings.from_env()

    if not settings.finnhub_api_key and settings.use_simulator:
        from .simulator import SimulatorFeed

        logger.info("Trade feed: GBM Simulator")
        return SimulatorFeed(aggregator=aggregator)

    from .finnhub_client import FinnhubFeed

    logger.info("Trade feed: Finnhub WebSocket")
    return FinnhubFeed(
        api_key=settings.finnhub_api_key,
        aggregator=aggregator,
        url=settings.finnhub_ws_url,
        reconnect_delay=settings.reconnect_delay,
    )
