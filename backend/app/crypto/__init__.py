"""Crypto price subsystem.

Public API:
    TradingPair         - The three tracked pairs, in broadcast order
    PAIR_TABLE          - Upstream symbol -> TradingPair mapping
    Trade, Snapshot     - Immutable trade and snapshot dataclasses
    PriceAggregator     - Per-pair current price and rolling hourly history
    TradeFeed           - Abstract interface for trade providers
    BroadcastScheduler  - Subscriber-counted once-per-second snapshot push
    create_trade_feed   - Factory that selects Finnhub or the simulator
    create_stream_router - FastAPI router factory for the SSE endpoint
"""

from .aggregator import PriceAggregator
from .broadcaster import DATA_UPDATE_EVENT, BroadcastMessage, BroadcastScheduler
from .factory import create_trade_feed
from .interface import TradeFeed
from .models import Snapshot, Trade
from .pairs import PAIR_TABLE, TradingPair
from .stream import create_stream_router

__all__ = [
    "TradingPair",
    "PAIR_TABLE",
    "Trade",
    "Snapshot",
    "PriceAggregator",
    "TradeFeed",
    "BroadcastScheduler",
    "BroadcastMessage",
    "DATA_UPDATE_EVENT",
    "create_trade_feed",
    "create_stream_router",
]
