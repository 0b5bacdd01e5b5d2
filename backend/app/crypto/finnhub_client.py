"""Finnhub WebSocket trade feed."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable, Mapping
from typing import Any

import websockets
from websockets.exceptions import WebSocketException

from .aggregator import PriceAggregator
from .interface import TradeFeed
from .models import Trade
from .pairs import PAIR_TABLE, TradingPair

logger = logging.getLogger(__name__)

FINNHUB_WS_URL = "wss://ws.finnhub.io"


def _decode(raw: Any) -> str:
    """Turn a text or binary frame into a UTF-8 string."""
    if isinstance(raw, str):
        return raw
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return bytes(raw).decode("utf-8")
    if isinstance(raw, list):
        # Fragmented binary message
        return b"".join(bytes(chunk) for chunk in raw).decode("utf-8")
    return str(raw)


class FinnhubFeed(TradeFeed):
    """TradeFeed backed by the Finnhub trades WebSocket.

    Subscribes to every symbol in the pair table on each (re)connection and
    forwards recognized trades to the PriceAggregator in delivery order.

    Reconnect policy: after any close, wait a fixed ``reconnect_delay`` and
    connect again, forever. The wait is an ordinary asyncio sleep inside the
    feed task, so stop() cancels the retry chain immediately.
    """

    def __init__(
        self,
        api_key: str | None,
        aggregator: PriceAggregator,
        url: str = FINNHUB_WS_URL,
        symbol_map: Mapping[str, TradingPair] = PAIR_TABLE,
        reconnect_delay: float = 5.0,
        connector: Callable[..., Any] = websockets.connect,
    ) -> None:
        self._api_key = (api_key or "").strip()
        self._aggregator = aggregator
        self._url = url
        self._symbol_map = symbol_map
        self._reconnect_delay = reconnect_delay
        self._connector = connector
        self._task: asyncio.Task | None = None
        self._connections = 0  # Successful opens, for health and tests

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def connections(self) -> int:
        return self._connections

    async def start(self) -> None:
        if not self._api_key:
            logger.error("FINNHUB_API_KEY is not set; Finnhub feed will not connect")
            return
        self._task = asyncio.create_task(self._run_loop(), name="finnhub-feed")
        logger.info("Finnhub feed started: %d symbols", len(self._symbol_map))

    async def stop(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("Finnhub feed stopped")

    async def connect(self) -> None:
        """Run one connection session: open, subscribe, read until closed.

        Transport errors are logged and end the session. They never escape,
        so the caller's only recovery path is to call connect() again.
        """
        if not self._api_key:
            logger.error("FINNHUB_API_KEY is not set; not connecting")
            return

        try:
            async with self._connector(f"{self._url}?token={self._api_key}", ping_interval=20) as ws:
                self._connections += 1
                logger.info("Connected to Finnhub WebSocket")
                for symbol in self._symbol_map:
                    await ws.send(json.dumps({"type": "subscribe", "symbol": symbol}))
                    logger.debug("Subscribed to %s", symbol)

                async for raw in ws:
                    self.handle_message(raw)
        except (OSError, WebSocketException) as e:
            logger.error("Finnhub WebSocket error: %s", e)

    def handle_message(self, raw: Any) -> int:
        """Decode one inbound message and forward its trades.

        Returns the number of trades forwarded to the aggregator. A payload
        that is not JSON is logged and dropped. Each trade record is checked
        on its own: a malformed record is logged and skipped, and the rest
        of the message still applies. Untracked symbols are dropped silently.
        """
        try:
            message = json.loads(_decode(raw))
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError are ValueErrors
            logger.error("Error parsing Finnhub message: %s", e)
            return 0

        if not isinstance(message, dict) or message.get("type") != "trade":
            return 0

        records = message.get("data")
        if not isinstance(records, list):
            logger.error("Error parsing Finnhub message: trade message without a data list")
            return 0

        forwarded = 0
        for record in records:
            if not isinstance(record, dict) or not isinstance(record.get("s"), str):
                logger.warning("Skipping malformed trade record: %r", record)
                continue
            pair = self._symbol_map.get(record["s"])
            if pair is None:
                logger.debug("Ignoring trade for untracked symbol %s", record["s"])
                continue
            try:
                trade = Trade(pair=pair, price=float(record["p"]), timestamp_ms=int(record["t"]))
            except (KeyError, ValueError, TypeError, ArithmeticError) as e:
                # OverflowError: 1e400 timestamps, integer prices too big for a float
                logger.warning("Skipping trade for %s: %s", pair, e)
                continue
            self._aggregator.handle_trade(trade.pair, trade.price, trade.timestamp_ms)
            forwarded += 1
        return forwarded

    # --- Internal ---

    async def _run_loop(self) -> None:
        """Connect, and after every close wait the fixed delay and reconnect."""
        while True:
            try:
                await self.connect()
            except Exception:
                logger.exception("Finnhub session failed")
            logger.warning(
                "Finnhub WebSocket disconnected. Reconnecting in %.0f seconds...",
                self._reconnect_delay,
            )
            await asyncio.sleep(self._reconnect_delay)
