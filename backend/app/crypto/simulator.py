"""GBM-based trade simulator for running without a Finnhub key."""

from __future__ import annotations

import asyncio
import logging
import math
import random
import time

import numpy as np

from .aggregator import PriceAggregator
from .interface import TradeFeed
from .pairs import TradingPair
from .seed_prices import (
    CROSS_QUOTE_CORR,
    PAIR_PARAMS,
    PRICE_DECIMALS,
    SEED_PRICES,
    STABLECOIN_CORR,
)

logger = logging.getLogger(__name__)

_STABLECOIN_PAIRS = frozenset({TradingPair.ETH_USDC, TradingPair.ETH_USDT})


class GBMSimulator:
    """Geometric Brownian Motion simulator for the three correlated pairs.

    Math:
        S(t+dt) = S(t) * exp((mu - sigma^2/2) * dt + sigma * sqrt(dt) * Z)

    Crypto trades around the clock, so dt is the step as a fraction of a
    calendar year (365 * 24h).
    """

    SECONDS_PER_YEAR = 365 * 24 * 3600  # 31,536,000
    DEFAULT_DT = 0.5 / SECONDS_PER_YEAR  # ~1.59e-8

    def __init__(self, dt: float = DEFAULT_DT, event_probability: float = 0.001) -> None:
        self._dt = dt
        self._event_prob = event_probability
        self._prices: list[float] = [SEED_PRICES[pair] for pair in TradingPair]
        self._cholesky: np.ndarray = np.linalg.cholesky(self._correlation_matrix())

    def step(self) -> dict[TradingPair, float]:
        """Advance all pairs by one time step. Returns {pair: new_price}."""
        z = self._cholesky @ np.random.standard_normal(len(self._prices))

        result: dict[TradingPair, float] = {}
        for pair in TradingPair:
            params = PAIR_PARAMS[pair]
            mu = params["mu"]
            sigma = params["sigma"]

            drift = (mu - 0.5 * sigma**2) * self._dt
            diffusion = sigma * math.sqrt(self._dt) * z[pair]
            self._prices[pair] *= math.exp(drift + diffusion)

            if random.random() < self._event_prob:
                shock_magnitude = random.uniform(0.01, 0.03)
                shock_sign = random.choice([-1, 1])
                self._prices[pair] *= 1 + shock_magnitude * shock_sign
                logger.debug(
                    "Random event on %s: %.1f%% %s",
                    pair,
                    shock_magnitude * 100,
                    "up" if shock_sign > 0 else "down",
                )

            result[pair] = round(self._prices[pair], PRICE_DECIMALS[pair])

        return result

    def get_price(self, pair: TradingPair) -> float:
        return round(self._prices[pair], PRICE_DECIMALS[pair])

    @staticmethod
    def _correlation_matrix() -> np.ndarray:
        n = len(TradingPair)
        corr = np.eye(n)
        for a in TradingPair:
            for b in TradingPair:
                if a < b:
                    both_stable = a in _STABLECOIN_PAIRS and b in _STABLECOIN_PAIRS
                    rho = STABLECOIN_CORR if both_stable else CROSS_QUOTE_CORR
                    corr[a, b] = rho
                    corr[b, a] = rho
        return corr


class SimulatorFeed(TradeFeed):
    """TradeFeed backed by the GBM simulator.

    Runs a background asyncio task that calls GBMSimulator.step() every
    `update_interval` seconds and forwards one trade per pair to the
    PriceAggregator.
    """

    def __init__(
        self,
        aggregator: PriceAggregator,
        update_interval: float = 0.5,
        event_probability: float = 0.001,
    ) -> None:
        self._aggregator = aggregator
        self._interval = update_interval
        self._event_prob = event_probability
        self._sim: GBMSimulator | None = None
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        self._sim = GBMSimulator(event_probability=self._event_prob)
        # Seed the aggregator so the first broadcast already has prices
        now_ms = int(time.time() * 1000)
        for pair in TradingPair:
            self._aggregator.handle_trade(pair, self._sim.get_price(pair), now_ms)
        self._task = asyncio.create_task(self._run_loop(), name="simulator-feed")
        logger.info("Simulator feed started with %d pairs", len(TradingPair))

    async def stop(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("Simulator feed stopped")

    async def _run_loop(self) -> None:
        """Core loop: step the simulation, forward trades, sleep."""
        while True:
            try:
                if self._sim:
                    now_ms = int(time.time() * 1000)
                    for pair, price in self._sim.step().items():
                        self._aggregator.handle_trade(pair, price, now_ms)
            except Exception:
                logger.exception("Simulator step failed")
            await asyncio.sleep(self._interval)
