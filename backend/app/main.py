"""FastAPI application: wires the trade feed, aggregator and broadcaster."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .crypto import BroadcastScheduler, PriceAggregator, create_stream_router, create_trade_feed

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app. The trade feed starts and stops with the lifespan."""
    settings = settings or Settings.from_env()

    aggregator = PriceAggregator()
    scheduler = BroadcastScheduler(aggregator, interval=settings.broadcast_interval)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        feed = create_trade_feed(aggregator, settings)
        app.state.feed = feed
        await feed.start()
        try:
            yield
        finally:
            scheduler.stop()
            await feed.stop()
            logger.info("Shutdown complete")

    app = FastAPI(title="Crypto Price Stream", lifespan=lifespan)
    app.state.settings = settings
    app.state.aggregator = aggregator
    app.state.scheduler = scheduler

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(create_stream_router(scheduler))

    @app.get("/api/crypto", tags=["crypto"])
    async def get_crypto() -> list[dict]:
        """Current snapshot of every tracked pair."""
        return [snapshot.to_dict() for snapshot in aggregator.get_all_data()]

    @app.get("/api/health", tags=["health"])
    async def health() -> dict:
        return {
            "status": "ok",
            "subscribers": scheduler.subscriber_count,
            "streaming": scheduler.is_streaming,
        }

    return app


app = create_app()


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run() -> None:
    """Serve the module-level app with uvicorn."""
    import uvicorn

    configure_logging(app.state.settings)
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "3000")))


if __name__ == "__main__":
    run()
