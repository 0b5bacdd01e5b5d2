"""Environment-backed settings for the crypto backend."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, loaded once at startup.

    A blank FINNHUB_API_KEY counts as absent: the feed logs the problem and
    never connects, the rest of the app runs normally.
    """

    finnhub_api_key: str = ""
    finnhub_ws_url: str = "wss://ws.finnhub.io"
    use_simulator: bool = False
    broadcast_interval: float = 1.0  # seconds
    reconnect_delay: float = 5.0  # seconds
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> Settings:
        origins = os.environ.get("CORS_ORIGINS", "*")
        return cls(
            finnhub_api_key=os.environ.get("FINNHUB_API_KEY", "").strip(),
            finnhub_ws_url=os.environ.get("FINNHUB_WS_URL", "wss://ws.finnhub.io"),
            use_simulator=os.environ.get("CRYPTO_SIMULATOR", "").strip().lower() in _TRUTHY,
            broadcast_interval=float(os.environ.get("BROADCAST_INTERVAL", "1.0")),
            reconnect_delay=float(os.environ.get("RECONNECT_DELAY", "5.0")),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        )
