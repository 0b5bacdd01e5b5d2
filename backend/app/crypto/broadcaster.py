"""Connection-counted periodic broadcast of price snapshots."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from .aggregator import PriceAggregator
from .models import Snapshot

logger = logging.getLogger(__name__)

DATA_UPDATE_EVENT = "crypto-data"


@dataclass(frozen=True, slots=True)
class BroadcastMessage:
    """One logical push to a subscriber: an event name plus its payload."""

    event: str
    snapshots: tuple[Snapshot, ...]

    def payload(self) -> list[dict]:
        return [snapshot.to_dict() for snapshot in self.snapshots]


class BroadcastScheduler:
    """Pushes aggregator snapshots to every subscriber once per interval.

    Two states:
        Idle       no timer, subscriber_count == 0
        Streaming  one timer task, subscriber_count >= 1

    Every change to the count goes through _set_subscriber_count(), which
    starts or cancels the timer in the same call. The timer therefore
    exists if and only if subscriber_count > 0 after every connect or
    disconnect, no matter how many clients come and go.

    Each subscriber owns a bounded mailbox (asyncio.Queue). When a mailbox
    is full the oldest message is dropped, so a slow reader never blocks a
    tick.
    """

    def __init__(
        self,
        aggregator: PriceAggregator,
        interval: float = 1.0,
        event: str = DATA_UPDATE_EVENT,
        mailbox_size: int = 10,
    ) -> None:
        self._aggregator = aggregator
        self._interval = interval
        self._event = event
        self._mailbox_size = mailbox_size
        self._subscriber_count = 0
        self._timer: asyncio.Task | None = None
        self._mailboxes: dict[str, asyncio.Queue[BroadcastMessage]] = {}

    @property
    def subscriber_count(self) -> int:
        return self._subscriber_count

    @property
    def is_streaming(self) -> bool:
        return self._timer is not None

    def on_connect(self, client_id: str) -> asyncio.Queue[BroadcastMessage]:
        """Register a subscriber and return its mailbox.

        Must be called from inside the running event loop.
        """
        mailbox: asyncio.Queue[BroadcastMessage] = asyncio.Queue(maxsize=self._mailbox_size)
        self._mailboxes[client_id] = mailbox
        self._set_subscriber_count(self._subscriber_count + 1)
        logger.info("Client connected: %s (%d subscribers)", client_id, self._subscriber_count)
        return mailbox

    def on_disconnect(self, client_id: str) -> None:
        """Unregister a subscriber. Extra calls never push the count below 0."""
        self._mailboxes.pop(client_id, None)
        self._set_subscriber_count(self._subscriber_count - 1)
        logger.info("Client disconnected: %s (%d subscribers)", client_id, self._subscriber_count)

    def stop(self) -> None:
        """Tear down: drop all subscribers and cancel the timer. Idempotent."""
        self._mailboxes.clear()
        self._set_subscriber_count(0)

    def broadcast(self) -> BroadcastMessage:
        """Run one tick: snapshot the aggregator and push to every mailbox."""
        message = BroadcastMessage(
            event=self._event,
            snapshots=tuple(self._aggregator.get_all_data()),
        )
        for mailbox in self._mailboxes.values():
            if mailbox.full():
                mailbox.get_nowait()
            mailbox.put_nowait(message)
        return message

    # --- Internal ---

    def _set_subscriber_count(self, count: int) -> None:
        """The only place that changes the count or the timer."""
        self._subscriber_count = max(count, 0)

        if self._subscriber_count > 0 and self._timer is None:
            self._timer = asyncio.create_task(self._run_loop(), name="crypto-broadcast")
            logger.info("Broadcast started: every %.1fs", self._interval)
        elif self._subscriber_count == 0 and self._timer is not None:
            self._timer.cancel()
            self._timer = None
            logger.info("Broadcast stopped: no subscribers")

    async def _run_loop(self) -> None:
        """Sleep, tick, repeat. The first push happens one interval after start."""
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.broadcast()
            except Exception:
                logger.exception("Broadcast tick failed")
