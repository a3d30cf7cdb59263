"""Fan-out of ranking updates to live subscribers."""

import asyncio
import itertools
import logging
import threading

from .models import Player, RankingUpdate


logger = logging.getLogger("eloranker:broadcaster")

_ids = itertools.count(1)

_CLOSED = object()


class Subscription:
    """Live stream handle for one connected client.

    Events are queued without bound; a subscriber that stops reading
    simply accumulates events until it unsubscribes. A subscription
    created on an event loop is fed through that loop, so it can be
    published to from any thread.
    """

    def __init__(self) -> None:
        self.id = next(_ids)
        self.closed = False
        self._queue: asyncio.Queue[RankingUpdate | object] = asyncio.Queue()
        try:
            self._loop: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
        except RuntimeError:
            self._loop = None

    def deliver(self, event: RankingUpdate) -> None:
        """Queue an event without waiting."""
        self._put(event)

    def close(self) -> None:
        """End the stream once the events queued before it are consumed."""
        self._put(_CLOSED)

    def _put(self, item: RankingUpdate | object) -> None:
        if self._loop is None or self._on_own_loop():
            self._queue.put_nowait(item)
            return
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, item)
        except RuntimeError:
            # loop already closed, nobody is reading any more
            logger.debug(f"Subscription {self.id} dropped an event after its loop closed")

    def _on_own_loop(self) -> bool:
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False

    async def next_event(self, timeout: float | None = None) -> RankingUpdate | None:
        """Wait for the next event.

        Args:
            timeout: Seconds to wait, or None to wait forever

        Returns:
            The next event, or None if the timeout expired first or the
            subscription has been closed (check `closed` to tell them apart)
        """
        if self.closed:
            return None
        try:
            item = await asyncio.wait_for(self._queue.get(), timeout)
        except asyncio.TimeoutError:
            return None
        if item is _CLOSED:
            self.closed = True
            return None
        return item

    def pending(self) -> list[RankingUpdate]:
        """Drain and return every event queued so far."""
        events = []
        while not self._queue.empty():
            item = self._queue.get_nowait()
            if item is _CLOSED:
                self.closed = True
                continue
            events.append(item)
        return events


class Broadcaster:
    """Publishes player updates to every registered subscription.

    Also keeps an advisory copy of the last full ranking. The ranking
    store stays the source of truth.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: list[Subscription] = []
        self._ranking_cache: list[Player] = []

    def subscribe(self) -> Subscription:
        subscription = Subscription()
        with self._lock:
            self._subscribers.append(subscription)
        logger.debug(f"Subscription {subscription.id} opened")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscription. Unknown or already removed handles are ignored."""
        with self._lock:
            if subscription not in self._subscribers:
                return
            self._subscribers.remove(subscription)
        logger.debug(f"Subscription {subscription.id} closed")

    def close(self) -> None:
        """Close and drop every subscription, ending their streams."""
        with self._lock:
            subscribers = self._subscribers
            self._subscribers = []
        for subscription in subscribers:
            subscription.close()
        logger.debug(f"Closed {len(subscribers)} subscriptions")

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, player: Player) -> None:
        """Send a RankingUpdate for player to all subscribers, in subscription order."""
        event = RankingUpdate(player=player)
        with self._lock:
            subscribers = list(self._subscribers)
        logger.debug(f"Publishing {player.id}={player.rating} to {len(subscribers)} subscribers")
        for subscription in subscribers:
            subscription.deliver(event)

    def update_cache(self, players: list[Player]) -> None:
        with self._lock:
            self._ranking_cache = list(players)

    def cached_ranking(self) -> list[Player]:
        with self._lock:
            return list(self._ranking_cache)

    def clear_cache(self) -> None:
        with self._lock:
            self._ranking_cache = []
