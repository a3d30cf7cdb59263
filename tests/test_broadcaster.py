"""Tests for the broadcaster and subscriptions."""

import asyncio

from eloranker.broadcaster import Broadcaster
from eloranker.models import Player


class TestBroadcaster:
    """Tests for Broadcaster subscription management and publishing."""

    def test_publish_reaches_every_subscriber(self) -> None:
        """Test that each subscriber receives the update."""
        broadcaster = Broadcaster()
        first = broadcaster.subscribe()
        second = broadcaster.subscribe()

        broadcaster.publish(Player(id="alice", rating=1216))

        for subscription in (first, second):
            events = subscription.pending()
            assert len(events) == 1
            assert events[0].type == "RankingUpdate"
            assert events[0].player == Player(id="alice", rating=1216)

    def test_publish_without_subscribers(self) -> None:
        """Test publishing with nobody listening is harmless."""
        broadcaster = Broadcaster()
        broadcaster.publish(Player(id="alice", rating=1200))
        assert broadcaster.subscriber_count == 0

    def test_unsubscribed_receive_nothing(self) -> None:
        """Test removed subscriptions get no further events."""
        broadcaster = Broadcaster()
        subscription = broadcaster.subscribe()
        broadcaster.unsubscribe(subscription)

        broadcaster.publish(Player(id="alice", rating=1200))

        assert subscription.pending() == []

    def test_unsubscribe_is_idempotent(self) -> None:
        """Test unsubscribing twice is fine."""
        broadcaster = Broadcaster()
        kept = broadcaster.subscribe()
        removed = broadcaster.subscribe()

        broadcaster.unsubscribe(removed)
        broadcaster.unsubscribe(removed)

        assert broadcaster.subscriber_count == 1
        broadcaster.publish(Player(id="alice", rating=1200))
        assert len(kept.pending()) == 1

    def test_events_keep_publish_order(self) -> None:
        """Test a subscriber sees events in the order they were published."""
        broadcaster = Broadcaster()
        subscription = broadcaster.subscribe()

        broadcaster.publish(Player(id="alice", rating=1216))
        broadcaster.publish(Player(id="bob", rating=1184))

        assert [e.player.id for e in subscription.pending()] == ["alice", "bob"]


class TestSubscription:
    """Tests for Subscription.next_event."""

    async def test_next_event_returns_queued_event(self) -> None:
        """Test waiting returns a queued event."""
        broadcaster = Broadcaster()
        subscription = broadcaster.subscribe()
        broadcaster.publish(Player(id="alice", rating=1200))

        event = await subscription.next_event(timeout=1)

        assert event is not None
        assert event.player.id == "alice"

    async def test_next_event_times_out(self) -> None:
        """Test waiting on an idle subscription returns None after the timeout."""
        subscription = Broadcaster().subscribe()
        assert await subscription.next_event(timeout=0.01) is None


class TestRankingCache:
    """Tests for the advisory ranking cache."""

    def test_cache_round_trip(self) -> None:
        """Test the cache returns the last stored ranking."""
        broadcaster = Broadcaster()
        ranking = [Player(id="alice", rating=1216), Player(id="bob", rating=1184)]

        broadcaster.update_cache(ranking)
        ranking.clear()

        assert [p.id for p in broadcaster.cached_ranking()] == ["alice", "bob"]

    def test_clear_cache(self) -> None:
        """Test clearing empties the cache."""
        broadcaster = Broadcaster()
        broadcaster.update_cache([Player(id="alice", rating=1200)])
        broadcaster.clear_cache()
        assert broadcaster.cached_ranking() == []


class TestCrossThreadDelivery:
    """Tests for publishing from threads other than the subscriber's loop."""

    async def test_publish_from_thread_wakes_waiting_reader(self) -> None:
        """Test an event published from a worker thread reaches a waiting reader."""
        broadcaster = Broadcaster()
        subscription = broadcaster.subscribe()
        waiting = asyncio.ensure_future(subscription.next_event(timeout=2))
        await asyncio.sleep(0)

        await asyncio.to_thread(broadcaster.publish, Player(id="alice", rating=1216))
        event = await waiting

        assert event is not None
        assert event.player == Player(id="alice", rating=1216)


class TestClose:
    """Tests for Broadcaster.close."""

    def test_close_drops_and_closes_subscriptions(self) -> None:
        """Test closing ends every subscription after its queued events."""
        broadcaster = Broadcaster()
        subscription = broadcaster.subscribe()
        broadcaster.publish(Player(id="alice", rating=1200))

        broadcaster.close()

        assert broadcaster.subscriber_count == 0
        assert [e.player.id for e in subscription.pending()] == ["alice"]
        assert subscription.closed

    async def test_next_event_after_close(self) -> None:
        """Test a closed subscription stops waiting."""
        broadcaster = Broadcaster()
        subscription = broadcaster.subscribe()

        broadcaster.close()

        assert await subscription.next_event(timeout=2) is None
        assert subscription.closed
        assert await subscription.next_event(timeout=2) is None
