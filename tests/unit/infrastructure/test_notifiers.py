"""
Name: Change Notifier Tests

Responsibilities:
  - In-memory notifier history and subscribers
  - Redis notifier message format and best-effort publish
  - Null notifier accepts everything

Notes:
  - Redis client is a MagicMock (no server needed)
"""

import json
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
from backoffice.crosscutting.config import Settings
from backoffice.infrastructure.notifier import (
    InMemoryChangeNotifier,
    NullChangeNotifier,
    RedisChangeNotifier,
    build_redis_client,
)
from redis.exceptions import ConnectionError as RedisConnectionError

pytestmark = pytest.mark.unit


def test_null_notifier_discards_events():
    assert NullChangeNotifier().publish("thread_updated", {"thread_id": 1}) is None


class TestInMemoryChangeNotifier:
    def test_records_history_and_calls_subscribers(self):
        notifier = InMemoryChangeNotifier()
        received = []
        notifier.subscribe(lambda name, payload: received.append((name, payload)))

        notifier.publish("thread_updated", {"thread_id": 7})

        assert [e.name for e in notifier.events] == ["thread_updated"]
        assert received == [("thread_updated", {"thread_id": 7})]

    def test_unsubscribe_stops_delivery(self):
        notifier = InMemoryChangeNotifier()
        received = []
        unsubscribe = notifier.subscribe(lambda name, payload: received.append(name))

        unsubscribe()
        notifier.publish("thread_updated", {})

        assert received == []
        assert len(notifier.events) == 1

    def test_failing_subscriber_does_not_block_others(self):
        notifier = InMemoryChangeNotifier()
        received = []

        def broken(name, payload):
            raise RuntimeError("boom")

        notifier.subscribe(broken)
        notifier.subscribe(lambda name, payload: received.append(name))

        notifier.publish("thread_updated", {})

        assert received == ["thread_updated"]

    def test_history_is_bounded(self):
        notifier = InMemoryChangeNotifier(history_size=2)

        for i in range(5):
            notifier.publish("thread_updated", {"thread_id": i})

        assert [e.payload["thread_id"] for e in notifier.events] == [3, 4]


class TestRedisChangeNotifier:
    def test_publishes_json_message_on_channel(self):
        client = MagicMock()
        client.publish.return_value = 1
        notifier = RedisChangeNotifier(client, channel="backoffice:events")
        when = datetime(2025, 1, 16, 12, 0, tzinfo=timezone.utc)

        notifier.publish(
            "thread_updated",
            {"thread_id": 42, "updates": {"status": "CLOSED", "updated_at": when}},
        )

        channel, raw = client.publish.call_args[0]
        assert channel == "backoffice:events"
        message = json.loads(raw)
        assert message["event"] == "thread_updated"
        assert message["payload"]["thread_id"] == 42
        assert message["payload"]["updates"]["updated_at"] == when.isoformat()

    def test_redis_errors_are_swallowed(self):
        client = MagicMock()
        client.publish.side_effect = RedisConnectionError("down")
        notifier = RedisChangeNotifier(client, channel="backoffice:events")

        notifier.publish("thread_updated", {"thread_id": 1})

        client.publish.assert_called_once()

    def test_channel_is_required(self):
        with pytest.raises(ValueError, match="channel"):
            RedisChangeNotifier(MagicMock(), channel="")

    def test_client_timeouts_are_bounded_by_setting(self):
        with patch(
            "backoffice.infrastructure.notifier.redis_notifier.Redis.from_url"
        ) as from_url:
            build_redis_client("redis://cache:6379/0", timeout_ms=250)

        from_url.assert_called_once_with(
            "redis://cache:6379/0",
            socket_connect_timeout=0.25,
            socket_timeout=0.25,
            health_check_interval=30,
        )

    def test_notifier_timeout_defaults_to_quarter_second(self):
        settings = Settings(database_url="postgresql://x")

        assert settings.notifier_timeout_ms == 250

    def test_notifier_timeout_must_be_positive(self):
        with pytest.raises(ValueError, match="notifier_timeout_ms"):
            Settings(database_url="postgresql://x", notifier_timeout_ms=0)
