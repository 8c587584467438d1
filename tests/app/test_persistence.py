"""Tests for progress persistence."""

from unittest.mock import MagicMock, patch

import pytest
import redis

from bjtrainer.config import AppConfig
from bjtrainer.errors import StoreError
from bjtrainer.persistence import (
    BALANCE_KEY,
    STATISTICS_KEY,
    InMemoryKeyValueStore,
    ProgressStore,
    RedisKeyValueStore,
    get_store,
    progress_store_from_config,
)
from bjtrainer.statistics import PlayerStatistics


class TestProgressStore:
    """Saving and loading balance and statistics."""

    def test_empty_store(self, progress):
        """Test an empty store loads nothing."""
        assert progress.load() == (None, None)

    def test_round_trip(self, progress):
        """Test balance and statistics are saved and loaded."""
        stats = PlayerStatistics(hands_played=4, hands_won=3, decisions_total=4, decisions_correct=2)
        progress.save(1250, stats)
        assert progress.load() == (1250, stats)

    def test_prefix(self):
        """Test keys are stored under the prefix."""
        store = InMemoryKeyValueStore()
        ProgressStore(store, prefix="bjtrainer:").save_balance(500)
        assert store.get(f"bjtrainer:{BALANCE_KEY}") == "500"
        assert store.get(BALANCE_KEY) is None

    def test_corrupt_balance_ignored(self):
        """Test an unreadable balance is treated as missing."""
        store = InMemoryKeyValueStore()
        store.set(BALANCE_KEY, "lots")
        assert ProgressStore(store).load_balance() is None

    def test_negative_balance_ignored(self):
        """Test a negative balance is treated as missing."""
        store = InMemoryKeyValueStore()
        store.set(BALANCE_KEY, "-20")
        assert ProgressStore(store).load_balance() is None

    def test_corrupt_statistics_ignored(self):
        """Test unreadable statistics are treated as missing."""
        store = InMemoryKeyValueStore()
        store.set(STATISTICS_KEY, "{not json")
        assert ProgressStore(store).load_statistics() is None

    def test_clear(self, progress):
        """Test clearing removes both keys."""
        progress.save(900, PlayerStatistics())
        progress.clear()
        assert progress.load() == (None, None)


class TestRedisKeyValueStore:
    """The Redis adapter, against a mocked client."""

    def test_decodes_bytes(self):
        """Test byte values from Redis are decoded."""
        client = MagicMock()
        client.get.return_value = b"700"
        assert RedisKeyValueStore(client).get("k") == "700"

    def test_missing_key(self):
        """Test a missing Redis key reads as None."""
        client = MagicMock()
        client.get.return_value = None
        assert RedisKeyValueStore(client).get("k") is None

    def test_set_and_delete(self):
        """Test writes and deletes reach the client."""
        client = MagicMock()
        store = RedisKeyValueStore(client)
        store.set("k", "v")
        store.delete("k")
        client.set.assert_called_once_with("k", "v")
        client.delete.assert_called_once_with("k")

    @pytest.mark.parametrize("method,args", [("get", ("k",)), ("set", ("k", "v")), ("delete", ("k",))])
    def test_errors_wrapped(self, method, args):
        """Test Redis errors surface as StoreError."""
        client = MagicMock()
        getattr(client, method).side_effect = redis.ConnectionError("down")
        with pytest.raises(StoreError):
            getattr(RedisKeyValueStore(client), method)(*args)


class TestGetStore:
    def test_memory_backend(self):
        """Test the memory backend gives an in-memory store."""
        assert isinstance(get_store("memory"), InMemoryKeyValueStore)

    def test_redis_backend(self):
        """Test a reachable Redis gives a Redis store."""
        client = MagicMock()
        with patch("bjtrainer.persistence.redis.Redis.from_url", return_value=client):
            store = get_store("redis", "redis://localhost:6379/0")
        assert isinstance(store, RedisKeyValueStore)
        client.ping.assert_called_once()

    def test_falls_back_when_redis_unreachable(self):
        """Test an unreachable Redis falls back to memory."""
        client = MagicMock()
        client.ping.side_effect = redis.ConnectionError("refused")
        with patch("bjtrainer.persistence.redis.Redis.from_url", return_value=client):
            store = get_store("redis", "redis://localhost:6379/0")
        assert isinstance(store, InMemoryKeyValueStore)

    def test_from_config(self):
        """Test the progress store is built from the app config."""
        progress = progress_store_from_config(AppConfig(storage_backend="memory"))
        assert isinstance(progress.store, InMemoryKeyValueStore)
        assert progress.prefix == "bjtrainer:"

    def test_global_config_is_package_config(self):
        """Test the default store reads the config bundled with the package."""
        import bjtrainer.config
        import bjtrainer.persistence

        assert bjtrainer.persistence.config is bjtrainer.config.config
        assert AppConfig.__module__ == "bjtrainer.config"
