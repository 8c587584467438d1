"""Progress persistence with a Redis backend and in-memory fallback."""

import logging
from abc import ABC, abstractmethod

import redis
from pydantic import ValidationError

from bjtrainer.config import AppConfig, config
from bjtrainer.errors import StoreError
from bjtrainer.statistics import PlayerStatistics

logger = logging.getLogger(__name__)

BALANCE_KEY = "blackjack_balance"
STATISTICS_KEY = "blackjack_statistics"


class KeyValueStore(ABC):
    """Abstract string key-value store."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store for tests and local play."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class RedisKeyValueStore(KeyValueStore):
    """Redis-backed store; client errors surface as ``StoreError``."""

    def __init__(self, redis_client: redis.Redis) -> None:
        self._redis = redis_client

    def get(self, key: str) -> str | None:
        try:
            value = self._redis.get(key)
        except redis.RedisError as exc:
            raise StoreError(f"Redis get failed for {key}") from exc
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            self._redis.set(key, value)
        except redis.RedisError as exc:
            raise StoreError(f"Redis set failed for {key}") from exc

    def delete(self, key: str) -> None:
        try:
            self._redis.delete(key)
        except redis.RedisError as exc:
            raise StoreError(f"Redis delete failed for {key}") from exc


class ProgressStore:
    """
    Saves and restores a player's balance and statistics.

    Values are stored as strings under ``prefix + key``: the balance as a
    decimal integer and the statistics as pydantic JSON. Unreadable
    values are logged and treated as missing.
    """

    def __init__(self, store: KeyValueStore | None = None, prefix: str = "") -> None:
        self.store = store or InMemoryKeyValueStore()
        self.prefix = prefix

    def _key(self, name: str) -> str:
        return f"{self.prefix}{name}"

    def load_balance(self) -> int | None:
        raw = self.store.get(self._key(BALANCE_KEY))
        if raw is None:
            return None
        try:
            balance = int(raw)
        except ValueError:
            logger.warning("Ignoring unreadable stored balance %r", raw)
            return None
        return balance if balance >= 0 else None

    def save_balance(self, balance: int) -> None:
        self.store.set(self._key(BALANCE_KEY), str(balance))

    def load_statistics(self) -> PlayerStatistics | None:
        raw = self.store.get(self._key(STATISTICS_KEY))
        if raw is None:
            return None
        try:
            return PlayerStatistics.model_validate_json(raw)
        except ValidationError:
            logger.warning("Ignoring unreadable stored statistics")
            return None

    def save_statistics(self, statistics: PlayerStatistics) -> None:
        self.store.set(self._key(STATISTICS_KEY), statistics.model_dump_json())

    def load(self) -> tuple[int | None, PlayerStatistics | None]:
        """Return the stored balance and statistics; either may be None."""
        return self.load_balance(), self.load_statistics()

    def save(self, balance: int, statistics: PlayerStatistics) -> None:
        self.save_balance(balance)
        self.save_statistics(statistics)

    def clear(self) -> None:
        self.store.delete(self._key(BALANCE_KEY))
        self.store.delete(self._key(STATISTICS_KEY))


def get_store(backend: str = "memory", redis_url: str | None = None) -> KeyValueStore:
    """
    Build the configured key-value store.

    A Redis backend is checked with ``PING``; when it is unreachable the
    in-memory store is used instead.
    """
    if backend == "redis" and redis_url:
        client = redis.Redis.from_url(redis_url)
        try:
            client.ping()
        except redis.RedisError as exc:
            logger.warning("Redis unavailable at %s (%s), using in-memory store", redis_url, exc)
        else:
            return RedisKeyValueStore(client)
    return InMemoryKeyValueStore()


def progress_store_from_config(cfg: AppConfig | None = None) -> ProgressStore:
    """Progress store for an ``AppConfig``, the global config by default."""
    cfg = cfg or config
    store = get_store(cfg.storage_backend, cfg.redis.url)
    return ProgressStore(store, prefix=cfg.redis.key_prefix)
