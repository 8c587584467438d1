"""Configuration management with environment variable support."""

import logging
import os
from dataclasses import dataclass, field
from typing import Literal

from bjtrainer.rules import GameSettings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class RedisConfig:
    """Redis connection configuration."""

    host: str = field(default_factory=lambda: os.getenv("REDIS_HOST", "localhost"))
    port: int = field(default_factory=lambda: int(os.getenv("REDIS_PORT", "6379")))
    db: int = field(default_factory=lambda: int(os.getenv("REDIS_DB", "0")))
    password: str | None = field(default_factory=lambda: os.getenv("REDIS_PASSWORD"))
    key_prefix: str = field(default_factory=lambda: os.getenv("REDIS_KEY_PREFIX", "bjtrainer:"))

    @property
    def url(self) -> str:
        """Build Redis connection URL."""
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"


@dataclass(frozen=True)
class GameConfig:
    """Table rules, read from ``BJ_*`` environment variables."""

    starting_balance: int = field(default_factory=lambda: int(os.getenv("BJ_STARTING_BALANCE", "1000")))
    min_bet: int = field(default_factory=lambda: int(os.getenv("BJ_MIN_BET", "10")))
    max_bet: int = field(default_factory=lambda: int(os.getenv("BJ_MAX_BET", "500")))
    deck_count: int = field(default_factory=lambda: int(os.getenv("BJ_DECK_COUNT", "6")))
    penetration: float = field(default_factory=lambda: float(os.getenv("BJ_PENETRATION", "0.75")))
    blackjack_payout: float = field(default_factory=lambda: float(os.getenv("BJ_BLACKJACK_PAYOUT", "1.5")))
    dealer_hits_soft_17: bool = field(default_factory=lambda: _env_bool("BJ_DEALER_HITS_SOFT_17", "false"))
    allow_surrender: bool = field(default_factory=lambda: _env_bool("BJ_ALLOW_SURRENDER", "true"))
    allow_insurance: bool = field(default_factory=lambda: _env_bool("BJ_ALLOW_INSURANCE", "true"))
    double_after_split: bool = field(default_factory=lambda: _env_bool("BJ_DOUBLE_AFTER_SPLIT", "true"))
    resplit_aces: bool = field(default_factory=lambda: _env_bool("BJ_RESPLIT_ACES", "false"))
    max_split_hands: int = field(default_factory=lambda: int(os.getenv("BJ_MAX_SPLIT_HANDS", "2")))

    def to_settings(self) -> GameSettings:
        """Build validated game settings from this configuration."""
        return GameSettings(
            starting_balance=self.starting_balance,
            min_bet=self.min_bet,
            max_bet=self.max_bet,
            deck_count=self.deck_count,
            penetration=self.penetration,
            dealer_hits_soft_17=self.dealer_hits_soft_17,
            blackjack_payout=self.blackjack_payout,
            allow_surrender=self.allow_surrender,
            allow_insurance=self.allow_insurance,
            double_after_split=self.double_after_split,
            resplit_aces=self.resplit_aces,
            max_split_hands=self.max_split_hands,
        )


@dataclass(frozen=True)
class LoggingConfig:
    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    format: str = LOG_FORMAT


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: _env_bool("DEBUG", "false"))
    storage_backend: Literal["memory", "redis"] = field(
        default_factory=lambda: os.getenv("STORAGE_BACKEND", "memory").lower()  # type: ignore[return-value]
    )

    redis: RedisConfig = field(default_factory=RedisConfig)
    game: GameConfig = field(default_factory=GameConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def configure_logging(cfg: LoggingConfig | None = None, debug: bool = False) -> None:
    """Set up root logging for applications built on the library."""
    cfg = cfg or LoggingConfig()
    level = logging.DEBUG if debug else getattr(logging, cfg.level, logging.INFO)
    logging.basicConfig(level=level, format=cfg.format)


# Global configuration instance
config = AppConfig()
