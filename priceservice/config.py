"""Pricing service configuration management.

Loads configuration from environment variables with sensible defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


@dataclass
class DBConfig:
    """Database connection configuration."""

    url: str
    pool_size: int = 10
    pool_max_overflow: int = 20
    pool_timeout: int = 30
    echo: bool = False  # SQL logging


@dataclass
class CacheConfig:
    """Response cache settings.

    Disabled by default: every request reconciles the requested page afresh.
    """

    enabled: bool = False
    backend: str = "memory"  # memory or redis
    ttl_seconds: int = 300
    redis_url: str = "redis://localhost:6379/0"


@dataclass
class PaginationConfig:
    """Page size bounds for the prices endpoint."""

    default_page_size: int = 10
    max_page_size: int = 100


@dataclass
class ReconcileConfig:
    """Reconciliation algorithm selection."""

    strategy: str = "pairwise"  # pairwise or sweep


@dataclass
class AppConfig:
    """Root application configuration.

    Loads from environment variables with fail-fast on missing required values.
    """

    db: DBConfig
    log_level: str = "INFO"
    log_format: str = "text"  # json or text

    # Feature Flags
    seed_sample_data: bool = False
    enable_metrics: bool = True

    # Sub-configurations with defaults
    cache: CacheConfig = field(default_factory=CacheConfig)
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    reconcile: ReconcileConfig = field(default_factory=ReconcileConfig)

    @classmethod
    def from_env(cls) -> AppConfig:
        """Load configuration from environment variables.

        Required environment variables:
        - DATABASE_URL: SQLAlchemy async connection string

        Optional (with defaults):
        - LOG_LEVEL: Logging verbosity (default: "INFO")
        - CACHE_ENABLED / CACHE_BACKEND: response cache toggle and backend
        - RECONCILE_STRATEGY: "pairwise" or "sweep"

        Raises:
            KeyError: If required environment variables are missing
            ValueError: If an enumerated setting has an unknown value
        """
        database_url = os.environ.get("DATABASE_URL")
        if not database_url:
            raise KeyError(
                "DATABASE_URL environment variable is required. "
                "Example: sqlite+aiosqlite:///./prices.db"
            )

        cache_backend = os.getenv("CACHE_BACKEND", "memory").lower()
        if cache_backend not in ("memory", "redis"):
            raise ValueError(f"Unsupported CACHE_BACKEND '{cache_backend}'")

        strategy = os.getenv("RECONCILE_STRATEGY", "pairwise").lower()
        if strategy not in ("pairwise", "sweep"):
            raise ValueError(f"Unsupported RECONCILE_STRATEGY '{strategy}'")

        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "text"),
            seed_sample_data=os.getenv("SEED_SAMPLE_DATA", "false").lower() == "true",
            enable_metrics=os.getenv("ENABLE_METRICS", "true").lower() == "true",
            db=DBConfig(
                url=database_url,
                pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
                pool_max_overflow=int(os.getenv("DB_POOL_MAX_OVERFLOW", "20")),
                pool_timeout=int(os.getenv("DB_POOL_TIMEOUT", "30")),
                echo=os.getenv("DB_ECHO", "false").lower() == "true",
            ),
            cache=CacheConfig(
                enabled=os.getenv("CACHE_ENABLED", "false").lower() == "true",
                backend=cache_backend,
                ttl_seconds=int(os.getenv("CACHE_TTL_SECONDS", "300")),
                redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            ),
            pagination=PaginationConfig(
                default_page_size=int(os.getenv("DEFAULT_PAGE_SIZE", "10")),
                max_page_size=int(os.getenv("MAX_PAGE_SIZE", "100")),
            ),
            reconcile=ReconcileConfig(strategy=strategy),
        )


# Singleton instance (lazy-loaded)
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or create singleton AppConfig instance from environment.

    Returns:
        AppConfig: Application configuration

    Raises:
        KeyError: If required environment variables are missing
    """
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the environment."""
    global _config
    _config = None
