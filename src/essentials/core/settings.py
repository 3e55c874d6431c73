"""Environment-driven settings for essentials.

Configuration is explicit, validated at startup, and read from ``ESSENTIALS_*``
environment variables (or a ``.env`` file).

Fields
──────
runner_timeout_ms       : Default wait bound for a batch of async steps
runner_max_concurrency  : Worker threads per async batch (larger batches queue)
log_level               : Structlog log level
log_json                : JSON logs (True), console (False), auto-detect (None)
service_name            : ``service.name`` stamped on every log event

Examples:
    >>> import os
    >>> os.environ["ESSENTIALS_RUNNER_TIMEOUT_MS"] = "250"
    >>> reset_settings()
    >>> get_settings().runner_timeout_ms
    250
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_RUNNER_TIMEOUT_MS = 5000
DEFAULT_RUNNER_MAX_CONCURRENCY = 32


class EssentialsSettings(BaseSettings):
    """Settings shared by every essentials component."""

    model_config = SettingsConfigDict(
        env_prefix="ESSENTIALS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Runner ───────────────────────────────────────────────────
    runner_timeout_ms: int = Field(
        default=DEFAULT_RUNNER_TIMEOUT_MS,
        gt=0,
        description="Milliseconds to wait for a batch of async steps",
    )
    runner_max_concurrency: int = Field(
        default=DEFAULT_RUNNER_MAX_CONCURRENCY,
        gt=0,
        description="Upper bound on worker threads for one batch of async steps",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None
    service_name: str = "essentials"


@lru_cache(maxsize=1)
def get_settings() -> EssentialsSettings:
    """Return the process-wide settings (cached after the first call)."""
    return EssentialsSettings()


def reset_settings() -> None:
    """Drop the cached settings so the next ``get_settings()`` re-reads the environment."""
    get_settings.cache_clear()


__all__ = [
    "DEFAULT_RUNNER_MAX_CONCURRENCY",
    "DEFAULT_RUNNER_TIMEOUT_MS",
    "EssentialsSettings",
    "get_settings",
    "reset_settings",
]
