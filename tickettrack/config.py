"""
Application Configuration.

Pydantic Settings model for TicketTrack.  Values come from environment
variables and an optional ``.env`` file.  Inject an ``AppConfig`` where
needed; ``get_config()`` exists for modules created before the
composition root runs (e.g. ``StructuredLogger``).
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings


class AppConfig(BaseSettings):
    """Central configuration loaded from environment variables and defaults."""

    # --- Supabase ---
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: SecretStr = SecretStr("")

    # --- Tables ---
    PROFILES_TABLE: str = "profiles"
    TICKETS_TABLE: str = "tickets"

    # --- Role resolution ---
    # The profile row written during sign-up may not be readable yet when
    # the session notification arrives.
    ROLE_LOOKUP_RETRIES: int = Field(default=3, ge=0)
    ROLE_LOOKUP_DELAY_S: float = Field(default=0.5, ge=0)

    # --- Live ticket queries ---
    LIVE_QUERY_INTERVAL_S: float = Field(default=2.0, gt=0)
    LIVE_QUERY_MAX_INTERVAL_S: float = Field(default=30.0, gt=0)

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "tickettrack.log"
    LOG_MAX_BYTES: int = 5_242_880  # 5 MB
    LOG_BACKUP_COUNT: int = 3

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @model_validator(mode="after")
    def _warn_missing_env(self) -> "AppConfig":
        """Log a startup warning when the backend is not configured."""
        _log = logging.getLogger("tickettrack.config")

        if not Path(".env").exists():
            _log.warning(
                "No .env file found; configuration loaded from "
                "environment variables or defaults."
            )

        if not self.SUPABASE_URL:
            _log.warning(
                "SUPABASE_URL is empty; every remote call will fail "
                "until the backend is configured."
            )

        return self

    @property
    def log_level(self) -> int:
        """Numeric ``logging`` level for ``LOG_LEVEL`` (INFO when unknown)."""
        level = logging.getLevelName(self.LOG_LEVEL.upper())
        return level if isinstance(level, int) else logging.INFO


# ---------------------------------------------------------------------------
# Module-level singleton factory
# ---------------------------------------------------------------------------

_config_instance: Optional[AppConfig] = None
_config_lock: threading.Lock = threading.Lock()


def get_config() -> AppConfig:
    """Return a cached ``AppConfig`` singleton (check-lock-check)."""
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = AppConfig()
    return _config_instance


def reset_config() -> None:
    """Drop the cached instance so the next ``get_config()`` re-reads the environment."""
    global _config_instance
    with _config_lock:
        _config_instance = None
