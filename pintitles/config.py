"""
Run settings.

Settings come from the environment (optionally seeded from a .env file)
and can be overridden by command line flags.
"""

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from .errors import ConfigError

PINBOARD_API_HOST = "api.pinboard.in"
RESULTS_PER_REQUEST = 100
TITLE_TIMEOUT_MS = 3000
MAX_TITLE_BYTES = 1024 * 1024
EXCLUDED_SUFFIXES: Tuple[str, ...] = (".pdf",)
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_limit(value: Any) -> Optional[int]:
    """Positive integers limit the run; anything else means unbounded."""
    if value is None or isinstance(value, bool):
        return None
    try:
        limit = int(str(value).strip())
    except ValueError:
        return None
    return limit if limit > 0 else None


def _int_env(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    token: str
    limit: Optional[int] = None
    page_size: int = RESULTS_PER_REQUEST
    delay_ms: int = 0
    title_timeout_ms: int = TITLE_TIMEOUT_MS
    api_host: str = PINBOARD_API_HOST
    excluded_suffixes: Tuple[str, ...] = EXCLUDED_SUFFIXES
    max_title_bytes: int = MAX_TITLE_BYTES
    dry_run: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        if not self.token:
            raise ConfigError("Missing PINBOARD_TOKEN")
        if self.page_size <= 0:
            raise ConfigError("page_size must be positive")
        if self.delay_ms < 0:
            raise ConfigError("delay_ms must not be negative")
        if self.title_timeout_ms <= 0:
            raise ConfigError("title_timeout_ms must be positive")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}")

    @property
    def api_base(self) -> str:
        return f"https://{self.api_host}/v1"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, **overrides) -> "Settings":
        """Build settings from environment variables, then apply overrides.

        Overrides set to None are ignored so argparse defaults can be passed
        straight through.
        """
        env = os.environ if env is None else env
        values = {
            "token": (env.get("PINBOARD_TOKEN") or "").strip(),
            "page_size": _int_env(env, "PINTITLES_PAGE_SIZE", RESULTS_PER_REQUEST),
            "delay_ms": _int_env(env, "PINTITLES_DELAY_MS", 0),
            "title_timeout_ms": _int_env(env, "PINTITLES_TITLE_TIMEOUT_MS", TITLE_TIMEOUT_MS),
            "log_level": env.get("PINTITLES_LOG_LEVEL", "INFO"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
