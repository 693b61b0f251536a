import os
from dataclasses import dataclass, replace
from typing import Any, Optional

from . import __version__

API_URL = "https://api.modrinth.com/v2"
API_V3_URL = "https://api.modrinth.com/v3"
USER_AGENT = f"mr-modpack/{__version__} (version coverage checker)"
CACHE_DURATION = 3600  # 1 hour in seconds
MIN_REQUEST_INTERVAL = 0.1
RATE_LIMIT_THRESHOLD = 10
REQUEST_TIMEOUT = 30
MAX_WORKERS = 8


@dataclass(frozen=True)
class Settings:
    api_url: str = API_URL
    api_v3_url: str = API_V3_URL
    user_agent: str = USER_AGENT
    cache_duration: float = CACHE_DURATION
    min_request_interval: float = MIN_REQUEST_INTERVAL
    rate_limit_threshold: int = RATE_LIMIT_THRESHOLD
    request_timeout: float = REQUEST_TIMEOUT
    max_workers: int = MAX_WORKERS

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "Settings":
        """Read overrides from ``MRMODPACK_*`` environment variables."""
        env = os.environ if environ is None else environ
        settings = cls()
        overrides = {
            "api_url": env.get("MRMODPACK_API_URL"),
            "api_v3_url": env.get("MRMODPACK_API_V3_URL"),
            "user_agent": env.get("MRMODPACK_USER_AGENT"),
            "cache_duration": _number(env.get("MRMODPACK_CACHE_TTL"), float, "MRMODPACK_CACHE_TTL"),
            "max_workers": _number(env.get("MRMODPACK_WORKERS"), int, "MRMODPACK_WORKERS"),
        }
        return replace(settings, **{k: v for k, v in overrides.items() if v not in (None, "")})


def _number(value: Optional[str], kind: Any, name: str):
    if value in (None, ""):
        return None
    try:
        return kind(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None
