"""
droplet_monitor.config

Runtime settings sourced from the process environment

- .env in the working directory is loaded first (existing env wins)
- DO_API_TOKEN is required; everything else has a default
- CLI options override these values at the call site
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

DEFAULT_BASE_URL = "https://api.digitalocean.com/v2"
DEFAULT_POLL_INTERVAL_S = 30
DEFAULT_MAX_CONCURRENCY = 8
DEFAULT_REQUEST_TIMEOUT_S = 10.0

TOKEN_ENV = "DO_API_TOKEN"
HOST_ID_ENV = "DROPLET_ID"
BASE_URL_ENV = "DO_API_BASE_URL"
POLL_INTERVAL_ENV = "DO_POLL_INTERVAL"
MAX_CONCURRENCY_ENV = "DO_MAX_CONCURRENCY"
REQUEST_TIMEOUT_ENV = "DO_REQUEST_TIMEOUT"


class ConfigError(ValueError):
    """Raised when the environment holds a missing or unusable value."""


@dataclass(frozen=True)
class Settings:
    """
    Monitor settings

    host_id:
    - single droplet id from the environment; reported, not used for polling
      (hosts are enumerated fresh every cycle)
    """

    api_token: str
    host_id: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    poll_interval_s: int = DEFAULT_POLL_INTERVAL_S
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S

    @classmethod
    def from_env(cls, *, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))

        token = (os.getenv(TOKEN_ENV) or "").strip()
        if not token:
            raise ConfigError(f"{TOKEN_ENV} is not set")

        return cls(
            api_token=token,
            host_id=(os.getenv(HOST_ID_ENV) or "").strip() or None,
            base_url=(os.getenv(BASE_URL_ENV) or DEFAULT_BASE_URL).rstrip("/"),
            poll_interval_s=_env_number(POLL_INTERVAL_ENV, int, DEFAULT_POLL_INTERVAL_S),
            max_concurrency=_env_number(MAX_CONCURRENCY_ENV, int, DEFAULT_MAX_CONCURRENCY),
            request_timeout_s=_env_number(REQUEST_TIMEOUT_ENV, float, DEFAULT_REQUEST_TIMEOUT_S),
        )


def _env_number(name: str, kind, default):
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = kind(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be > 0, got {raw!r}")
    return value
