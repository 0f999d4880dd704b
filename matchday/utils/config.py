"""
Environment-driven configuration for the Matchday toolkit.

Every setting has a default from ``constants`` so the toolkit runs against a
local backend without any environment set up.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .constants import (
    DEFAULT_AUTOSAVE_DEBOUNCE_SECONDS,
    DEFAULT_BACKEND_URL,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
)

ENV_PREFIX = "MATCHDAY_"


def _float_env(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}")
    if value < 0:
        raise ValueError(f"{key} must not be negative, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings.

    Attributes:
        backend_url: Base URL of the REST backend (no trailing slash)
        auth_token: Bearer token sent with every request, if any
        http_timeout: Seconds before an HTTP request is abandoned
        autosave_debounce: Seconds of quiet before a draft is saved
        log_level: Name of the root logging level
    """
    backend_url: str = DEFAULT_BACKEND_URL
    auth_token: Optional[str] = None
    http_timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    autosave_debounce: float = DEFAULT_AUTOSAVE_DEBOUNCE_SECONDS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            env: Mapping to read from (defaults to ``os.environ``)

        Raises:
            ValueError: If a numeric setting cannot be parsed
        """
        env = os.environ if env is None else env
        token = env.get(ENV_PREFIX + "AUTH_TOKEN") or None
        return cls(
            backend_url=(env.get(ENV_PREFIX + "BACKEND_URL") or DEFAULT_BACKEND_URL).rstrip("/"),
            auth_token=token,
            http_timeout=_float_env(env, ENV_PREFIX + "HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT_SECONDS),
            autosave_debounce=_float_env(
                env, ENV_PREFIX + "AUTOSAVE_DEBOUNCE_SECONDS", DEFAULT_AUTOSAVE_DEBOUNCE_SECONDS
            ),
            log_level=(env.get(ENV_PREFIX + "LOG_LEVEL") or "INFO").upper(),
        )
