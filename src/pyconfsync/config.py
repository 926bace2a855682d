"""Client configuration for pyconfsync."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyconfsync._constants import DEFAULT_MIN_FETCH_INTERVAL, DEFAULT_REQUEST_TIMEOUT, USER_AGENT
from pyconfsync.exceptions import ConfSyncConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise ConfSyncConfigError(f"{name} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class SyncConfig:
    """Synchronization configuration.

    Parameters
    ----------
    source_url : str or None
        Locator of the conference dataset.  ``http(s)://`` URLs are
        fetched with aiohttp; ``file://`` URLs and plain paths are read
        from disk.  ``None`` or empty makes every refresh fail with
        ``NO_SOURCE``.
    min_fetch_interval : float
        Minimum seconds between two non-forced network attempts.
        Defaults to one hour.
    request_timeout : float
        Total timeout in seconds applied by the HTTP fetcher.
    store_dir : str or None
        Directory used by :class:`~pyconfsync.storage.JsonFileStore`.
    always_force : bool
        Treat every refresh as forced.  Useful for bundled local data,
        which should always be reloaded.
    user_agent : str
        User-Agent header sent with HTTP requests.
    """

    source_url: str | None = None
    min_fetch_interval: float = DEFAULT_MIN_FETCH_INTERVAL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    store_dir: str | None = None
    always_force: bool = False
    user_agent: str = USER_AGENT

    @classmethod
    def from_env(cls, **overrides: Any) -> SyncConfig:
        """Create configuration from ``CONFSYNC_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        ConfSyncConfigError
            When a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "CONFSYNC_SOURCE_URL": "source_url",
            "CONFSYNC_STORE_DIR": "store_dir",
            "CONFSYNC_USER_AGENT": "user_agent",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        interval_env = env.get("CONFSYNC_MIN_FETCH_INTERVAL")
        if interval_env is not None and "min_fetch_interval" not in overrides:
            config_kwargs["min_fetch_interval"] = _env_float("CONFSYNC_MIN_FETCH_INTERVAL", interval_env)

        timeout_env = env.get("CONFSYNC_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = _env_float("CONFSYNC_REQUEST_TIMEOUT", timeout_env)

        if "always_force" not in overrides:
            config_kwargs["always_force"] = _env_bool(env.get("CONFSYNC_ALWAYS_FORCE"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
