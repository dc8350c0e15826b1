"""Session credentials persisted in the user's config directory.

The config file is a small TOML document::

    api_url = "https://forge-api.kernelius.com"
    api_key = "forge_agent_..."
    agent_id = "..."
    agent_name = "my-agent"

Resolution order for the config directory:

1. ``FORGE_CONFIG_HOME`` environment variable (all platforms)
2. ``~/.config/forge`` on macOS/Linux
3. ``%APPDATA%\\forge`` on Windows (via platformdirs)
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

import toml
from filelock import FileLock, Timeout

from forge_cli.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://forge-api.kernelius.com"
CONFIG_HOME_ENV_VAR = "FORGE_CONFIG_HOME"
API_URL_ENV_VAR = "FORGE_API_URL"

_OPTIONAL_KEYS = ("api_key", "agent_id", "agent_name")


def default_api_url() -> str:
    """Return the service URL used when none has been persisted."""
    return os.environ.get(API_URL_ENV_VAR, "").strip() or DEFAULT_API_URL


def config_home() -> Path:
    if env_home := os.environ.get(CONFIG_HOME_ENV_VAR):
        return Path(env_home)

    if os.name == "nt":
        from platformdirs import user_config_dir

        return Path(user_config_dir("forge", appauthor=False))

    return Path.home() / ".config" / "forge"


@dataclass(frozen=True, slots=True)
class ForgeConfig:
    """Credentials and service location for one CLI invocation."""

    api_url: str
    api_key: str | None = None
    agent_id: str | None = None
    agent_name: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.api_key)

    def to_dict(self) -> dict[str, str]:
        return {key: value for key, value in asdict(self).items() if value is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ForgeConfig":
        api_url = data.get("api_url")
        if api_url is None or (isinstance(api_url, str) and not api_url.strip()):
            api_url = default_api_url()
        if not isinstance(api_url, str):
            raise ConfigError(f"Invalid config value for 'api_url': {api_url!r}")

        values: dict[str, str | None] = {}
        for key in _OPTIONAL_KEYS:
            value = data.get(key)
            if value is not None and not isinstance(value, (str, int)):
                raise ConfigError(f"Invalid config value for '{key}': {value!r}")
            values[key] = str(value) if value not in (None, "") else None

        return cls(api_url=api_url.strip(), **values)


class ConfigStore:
    """Read and write ``config.toml`` under an exclusive file lock."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or config_home() / "config.toml"
        self.lock_path = self.path.with_suffix(".lock")

    def _acquire_lock(self) -> FileLock:
        return FileLock(self.lock_path, timeout=10)

    def load(self) -> ForgeConfig:
        if not self.path.exists():
            return ForgeConfig(api_url=default_api_url())

        try:
            with self._acquire_lock():
                with open(self.path, "r", encoding="utf-8") as handle:
                    payload = toml.load(handle)
        except (toml.TomlDecodeError, OSError, Timeout) as exc:
            raise ConfigError(f"Failed to read config: {exc}") from exc

        return ForgeConfig.from_dict(payload)

    def save(self, config: ForgeConfig) -> None:
        try:
            self.path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
            with self._acquire_lock():
                with open(self.path, "w", encoding="utf-8") as handle:
                    toml.dump(config.to_dict(), handle)
                if os.name != "nt":
                    os.chmod(self.path, 0o600)
        except (OSError, Timeout) as exc:
            raise ConfigError(f"Failed to save config: {exc}") from exc
        logger.debug("Saved config to %s", self.path)

    def clear(self) -> None:
        """Reset the stored session to the default service URL with no key."""
        self.save(ForgeConfig(api_url=default_api_url()))


def load_config() -> ForgeConfig:
    return ConfigStore().load()


def save_config(config: ForgeConfig) -> None:
    ConfigStore().save(config)


def clear_config() -> None:
    ConfigStore().clear()


def config_path() -> Path:
    return ConfigStore().path
