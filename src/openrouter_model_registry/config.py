"""Runtime configuration for the model registry."""

import os
from pathlib import Path
from typing import Optional, Union

from .config_paths import (
    ENV_API_URL,
    ENV_CACHE_DIR,
    ENV_DISABLE_CACHE,
    ENV_OFFLINE,
    ENV_SNAPSHOT_PATH,
    ENV_TIMEOUT,
    env_flag,
    get_user_cache_dir,
)
from .errors import ConfigurationError

OPENROUTER_API_URL = "https://openrouter.ai/api/v1/models"
DEFAULT_TIMEOUT = 30.0


class RegistryConfig:
    """Configuration for fetching and caching the registry."""

    def __init__(
        self,
        api_url: str = OPENROUTER_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        snapshot_path: Optional[Union[str, Path]] = None,
        cache_dir: Optional[Union[str, Path]] = None,
        cache_enabled: bool = True,
        network_enabled: bool = True,
    ):
        """Initialize registry configuration.

        Args:
            api_url: Upstream models endpoint.
            timeout: Request timeout in seconds for the API stage.
            snapshot_path: Custom snapshot JSON file. If None, the bundled
                           snapshot is used.
            cache_dir: Directory for the persisted registry. If None, the
                       platform user cache directory is used.
            cache_enabled: Whether the client persists and reads the cache.
            network_enabled: Whether the API stage is attempted at all.
        """
        if not api_url:
            raise ConfigurationError("api_url must not be empty", field="api_url")
        if timeout <= 0:
            raise ConfigurationError("timeout must be positive", field="timeout")

        self.api_url = api_url
        self.timeout = float(timeout)
        self.snapshot_path = Path(snapshot_path) if snapshot_path else None
        self._cache_dir = Path(cache_dir) if cache_dir else None
        self.cache_enabled = cache_enabled
        self.network_enabled = network_enabled

    @property
    def cache_dir(self) -> Path:
        """Resolved cache directory."""
        return self._cache_dir or get_user_cache_dir()

    @classmethod
    def from_env(cls) -> "RegistryConfig":
        """Build a configuration from ORMR_* environment variables."""
        timeout_raw = os.getenv(ENV_TIMEOUT)
        timeout = DEFAULT_TIMEOUT
        if timeout_raw:
            try:
                timeout = float(timeout_raw)
            except ValueError:
                raise ConfigurationError(f"Invalid {ENV_TIMEOUT} value: {timeout_raw!r}", field="timeout")

        return cls(
            api_url=os.getenv(ENV_API_URL) or OPENROUTER_API_URL,
            timeout=timeout,
            snapshot_path=os.getenv(ENV_SNAPSHOT_PATH) or None,
            cache_dir=os.getenv(ENV_CACHE_DIR) or None,
            cache_enabled=not env_flag(ENV_DISABLE_CACHE),
            network_enabled=not env_flag(ENV_OFFLINE),
        )

    def __repr__(self) -> str:
        return (
            f"RegistryConfig(api_url={self.api_url!r}, timeout={self.timeout}, "
            f"snapshot_path={self.snapshot_path!r}, cache_dir={self._cache_dir!r}, "
            f"cache_enabled={self.cache_enabled}, network_enabled={self.network_enabled})"
        )
