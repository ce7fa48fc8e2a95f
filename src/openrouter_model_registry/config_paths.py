"""Configuration path handling for the model registry.

This module implements path resolution for the registry cache and the bundled
snapshot. The cache follows the XDG Base Directory Specification via
platformdirs; both locations can be overridden through environment variables.
"""

import os
from pathlib import Path
from typing import Optional

import platformdirs

# Application name used for directory paths
APP_NAME = "openrouter-model-registry"

# Environment variable names
ENV_API_URL = "ORMR_API_URL"
ENV_TIMEOUT = "ORMR_TIMEOUT"
ENV_SNAPSHOT_PATH = "ORMR_SNAPSHOT_PATH"
ENV_CACHE_DIR = "ORMR_CACHE_DIR"
ENV_DISABLE_CACHE = "ORMR_DISABLE_CACHE"
ENV_OFFLINE = "ORMR_OFFLINE"

ALL_ENV_VARS = [
    ENV_API_URL,
    ENV_TIMEOUT,
    ENV_SNAPSHOT_PATH,
    ENV_CACHE_DIR,
    ENV_DISABLE_CACHE,
    ENV_OFFLINE,
]

# Default filenames
CACHE_FILENAME = "llm-model-registry.json"
SNAPSHOT_FILENAME = "latest.json"
SNAPSHOT_PACKAGE = "openrouter_model_registry.data"


def env_flag(name: str) -> bool:
    """Return True if the environment variable is set to a truthy value."""
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes")


def get_user_cache_dir() -> Path:
    """Get the cache directory, respecting the ORMR_CACHE_DIR override."""
    custom_dir = os.getenv(ENV_CACHE_DIR)
    if custom_dir:
        return Path(custom_dir)
    return Path(platformdirs.user_cache_dir(APP_NAME))


def ensure_cache_dir_exists(cache_dir: Optional[Path] = None) -> Path:
    """Ensure that the cache directory exists.

    Args:
        cache_dir: Directory to create. Defaults to the resolved user cache dir.

    Returns:
        The existing (or newly created) directory

    Raises:
        OSError: If the directory cannot be created
        PermissionError: If the directory exists but is not writable
    """
    directory = cache_dir or get_user_cache_dir()
    directory.mkdir(parents=True, exist_ok=True)

    if not os.access(directory, os.W_OK):
        raise PermissionError(f"Cache directory is not writable: {directory}")
    return directory


def get_cache_file_path(cache_dir: Optional[Path] = None) -> Path:
    """Get the path of the persisted registry blob."""
    return (cache_dir or get_user_cache_dir()) / CACHE_FILENAME


def get_snapshot_override_path() -> Optional[Path]:
    """Get the snapshot path from ORMR_SNAPSHOT_PATH, if set.

    The path is returned even when it does not exist, so that a broken
    override surfaces as a snapshot stage failure instead of silently
    falling back to the bundled file.
    """
    env_path = os.getenv(ENV_SNAPSHOT_PATH)
    if env_path:
        return Path(env_path)
    return None
