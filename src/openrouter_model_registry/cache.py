"""Persisted registry cache.

The last assembled registry is stored as a single JSON blob in the user cache
directory. Persistence is best-effort: every failure is logged at debug level
and reported through the return value, never raised, since the in-memory
registry stays valid regardless.
"""

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .config_paths import ensure_cache_dir_exists, get_cache_file_path, get_user_cache_dir
from .logging import LogEvent, log_debug, log_info
from .registry import Registry


class RegistryCache:
    """Read and write the persisted registry blob."""

    def __init__(self, cache_dir: Optional[Union[str, Path]] = None):
        """Initialize the cache.

        Args:
            cache_dir: Directory holding the cache file. If None, the user
                       cache directory is used.
        """
        self.cache_dir = Path(cache_dir) if cache_dir else get_user_cache_dir()

    @property
    def path(self) -> Path:
        return get_cache_file_path(self.cache_dir)

    def _read(self) -> Optional[Registry]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return Registry.from_dict(data)
        except FileNotFoundError:
            return None
        except (OSError, ValueError, KeyError, TypeError) as e:
            log_debug(LogEvent.CACHE, "Ignoring unreadable registry cache", path=str(self.path), error=str(e))
            return None

    def load(self, allow_expired: bool = False, now: Optional[datetime] = None) -> Optional[Registry]:
        """Load the cached registry.

        Args:
            allow_expired: Return the registry even if its expiry has passed
            now: Reference time for the expiry check (defaults to now, UTC)

        Returns:
            The cached Registry, or None if it is missing, corrupt or expired
        """
        registry = self._read()
        if registry is None:
            return None
        if not allow_expired and registry.is_expired(now):
            log_debug(LogEvent.CACHE, "Registry cache is expired", expires_at=registry.metadata.expires_at)
            return None
        return registry

    def save(self, registry: Registry) -> bool:
        """Write the registry atomically.

        Returns:
            True if the cache file was written
        """
        tmp_path: Optional[Path] = None
        try:
            directory = ensure_cache_dir_exists(self.cache_dir)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=directory, prefix=".registry-", suffix=".tmp", delete=False
            ) as tmp_file:
                tmp_path = Path(tmp_file.name)
                json.dump(registry.to_dict(), tmp_file)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            log_debug(LogEvent.CACHE, "Could not persist registry cache", path=str(self.path), error=str(e))
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            return False

        log_debug(LogEvent.CACHE, "Persisted registry cache", path=str(self.path))
        return True

    def clear(self) -> bool:
        """Delete the cache file.

        Returns:
            True if a file was removed
        """
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            log_debug(LogEvent.CACHE, "Could not clear registry cache", path=str(self.path), error=str(e))
            return False
        log_info(LogEvent.CACHE, "Cleared registry cache", path=str(self.path))
        return True

    def info(self) -> Dict[str, Any]:
        """Describe the cache file for diagnostics."""
        path = self.path
        info: Dict[str, Any] = {"path": str(path), "exists": path.exists()}
        if not info["exists"]:
            return info

        try:
            stat = path.stat()
        except OSError as e:
            info["error"] = str(e)
            return info

        info["size"] = stat.st_size
        info["modified"] = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat()
        registry = self._read()
        if registry is not None:
            info["metadata"] = registry.metadata.to_dict()
            info["expired"] = registry.is_expired()
        return info
