"""Tests for runtime configuration and path resolution."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from openrouter_model_registry.config import DEFAULT_TIMEOUT, OPENROUTER_API_URL, RegistryConfig
from openrouter_model_registry.config_paths import (
    APP_NAME,
    CACHE_FILENAME,
    ENV_API_URL,
    ENV_CACHE_DIR,
    ENV_DISABLE_CACHE,
    ENV_OFFLINE,
    ENV_SNAPSHOT_PATH,
    ENV_TIMEOUT,
    ensure_cache_dir_exists,
    env_flag,
    get_cache_file_path,
    get_snapshot_override_path,
    get_user_cache_dir,
)
from openrouter_model_registry.errors import ConfigurationError


class TestRegistryConfig:
    """Constructor defaults and validation."""

    def test_defaults(self, isolated_env: Path) -> None:
        config = RegistryConfig()

        assert config.api_url == OPENROUTER_API_URL
        assert config.timeout == DEFAULT_TIMEOUT
        assert config.snapshot_path is None
        assert config.cache_dir == isolated_env
        assert config.cache_enabled is True
        assert config.network_enabled is True

    @pytest.mark.parametrize("kwargs, field", [({"api_url": ""}, "api_url"), ({"timeout": 0}, "timeout")])
    def test_invalid_values(self, kwargs: dict, field: str) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            RegistryConfig(**kwargs)
        assert exc_info.value.field == field

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv(ENV_API_URL, "https://mirror.test/models")
        monkeypatch.setenv(ENV_TIMEOUT, "2.5")
        monkeypatch.setenv(ENV_SNAPSHOT_PATH, str(tmp_path / "snap.json"))
        monkeypatch.setenv(ENV_CACHE_DIR, str(tmp_path / "elsewhere"))
        monkeypatch.setenv(ENV_DISABLE_CACHE, "true")
        monkeypatch.setenv(ENV_OFFLINE, "1")

        config = RegistryConfig.from_env()

        assert config.api_url == "https://mirror.test/models"
        assert config.timeout == 2.5
        assert config.snapshot_path == tmp_path / "snap.json"
        assert config.cache_dir == tmp_path / "elsewhere"
        assert config.cache_enabled is False
        assert config.network_enabled is False

    def test_from_env_rejects_bad_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_TIMEOUT, "soon")
        with pytest.raises(ConfigurationError, match=ENV_TIMEOUT):
            RegistryConfig.from_env()

    def test_repr(self) -> None:
        assert "network_enabled=True" in repr(RegistryConfig())


class TestConfigPaths:
    """Cache and snapshot locations."""

    def test_cache_dir_override(self, isolated_env: Path) -> None:
        assert get_user_cache_dir() == isolated_env
        assert get_cache_file_path() == isolated_env / CACHE_FILENAME

    def test_platform_cache_dir(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.delenv(ENV_CACHE_DIR)
        with patch("openrouter_model_registry.config_paths.platformdirs.user_cache_dir") as mock_cache_dir:
            mock_cache_dir.return_value = str(tmp_path / APP_NAME)
            assert get_user_cache_dir() == tmp_path / APP_NAME
            mock_cache_dir.assert_called_once_with(APP_NAME)

    def test_default_cache_dir_contains_app_name(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(ENV_CACHE_DIR)
        assert APP_NAME in str(get_user_cache_dir())

    def test_ensure_cache_dir_creates_directory(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "cache"
        assert not target.exists()

        assert ensure_cache_dir_exists(target) == target
        assert target.is_dir()

    @pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="permission bits are not enforced")
    def test_ensure_cache_dir_rejects_read_only(self, tmp_path: Path) -> None:
        target = tmp_path / "read-only"
        target.mkdir()
        target.chmod(0o500)
        try:
            with pytest.raises(PermissionError):
                ensure_cache_dir_exists(target)
        finally:
            target.chmod(0o700)

    def test_snapshot_override(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        assert get_snapshot_override_path() is None
        monkeypatch.setenv(ENV_SNAPSHOT_PATH, str(tmp_path / "missing.json"))
        assert get_snapshot_override_path() == tmp_path / "missing.json"

    @pytest.mark.parametrize("value, expected", [("1", True), ("TRUE", True), ("yes", True), ("0", False), ("", False)])
    def test_env_flag(self, monkeypatch: pytest.MonkeyPatch, value: str, expected: bool) -> None:
        monkeypatch.setenv(ENV_OFFLINE, value)
        assert env_flag(ENV_OFFLINE) is expected
