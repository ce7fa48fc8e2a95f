"""Shared fixtures for the registry tests."""

import copy
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Generator

import pytest

from openrouter_model_registry.client import ModelRegistryClient
from openrouter_model_registry.config_paths import ALL_ENV_VARS, ENV_CACHE_DIR
from openrouter_model_registry.logging import ROOT_LOGGER_NAME

SONNET_RECORD: Dict[str, Any] = {
    "id": "anthropic/claude-3.5-sonnet",
    "name": "Anthropic: Claude 3.5 Sonnet",
    "description": "Fast and capable model.",
    "created": 1729555200,
    "context_length": 200000,
    "architecture": {
        "modality": "text+image->text",
        "input_modalities": ["text", "image"],
        "output_modalities": ["text"],
        "tokenizer": "Claude",
        "instruct_type": None,
    },
    "pricing": {
        "prompt": "0.000003",
        "completion": "0.000015",
        "image": "0.0048",
        "request": "0",
        "web_search": "0",
        "input_cache_read": "0.0000003",
    },
    "top_provider": {"context_length": 200000, "max_completion_tokens": 8192, "is_moderated": True},
    "per_request_limits": None,
    "supported_parameters": ["max_tokens", "temperature", "top_p", "tools", "tool_choice", "stop"],
}


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Clear ORMR_* variables and point the cache at a temporary directory."""
    for var in ALL_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    cache_dir = tmp_path / "cache"
    monkeypatch.setenv(ENV_CACHE_DIR, str(cache_dir))
    return cache_dir


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Undo handler changes made by CLI runs so caplog sees package records."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture(autouse=True)
def reset_client_singleton() -> Generator[None, None, None]:
    """Reset the default client before and after each test."""
    ModelRegistryClient.cleanup()
    yield
    ModelRegistryClient.cleanup()


@pytest.fixture
def sonnet_record() -> Dict[str, Any]:
    return copy.deepcopy(SONNET_RECORD)


@pytest.fixture
def make_record() -> Callable[..., Dict[str, Any]]:
    """Build a minimal raw record; keyword arguments override fields."""

    def _make(model_id: str, context_length: int = 8192, **overrides: Any) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "id": model_id,
            "name": overrides.pop("name", model_id.split("/")[-1].replace("-", " ").title()),
            "context_length": context_length,
            "pricing": {"prompt": "0.000001", "completion": "0.000002"},
            "architecture": {"modality": "text->text"},
            "supported_parameters": ["temperature"],
        }
        record.update(overrides)
        return record

    return _make
