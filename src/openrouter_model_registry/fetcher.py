"""Fallback-chain fetcher.

The registry is loaded from the first source that yields usable data:

1. the live OpenRouter ``/models`` endpoint,
2. the snapshot bundled with the package,
3. the hardcoded fallback models.

Stages run strictly in that order and never in parallel. Stage failures are
logged as warnings and recorded; the chain as a whole always returns a
registry because the last stage performs no I/O and cannot fail.
"""

import asyncio
import json
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

import requests

from .config import RegistryConfig
from .config_paths import APP_NAME, SNAPSHOT_FILENAME, SNAPSHOT_PACKAGE, get_snapshot_override_path
from .errors import InvalidResponseError, NetworkError, SnapshotError
from .fallback import get_fallback_models
from .logging import LogEvent, get_logger, log_debug, log_info, log_warning
from .models import RegistrySource
from .normalizer import normalize_all
from .registry import Registry, assemble

logger = get_logger("fetcher")

_REQUEST_HEADERS = {
    "Accept": "application/json",
    "User-Agent": APP_NAME,
}


@dataclass(frozen=True)
class StageFailure:
    """A fallback stage that did not produce a registry.

    Attributes:
        source: The stage that failed
        error: The exception that stopped it
    """

    source: RegistrySource
    error: Exception

    def describe(self) -> str:
        return f"{self.source.value}: {self.error}"


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one fallback-chain run."""

    registry: Registry
    failures: List[StageFailure] = field(default_factory=list)

    @property
    def source(self) -> RegistrySource:
        return self.registry.source

    @property
    def degraded(self) -> bool:
        """True when the registry did not come from the live API."""
        return self.registry.source is not RegistrySource.API


def _extract_records(payload: Any, source: str) -> List[Any]:
    """Validate the ``{"data": [...]}`` envelope and return the record list.

    Raises:
        InvalidResponseError: If ``data`` is missing, not a list or empty
    """
    if not isinstance(payload, dict):
        raise InvalidResponseError("Expected a JSON object at the top level", source=source)
    if "data" not in payload:
        raise InvalidResponseError("Missing 'data' field", source=source)
    records = payload["data"]
    if not isinstance(records, list):
        raise InvalidResponseError(f"'data' must be a list, got {type(records).__name__}", source=source)
    if not records:
        raise InvalidResponseError("'data' list is empty", source=source)
    return records


def fetch_from_openrouter(config: Optional[RegistryConfig] = None) -> List[Any]:
    """Retrieve raw model records from the OpenRouter API.

    Args:
        config: Registry configuration. If None, defaults are used.

    Returns:
        The raw ``data`` list from the response

    Raises:
        NetworkError: On a transport error or a non-2xx status
        InvalidResponseError: If the body is not valid JSON or has the wrong shape
    """
    config = config or RegistryConfig()
    url = config.api_url
    logger.debug(f"Fetching models from {url}")

    try:
        response = requests.get(url, timeout=config.timeout, headers=_REQUEST_HEADERS)
    except requests.RequestException as e:
        raise NetworkError(f"Request to {url} failed: {e}", url=url) from e

    if not 200 <= response.status_code < 300:
        raise NetworkError(
            f"Request to {url} returned HTTP {response.status_code}",
            url=url,
            status_code=response.status_code,
        )

    try:
        payload = response.json()
    except ValueError as e:
        raise InvalidResponseError(f"Response body is not valid JSON: {e}", source=url) from e

    return _extract_records(payload, url)


def _read_snapshot_text(config: RegistryConfig) -> Tuple[str, str]:
    override = config.snapshot_path or get_snapshot_override_path()
    if override is not None:
        path = Path(override)
        try:
            return path.read_text(encoding="utf-8"), str(path)
        except OSError as e:
            raise SnapshotError(f"Cannot read snapshot file {path}: {e}", path=str(path)) from e

    location = f"{SNAPSHOT_PACKAGE}/{SNAPSHOT_FILENAME}"
    try:
        resource = resources.files(SNAPSHOT_PACKAGE) / SNAPSHOT_FILENAME
        return resource.read_text(encoding="utf-8"), location
    except (OSError, ModuleNotFoundError) as e:
        raise SnapshotError(f"Bundled snapshot is unavailable: {e}", path=location) from e


def load_snapshot(config: Optional[RegistryConfig] = None) -> List[Any]:
    """Load raw model records from the snapshot.

    The bundled ``data/latest.json`` is used unless ``config.snapshot_path``
    or ``ORMR_SNAPSHOT_PATH`` points elsewhere.

    Raises:
        SnapshotError: If the snapshot cannot be read, parsed or validated
    """
    config = config or RegistryConfig()
    text, location = _read_snapshot_text(config)

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {e}", path=location) from e

    try:
        records = _extract_records(payload, location)
    except InvalidResponseError as e:
        raise SnapshotError(f"Snapshot has an invalid shape: {e.message}", path=location) from e

    log_debug(LogEvent.SNAPSHOT, "Read snapshot", location=location, records=len(records))
    return records


def _assemble_stage(records: List[Any], source: RegistrySource, origin: str) -> Registry:
    models = normalize_all(records)
    if not models:
        raise InvalidResponseError("No usable model records", source=origin)
    return assemble(models, source)


def fetch_registry(config: Optional[RegistryConfig] = None) -> Registry:
    """Run the API stage only.

    Raises:
        NetworkError, InvalidResponseError: If the API stage fails
    """
    config = config or RegistryConfig()
    return _assemble_stage(fetch_from_openrouter(config), RegistrySource.API, config.api_url)


def load_snapshot_registry(config: Optional[RegistryConfig] = None) -> Registry:
    """Run the snapshot stage only.

    Raises:
        SnapshotError: If the snapshot stage fails
    """
    records = load_snapshot(config)
    try:
        return _assemble_stage(records, RegistrySource.SNAPSHOT, "snapshot")
    except InvalidResponseError as e:
        raise SnapshotError(f"Snapshot holds no usable models: {e.message}") from e


def get_fallback_registry() -> Registry:
    """Build a registry from the hardcoded fallback models."""
    return assemble(get_fallback_models(), RegistrySource.FALLBACK)


def fetch_with_fallback_detailed(config: Optional[RegistryConfig] = None) -> FetchResult:
    """Run the fallback chain and report which stages failed.

    Args:
        config: Registry configuration. If None, it is read from the environment.

    Returns:
        FetchResult with the registry and the failures of skipped stages
    """
    config = config or RegistryConfig.from_env()
    failures: List[StageFailure] = []

    stages: List[Tuple[RegistrySource, Callable[[], Registry]]] = [
        (RegistrySource.API, lambda: fetch_registry(config)),
        (RegistrySource.SNAPSHOT, lambda: load_snapshot_registry(config)),
    ]

    for source, stage in stages:
        if source is RegistrySource.API and not config.network_enabled:
            failures.append(StageFailure(source, NetworkError("Network access is disabled")))
            log_info(LogEvent.FETCH, "Skipping API stage, network access is disabled")
            continue
        try:
            registry = stage()
        except Exception as e:
            failures.append(StageFailure(source, e))
            log_warning(LogEvent.FALLBACK, "Fallback stage failed", stage=source.value, error=e)
            continue
        log_info(LogEvent.FETCH, "Loaded registry", source=source.value, models=registry.metadata.model_count)
        return FetchResult(registry, failures)

    registry = get_fallback_registry()
    log_warning(
        LogEvent.FALLBACK,
        "Serving hardcoded fallback models",
        models=registry.metadata.model_count,
    )
    return FetchResult(registry, failures)


def fetch_with_fallback(config: Optional[RegistryConfig] = None) -> Registry:
    """Load the registry from the first stage that succeeds. Never raises."""
    return fetch_with_fallback_detailed(config).registry


async def fetch_with_fallback_async(config: Optional[RegistryConfig] = None) -> Registry:
    """Awaitable variant of :func:`fetch_with_fallback`.

    The sequential chain runs on a worker thread so the event loop is not
    blocked by the HTTP request.
    """
    return await asyncio.to_thread(fetch_with_fallback, config)
