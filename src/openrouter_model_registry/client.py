"""Client cache wrapper.

``ModelRegistryClient`` is the stateful entry point for applications. It keeps
the current registry in memory, persists it through ``RegistryCache``, makes
sure only one fallback-chain run is in flight at a time, and notifies
subscribers whenever its state changes.

Example:

    from openrouter_model_registry import get_client

    client = get_client()
    client.load()
    limit = client.get_context_limit("claude-3.5-sonnet")
"""

import asyncio
import threading
from concurrent.futures import Future
from datetime import datetime
from typing import Any, Callable, List, Optional, Union

from .cache import RegistryCache
from .config import RegistryConfig
from .errors import DegradedDataError
from .fetcher import FetchResult, fetch_with_fallback_detailed, get_fallback_registry
from .logging import LogEvent, log_error, log_info, log_warning
from .models import LLMModel, ModelProvider, RegistrySource
from .query import (
    BudgetInfo,
    QueryOptions,
    RegistryStats,
    find_model,
    get_budget_status,
    get_providers,
    get_stats,
    query_models,
)
from .registry import Registry

FetchFunction = Callable[[RegistryConfig], Union[FetchResult, Registry]]
Subscriber = Callable[["ModelRegistryClient"], None]


def _degraded_error(result: FetchResult) -> Optional[DegradedDataError]:
    """Describe why a non-API source was served, or None for live data."""
    if not result.degraded:
        return None
    source = result.registry.source.value
    details = "; ".join(failure.describe() for failure in result.failures)
    message = f"Serving {source} data"
    if details:
        message = f"{message} ({details})"
    return DegradedDataError(message, source=source, failures=result.failures)


class ModelRegistryClient:
    """Stateful, subscribable access to the model registry."""

    _default_instance: Optional["ModelRegistryClient"] = None
    _instance_lock = threading.RLock()

    @classmethod
    def get_default(cls) -> "ModelRegistryClient":
        """Get the process-wide default client.

        Returns:
            The singleton ModelRegistryClient, configured from the environment
        """
        with cls._instance_lock:
            if cls._default_instance is None:
                cls._default_instance = cls()
            return cls._default_instance

    @staticmethod
    def cleanup() -> None:
        """Drop the default client instance."""
        with ModelRegistryClient._instance_lock:
            ModelRegistryClient._default_instance = None

    def __init__(
        self,
        config: Optional[RegistryConfig] = None,
        cache: Optional[RegistryCache] = None,
        fetch: Optional[FetchFunction] = None,
    ):
        """Initialize a client.

        Args:
            config: Registry configuration. If None, it is read from the environment.
            cache: Persisted cache. If None, one is created in ``config.cache_dir``
                   unless caching is disabled.
            fetch: Function running the fallback chain. Defaults to
                   :func:`fetch_with_fallback_detailed`.
        """
        self.config = config or RegistryConfig.from_env()
        if cache is None and self.config.cache_enabled:
            cache = RegistryCache(self.config.cache_dir)
        self._cache = cache
        self._fetch: FetchFunction = fetch or fetch_with_fallback_detailed

        self._registry: Optional[Registry] = None
        self._error: Optional[Exception] = None
        self._last_updated: Optional[datetime] = None

        self._state_lock = threading.RLock()
        self._flight_lock = threading.Lock()
        self._pending: Optional["Future[Registry]"] = None
        self._subscribers: List[Subscriber] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def registry(self) -> Optional[Registry]:
        return self._registry

    @property
    def models(self) -> List[LLMModel]:
        registry = self._registry
        return list(registry.models) if registry else []

    @property
    def is_loading(self) -> bool:
        return self._pending is not None

    @property
    def is_stale(self) -> bool:
        """True when the current registry's expiry has passed."""
        registry = self._registry
        return registry is not None and registry.is_expired()

    @property
    def error(self) -> Optional[Exception]:
        """Why the current data is degraded, or None for fresh API data."""
        return self._error

    @property
    def last_updated(self) -> Optional[datetime]:
        return self._last_updated

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback invoked with the client after each state change.

        Returns:
            A function that removes the subscription
        """
        with self._state_lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._state_lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        with self._state_lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(self)
            except Exception as e:
                log_warning(LogEvent.MODEL_REGISTRY, "Subscriber raised during notification", error=str(e))

    def _set_state(self, registry: Registry, error: Optional[Exception]) -> None:
        with self._state_lock:
            self._registry = registry
            self._error = error
            self._last_updated = registry.fetched_at

    def _publish(self, registry: Registry, error: Optional[Exception]) -> None:
        """Set state under the flight lock so cache adoption cannot interleave."""
        with self._flight_lock:
            self._set_state(registry, error)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, force: bool = False) -> Registry:
        """Return a fresh registry, loading it if needed.

        Without ``force``, the in-memory registry is returned if it has not
        expired, then the persisted cache is tried. Otherwise the fallback
        chain runs. Concurrent callers share a single chain run.

        Args:
            force: Skip the in-memory and persisted caches

        Returns:
            The current registry
        """
        if not force:
            current = self._registry
            if current is not None and not current.is_expired():
                return current
            cached = self._cache.load() if self._cache else None
            if cached is not None:
                with self._flight_lock:
                    # A run that finished while the cache was read holds newer data
                    current = self._registry
                    if current is not None and not current.is_expired():
                        return current
                    log_info(LogEvent.CACHE, "Using persisted registry", source=cached.source.value)
                    self._set_state(cached, self._cached_error(cached))
                self._notify()
                return cached

        with self._flight_lock:
            pending = self._pending
            if pending is None and not force:
                # A run may have completed while we were checking the cache
                current = self._registry
                if current is not None and not current.is_expired():
                    return current
            owner = pending is None
            if owner:
                pending = Future()
                self._pending = pending

        if not owner:
            return pending.result()

        self._notify()
        try:
            registry = self._run_chain()
        except BaseException as e:
            pending.set_exception(e)
            raise
        else:
            pending.set_result(registry)
        finally:
            with self._flight_lock:
                self._pending = None
            self._notify()
        return registry

    def refresh(self) -> Registry:
        """Force a fallback-chain run."""
        return self.load(force=True)

    async def aload(self, force: bool = False) -> Registry:
        """Awaitable variant of :meth:`load`."""
        return await asyncio.to_thread(self.load, force)

    async def arefresh(self) -> Registry:
        """Awaitable variant of :meth:`refresh`."""
        return await asyncio.to_thread(self.load, True)

    @staticmethod
    def _cached_error(registry: Registry) -> Optional[DegradedDataError]:
        if registry.source is RegistrySource.API:
            return None
        source = registry.source.value
        return DegradedDataError(f"Serving {source} data from the persisted cache", source=source)

    def _run_chain(self) -> Registry:
        try:
            outcome = self._fetch(self.config)
        except Exception as e:
            log_error(LogEvent.FETCH, "Registry fetch failed", error=str(e))
            registry = self._registry
            if registry is None and self._cache:
                registry = self._cache.load(allow_expired=True)
            if registry is None:
                registry = get_fallback_registry()
            self._publish(registry, e)
            return registry

        result = outcome if isinstance(outcome, FetchResult) else FetchResult(outcome)
        self._publish(result.registry, _degraded_error(result))
        if self._cache:
            self._cache.save(result.registry)
        return result.registry

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_model(self, model_id: str) -> Optional[LLMModel]:
        """Resolve a model reference with :func:`find_model`."""
        return find_model(model_id, self.models)

    def get_context_limit(self, model_id: str) -> Optional[int]:
        model = self.get_model(model_id)
        return model.context_length if model else None

    def get_budget_status(self, model_id: str, tokens: int) -> Optional[BudgetInfo]:
        """Budget usage of ``tokens`` against a model's context, or None if the model is unknown."""
        model = self.get_model(model_id)
        return get_budget_status(tokens, model.context_length) if model else None

    def query(self, options: Optional[QueryOptions] = None, **filters: Any) -> List[LLMModel]:
        """Run :func:`query_models` over the current models."""
        return query_models(self.models, options, **filters)

    def get_providers(self) -> List[ModelProvider]:
        return get_providers(self.models)

    def get_stats(self) -> RegistryStats:
        return get_stats(self.models)


def get_client() -> ModelRegistryClient:
    """Get the process-wide default client."""
    return ModelRegistryClient.get_default()
