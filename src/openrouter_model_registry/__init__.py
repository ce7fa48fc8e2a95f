"""Registry of OpenRouter LLM models.

This package fetches the OpenRouter model catalog, normalizes it into a strict
internal schema and serves it as an immutable, indexed registry. Loading falls
back from the live API to a bundled snapshot and finally to a hardcoded model
list, so a usable registry is always available.
"""

# Version of the package
try:
    from importlib.metadata import version as _version

    __version__ = _version("openrouter-model-registry")
except ImportError:
    raise ImportError(
        "Failed to determine package version. This package requires Python 3.9+ "
        "where importlib.metadata is available, or must be installed as a package."
    )

# Import main components for easier access
from .cache import RegistryCache
from .client import ModelRegistryClient, get_client
from .config import RegistryConfig
from .errors import (
    ConfigurationError,
    DegradedDataError,
    InvalidResponseError,
    ModelNotFoundError,
    ModelRegistryError,
    NetworkError,
    SnapshotError,
)
from .fetcher import (
    FetchResult,
    StageFailure,
    fetch_from_openrouter,
    fetch_registry,
    fetch_with_fallback,
    fetch_with_fallback_async,
    fetch_with_fallback_detailed,
    get_fallback_registry,
    load_snapshot,
    load_snapshot_registry,
)
from .models import (
    LLMModel,
    ModelCapabilities,
    ModelDefaults,
    ModelPricing,
    ModelProvider,
    RegistrySource,
    RequestLimits,
    SizeTier,
    SupportedParameter,
)
from .normalizer import get_size_tier, normalize, normalize_all
from .providers import get_provider_info
from .query import (
    BudgetInfo,
    BudgetStatus,
    QueryOptions,
    RegistryStats,
    find_model,
    get_budget_status,
    get_context_limit,
    get_providers,
    get_stats,
    is_over_budget,
    query_models,
)
from .registry import Registry, RegistryMetadata, assemble

# Define public API
__all__ = [
    # Client
    "ModelRegistryClient",
    "get_client",
    "RegistryConfig",
    "RegistryCache",
    # Schema
    "LLMModel",
    "ModelCapabilities",
    "ModelDefaults",
    "ModelPricing",
    "ModelProvider",
    "RequestLimits",
    "SizeTier",
    "SupportedParameter",
    "RegistrySource",
    # Normalization and assembly
    "normalize",
    "normalize_all",
    "get_size_tier",
    "get_provider_info",
    "assemble",
    "Registry",
    "RegistryMetadata",
    # Fetching
    "fetch_with_fallback",
    "fetch_with_fallback_async",
    "fetch_with_fallback_detailed",
    "fetch_from_openrouter",
    "fetch_registry",
    "load_snapshot",
    "load_snapshot_registry",
    "get_fallback_registry",
    "FetchResult",
    "StageFailure",
    # Querying
    "QueryOptions",
    "RegistryStats",
    "query_models",
    "find_model",
    "get_context_limit",
    "get_providers",
    "get_stats",
    "get_budget_status",
    "is_over_budget",
    "BudgetInfo",
    "BudgetStatus",
    # Errors
    "ModelRegistryError",
    "ConfigurationError",
    "NetworkError",
    "InvalidResponseError",
    "SnapshotError",
    "ModelNotFoundError",
    "DegradedDataError",
]
