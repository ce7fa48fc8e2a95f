"""Registry assembly.

A ``Registry`` is one immutable, fully indexed materialization of the model
catalog. It is built atomically by :func:`assemble` from a finished model list
and never patched afterwards; a refresh always produces a new instance.

Typical usage:

    from openrouter_model_registry import assemble, normalize_all

    registry = assemble(normalize_all(raw_records), "api")
    registry.by_id["anthropic/claude-3.5-sonnet"].context_length
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .logging import LogEvent, get_logger, log_warning
from .models import LLMModel, RegistrySource, SizeTier
from .normalizer import parse_iso, to_iso

logger = get_logger("registry")

REGISTRY_VERSION = 1
CACHE_TTL = timedelta(hours=24)


@dataclass(frozen=True)
class RegistryMetadata:
    """Metadata describing how and when a registry was built.

    Attributes:
        version: Schema version of the serialized registry
        fetched_at: ISO-8601 construction time
        expires_at: ISO-8601 expiry (construction time + 24h)
        model_count: Number of models
        provider_count: Number of distinct providers
        source: Which fallback stage produced the data
    """

    version: int
    fetched_at: str
    expires_at: str
    model_count: int
    provider_count: int
    source: RegistrySource

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "fetched_at": self.fetched_at,
            "expires_at": self.expires_at,
            "model_count": self.model_count,
            "provider_count": self.provider_count,
            "source": self.source.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RegistryMetadata":
        return cls(
            version=int(data["version"]),
            fetched_at=str(data["fetched_at"]),
            expires_at=str(data["expires_at"]),
            model_count=int(data["model_count"]),
            provider_count=int(data["provider_count"]),
            source=RegistrySource(data["source"]),
        )


@dataclass(frozen=True)
class Registry:
    """Immutable registry snapshot.

    Attributes:
        metadata: Build metadata
        models: Models sorted by context length, largest first
        by_id: Model lookup by identifier
        by_provider: Models per provider id, in ``models`` order
        by_tier: Models per size tier, in ``models`` order; every tier is present
    """

    metadata: RegistryMetadata
    models: Tuple[LLMModel, ...]
    by_id: Mapping[str, LLMModel]
    by_provider: Mapping[str, Tuple[LLMModel, ...]]
    by_tier: Mapping[SizeTier, Tuple[LLMModel, ...]]

    @property
    def source(self) -> RegistrySource:
        return self.metadata.source

    @property
    def fetched_at(self) -> datetime:
        return parse_iso(self.metadata.fetched_at)

    @property
    def expires_at(self) -> datetime:
        return parse_iso(self.metadata.expires_at)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check whether the registry's expiry time has passed."""
        now = now or datetime.now(timezone.utc)
        return now >= self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible primitives (indices are rebuilt on load)."""
        return {
            "metadata": self.metadata.to_dict(),
            "models": [model.to_dict() for model in self.models],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Registry":
        """Rebuild a registry from ``to_dict`` output, keeping the stored metadata.

        Raises:
            KeyError, ValueError, TypeError: If the payload is malformed
        """
        metadata = RegistryMetadata.from_dict(data["metadata"])
        if metadata.version != REGISTRY_VERSION:
            raise ValueError(f"Unsupported registry version {metadata.version}")
        models = [LLMModel.from_dict(item) for item in data["models"]]
        return _build(models, metadata)


_Indices = Tuple[
    Tuple[LLMModel, ...],
    Mapping[str, LLMModel],
    Mapping[str, Tuple[LLMModel, ...]],
    Mapping[SizeTier, Tuple[LLMModel, ...]],
]


def _index(models: Iterable[LLMModel]) -> _Indices:
    """Sort models (stable, largest context first) and build all indices in one pass.

    The indices are returned as read-only mapping views.
    """
    ordered = tuple(sorted(models, key=lambda model: model.context_length, reverse=True))
    by_id: Dict[str, LLMModel] = {}
    by_provider: Dict[str, List[LLMModel]] = {}
    by_tier: Dict[SizeTier, List[LLMModel]] = {tier: [] for tier in SizeTier}

    for model in ordered:
        if model.id in by_id:
            # Last write wins; upstream should never send duplicates
            log_warning(LogEvent.MODEL_REGISTRY, "Duplicate model id in registry input", model=model.id)
        by_id[model.id] = model
        by_provider.setdefault(model.provider.id, []).append(model)
        by_tier[model.size_tier].append(model)

    return (
        ordered,
        MappingProxyType(by_id),
        MappingProxyType({provider: tuple(items) for provider, items in by_provider.items()}),
        MappingProxyType({tier: tuple(items) for tier, items in by_tier.items()}),
    )


def _build(models: Iterable[LLMModel], metadata: RegistryMetadata) -> Registry:
    ordered, by_id, by_provider, by_tier = _index(models)
    return Registry(metadata=metadata, models=ordered, by_id=by_id, by_provider=by_provider, by_tier=by_tier)


def assemble(
    models: Iterable[LLMModel],
    source: Union[RegistrySource, str] = RegistrySource.API,
    now: Optional[datetime] = None,
) -> Registry:
    """Build a registry snapshot from normalized models.

    Args:
        models: Normalized models in upstream order
        source: Which fallback stage produced the models
        now: Construction time (defaults to the current UTC time)

    Returns:
        A new Registry. Models are sorted by context length, largest first;
        the sort is stable so equal context lengths keep their input order.
    """
    built_at = now or datetime.now(timezone.utc)
    ordered, by_id, by_provider, by_tier = _index(models)

    metadata = RegistryMetadata(
        version=REGISTRY_VERSION,
        fetched_at=to_iso(built_at),
        expires_at=to_iso(built_at + CACHE_TTL),
        model_count=len(ordered),
        provider_count=len(by_provider),
        source=RegistrySource(source),
    )
    logger.debug(f"Assembled registry from {metadata.source.value}: {metadata.model_count} models")
    return Registry(metadata=metadata, models=ordered, by_id=by_id, by_provider=by_provider, by_tier=by_tier)
