"""Query engine.

Pure functions over a list of models. Nothing here mutates its input: every
filter builds a new working list and the caller's sequence is left untouched.

Example:

    from openrouter_model_registry.query import QueryOptions, query_models

    cheap_vision = query_models(
        registry.models,
        QueryOptions(supports_images=True, sort_by="price", limit=5),
    )
"""

import math
import re
from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

from .logging import LogEvent, log_debug
from .models import LLMModel, ModelProvider, SizeTier

SORT_KEYS = ("context", "price", "name", "provider")
SORT_ORDERS = ("asc", "desc")

_FUZZY_STRIP = re.compile(r"[-.\s]")

StrOrMany = Union[str, Iterable[str]]
TierOrMany = Union[SizeTier, str, Iterable[Union[SizeTier, str]]]


@dataclass(frozen=True)
class QueryOptions:
    """Filters, sort and limit for :func:`query_models`.

    Every field defaults to None, meaning "do not filter on this".

    Attributes:
        provider: Provider id or display name, or several of them (any-of)
        min_context: Inclusive lower bound on context length
        max_context: Inclusive upper bound on context length
        tier: Size tier, or several of them (any-of)
        is_free: Keep only free (True) or only paid (False) models
        supports_images: Keep only models with (True) or without (False) image input
        supports_tools: Keep only models with (True) or without (False) tool calling
        supports_reasoning: Keep only reasoning (True) or non-reasoning (False) models
        supports_structured_output: Keep only models with (True) or without (False) structured outputs
        input_modality: Input modality, or several of them (any-of)
        search: Case-insensitive substring over id, name, provider name and description
        sort_by: One of "context", "price", "name", "provider"
        sort_order: "asc" or "desc" (default "asc")
        limit: Maximum number of results; None or 0 means no cap
    """

    provider: Optional[StrOrMany] = None
    min_context: Optional[int] = None
    max_context: Optional[int] = None
    tier: Optional[TierOrMany] = None
    is_free: Optional[bool] = None
    supports_images: Optional[bool] = None
    supports_tools: Optional[bool] = None
    supports_reasoning: Optional[bool] = None
    supports_structured_output: Optional[bool] = None
    input_modality: Optional[StrOrMany] = None
    search: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: str = "asc"
    limit: Optional[int] = None


@dataclass(frozen=True)
class RegistryStats:
    """Aggregate statistics over a model list."""

    total: int = 0
    providers: int = 0
    avg_context: int = 0
    min_context: int = 0
    max_context: int = 0
    free_models: int = 0
    image_capable: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def _as_set(value: Union[str, Iterable[Any]]) -> List[str]:
    if isinstance(value, str):
        values: Iterable[Any] = [value]
    else:
        values = value
    return [(item.value if isinstance(item, SizeTier) else str(item)).lower() for item in values]


_SORT_KEY_FUNCS: Dict[str, Callable[[LLMModel], Any]] = {
    "context": lambda model: model.context_length,
    "price": lambda model: model.pricing.prompt_per_million,
    "name": lambda model: model.name.casefold(),
    "provider": lambda model: model.provider.name.casefold(),
}


def query_models(
    models: Sequence[LLMModel],
    options: Optional[QueryOptions] = None,
    **filters: Any,
) -> List[LLMModel]:
    """Filter, sort and truncate a model list.

    Filters are AND-composed. Options may be passed as a QueryOptions, as
    keyword arguments, or both (keywords override the options object).

    Args:
        models: Models to query (not modified)
        options: Query options
        **filters: QueryOptions fields as keywords

    Returns:
        A new list of matching models

    Raises:
        TypeError: If an unknown keyword filter is passed
        ValueError: If sort_by or sort_order is not recognized
    """
    options = options or QueryOptions()
    if filters:
        known = {f.name for f in fields(QueryOptions)}
        unknown = sorted(set(filters) - known)
        if unknown:
            raise TypeError(f"Unknown query filter(s): {', '.join(unknown)}")
        options = replace(options, **filters)

    if options.sort_by is not None and options.sort_by not in SORT_KEYS:
        raise ValueError(f"Invalid sort_by {options.sort_by!r}; expected one of {', '.join(SORT_KEYS)}")
    if options.sort_order not in SORT_ORDERS:
        raise ValueError(f"Invalid sort_order {options.sort_order!r}; expected 'asc' or 'desc'")

    result = list(models)

    if options.provider is not None:
        wanted = set(_as_set(options.provider))
        result = [m for m in result if m.provider.id.lower() in wanted or m.provider.name.lower() in wanted]

    if options.min_context is not None:
        result = [m for m in result if m.context_length >= options.min_context]
    if options.max_context is not None:
        result = [m for m in result if m.context_length <= options.max_context]

    if options.tier is not None:
        tiers = set(_as_set(options.tier))
        result = [m for m in result if m.size_tier.value in tiers]

    if options.is_free is not None:
        result = [m for m in result if m.pricing.is_free == options.is_free]
    if options.supports_images is not None:
        result = [m for m in result if m.capabilities.supports_images == options.supports_images]
    if options.supports_tools is not None:
        result = [m for m in result if m.capabilities.supports_tools == options.supports_tools]
    if options.supports_reasoning is not None:
        result = [m for m in result if m.capabilities.supports_reasoning == options.supports_reasoning]
    if options.supports_structured_output is not None:
        result = [
            m for m in result if m.capabilities.supports_structured_output == options.supports_structured_output
        ]

    if options.input_modality is not None:
        modalities = set(_as_set(options.input_modality))
        result = [m for m in result if modalities.intersection(m.capabilities.input_modalities)]

    if options.search:
        needle = options.search.lower()
        result = [m for m in result if _matches_search(m, needle)]

    if options.sort_by:
        # sorted() is stable in both directions, so ties keep their input order
        result = sorted(result, key=_SORT_KEY_FUNCS[options.sort_by], reverse=options.sort_order == "desc")

    if options.limit:
        result = result[: options.limit]

    log_debug(LogEvent.QUERY, "Query evaluated", candidates=len(models), matches=len(result))
    return result


def _matches_search(model: LLMModel, needle: str) -> bool:
    haystacks = [model.id, model.name, model.provider.name]
    if model.description:
        haystacks.append(model.description)
    return any(needle in text.lower() for text in haystacks)


def _fuzzy(text: str) -> str:
    return _FUZZY_STRIP.sub("", text.lower())


def find_model(query: str, models: Sequence[LLMModel]) -> Optional[LLMModel]:
    """Resolve a loosely written model reference.

    Resolution order, first match wins (all case-insensitive):

    1. exact identifier
    2. exact slug
    3. identifier ending in "/" + query
    4. display name containing the query
    5. fuzzy match with hyphens, dots and whitespace removed on both sides,
       against identifier, slug or name

    Args:
        query: Model reference, e.g. "claude-3.5-sonnet" or "gpt4o"
        models: Models to search

    Returns:
        The matching model, or None
    """
    needle = (query or "").strip().lower()
    if not needle:
        return None

    passes: List[Callable[[LLMModel], bool]] = [
        lambda m: m.id.lower() == needle,
        lambda m: m.slug.lower() == needle,
        lambda m: m.id.lower().endswith("/" + needle),
        lambda m: needle in m.name.lower(),
    ]
    fuzzy_needle = _fuzzy(needle)
    if fuzzy_needle:
        passes.append(
            lambda m: any(fuzzy_needle in _fuzzy(text) for text in (m.id, m.slug, m.name))
        )

    for matches in passes:
        for model in models:
            if matches(model):
                return model
    return None


def get_context_limit(model_id: str, models: Sequence[LLMModel]) -> Optional[int]:
    """Context length of the model ``find_model`` resolves, or None."""
    model = find_model(model_id, models)
    return model.context_length if model else None


def get_providers(models: Sequence[LLMModel]) -> List[ModelProvider]:
    """Unique providers, sorted by display name."""
    unique: Dict[str, ModelProvider] = {}
    for model in models:
        unique.setdefault(model.provider.id, model.provider)
    return sorted(unique.values(), key=lambda provider: provider.name.casefold())


def get_stats(models: Sequence[LLMModel]) -> RegistryStats:
    """Aggregate statistics; every field is 0 for an empty list."""
    if not models:
        return RegistryStats()

    contexts = [model.context_length for model in models]
    return RegistryStats(
        total=len(models),
        providers=len({model.provider.id for model in models}),
        # Round half up
        avg_context=math.floor(sum(contexts) / len(contexts) + 0.5),
        min_context=min(contexts),
        max_context=max(contexts),
        free_models=sum(1 for model in models if model.pricing.is_free),
        image_capable=sum(1 for model in models if model.capabilities.supports_images),
    )


class BudgetStatus(str, Enum):
    """How close a token count is to a context limit."""

    SAFE = "safe"  # below 75%
    WARNING = "warning"  # 75% - 90%
    DANGER = "danger"  # 90% up to the limit
    OVER = "over"  # beyond the limit


WARNING_THRESHOLD = 75.0
DANGER_THRESHOLD = 90.0


@dataclass(frozen=True)
class BudgetInfo:
    """Context budget usage for a token count.

    Attributes:
        percentage: Share of the context limit used, capped at 100
        status: Budget band
        remaining: Tokens left before the limit; negative when over
    """

    percentage: float
    status: BudgetStatus
    remaining: int

    def to_dict(self) -> Dict[str, Any]:
        return {"percentage": self.percentage, "status": self.status.value, "remaining": self.remaining}


def get_budget_status(tokens: int, context_limit: int) -> BudgetInfo:
    """Classify how much of a context window a prompt uses.

    Args:
        tokens: Token count of the prompt
        context_limit: Context length of the target model

    Returns:
        BudgetInfo. Reaching the limit exactly is still "danger"; only a count
        above it is "over".

    Raises:
        ValueError: If ``tokens`` is negative
    """
    if tokens < 0:
        raise ValueError(f"Token count must be non-negative, got {tokens}")

    remaining = context_limit - tokens
    if tokens > context_limit:
        return BudgetInfo(percentage=100.0, status=BudgetStatus.OVER, remaining=remaining)

    percentage = min(100.0, tokens * 100 / context_limit) if context_limit > 0 else 0.0
    if percentage >= DANGER_THRESHOLD:
        status = BudgetStatus.DANGER
    elif percentage >= WARNING_THRESHOLD:
        status = BudgetStatus.WARNING
    else:
        status = BudgetStatus.SAFE
    return BudgetInfo(percentage=percentage, status=status, remaining=remaining)


def is_over_budget(tokens: int, model: LLMModel) -> bool:
    """True when ``tokens`` exceeds the model's context length."""
    return tokens > model.context_length
