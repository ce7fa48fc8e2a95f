"""Schema normalizer.

Transforms raw OpenRouter model records into ``LLMModel``. The upstream schema
is loosely typed, so every field goes through a small tolerant reader;
``normalize`` never raises and always returns a fully populated record.
"""

import math
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .logging import LogEvent, log_warning
from .models import (
    INPUT_MODALITIES,
    OUTPUT_MODALITIES,
    LLMModel,
    ModelCapabilities,
    ModelDefaults,
    ModelPricing,
    RequestLimits,
    SizeTier,
)
from .pricing import parse_pricing
from .providers import UNKNOWN_PROVIDER_ID, get_provider_info

DEFAULT_MAX_COMPLETION_TOKENS = 4096

# Feature flag -> upstream parameter names that enable it
_FEATURE_PARAMETERS = {
    "supports_tools": ("tools", "tool_choice"),
    "supports_reasoning": ("reasoning", "include_reasoning"),
    "supports_structured_output": ("structured_outputs",),
    "supports_json_mode": ("response_format",),
    "supports_temperature": ("temperature",),
    "supports_top_p": ("top_p",),
    "supports_top_k": ("top_k",),
    "supports_frequency_penalty": ("frequency_penalty",),
    "supports_presence_penalty": ("presence_penalty",),
    "supports_stop_sequences": ("stop",),
}


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with a Z suffix."""
    return to_iso(datetime.now(timezone.utc))


def to_iso(moment: datetime) -> str:
    """Format an aware datetime as ISO-8601 UTC with millisecond precision."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 string produced by ``to_iso``."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ---------------------------------------------------------------------------
# Tolerant field readers
# ---------------------------------------------------------------------------


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _string(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _number(value: Any) -> Optional[float]:
    """Read a finite number; integers beyond float range count as malformed."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def _non_negative_int(value: Any) -> Optional[int]:
    """Read a non-negative integer, accepting numeric strings."""
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    number = _number(value)
    if number is None or number < 0:
        return None
    return int(value)


def _positive_int(value: Any) -> Optional[int]:
    parsed = _non_negative_int(value)
    return parsed if parsed else None


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, str)]


def _filter_vocabulary(values: Iterable[str], vocabulary: Tuple[str, ...]) -> Tuple[str, ...]:
    seen: List[str] = []
    for value in values:
        lowered = value.lower()
        if lowered in vocabulary and lowered not in seen:
            seen.append(lowered)
    return tuple(seen)


# ---------------------------------------------------------------------------
# Field derivations
# ---------------------------------------------------------------------------


def capability_flags(parameters: Iterable[str]) -> Dict[str, bool]:
    """Map supported parameter names to the parameter-driven capability flags."""
    names = set(parameters)
    return {flag: any(name in names for name in enables) for flag, enables in _FEATURE_PARAMETERS.items()}


def split_model_id(model_id: str) -> Tuple[str, str]:
    """Split "provider/slug" into its parts.

    Returns:
        (provider_id, slug). The provider is "unknown" when the id carries no
        provider prefix; the slug falls back to the whole id.
    """
    provider_id, separator, slug = model_id.partition("/")
    if not separator:
        return UNKNOWN_PROVIDER_ID, model_id
    return provider_id or UNKNOWN_PROVIDER_ID, slug or model_id


def get_size_tier(context_length: int) -> SizeTier:
    """Classify a context length into a size tier."""
    return SizeTier.from_context_length(context_length)


def parse_input_modalities(architecture: Mapping[str, Any]) -> Tuple[str, ...]:
    """Derive input modalities, preferring the explicit upstream list."""
    explicit = _string_list(architecture.get("input_modalities"))
    if explicit:
        return _filter_vocabulary(explicit, INPUT_MODALITIES)

    modality = (_string(architecture.get("modality")) or "text").lower()
    inferred = ["text"]
    for candidate in ("image", "audio", "video"):
        if candidate in modality:
            inferred.append(candidate)
    return tuple(inferred)


def parse_output_modalities(architecture: Mapping[str, Any]) -> Tuple[str, ...]:
    """Derive output modalities, defaulting to text only."""
    explicit = _string_list(architecture.get("output_modalities"))
    if explicit:
        return _filter_vocabulary(explicit, OUTPUT_MODALITIES)
    return ("text",)


def classify_modality(input_modalities: Tuple[str, ...], output_modalities: Tuple[str, ...]) -> str:
    """Legacy tri-state modality: "multimodal", "text+image" or "text"."""
    has_image = "image" in input_modalities
    if "audio" in input_modalities or "video" in input_modalities:
        return "multimodal"
    if has_image and len(output_modalities) > 1:
        return "multimodal"
    if has_image:
        return "text+image"
    return "text"


def parse_capabilities(raw: Mapping[str, Any], pricing: ModelPricing) -> ModelCapabilities:
    """Derive the capabilities block from architecture, parameters and pricing."""
    architecture = _mapping(raw.get("architecture"))
    top_provider = _mapping(raw.get("top_provider"))

    input_modalities = parse_input_modalities(architecture)
    output_modalities = parse_output_modalities(architecture)
    modality_string = _string(architecture.get("modality")) or (
        "+".join(input_modalities) + "->" + "+".join(output_modalities)
    )

    return ModelCapabilities(
        input_modalities=input_modalities,
        output_modalities=output_modalities,
        modality_string=modality_string,
        supports_streaming=True,
        supports_web_search=bool(pricing.web_search_cost and pricing.web_search_cost > 0),
        is_moderated=top_provider.get("is_moderated") is True,
        supports_images="image" in input_modalities,
        modality=classify_modality(input_modalities, output_modalities),
        instruct_type=_string(architecture.get("instruct_type")),
        **capability_flags(_string_list(raw.get("supported_parameters"))),
    )


def parse_defaults(value: Any) -> ModelDefaults:
    """Read default sampling parameters; an absent block yields empty defaults."""
    block = _mapping(value)
    return ModelDefaults(
        temperature=_number(block.get("temperature")),
        top_p=_number(block.get("top_p")),
        top_k=_number(block.get("top_k")),
        frequency_penalty=_number(block.get("frequency_penalty")),
        presence_penalty=_number(block.get("presence_penalty")),
    )


def parse_request_limits(value: Any) -> Optional[RequestLimits]:
    """Read per-request limits; None when upstream reports none."""
    if not isinstance(value, Mapping):
        return None
    limits = RequestLimits(
        prompt_tokens=_non_negative_int(value.get("prompt_tokens")),
        completion_tokens=_non_negative_int(value.get("completion_tokens")),
    )
    if limits.prompt_tokens is None and limits.completion_tokens is None:
        return None
    return limits


def parse_created(value: Any) -> Optional[str]:
    """Convert an epoch-seconds timestamp to ISO-8601, or None."""
    seconds = _number(value)
    if seconds is None:
        return None
    try:
        return to_iso(datetime.fromtimestamp(seconds, tz=timezone.utc))
    except (OverflowError, OSError, ValueError):
        return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize(raw: Any) -> LLMModel:
    """Transform a single raw OpenRouter record into an LLMModel.

    This function is total: malformed or missing optional data degrades to
    documented defaults and never raises.

    Args:
        raw: One element of the upstream ``data`` list

    Returns:
        A fully populated LLMModel
    """
    record = _mapping(raw)
    top_provider = _mapping(record.get("top_provider"))
    architecture = _mapping(record.get("architecture"))

    model_id = _string(record.get("id")) or UNKNOWN_PROVIDER_ID
    provider_id, slug = split_model_id(model_id)

    context_length = _non_negative_int(record.get("context_length"))
    if context_length is None:
        context_length = _non_negative_int(top_provider.get("context_length")) or 0

    max_completion_tokens = (
        _positive_int(record.get("max_completion_tokens"))
        or _positive_int(top_provider.get("max_completion_tokens"))
        or min(context_length, DEFAULT_MAX_COMPLETION_TOKENS)
    )

    pricing = parse_pricing(record.get("pricing"))

    return LLMModel(
        id=model_id,
        slug=slug,
        canonical_slug=_string(record.get("canonical_slug")),
        name=_string(record.get("name")) or model_id,
        description=_string(record.get("description")),
        hugging_face_id=_string(record.get("hugging_face_id")),
        provider=get_provider_info(provider_id),
        context_length=context_length,
        max_completion_tokens=max_completion_tokens,
        size_tier=get_size_tier(context_length),
        pricing=pricing,
        capabilities=parse_capabilities(record, pricing),
        supported_parameters=tuple(_string_list(record.get("supported_parameters"))),
        defaults=parse_defaults(record.get("default_parameters")),
        request_limits=parse_request_limits(record.get("per_request_limits")),
        tokenizer=_string(architecture.get("tokenizer")),
        created_at=parse_created(record.get("created")),
        updated_at=utc_now_iso(),
    )


def normalize_all(raw_models: Iterable[Any]) -> List[LLMModel]:
    """Normalize a list of raw records, largest context first.

    Entries that are not objects or carry no identifier cannot be keyed and
    are skipped with a warning. The sort is stable, so models with equal
    context lengths keep their upstream order.
    """
    models: List[LLMModel] = []
    for index, raw in enumerate(raw_models):
        if not isinstance(raw, Mapping) or _string(raw.get("id")) is None:
            log_warning(LogEvent.NORMALIZATION, "Skipping record without a model id", index=index)
            continue
        models.append(normalize(raw))

    models.sort(key=lambda model: model.context_length, reverse=True)
    return models
