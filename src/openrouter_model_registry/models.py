"""Internal model schema.

These are the strict, immutable records produced by the normalizer. Every
field has a concrete type; optional upstream data is represented as ``None``
(or an empty value object) rather than being left out.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

# Known modality vocabularies; anything else from upstream is dropped
INPUT_MODALITIES: Tuple[str, ...] = ("text", "image", "audio", "video", "file")
OUTPUT_MODALITIES: Tuple[str, ...] = ("text", "image", "audio")

# Tier lower bounds (inclusive), largest first
_TIER_BOUNDS = (
    (500_000, "massive"),
    (128_000, "large"),
    (32_000, "medium"),
    (8_000, "small"),
)


class SizeTier(str, Enum):
    """Coarse classification of a model's context window."""

    TINY = "tiny"  # < 8K
    SMALL = "small"  # 8K - 32K
    MEDIUM = "medium"  # 32K - 128K
    LARGE = "large"  # 128K - 500K
    MASSIVE = "massive"  # 500K+

    @classmethod
    def from_context_length(cls, context_length: int) -> "SizeTier":
        """Classify a context length into its half-open tier bin."""
        for lower_bound, tier in _TIER_BOUNDS:
            if context_length >= lower_bound:
                return cls(tier)
        return cls.TINY


class RegistrySource(str, Enum):
    """Which stage of the fallback chain produced a registry."""

    API = "api"
    SNAPSHOT = "snapshot"
    FALLBACK = "fallback"


class SupportedParameter(str, Enum):
    """Request parameters known to this package.

    Upstream adds parameters over time, so this is an open set: models keep
    the raw parameter names, and unrecognized names are reported through
    ``LLMModel.extra_parameters`` instead of being rejected.
    """

    INCLUDE_REASONING = "include_reasoning"
    MAX_TOKENS = "max_tokens"
    REASONING = "reasoning"
    RESPONSE_FORMAT = "response_format"
    SEED = "seed"
    STOP = "stop"
    STRUCTURED_OUTPUTS = "structured_outputs"
    TEMPERATURE = "temperature"
    TOOL_CHOICE = "tool_choice"
    TOOLS = "tools"
    TOP_K = "top_k"
    TOP_P = "top_p"
    FREQUENCY_PENALTY = "frequency_penalty"
    PRESENCE_PENALTY = "presence_penalty"
    VERBOSITY = "verbosity"

    @classmethod
    def parse(cls, value: str) -> Optional["SupportedParameter"]:
        """Return the enum member for a parameter name, or None if unknown."""
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class ModelProvider:
    """Provider value object embedded in every model."""

    id: str
    name: str
    color: str
    icon: Optional[str] = None


@dataclass(frozen=True)
class ModelPricing:
    """Normalized pricing.

    Token prices are expressed per million tokens. ``image_per_image``,
    ``request_cost`` and ``web_search_cost`` are per unit, as upstream reports
    them. Optional costs are None when upstream did not report them.
    """

    prompt_per_million: float
    completion_per_million: float
    is_free: bool
    image_per_image: Optional[float] = None
    request_cost: Optional[float] = None
    web_search_cost: Optional[float] = None
    reasoning_per_million: Optional[float] = None
    cache_read_per_million: Optional[float] = None
    cache_write_per_million: Optional[float] = None


@dataclass(frozen=True)
class ModelCapabilities:
    """Modalities and feature flags derived from upstream metadata."""

    input_modalities: Tuple[str, ...]
    output_modalities: Tuple[str, ...]
    modality_string: str
    supports_tools: bool = False
    supports_reasoning: bool = False
    supports_structured_output: bool = False
    supports_json_mode: bool = False
    supports_streaming: bool = True
    supports_temperature: bool = False
    supports_top_p: bool = False
    supports_top_k: bool = False
    supports_frequency_penalty: bool = False
    supports_presence_penalty: bool = False
    supports_stop_sequences: bool = False
    supports_web_search: bool = False
    is_moderated: bool = False
    supports_images: bool = False
    modality: str = "text"
    instruct_type: Optional[str] = None


@dataclass(frozen=True)
class ModelDefaults:
    """Default sampling parameters advertised by upstream."""

    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[float] = None
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None


@dataclass(frozen=True)
class RequestLimits:
    """Per-request token limits."""

    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None


@dataclass(frozen=True)
class LLMModel:
    """A normalized model record.

    Attributes:
        id: Upstream identifier, e.g. "anthropic/claude-3.5-sonnet"
        slug: Part of the id after the provider prefix
        name: Display name
        provider: Provider branding
        context_length: Total context window in tokens
        max_completion_tokens: Maximum output tokens
        size_tier: Context window classification
        pricing: Normalized pricing
        capabilities: Modalities and feature flags
        updated_at: ISO-8601 time this record was normalized
        canonical_slug: Dated upstream slug, if any
        description: Upstream description, if any
        hugging_face_id: Hugging Face repository id for open-weight models
        supported_parameters: Raw supported parameter names, in upstream order
        defaults: Default sampling parameters
        request_limits: Per-request token limits, if any
        tokenizer: Tokenizer family, if known
        created_at: ISO-8601 time the model was added upstream, if known
    """

    id: str
    slug: str
    name: str
    provider: ModelProvider
    context_length: int
    max_completion_tokens: int
    size_tier: SizeTier
    pricing: ModelPricing
    capabilities: ModelCapabilities
    updated_at: str
    canonical_slug: Optional[str] = None
    description: Optional[str] = None
    hugging_face_id: Optional[str] = None
    supported_parameters: Tuple[str, ...] = ()
    defaults: ModelDefaults = field(default_factory=ModelDefaults)
    request_limits: Optional[RequestLimits] = None
    tokenizer: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def known_parameters(self) -> Tuple[SupportedParameter, ...]:
        """Supported parameters that map to a known SupportedParameter."""
        parsed = (SupportedParameter.parse(name) for name in self.supported_parameters)
        return tuple(param for param in parsed if param is not None)

    @property
    def extra_parameters(self) -> Tuple[str, ...]:
        """Supported parameter names this package does not recognize."""
        return tuple(name for name in self.supported_parameters if SupportedParameter.parse(name) is None)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible primitives."""
        data = asdict(self)
        data["size_tier"] = self.size_tier.value
        data["supported_parameters"] = list(self.supported_parameters)
        data["capabilities"]["input_modalities"] = list(self.capabilities.input_modalities)
        data["capabilities"]["output_modalities"] = list(self.capabilities.output_modalities)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LLMModel":
        """Rebuild a model from ``to_dict`` output.

        Raises:
            KeyError: If a required field is missing
            ValueError: If an enum value is not recognized
            TypeError: If a nested block has unexpected fields
        """
        capabilities = dict(data["capabilities"])
        capabilities["input_modalities"] = tuple(capabilities.get("input_modalities") or ())
        capabilities["output_modalities"] = tuple(capabilities.get("output_modalities") or ())
        request_limits = data.get("request_limits")

        return cls(
            id=data["id"],
            slug=data["slug"],
            name=data["name"],
            provider=ModelProvider(**data["provider"]),
            context_length=int(data["context_length"]),
            max_completion_tokens=int(data["max_completion_tokens"]),
            size_tier=SizeTier(data["size_tier"]),
            pricing=ModelPricing(**data["pricing"]),
            capabilities=ModelCapabilities(**capabilities),
            updated_at=data["updated_at"],
            canonical_slug=data.get("canonical_slug"),
            description=data.get("description"),
            hugging_face_id=data.get("hugging_face_id"),
            supported_parameters=tuple(data.get("supported_parameters") or ()),
            defaults=ModelDefaults(**(data.get("defaults") or {})),
            request_limits=RequestLimits(**request_limits) if request_limits else None,
            tokenizer=data.get("tokenizer"),
            created_at=data.get("created_at"),
        )

