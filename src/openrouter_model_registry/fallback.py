"""Hardcoded fallback models.

The terminal stage of the fallback chain. These records are already in the
internal schema, so building them involves no parsing and no I/O and cannot
fail. Figures are list prices at the time of writing.
"""

from typing import List, NamedTuple, Tuple

from .models import LLMModel, ModelCapabilities, ModelDefaults, ModelPricing, SizeTier
from .normalizer import capability_flags, utc_now_iso
from .providers import get_provider_info

_BASE_PARAMETERS = ("temperature", "top_p", "stop", "max_tokens")
_PENALTIES = ("frequency_penalty", "presence_penalty")
_TOOLS = ("tools", "tool_choice")
_JSON_OUTPUT = ("response_format", "structured_outputs")


class _FallbackEntry(NamedTuple):
    id: str
    name: str
    context_length: int
    max_completion_tokens: int
    prompt_per_million: float
    completion_per_million: float
    supported_parameters: Tuple[str, ...]
    supports_images: bool = False
    is_moderated: bool = False
    multimodal: bool = False


_FALLBACK_ENTRIES: Tuple[_FallbackEntry, ...] = (
    # Anthropic
    _FallbackEntry(
        "anthropic/claude-sonnet-4", "Claude Sonnet 4", 200_000, 64_000, 3, 15,
        _BASE_PARAMETERS + ("top_k", "reasoning") + _TOOLS, supports_images=True,
    ),
    _FallbackEntry(
        "anthropic/claude-3.5-sonnet", "Claude 3.5 Sonnet", 200_000, 8_192, 3, 15,
        _BASE_PARAMETERS + ("top_k",) + _TOOLS, supports_images=True,
    ),
    _FallbackEntry(
        "anthropic/claude-opus-4", "Claude Opus 4", 200_000, 32_000, 15, 75,
        _BASE_PARAMETERS + ("top_k", "reasoning") + _TOOLS, supports_images=True,
    ),
    # OpenAI
    _FallbackEntry(
        "openai/gpt-4o", "GPT-4o", 128_000, 16_384, 2.5, 10,
        _BASE_PARAMETERS + _PENALTIES + _TOOLS + _JSON_OUTPUT, supports_images=True, is_moderated=True,
    ),
    _FallbackEntry(
        "openai/gpt-4-turbo", "GPT-4 Turbo", 128_000, 4_096, 10, 30,
        _BASE_PARAMETERS + _PENALTIES + _TOOLS + ("response_format",), supports_images=True, is_moderated=True,
    ),
    _FallbackEntry(
        "openai/o1", "o1", 200_000, 100_000, 15, 60,
        ("max_tokens", "reasoning"), supports_images=True, is_moderated=True,
    ),
    # Google
    _FallbackEntry(
        "google/gemini-2.5-pro-preview", "Gemini 2.5 Pro Preview", 1_000_000, 65_536, 1.25, 10,
        _BASE_PARAMETERS + ("top_k", "reasoning") + _TOOLS + _JSON_OUTPUT, supports_images=True, multimodal=True,
    ),
    _FallbackEntry(
        "google/gemini-2.0-flash-exp", "Gemini 2.0 Flash Experimental", 1_000_000, 8_192, 0, 0,
        _BASE_PARAMETERS + ("top_k",), supports_images=True, multimodal=True,
    ),
    # DeepSeek
    _FallbackEntry(
        "deepseek/deepseek-chat", "DeepSeek V3", 128_000, 8_192, 0.14, 0.28,
        _BASE_PARAMETERS + _PENALTIES + _TOOLS + ("response_format",),
    ),
    _FallbackEntry(
        "deepseek/deepseek-r1", "DeepSeek R1", 64_000, 8_192, 0.55, 2.19,
        _BASE_PARAMETERS + _PENALTIES + ("reasoning", "include_reasoning"),
    ),
    # Open weights
    _FallbackEntry(
        "meta-llama/llama-3.3-70b-instruct", "Llama 3.3 70B Instruct", 131_072, 8_192, 0.12, 0.3,
        _BASE_PARAMETERS + ("top_k",) + _PENALTIES,
    ),
    _FallbackEntry(
        "mistralai/mistral-large-2411", "Mistral Large 2411", 128_000, 8_192, 2, 6,
        _BASE_PARAMETERS + _PENALTIES + _TOOLS + ("response_format",),
    ),
    _FallbackEntry(
        "qwen/qwen-2.5-72b-instruct", "Qwen2.5 72B Instruct", 131_072, 8_192, 0.35, 0.4,
        _BASE_PARAMETERS + ("top_k",) + _PENALTIES,
    ),
    # xAI
    _FallbackEntry(
        "x-ai/grok-2", "Grok 2", 131_072, 8_192, 2, 10,
        _BASE_PARAMETERS + _PENALTIES + _TOOLS, supports_images=True,
    ),
)


def _build_model(entry: _FallbackEntry, updated_at: str) -> LLMModel:
    inputs = ("text", "image") if entry.supports_images else ("text",)
    if entry.multimodal:
        modality = "multimodal"
    elif entry.supports_images:
        modality = "text+image"
    else:
        modality = "text"

    capabilities = ModelCapabilities(
        input_modalities=inputs,
        output_modalities=("text",),
        modality_string="+".join(inputs) + "->text",
        supports_streaming=True,
        supports_web_search=False,
        is_moderated=entry.is_moderated,
        supports_images=entry.supports_images,
        modality=modality,
        **capability_flags(entry.supported_parameters),
    )

    provider_id, _, slug = entry.id.partition("/")
    return LLMModel(
        id=entry.id,
        slug=slug,
        name=entry.name,
        provider=get_provider_info(provider_id),
        context_length=entry.context_length,
        max_completion_tokens=entry.max_completion_tokens,
        size_tier=SizeTier.from_context_length(entry.context_length),
        pricing=ModelPricing(
            prompt_per_million=float(entry.prompt_per_million),
            completion_per_million=float(entry.completion_per_million),
            is_free=entry.prompt_per_million == 0 and entry.completion_per_million == 0,
        ),
        capabilities=capabilities,
        supported_parameters=entry.supported_parameters,
        defaults=ModelDefaults(temperature=1.0, top_p=1.0),
        updated_at=updated_at,
    )


def get_fallback_models() -> List[LLMModel]:
    """Build the hardcoded fallback models.

    Each call returns new model instances, so registries built from them never
    share records.
    """
    updated_at = utc_now_iso()
    return [_build_model(entry, updated_at) for entry in _FALLBACK_ENTRIES]
