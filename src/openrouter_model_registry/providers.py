"""Provider branding table and provider lookup.

Providers are derived from the model identifier prefix rather than fetched.
The table below is process-wide constant data; lookups always return a fresh
``ModelProvider`` value.
"""

from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional

from .models import ModelProvider


class ProviderBranding(NamedTuple):
    """Display name, brand color and icon reference of a provider."""

    name: str
    color: str
    icon: Optional[str] = None


# Icons use the lobe-icons naming scheme: "lobe-icons:{name}" or "lobe-icons:{name}-color"
KNOWN_PROVIDERS: Mapping[str, ProviderBranding] = MappingProxyType(
    {
        # Major labs
        "anthropic": ProviderBranding("Anthropic", "#D4A574", "lobe-icons:anthropic"),
        "openai": ProviderBranding("OpenAI", "#10A37F", "lobe-icons:openai"),
        "google": ProviderBranding("Google", "#4285F4", "lobe-icons:google-color"),
        "meta-llama": ProviderBranding("Meta", "#0668E1", "lobe-icons:meta-color"),
        "mistralai": ProviderBranding("Mistral", "#FF7000", "lobe-icons:mistral-color"),
        "x-ai": ProviderBranding("xAI", "#1DA1F2", "lobe-icons:xai"),
        "deepseek": ProviderBranding("DeepSeek", "#4D6BFE", "lobe-icons:deepseek-color"),
        "cohere": ProviderBranding("Cohere", "#D18EE2", "lobe-icons:cohere-color"),
        "qwen": ProviderBranding("Qwen", "#615EFF", "lobe-icons:qwen-color"),
        "alibaba": ProviderBranding("Alibaba", "#FF6A00", "lobe-icons:alibaba-color"),
        "microsoft": ProviderBranding("Microsoft", "#00A4EF", "lobe-icons:azure-color"),
        "perplexity": ProviderBranding("Perplexity", "#20808D", "lobe-icons:perplexity-color"),
        "nvidia": ProviderBranding("NVIDIA", "#76B900", "lobe-icons:nvidia-color"),
        # Research labs
        "nous": ProviderBranding("Nous Research", "#8B5CF6", "lobe-icons:nousresearch"),
        "nousresearch": ProviderBranding("Nous Research", "#8B5CF6", "lobe-icons:nousresearch"),
        "ai21": ProviderBranding("AI21 Labs", "#6366F1", "lobe-icons:ai21-brand-color"),
        "thudm": ProviderBranding("Zhipu AI", "#00D4AA", "lobe-icons:zhipu-color"),
        "01-ai": ProviderBranding("01.AI", "#FF6B6B", "lobe-icons:yi-color"),
        "inflection": ProviderBranding("Inflection", "#7C3AED", "lobe-icons:inflection"),
        # Cloud and inference hosts
        "amazon": ProviderBranding("Amazon", "#FF9900", "lobe-icons:bedrock-color"),
        "databricks": ProviderBranding("Databricks", "#FF3621", "lobe-icons:dbrx-color"),
        "together": ProviderBranding("Together", "#0EA5E9", "lobe-icons:together-color"),
        "groq": ProviderBranding("Groq", "#F55036", "lobe-icons:groq"),
        "fireworks-ai": ProviderBranding("Fireworks", "#FF6B35", "lobe-icons:fireworks-color"),
        "deepinfra": ProviderBranding("DeepInfra", "#3B82F6", "lobe-icons:deepinfra-color"),
        "replicate": ProviderBranding("Replicate", "#000000", "lobe-icons:replicate"),
        "anyscale": ProviderBranding("Anyscale", "#00D4FF", "lobe-icons:anyscale-color"),
        "cloudflare": ProviderBranding("Cloudflare", "#F6821F", "lobe-icons:cloudflare-color"),
        "sambanova": ProviderBranding("SambaNova", "#FF5722", "lobe-icons:sambanova-color"),
        "cerebras": ProviderBranding("Cerebras", "#00D9FF", "lobe-icons:cerebras-color"),
        # Chinese labs
        "baichuan": ProviderBranding("Baichuan", "#4F46E5", "lobe-icons:baichuan-color"),
        "moonshot": ProviderBranding("Moonshot", "#1E293B", "lobe-icons:moonshot"),
        "moonshotai": ProviderBranding("Moonshot", "#1E293B", "lobe-icons:moonshot"),
        "minimax": ProviderBranding("MiniMax", "#3B82F6", "lobe-icons:minimax-color"),
        "zhipu": ProviderBranding("Zhipu AI", "#00D4AA", "lobe-icons:zhipu-color"),
        "stepfun": ProviderBranding("StepFun", "#6366F1", "lobe-icons:stepfun-color"),
        "baidu": ProviderBranding("Baidu", "#2932E1", "lobe-icons:baidu-color"),
        "tencent": ProviderBranding("Tencent", "#00C853", "lobe-icons:tencent-color"),
        "bytedance": ProviderBranding("ByteDance", "#3B82F6", "lobe-icons:bytedance-color"),
        # Open source and community
        "huggingface": ProviderBranding("Hugging Face", "#FFD21E", "lobe-icons:huggingface-color"),
        "ollama": ProviderBranding("Ollama", "#000000", "lobe-icons:ollama"),
        "openrouter": ProviderBranding("OpenRouter", "#6366F1", "lobe-icons:openrouter"),
    }
)

UNKNOWN_PROVIDER = ProviderBranding("Unknown", "#6B7280", "lobe-icons:openrouter")
UNKNOWN_PROVIDER_ID = "unknown"


def generate_provider_name(provider_id: str) -> str:
    """Build a display name from an unrecognized provider id.

    ``"some-new-lab"`` becomes ``"Some New Lab"``. Only the first character of
    each segment is upper-cased; the remainder is left untouched.
    """
    segments = [segment[:1].upper() + segment[1:] for segment in provider_id.split("-")]
    name = " ".join(segment for segment in segments if segment)
    return name or UNKNOWN_PROVIDER.name


def get_provider_info(provider_id: str) -> ModelProvider:
    """Look up branding for a provider id.

    Args:
        provider_id: Provider prefix of a model id (e.g. "anthropic")

    Returns:
        A new ModelProvider. Unknown ids get a generated name and the
        generic unknown-provider color and icon.
    """
    known = KNOWN_PROVIDERS.get(provider_id)
    if known is not None:
        return ModelProvider(id=provider_id, name=known.name, color=known.color, icon=known.icon)

    return ModelProvider(
        id=provider_id,
        name=generate_provider_name(provider_id),
        color=UNKNOWN_PROVIDER.color,
        icon=UNKNOWN_PROVIDER.icon,
    )
