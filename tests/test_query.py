"""Tests for the query engine."""

from typing import Any, Callable, Dict, List

import pytest

from openrouter_model_registry.models import LLMModel, SizeTier
from openrouter_model_registry.normalizer import normalize
from openrouter_model_registry.query import (
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
from openrouter_model_registry.registry import assemble

FREE = {"prompt": "0", "completion": "0"}


@pytest.fixture
def models(make_record: Callable[..., Dict[str, Any]], sonnet_record: Dict[str, Any]) -> List[LLMModel]:
    raws = [
        make_record("meta-llama/llama-2-7b", 4000, pricing=FREE),
        make_record(
            "openai/gpt-3.5-turbo",
            16000,
            pricing={"prompt": "0.0000005", "completion": "0.0000015"},
            supported_parameters=["tools", "response_format"],
        ),
        make_record(
            "mistralai/mixtral-8x7b",
            40000,
            pricing={"prompt": "0.0000005", "completion": "0.0000005"},
            description="Sparse mixture of experts",
        ),
        sonnet_record,
        make_record(
            "google/gemini-pro-1.5",
            1000000,
            name="Gemini Pro 1.5",
            architecture={"input_modalities": ["text", "image", "audio"], "output_modalities": ["text"]},
            supported_parameters=["reasoning", "structured_outputs"],
        ),
    ]
    return [normalize(raw) for raw in raws]


def _ids(models: List[LLMModel]) -> List[str]:
    return [model.id for model in models]


class TestQueryModels:
    """Filters, sort and limit."""

    def test_no_options_returns_copy(self, models: List[LLMModel]) -> None:
        result = query_models(models)
        assert result == models
        assert result is not models

    def test_min_context_over_registry_order(self, models: List[LLMModel]) -> None:
        registry = assemble(models)
        result = query_models(registry.models, QueryOptions(min_context=32000))
        assert [m.context_length for m in result] == [1000000, 200000, 40000]

    def test_context_bounds_are_inclusive(self, models: List[LLMModel]) -> None:
        result = query_models(models, min_context=16000, max_context=200000)
        assert [m.context_length for m in result] == [16000, 40000, 200000]

    def test_provider_by_id_or_name(self, models: List[LLMModel]) -> None:
        assert _ids(query_models(models, provider="anthropic")) == ["anthropic/claude-3.5-sonnet"]
        assert _ids(query_models(models, provider="Meta")) == ["meta-llama/llama-2-7b"]
        assert _ids(query_models(models, provider=["OPENAI", "google"])) == [
            "openai/gpt-3.5-turbo",
            "google/gemini-pro-1.5",
        ]

    def test_tier(self, models: List[LLMModel]) -> None:
        assert _ids(query_models(models, tier=SizeTier.MASSIVE)) == ["google/gemini-pro-1.5"]
        assert _ids(query_models(models, tier=["tiny", SizeTier.SMALL])) == [
            "meta-llama/llama-2-7b",
            "openai/gpt-3.5-turbo",
        ]

    def test_free_and_paid(self, models: List[LLMModel]) -> None:
        assert _ids(query_models(models, is_free=True)) == ["meta-llama/llama-2-7b"]
        assert len(query_models(models, is_free=False)) == 4

    def test_capability_filters(self, models: List[LLMModel]) -> None:
        assert _ids(query_models(models, supports_tools=True)) == [
            "openai/gpt-3.5-turbo",
            "anthropic/claude-3.5-sonnet",
        ]
        assert _ids(query_models(models, supports_images=True)) == [
            "anthropic/claude-3.5-sonnet",
            "google/gemini-pro-1.5",
        ]
        assert _ids(query_models(models, supports_reasoning=True)) == ["google/gemini-pro-1.5"]
        assert len(query_models(models, supports_reasoning=False)) == 4

    def test_input_modality(self, models: List[LLMModel]) -> None:
        assert _ids(query_models(models, input_modality="audio")) == ["google/gemini-pro-1.5"]

    def test_search(self, models: List[LLMModel]) -> None:
        assert _ids(query_models(models, search="SONNET")) == ["anthropic/claude-3.5-sonnet"]
        assert _ids(query_models(models, search="mixture")) == ["mistralai/mixtral-8x7b"]
        assert _ids(query_models(models, search="mistral")) == ["mistralai/mixtral-8x7b"]

    def test_filters_compose(self, models: List[LLMModel]) -> None:
        result = query_models(models, QueryOptions(min_context=10000, is_free=False, supports_images=False))
        assert _ids(result) == ["openai/gpt-3.5-turbo", "mistralai/mixtral-8x7b"]

    def test_sort_by_context(self, models: List[LLMModel]) -> None:
        desc = query_models(models, sort_by="context", sort_order="desc")
        assert [m.context_length for m in desc] == [1000000, 200000, 40000, 16000, 4000]

    def test_sort_is_stable_in_both_directions(self, models: List[LLMModel]) -> None:
        # gpt-3.5-turbo and mixtral share a prompt price
        asc = query_models(models, sort_by="price")
        desc = query_models(models, sort_by="price", sort_order="desc")

        assert _ids(asc)[:3] == ["meta-llama/llama-2-7b", "openai/gpt-3.5-turbo", "mistralai/mixtral-8x7b"]
        tied = [m.id for m in desc if m.pricing.prompt_per_million == 0.5]
        assert tied == ["openai/gpt-3.5-turbo", "mistralai/mixtral-8x7b"]

    def test_sort_by_provider_name(self, models: List[LLMModel]) -> None:
        result = query_models(models, sort_by="provider")
        assert [m.provider.name for m in result] == ["Anthropic", "Google", "Meta", "Mistral", "OpenAI"]

    def test_limit(self, models: List[LLMModel]) -> None:
        assert len(query_models(models, limit=2)) == 2
        assert len(query_models(models, limit=0)) == 5
        assert _ids(query_models(models, sort_by="context", sort_order="desc", limit=1)) == [
            "google/gemini-pro-1.5"
        ]

    def test_idempotent_and_non_mutating(self, models: List[LLMModel]) -> None:
        snapshot = list(models)
        options = QueryOptions(min_context=10000, sort_by="name", sort_order="desc")

        first = query_models(models, options)
        second = query_models(models, options)

        assert first == second
        assert models == snapshot

    def test_invalid_sort(self, models: List[LLMModel]) -> None:
        with pytest.raises(ValueError):
            query_models(models, sort_by="popularity")
        with pytest.raises(ValueError):
            query_models(models, sort_by="name", sort_order="sideways")

    def test_unknown_filter(self, models: List[LLMModel]) -> None:
        with pytest.raises(TypeError):
            query_models(models, colour="blue")


class TestFindModel:
    """Loose model resolution."""

    def test_exact_id(self, models: List[LLMModel]) -> None:
        assert find_model("openai/gpt-3.5-turbo", models).id == "openai/gpt-3.5-turbo"

    def test_case_insensitive_slug(self, models: List[LLMModel]) -> None:
        assert find_model("Claude-3.5-Sonnet", models).id == "anthropic/claude-3.5-sonnet"

    def test_name_substring(self, models: List[LLMModel]) -> None:
        assert find_model("pro 1.5", models).id == "google/gemini-pro-1.5"

    def test_fuzzy(self, models: List[LLMModel]) -> None:
        assert find_model("gpt35turbo", models).id == "openai/gpt-3.5-turbo"
        assert find_model("claude 3.5", models).id == "anthropic/claude-3.5-sonnet"

    def test_earlier_pass_wins(self, make_record: Callable[..., Dict[str, Any]]) -> None:
        candidates = [
            normalize(make_record("openai/gpt-4o-mini", name="GPT-4o mini")),
            normalize(make_record("openai/gpt-4o", name="GPT-4o")),
        ]
        assert find_model("gpt-4o", candidates).id == "openai/gpt-4o"
        assert find_model("gpt4o", candidates).id == "openai/gpt-4o-mini"

    def test_gpt4o_fuzzy_match(self, make_record: Callable[..., Dict[str, Any]]) -> None:
        candidates = [
            normalize(make_record("anthropic/claude-3-haiku")),
            normalize(make_record("openai/gpt-4o", name="GPT-4o")),
        ]
        assert find_model("gpt4o", candidates).id == "openai/gpt-4o"

    @pytest.mark.parametrize("query", ["", "   ", "no-such-model"])
    def test_no_match(self, models: List[LLMModel], query: str) -> None:
        assert find_model(query, models) is None

    def test_get_context_limit(self, models: List[LLMModel]) -> None:
        assert get_context_limit("claude-3.5-sonnet", models) == 200000
        assert get_context_limit("unknown-model", models) is None


class TestAggregates:
    """Providers and statistics."""

    def test_providers_sorted_by_name(self, models: List[LLMModel]) -> None:
        providers = get_providers(models)
        assert [p.name for p in providers] == ["Anthropic", "Google", "Meta", "Mistral", "OpenAI"]
        assert providers[2].id == "meta-llama"

    def test_stats(self, models: List[LLMModel]) -> None:
        stats = get_stats(models)

        assert stats.total == 5
        assert stats.providers == 5
        assert stats.avg_context == 252000
        assert stats.min_context == 4000
        assert stats.max_context == 1000000
        assert stats.free_models == 1
        assert stats.image_capable == 2

    def test_average_rounds_half_up(self, make_record: Callable[..., Dict[str, Any]]) -> None:
        candidates = [normalize(make_record("a/x", 1)), normalize(make_record("a/y", 2))]
        assert get_stats(candidates).avg_context == 2

    def test_empty_stats(self) -> None:
        assert get_stats([]) == RegistryStats()
        assert get_stats([]).to_dict()["total"] == 0


class TestBudget:
    """Context budget helpers."""

    @pytest.mark.parametrize(
        "tokens, status, remaining",
        [
            (0, BudgetStatus.SAFE, 1000),
            (749, BudgetStatus.SAFE, 251),
            (750, BudgetStatus.WARNING, 250),
            (899, BudgetStatus.WARNING, 101),
            (900, BudgetStatus.DANGER, 100),
            (1000, BudgetStatus.DANGER, 0),
            (1001, BudgetStatus.OVER, -1),
        ],
    )
    def test_thresholds(self, tokens: int, status: BudgetStatus, remaining: int) -> None:
        info = get_budget_status(tokens, 1000)
        assert info.status is status
        assert info.remaining == remaining

    def test_percentage_is_capped(self) -> None:
        assert get_budget_status(750, 1000).percentage == 75.0
        over = get_budget_status(5000, 1000)
        assert over.percentage == 100.0
        assert over.to_dict() == {"percentage": 100.0, "status": "over", "remaining": -4000}

    def test_zero_limit(self) -> None:
        assert get_budget_status(0, 0).status is BudgetStatus.SAFE
        assert get_budget_status(1, 0).status is BudgetStatus.OVER

    def test_negative_tokens(self) -> None:
        with pytest.raises(ValueError):
            get_budget_status(-1, 1000)

    def test_is_over_budget(self, models: List[LLMModel]) -> None:
        sonnet = find_model("claude-3.5-sonnet", models)
        assert is_over_budget(200000, sonnet) is False
        assert is_over_budget(200001, sonnet) is True
