#!/usr/bin/env python3
"""Example of basic registry usage."""

from openrouter_model_registry import QueryOptions, get_client


def print_model_info(client, model_name):
    """Print information about a model.

    Args:
        client: Loaded registry client
        model_name: Model id, slug or loose reference
    """
    model = client.get_model(model_name)
    if model is None:
        print(f"Model not found: {model_name}")
        print()
        return

    print(f"Model: {model.id} ({model.name})")
    print(f"  Provider: {model.provider.name}")
    print(f"  Context window: {model.context_length} ({model.size_tier.value})")
    print(f"  Max output tokens: {model.max_completion_tokens}")
    print(f"  Price per 1M tokens: ${model.pricing.prompt_per_million:g} in / ${model.pricing.completion_per_million:g} out")
    print(f"  Supports tools: {model.capabilities.supports_tools}")
    print(f"  Supports images: {model.capabilities.supports_images}")
    if model.extra_parameters:
        print(f"  Other parameters: {', '.join(model.extra_parameters)}")
    print()


def main():
    """Run the example."""
    client = get_client()
    registry = client.load()

    print(f"Loaded {registry.metadata.model_count} models from {registry.source.value}")
    if client.error is not None:
        print(f"  Note: {client.error}")
    print()

    for model_name in ["claude-3.5-sonnet", "gpt4o", "deepseek/deepseek-r1"]:
        print_model_info(client, model_name)

    print("Cheapest vision models with at least 128K context:")
    options = QueryOptions(supports_images=True, min_context=128000, sort_by="price", limit=5)
    for model in client.query(options):
        print(f"  {model.id}: ${model.pricing.prompt_per_million:g}/M")
    print()

    stats = client.get_stats()
    print(f"{stats.total} models from {stats.providers} providers, {stats.free_models} free")


if __name__ == "__main__":
    main()
