"""Rich table formatter for CLI output."""

import sys
from typing import Any, Dict, List, Optional, Sequence, TextIO

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ...models import LLMModel, ModelProvider
from ...query import RegistryStats
from ...registry import Registry
from ..utils.helpers import extract_nested_value, format_file_size

DEFAULT_MODEL_COLUMNS = [
    "id",
    "provider.name",
    "context_length",
    "max_completion_tokens",
    "size_tier",
    "pricing.prompt_per_million",
    "pricing.completion_per_million",
    "capabilities.supports_images",
    "capabilities.supports_tools",
    "capabilities.supports_reasoning",
]

_COLUMN_NAMES = {
    "id": "Model",
    "name": "Name",
    "provider.name": "Provider",
    "context_length": "Context",
    "max_completion_tokens": "Max\nOutput",
    "size_tier": "Tier",
    "pricing.prompt_per_million": "Prompt\n$/M",
    "pricing.completion_per_million": "Completion\n$/M",
    "pricing.is_free": "Free",
    "capabilities.supports_images": "Images",
    "capabilities.supports_tools": "Tools",
    "capabilities.supports_reasoning": "Reasoning",
    "capabilities.supports_structured_output": "Structured\nOutput",
}


def create_console(output: Optional[TextIO] = None, no_color: bool = False) -> Console:
    """Create a Rich console instance.

    Args:
        output: Output stream (defaults to stdout)
        no_color: Disable color output

    Returns:
        Console instance
    """
    if output is None:
        output = sys.stdout

    # Let Rich use the actual terminal width to avoid truncating headers
    return Console(file=output, no_color=no_color)


def format_tokens(tokens: int) -> str:
    """Render a token count as 1.0M / 128K / 512."""
    if tokens >= 1_000_000:
        return f"{tokens / 1_000_000:.1f}M"
    if tokens >= 1_000:
        return f"{tokens / 1_000:.0f}K"
    return str(tokens)


def _format_column_value(value: Any, column_name: str) -> str:
    """Format a column value for display in table.

    Args:
        value: The value to format
        column_name: Dotted path of the column (for special formatting)

    Returns:
        Formatted string value
    """
    if value is None:
        return "N/A"
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if column_name.startswith("pricing.") and isinstance(value, (int, float)):
        return f"${value:g}"
    if column_name in ("context_length", "max_completion_tokens") and isinstance(value, int):
        return format_tokens(value)
    return str(value)


def _get_column_display_name(column_path: str) -> str:
    """Convert column path to display name."""
    if column_path in _COLUMN_NAMES:
        return _COLUMN_NAMES[column_path]
    return " ".join(part.replace("_", " ").title() for part in column_path.split("."))


def format_models_table(
    models: Sequence[LLMModel],
    console: Optional[Console] = None,
    columns: Optional[List[str]] = None,
    title: str = "OpenRouter Models",
) -> None:
    """Format models as a Rich table.

    Args:
        models: Models to show, in display order
        console: Rich console (will create if None)
        columns: Custom columns to display (dotted paths into ``LLMModel.to_dict()``)
        title: Table title
    """
    if console is None:
        console = create_console()
    columns = columns or DEFAULT_MODEL_COLUMNS

    table = Table(title=title, show_header=True, header_style="bold magenta")
    for column_path in columns:
        display_name = _get_column_display_name(column_path)
        if column_path == "id":
            table.add_column(display_name, style="cyan", no_wrap=True)
        elif column_path.startswith("pricing.") or column_path in ("context_length", "max_completion_tokens"):
            table.add_column(display_name, justify="right", no_wrap=True)
        elif column_path.startswith("capabilities.supports_"):
            table.add_column(display_name, justify="center", no_wrap=True)
        else:
            table.add_column(display_name, no_wrap=True)

    for model in models:
        data = model.to_dict()
        table.add_row(*[_format_column_value(extract_nested_value(data, path), path) for path in columns])

    console.print(table)


def format_providers_table(
    providers: List[ModelProvider], counts: Dict[str, int], console: Optional[Console] = None
) -> None:
    """Format providers as a Rich table.

    Args:
        providers: Providers sorted by name
        counts: Number of models per provider id
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    table = Table(title="Providers", show_header=True, header_style="bold magenta")
    table.add_column("Provider", style="cyan")
    table.add_column("Id", style="dim")
    table.add_column("Models", justify="right")
    table.add_column("Color")

    for provider in providers:
        table.add_row(
            provider.name,
            provider.id,
            str(counts.get(provider.id, 0)),
            Text(provider.color, style=provider.color),
        )

    console.print(table)


def format_stats_table(stats: RegistryStats, registry: Registry, console: Optional[Console] = None) -> None:
    """Format registry statistics as a Rich table."""
    if console is None:
        console = create_console()

    table = Table(title="Registry Statistics", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    source_style = "green" if registry.source.value == "api" else "yellow"
    table.add_row("Source", Text(registry.source.value, style=source_style))
    table.add_row("Fetched", registry.metadata.fetched_at)
    table.add_row("Expires", registry.metadata.expires_at)
    table.add_row("Models", str(stats.total))
    table.add_row("Providers", str(stats.providers))
    table.add_row("Average context", format_tokens(stats.avg_context))
    table.add_row("Smallest context", format_tokens(stats.min_context))
    table.add_row("Largest context", format_tokens(stats.max_context))
    table.add_row("Free models", str(stats.free_models))
    table.add_row("Image capable", str(stats.image_capable))

    console.print(table)


def format_cache_info_table(cache_info: Dict[str, Any], console: Optional[Console] = None) -> None:
    """Format cache information as a Rich table.

    Args:
        cache_info: Output of ``RegistryCache.info()``
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    console.print(f"[bold]Cache File:[/bold] {cache_info.get('path', 'N/A')}")
    if not cache_info.get("exists"):
        console.print("[dim]No cached registry found[/dim]")
        return

    table = Table(title="Cached Registry", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Size", format_file_size(int(cache_info.get("size", 0))))
    table.add_row("Modified", str(cache_info.get("modified", "N/A")))

    metadata = cache_info.get("metadata")
    if metadata:
        expired = cache_info.get("expired")
        table.add_row("Source", str(metadata.get("source")))
        table.add_row("Models", str(metadata.get("model_count")))
        table.add_row("Fetched", str(metadata.get("fetched_at")))
        table.add_row(
            "Expires",
            Text(str(metadata.get("expires_at")), style="red" if expired else "green"),
        )
    else:
        table.add_row("Status", Text("unreadable", style="red"))

    console.print(table)
