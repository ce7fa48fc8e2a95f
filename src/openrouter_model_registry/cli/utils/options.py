"""Common CLI options and decorators."""

from functools import wraps
from typing import Any, Callable, TypeVar, cast

import click

from ...models import SizeTier
from ...query import SORT_KEYS, SORT_ORDERS

F = TypeVar("F", bound=Callable[..., Any])


def output_option(func: F) -> F:
    """Add --output option to a command."""

    @click.option("--output", "-o", type=click.Path(), help="Write output to file instead of stdout.")
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return cast(F, wrapper)


def filter_options(func: F) -> F:
    """Add the query-engine filter options to a command."""

    @click.option("--provider", "-p", multiple=True, help="Provider id or name (repeatable, any-of).")
    @click.option("--min-context", type=click.IntRange(min=0), help="Minimum context length (inclusive).")
    @click.option("--max-context", type=click.IntRange(min=0), help="Maximum context length (inclusive).")
    @click.option(
        "--tier",
        multiple=True,
        type=click.Choice([tier.value for tier in SizeTier], case_sensitive=False),
        help="Size tier (repeatable, any-of).",
    )
    @click.option("--free/--paid", "is_free", default=None, help="Only free or only paid models.")
    @click.option("--images/--no-images", "supports_images", default=None, help="Filter on image input support.")
    @click.option("--tools/--no-tools", "supports_tools", default=None, help="Filter on tool calling support.")
    @click.option(
        "--reasoning/--no-reasoning", "supports_reasoning", default=None, help="Filter on reasoning support."
    )
    @click.option(
        "--structured-output/--no-structured-output",
        "supports_structured_output",
        default=None,
        help="Filter on structured output support.",
    )
    @click.option("--modality", "input_modality", multiple=True, help="Input modality (repeatable, any-of).")
    @click.option("--search", "-s", help="Case-insensitive search over id, name, provider and description.")
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return cast(F, wrapper)


def sort_options(func: F) -> F:
    """Add --sort, --order and --limit options to a command."""

    @click.option("--sort", "sort_by", type=click.Choice(SORT_KEYS, case_sensitive=False), help="Sort key.")
    @click.option(
        "--order",
        "sort_order",
        type=click.Choice(SORT_ORDERS, case_sensitive=False),
        default="asc",
        show_default=True,
        help="Sort order.",
    )
    @click.option("--limit", "-n", type=click.IntRange(min=0), help="Maximum number of results (0 = no limit).")
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return cast(F, wrapper)
