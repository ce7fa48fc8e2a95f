"""Main CLI application for the OpenRouter Model Registry."""

from typing import Optional

import click
import rich_click as rich_click

from .utils import configure_logging, resolve_format, resolve_log_level

# Configure rich-click
rich_click.rich_click.USE_RICH_MARKUP = True
rich_click.rich_click.USE_MARKDOWN = True
rich_click.rich_click.SHOW_ARGUMENTS = True
rich_click.rich_click.GROUP_ARGUMENTS_OPTIONS = True


@click.group(invoke_without_command=True)
@click.option(
    "--format",
    type=click.Choice(["table", "json", "csv", "yaml"], case_sensitive=False),
    help="Output format. Defaults to 'table' for TTY, 'json' for non-TTY.",
)
@click.option("--verbose", "-v", count=True, help="Increase verbosity (can be used multiple times).")
@click.option("--quiet", "-q", count=True, help="Decrease verbosity (can be used multiple times).")
@click.option("--debug", is_flag=True, help="Enable debug-level logging.")
@click.option("--no-color", is_flag=True, help="Disable color output.")
@click.option("--offline", is_flag=True, help="Skip the live API and load the bundled snapshot.")
@click.option("--version", is_flag=True, is_eager=True, help="Print CLI and library version information.")
@click.pass_context
def app(
    ctx: click.Context,
    format: Optional[str] = None,
    verbose: int = 0,
    quiet: int = 0,
    debug: bool = False,
    no_color: bool = False,
    offline: bool = False,
    version: bool = False,
) -> None:
    """OpenRouter Model Registry CLI - browse and query LLM model metadata.

    Models are loaded from the OpenRouter API, falling back to the bundled
    snapshot and then to a built-in list. Results are cached for 24 hours.
    Configuration is read from ORMR_* environment variables.

    Examples:
      # Largest-context models from Anthropic
      ormr models list --provider anthropic --sort context --order desc

      # Details for one model
      ormr models get claude-3.5-sonnet

      # Force a refresh and show which source was used
      ormr refresh
    """
    if version:
        try:
            from .. import __version__

            library_version = __version__
        except ImportError:
            library_version = "unknown"

        click.echo(f"ORMR CLI version: {library_version}")
        click.echo(f"Library version: {library_version}")
        ctx.exit()

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()

    log_level = resolve_log_level(verbose, quiet, debug)
    configure_logging(log_level, no_color=no_color)

    # Store global options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj.update(
        {
            "format": resolve_format(format),
            "format_explicit": format is not None,
            "verbose": verbose,
            "quiet": quiet,
            "debug": debug,
            "no_color": no_color,
            "offline": offline,
            "log_level": log_level,
        }
    )


# Import and register subcommands after the group is defined
from .commands import cache, models, providers, refresh, stats  # noqa: E402

app.add_command(models.models)
app.add_command(providers.providers)
app.add_command(stats.stats)
app.add_command(refresh.refresh)
app.add_command(cache.cache)


if __name__ == "__main__":
    app()
