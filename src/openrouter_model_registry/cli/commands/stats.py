"""Registry statistics command for the ORMR CLI."""

import click

from ..formatters import create_console, format_json, format_stats_table
from ..utils import ExitCode, handle_error, load_client


@click.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Show aggregate statistics for the current registry."""
    try:
        client = load_client(ctx.obj)
        registry = client.registry
        registry_stats = client.get_stats()

        if ctx.obj["format"] == "json":
            data = registry_stats.to_dict()
            data.update(
                {
                    "source": registry.source.value if registry else None,
                    "fetched_at": registry.metadata.fetched_at if registry else None,
                    "expires_at": registry.metadata.expires_at if registry else None,
                    "stale": client.is_stale,
                }
            )
            format_json(data)
        elif registry is not None:
            console = create_console(no_color=ctx.obj["no_color"])
            format_stats_table(registry_stats, registry, console)

    except Exception as e:
        handle_error(e, ExitCode.GENERIC_ERROR)
