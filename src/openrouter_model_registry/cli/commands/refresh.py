"""Registry refresh command for the ORMR CLI."""

import click

from ...errors import DegradedDataError
from ..formatters import create_console, format_json
from ..utils import ExitCode, handle_error, load_client


@click.command()
@click.pass_context
def refresh(ctx: click.Context) -> None:
    """Run the fallback chain now, bypassing the cache.

    Reports which source produced the registry. A source other than "api"
    means the live endpoint could not be used; the reasons are listed.
    """
    try:
        client = load_client(ctx.obj, force=True)
        registry = client.registry
        error = client.error

        failures = []
        if isinstance(error, DegradedDataError):
            failures = [{"stage": f.source.value, "error": str(f.error)} for f in error.failures]
        elif error is not None:
            failures = [{"stage": "fetch", "error": str(error)}]

        if ctx.obj["format"] == "json":
            format_json(
                {
                    "source": registry.source.value if registry else None,
                    "model_count": registry.metadata.model_count if registry else 0,
                    "provider_count": registry.metadata.provider_count if registry else 0,
                    "fetched_at": registry.metadata.fetched_at if registry else None,
                    "failures": failures,
                }
            )
            return

        console = create_console(no_color=ctx.obj["no_color"])
        if registry is None:
            console.print("[red]No registry loaded[/red]")
            return
        style = "green" if registry.source.value == "api" else "yellow"
        console.print(
            f"Loaded [bold]{registry.metadata.model_count}[/bold] models from "
            f"{registry.metadata.provider_count} providers "
            f"(source: [{style}]{registry.source.value}[/{style}])"
        )
        for failure in failures:
            console.print(f"  [yellow]skipped {failure['stage']}:[/yellow] {failure['error']}")

    except Exception as e:
        handle_error(e, ExitCode.GENERIC_ERROR)
