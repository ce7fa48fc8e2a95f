"""Provider listing commands for the ORMR CLI."""

from collections import Counter

import click

from ..formatters import create_console, format_json, format_providers_json, format_providers_table
from ..utils import ExitCode, handle_error, load_client


@click.group()
def providers() -> None:
    """Inspect model providers."""
    pass


@providers.command("list")
@click.pass_context
def list_providers(ctx: click.Context) -> None:
    """List providers with their model counts."""
    try:
        client = load_client(ctx.obj)
        provider_list = client.get_providers()
        counts = dict(Counter(model.provider.id for model in client.models))

        if ctx.obj["format"] == "json":
            format_json(format_providers_json(provider_list, counts))
        else:
            console = create_console(no_color=ctx.obj["no_color"])
            format_providers_table(provider_list, counts, console)

    except Exception as e:
        handle_error(e, ExitCode.GENERIC_ERROR)
