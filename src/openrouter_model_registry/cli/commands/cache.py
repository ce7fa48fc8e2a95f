"""Cache management commands for the ORMR CLI."""

import click

from ...cache import RegistryCache
from ..formatters import create_console, format_cache_info_json, format_cache_info_table, format_json
from ..utils import ExitCode, build_config, handle_error


def _get_cache(ctx: click.Context) -> RegistryCache:
    return RegistryCache(build_config(ctx.obj).cache_dir)


@click.group()
def cache() -> None:
    """Manage the persisted registry cache."""
    pass


@cache.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show the cache file location and the cached registry metadata."""
    try:
        cache_info = _get_cache(ctx).info()

        if ctx.obj["format"] == "json":
            format_json(format_cache_info_json(cache_info))
        else:
            console = create_console(no_color=ctx.obj["no_color"])
            format_cache_info_table(cache_info, console)

    except Exception as e:
        handle_error(e, ExitCode.GENERIC_ERROR)


@cache.command()
@click.option("--yes", is_flag=True, help="Confirm deletion without prompting (required for non-interactive use).")
@click.pass_context
def clear(ctx: click.Context, yes: bool = False) -> None:
    """Delete the cached registry.

    The next command loads the registry again through the fallback chain.
    """
    try:
        registry_cache = _get_cache(ctx)

        if not yes:
            if not registry_cache.path.exists():
                click.echo("No cached registry found to clear.")
                return
            if not click.confirm(f"Delete {registry_cache.path}?"):
                click.echo("Cache clear cancelled.")
                return

        removed = registry_cache.clear()

        if ctx.obj["format"] == "json":
            format_json({"success": True, "removed": removed, "cache_file": str(registry_cache.path)})
        else:
            console = create_console(no_color=ctx.obj["no_color"])
            if removed:
                console.print(f"[green]Cleared cached registry:[/green] {registry_cache.path}")
            else:
                console.print("No cached registry was found to clear.")

    except Exception as e:
        handle_error(e, ExitCode.GENERIC_ERROR)
