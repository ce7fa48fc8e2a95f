"""Model listing and inspection commands for the ORMR CLI."""

import csv
import io
import sys
from typing import Any, Dict, Optional, TextIO

import click
import yaml

from ...errors import ModelNotFoundError
from ...query import QueryOptions
from ..formatters import create_console, format_json, format_models_list_json, format_models_table
from ..formatters.table import DEFAULT_MODEL_COLUMNS
from ..utils import (
    ExitCode,
    extract_nested_value,
    filter_options,
    handle_error,
    load_client,
    output_option,
    sort_options,
    validate_format_support,
)


def _build_query(filters: Dict[str, Any]) -> QueryOptions:
    """Translate CLI option values into QueryOptions.

    Repeatable options arrive as tuples; an empty tuple means "not given".
    """
    values: Dict[str, Any] = {}
    for key, value in filters.items():
        if isinstance(value, tuple):
            if value:
                values[key] = list(value)
        elif value is not None:
            values[key] = value
    return QueryOptions(**values)


@click.group()
def models() -> None:
    """Browse and inspect models."""
    pass


@models.command("list")
@filter_options
@sort_options
@click.option("--columns", help="Comma-separated columns to display (dotted paths, e.g. 'pricing.is_free').")
@click.pass_context
def list_models(ctx: click.Context, columns: Optional[str] = None, **filters: Any) -> None:
    """List models matching the given filters.

    Examples:
      ormr models list --free --min-context 100000
      ormr models list --tier large --tier massive --sort price -n 10
    """
    try:
        format_type = validate_format_support(ctx.obj["format"], ["table", "json", "csv"], "models list", ctx.obj)
    except click.BadParameter as e:
        handle_error(e, ExitCode.INVALID_USAGE)

    try:
        client = load_client(ctx.obj)
        results = client.query(_build_query(filters))

        column_list = [col.strip() for col in columns.split(",") if col.strip()] if columns else None

        if format_type == "json":
            format_json(format_models_list_json(results, client.registry))
        elif format_type == "csv":
            column_list = column_list or DEFAULT_MODEL_COLUMNS
            output = io.StringIO()
            writer = csv.writer(output)
            writer.writerow(column_list)
            for model in results:
                data = model.to_dict()
                row = []
                for col in column_list:
                    value = extract_nested_value(data, col)
                    row.append(str(value) if value is not None else "N/A")
                writer.writerow(row)
            click.echo(output.getvalue().strip())
        else:
            console = create_console(no_color=ctx.obj["no_color"])
            format_models_table(results, console, columns=column_list)
            if client.error is not None:
                console.print(f"[yellow]Note:[/yellow] {client.error}")

    except Exception as e:
        handle_error(e, ExitCode.GENERIC_ERROR)


@models.command()
@click.argument("model_name", type=str)
@output_option
@click.pass_context
def get(ctx: click.Context, model_name: str, output: Optional[str] = None) -> None:
    """Get detailed information about a specific model.

    MODEL_NAME may be an id ("openai/gpt-4o"), a slug ("gpt-4o") or a loose
    reference such as "gpt4o".
    """
    try:
        format_type = validate_format_support(ctx.obj["format"], ["json", "yaml"], "models get", ctx.obj)
    except click.BadParameter as e:
        handle_error(e, ExitCode.INVALID_USAGE)

    try:
        model = load_client(ctx.obj).get_model(model_name)
        if model is None:
            handle_error(ModelNotFoundError(f"Model '{model_name}' not found", model=model_name), ExitCode.MODEL_NOT_FOUND)
        payload = model.to_dict()

        output_file: Optional[TextIO] = None
        if output:
            output_file = open(output, "w", encoding="utf-8")

        try:
            if format_type == "yaml":
                yaml_output = yaml.safe_dump(payload, default_flow_style=False, sort_keys=True)
                if output_file:
                    output_file.write(yaml_output)
                else:
                    click.echo(yaml_output.rstrip())
            else:
                format_json(payload, output_file or sys.stdout)
        finally:
            if output_file:
                output_file.close()

    except Exception as e:
        handle_error(e, ExitCode.GENERIC_ERROR)
