"""Helper functions for CLI operations."""

import logging
import sys
from typing import Any, Dict, List, Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from ...client import ModelRegistryClient
from ...config import RegistryConfig
from ...errors import ConfigurationError
from ...logging import ROOT_LOGGER_NAME


class ExitCode:
    """Standard exit codes for the CLI."""

    SUCCESS = 0
    GENERIC_ERROR = 1
    INVALID_USAGE = 2
    MODEL_NOT_FOUND = 3


def resolve_format(cli_format: Optional[str] = None, default_tty: str = "table", default_non_tty: str = "json") -> str:
    """Resolve output format with TTY detection.

    Args:
        cli_format: Format specified via CLI flag
        default_tty: Default format for TTY output
        default_non_tty: Default format for non-TTY output

    Returns:
        Resolved format name
    """
    if cli_format:
        return cli_format.lower()

    # Auto-detect based on TTY
    if sys.stdout.isatty():
        return default_tty
    else:
        return default_non_tty


def resolve_log_level(verbose: int = 0, quiet: int = 0, debug: bool = False) -> str:
    """Map verbosity flags to a logging level name."""
    if debug:
        return "DEBUG"
    if verbose > quiet:
        return "DEBUG" if verbose >= 2 else "INFO"
    if quiet > verbose:
        return "ERROR"
    return "WARNING"


def configure_logging(level: str, no_color: bool = False) -> None:
    """Route package logs to stderr through a Rich handler.

    Args:
        level: Logging level name
        no_color: Disable color output
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(console=Console(stderr=True, no_color=no_color), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def handle_error(error: Exception, exit_code: int = ExitCode.GENERIC_ERROR) -> None:
    """Handle CLI errors with consistent formatting.

    Args:
        error: Exception to handle
        exit_code: Exit code to use
    """
    click.echo(f"Error: {str(error)}", err=True)
    sys.exit(exit_code)


def build_config(ctx_obj: Dict[str, Any]) -> RegistryConfig:
    """Build the registry configuration for a command.

    Settings come from ORMR_* environment variables; ``--offline`` disables
    the network stage on top of them.

    Raises:
        ConfigurationError: If an environment value is invalid
    """
    config = RegistryConfig.from_env()
    if ctx_obj.get("offline"):
        config.network_enabled = False
    return config


def load_client(ctx_obj: Dict[str, Any], force: bool = False) -> ModelRegistryClient:
    """Create a client for a command and load its registry.

    Args:
        ctx_obj: Click context object with the global options
        force: Run the fallback chain even if a fresh cache exists

    Returns:
        A loaded ModelRegistryClient
    """
    try:
        config = build_config(ctx_obj)
    except ConfigurationError as e:
        handle_error(e, ExitCode.INVALID_USAGE)
        raise

    client = ModelRegistryClient(config)
    client.load(force=force)
    return client


def validate_format_support(
    format_type: str,
    supported_formats: List[str],
    command_name: str,
    ctx_obj: Dict[str, Any],
) -> str:
    """Validate format support for a command with consistent fallback behavior.

    Args:
        format_type: The requested format
        supported_formats: List of supported formats for this command
        command_name: Name of the command for error messages
        ctx_obj: Click context object containing verbosity settings

    Returns:
        The validated format (may be changed from input for fallback)

    Raises:
        click.BadParameter: For unsupported formats that can't fall back
    """
    if format_type in supported_formats:
        return format_type

    # Common fallback behavior for table/csv
    if format_type in ["table", "csv"]:
        fallback_format = "json" if "json" in supported_formats else supported_formats[0]
        # Only show message in verbose mode to avoid cluttering output
        if ctx_obj.get("verbose", 0) > 0:
            click.echo(
                f"Note: {command_name} doesn't support '{format_type}' format, using {fallback_format} instead.",
                err=True,
            )
        return fallback_format
    else:
        supported_list = "', '".join(supported_formats)
        raise click.BadParameter(f"Format '{format_type}' is not supported for {command_name}. Use '{supported_list}'.")


def extract_nested_value(obj: Dict[str, Any], path: str) -> Any:
    """Extract nested value using dotted path notation.

    Args:
        obj: Object to extract from
        path: Dotted path (e.g., 'pricing.prompt_per_million')

    Returns:
        Extracted value or None if path doesn't exist
    """
    current: Any = obj
    for part in path.split("."):
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            return None
    return current


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Human-readable size string
    """
    if size_bytes == 0:
        return "0 B"

    size_names = ["B", "KB", "MB", "GB"]
    size = float(size_bytes)
    i = 0
    while size >= 1024 and i < len(size_names) - 1:
        size /= 1024.0
        i += 1

    return f"{size:.1f} {size_names[i]}"
