"""CLI utilities package."""

from .helpers import (
    ExitCode,
    build_config,
    configure_logging,
    extract_nested_value,
    format_file_size,
    handle_error,
    load_client,
    resolve_format,
    resolve_log_level,
    validate_format_support,
)
from .options import (
    filter_options,
    output_option,
    sort_options,
)

__all__ = [
    "ExitCode",
    "resolve_format",
    "resolve_log_level",
    "configure_logging",
    "handle_error",
    "build_config",
    "load_client",
    "validate_format_support",
    "extract_nested_value",
    "format_file_size",
    "output_option",
    "filter_options",
    "sort_options",
]
