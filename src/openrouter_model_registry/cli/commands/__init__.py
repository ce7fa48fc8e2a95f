"""CLI commands package."""

# Import all command modules to make them available
from . import cache, models, providers, refresh, stats

__all__ = ["models", "providers", "stats", "refresh", "cache"]
