"""JSON output formatter for CLI."""

import datetime as _dt
import json
import sys
from enum import Enum as _Enum
from typing import Any, Dict, List, Optional, Sequence, TextIO

from ...models import LLMModel, ModelProvider
from ...registry import Registry


def _default_serializer(obj: Any) -> Any:
    """Serialize otherwise non-JSON-serializable objects.

    - datetime/date -> ISO 8601 string
    - Enum -> value (fallback to name)
    - Fallback -> str(obj)
    """
    if isinstance(obj, (_dt.datetime, _dt.date)):
        return obj.isoformat()
    if isinstance(obj, _Enum):
        return getattr(obj, "value", obj.name)
    return str(obj)


def format_json(data: Any, output: Optional[TextIO] = None, indent: int = 2) -> None:
    """Format data as JSON and write to output.

    Args:
        data: Data to format
        output: Output stream (defaults to stdout)
        indent: JSON indentation level
    """
    if output is None:
        output = sys.stdout

    json.dump(
        data,
        output,
        indent=indent,
        ensure_ascii=False,
        sort_keys=True,
        default=_default_serializer,
    )
    output.write("\n")


def format_models_list_json(models: Sequence[LLMModel], registry: Optional[Registry] = None) -> Dict[str, Any]:
    """Format a model list for JSON output.

    Models keep their query order; the registry source is included so
    consumers can tell degraded data apart.
    """
    return {
        "models": [model.to_dict() for model in models],
        "count": len(models),
        "source": registry.source.value if registry else None,
    }


def format_providers_json(providers: List[ModelProvider], counts: Dict[str, int]) -> Dict[str, Any]:
    """Format providers for JSON output.

    Args:
        providers: Providers sorted by name
        counts: Number of models per provider id

    Returns:
        Formatted data structure
    """
    return {
        "providers": [
            {
                "id": provider.id,
                "name": provider.name,
                "color": provider.color,
                "icon": provider.icon,
                "model_count": counts.get(provider.id, 0),
            }
            for provider in providers
        ],
        "count": len(providers),
    }


def format_cache_info_json(cache_info: Dict[str, Any]) -> Dict[str, Any]:
    """Format cache information for JSON output.

    Args:
        cache_info: Output of ``RegistryCache.info()``

    Returns:
        Formatted data structure
    """
    return {
        "cache_file": cache_info.get("path"),
        "exists": cache_info.get("exists", False),
        "size_bytes": cache_info.get("size", 0),
        "modified": cache_info.get("modified"),
        "expired": cache_info.get("expired"),
        "metadata": cache_info.get("metadata"),
    }
