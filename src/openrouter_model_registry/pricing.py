"""Pricing normalization.

Upstream reports per-token prices as decimal strings ("0.000003"). They are
converted to per-million figures with exact decimal arithmetic so that
"0.000003" becomes 3.0 rather than 2.9999999999999996.
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Tuple

from .models import ModelPricing

TOKENS_PER_MILLION = Decimal(1_000_000)


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Tolerantly parse a decimal-encoded cost.

    Args:
        value: String or number from the upstream payload

    Returns:
        The parsed finite Decimal, or None if the value is absent or malformed
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        value = repr(value)
    if not isinstance(value, str):
        return None
    try:
        parsed = Decimal(value.strip())
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


def _scaled(value: Optional[Decimal], factor: Decimal) -> Optional[float]:
    """Multiply and convert to float; results beyond float range count as malformed."""
    if value is None:
        return None
    try:
        scaled = float(value * factor)
    except ArithmeticError:
        return None
    return scaled if math.isfinite(scaled) else None


def _per_million(value: Optional[Decimal]) -> Optional[float]:
    return _scaled(value, TOKENS_PER_MILLION)


def _per_unit(value: Optional[Decimal]) -> Optional[float]:
    return _scaled(value, Decimal(1))


def _required_cost(value: Any) -> Tuple[Decimal, float]:
    """Read a required per-token cost as (raw, per-million); malformed counts as 0."""
    raw = parse_decimal(value)
    per_million = _per_million(raw)
    if raw is None or per_million is None:
        return Decimal(0), 0.0
    return raw, per_million


def parse_pricing(pricing: Any) -> ModelPricing:
    """Convert an upstream pricing block into ModelPricing.

    The prompt and completion costs are required: when missing or malformed
    they count as 0. All other costs are optional and stay None. A cost that
    cannot be represented as a finite float is malformed.

    Args:
        pricing: The raw ``pricing`` mapping (anything else is treated as empty)

    Returns:
        Normalized pricing
    """
    block: Mapping[str, Any] = pricing if isinstance(pricing, Mapping) else {}

    prompt, prompt_per_million = _required_cost(block.get("prompt"))
    completion, completion_per_million = _required_cost(block.get("completion"))

    return ModelPricing(
        prompt_per_million=prompt_per_million,
        completion_per_million=completion_per_million,
        is_free=prompt == 0 and completion == 0,
        image_per_image=_per_unit(parse_decimal(block.get("image"))),
        request_cost=_per_unit(parse_decimal(block.get("request"))),
        web_search_cost=_per_unit(parse_decimal(block.get("web_search"))),
        reasoning_per_million=_per_million(parse_decimal(block.get("internal_reasoning"))),
        cache_read_per_million=_per_million(parse_decimal(block.get("input_cache_read"))),
        cache_write_per_million=_per_million(parse_decimal(block.get("input_cache_write"))),
    )
