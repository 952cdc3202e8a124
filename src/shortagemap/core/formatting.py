"""
Unit formatters shared by legend labels and popup lines.
"""

import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Callable, Dict, Optional

NO_DATA_INTEGER = "No data"
NO_DATA_DECIMAL = "n/a"


def _is_number(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# enough precision to quantize any finite double
_WIDE = Context(prec=400)


def _one_decimal(value: float) -> Decimal:
    """One decimal, ties rounded away from zero like ``toFixed(1)``."""
    return Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP, context=_WIDE)


def format_integer(value: Optional[float]) -> str:
    """Whole units with thousands grouping, e.g. ``12,346``."""
    if not _is_number(value):
        return NO_DATA_INTEGER
    return f"{_round_half_up(value):,}"


def format_per_thousand(value: Optional[float]) -> str:
    """One decimal, used for per-1,000 rates."""
    if not _is_number(value):
        return NO_DATA_DECIMAL
    return f"{_one_decimal(value)}"


def format_percent(value: Optional[float]) -> str:
    """One decimal with a percent suffix; expects 0-100 percent space."""
    if not _is_number(value):
        return NO_DATA_DECIMAL
    return f"{_one_decimal(value)}%"


FORMATTERS: Dict[str, Callable[[Optional[float]], str]] = {
    "integer": format_integer,
    "per_thousand": format_per_thousand,
    "percent": format_percent,
}


def get_formatter(unit: str) -> Callable[[Optional[float]], str]:
    try:
        return FORMATTERS[unit]
    except KeyError:
        raise ValueError(
            f"Unknown unit formatter '{unit}'. Valid: {sorted(FORMATTERS)}"
        ) from None


def format_value(value: Optional[float], unit: str) -> str:
    return get_formatter(unit)(value)
