"""
Numeric normalization for dirty county attributes.

Source spreadsheets mix plain numbers, thousands-separated strings ("12,345"),
percent strings ("45%"), blanks and nulls. Everything here returns either a
finite float or ``None`` ("missing"); malformed text never raises.
"""

import math
import re
from numbers import Number
from typing import Any, Optional

from loguru import logger

MISSING = None

# Plain ASCII decimal with optional exponent; rejects "1_000" and non-ASCII digits
NUMERIC_TEXT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$", re.ASCII)


def parse_numeric(raw: Any) -> Optional[float]:
    """
    Parse a raw scalar into a finite float.

    Args:
        raw: String, number or None

    Returns:
        The parsed value, or None when the input is blank, malformed,
        NaN or infinite.
    """
    if raw is None or isinstance(raw, bool):
        return MISSING

    if isinstance(raw, Number):
        value = float(raw)
        return value if math.isfinite(value) else MISSING

    text = str(raw).strip()
    if not text:
        return MISSING

    if text.endswith("%"):
        text = text[:-1]
    text = text.replace(",", "").strip()

    if not NUMERIC_TEXT.match(text):
        logger.trace(f"Unparsable numeric value: {raw!r}")
        return MISSING

    value = float(text)
    return value if math.isfinite(value) else MISSING


def coerce_or_zero(raw: Any) -> float:
    """Parse ``raw``, counting absence as zero (aggregate totals only)."""
    value = parse_numeric(raw)
    return 0.0 if value is None else value


def ratio_to_percent(value: Optional[float]) -> Optional[float]:
    """Scale a 0-1 ratio into percent space; values above 1 are left alone."""
    if value is None:
        return MISSING
    return value * 100 if value <= 1 else value


def to_percent_space(raw: Any) -> float:
    """
    Normalize a ratio-or-percent field into 0-100 percent space.

    Missing values become 0. Anything <= 1 is read as a ratio and scaled
    by 100, so a genuine 1% and a ratio of 1.0 both come out as 100.
    This is lossy for small true percentages and is kept deliberately.
    """
    value = parse_numeric(raw)
    if value is None:
        return 0.0
    return ratio_to_percent(value)


def metric_value(lens, record) -> Optional[float]:
    """
    Extract the classified value for ``lens`` from a record or a bare
    property mapping.

    Missing stays missing so quantile lenses can exclude it.
    """
    properties = getattr(record, "properties", record)
    value = parse_numeric(properties.get(lens.metric_field))
    if lens.value_transform == "percent":
        return ratio_to_percent(value)
    return value
