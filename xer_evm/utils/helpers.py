"""General utility helper functions."""
from typing import Any, Optional
import logging
import math
import sys
import re
from datetime import datetime

import pandas as pd

logger = logging.getLogger(__name__)

# Leading numeric prefix, the way a lenient text-to-number reader sees it
_FLOAT_PREFIX = re.compile(r'^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')
_INT_PREFIX = re.compile(r'^[+-]?\d+')


def parse_float(value: Optional[str], default: float = 0.0) -> float:
    """
    Best-effort conversion of raw field text to a finite float.

    Reads the leading numeric prefix ("12.5h" -> 12.5). Absent, unparsable
    and non-finite values return the default.

    Args:
        value: Raw field text (or None)
        default: Value used when no finite number can be read

    Returns:
        Parsed float or default
    """
    if value is None:
        return default
    match = _FLOAT_PREFIX.match(str(value).strip())
    if not match:
        logger.debug(f'Non-numeric value {value!r}, using {default}')
        return default
    number = float(match.group(0))
    if not math.isfinite(number):
        logger.debug(f'Non-finite value {value!r}, using {default}')
        return default
    return number


def parse_int(value: Optional[str], default: int = 0) -> int:
    """
    Best-effort conversion of raw field text to an integer.

    Only the leading integer digits are read ("7.9" -> 7).

    Args:
        value: Raw field text (or None)
        default: Value used when no integer can be read

    Returns:
        Parsed integer or default
    """
    if value is None:
        return default
    match = _INT_PREFIX.match(str(value).strip())
    if not match:
        logger.debug(f'Non-integer value {value!r}, using {default}')
        return default
    try:
        return int(match.group(0))
    except ValueError:
        # Digit runs past the int conversion limit
        logger.debug(f'Integer too long in {str(value)[:20]!r}..., using {default}')
        return default


def round_half_away(value: float, digits: int = 2) -> float:
    """
    Round by scaling, rounding half away from zero, and rescaling.

    round_half_away(0.125, 2) == 0.13 and round_half_away(-0.125, 2) == -0.13.
    Python's built-in round() uses banker's rounding and is not used here.
    Non-finite input gives 0.0.

    Args:
        value: Number to round
        digits: Decimal places to keep

    Returns:
        Rounded float
    """
    if not math.isfinite(value):
        return 0.0
    factor = 10 ** digits
    scaled = value * factor
    # Too large to carry any decimals
    if not math.isfinite(scaled):
        return value
    rounded = math.floor(abs(scaled) + 0.5)
    if scaled < 0:
        rounded = -rounded
    return rounded / factor


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a P6 date field ("2024-03-15 08:00", "2024-03-15").

    Args:
        value: Raw date text (or None)

    Returns:
        datetime, or None when absent or unparsable
    """
    if not value:
        return None
    parsed = pd.to_datetime(value, errors='coerce')
    if pd.isna(parsed):
        logger.debug(f'Unparsable date {value!r}')
        return None
    return parsed.to_pydatetime()


def month_key(value: datetime) -> str:
    """Calendar month bucket key, zero-padded (YYYY-MM)."""
    return f'{value.year:04d}-{value.month:02d}'


def safe_get(d: dict[str, Any], key: str, default: Any = None) -> Any:
    """
    Get a value from a record, treating None as missing.

    Args:
        d: Record mapping
        key: Field name
        default: Value if the field is absent or None

    Returns:
        Value or default
    """
    value = d.get(key)
    return value if value is not None else default


def clamp_finite(value: float) -> float:
    """Keep a running total finite: overflow saturates at the largest float, NaN is 0."""
    if math.isnan(value):
        return 0.0
    if math.isinf(value):
        return math.copysign(sys.float_info.max, value)
    return value
