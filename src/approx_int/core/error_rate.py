"""Error-rate utilities for approximated integers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional, Union

import numpy as np

if TYPE_CHECKING:
    from .int_type import IntType


def error_rate(original: int, approximate: int) -> Optional[float]:
    """Relative error of an approximation, in percent.

    Positive when the approximation undershoots a positive original. The sign
    flips for negative originals.

    Args:
        original: The exact value
        approximate: Its reconstruction

    Returns:
        ``(original - approximate) / original * 100``, or None if original is 0
    """
    original = int(original)
    if original == 0:
        return None
    return (original - int(approximate)) / original * 100.0


def bias_percent(original: int, approximate: int, int_type: IntType) -> int:
    """Truncated relative error used to bias negative encodings.

    Computed in floating point the way a native implementation would and
    converted back into the integer type. Any step that fails (subtraction
    overflow, non-finite ratio, result outside a byte) yields 0.
    """
    diff = int_type.checked_sub(original, approximate)
    if diff is None:
        return 0

    try:
        rate = int_type.to_float(diff) / int_type.to_float(original) * 100.0
    except ZeroDivisionError:
        return 0

    percent = int_type.from_float(rate)
    if percent is None or not 0 <= percent <= 0xFF:
        return 0
    return percent


def analyze_error(
    values: Iterable[Any], int_type: Optional[Union[IntType, str]] = None
) -> Dict[str, Any]:
    """Measure how well a sample of integers survives approximation.

    Args:
        values: Integers to encode (plain ints, numpy scalars or an array)
        int_type: Native type of the values, inferred per value if omitted

    Returns:
        Dictionary with error statistics:
        - count: number of values analysed
        - mean_abs_error / max_abs_error / min_abs_error: absolute relative
          error in percent over non-zero values
        - bracketed_ratio: share of values inside their own bounds
        - exact_ratio: share of values reconstructed exactly
    """
    # Import at runtime to avoid circular imports
    from .small_value import SmallValue

    rates = []
    bracketed = 0
    exact = 0
    count = 0

    for value in values:
        encoded = SmallValue.from_int(value, int_type)
        original = int(value)
        approx = encoded.approximate()
        low, high = encoded.bounds()

        count += 1
        if approx == original:
            exact += 1
        if low <= original <= high:
            bracketed += 1

        rate = error_rate(original, approx)
        if rate is not None:
            rates.append(abs(rate))

    if count == 0:
        return {
            "count": 0,
            "mean_abs_error": 0.0,
            "max_abs_error": 0.0,
            "min_abs_error": 0.0,
            "bracketed_ratio": 0.0,
            "exact_ratio": 0.0,
        }

    errors = np.asarray(rates, dtype=np.float64)
    has_errors = errors.size > 0

    return {
        "count": count,
        "mean_abs_error": float(np.mean(errors)) if has_errors else 0.0,
        "max_abs_error": float(np.max(errors)) if has_errors else 0.0,
        "min_abs_error": float(np.min(errors)) if has_errors else 0.0,
        "bracketed_ratio": bracketed / count,
        "exact_ratio": exact / count,
    }
