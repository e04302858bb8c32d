"""Core encode/decode engine for approximate integers"""

from approx_int.core.batch import (
    TRIPLE_DTYPE,
    bounds_array,
    decode_array,
    encode_array,
    sort_keys,
    sort_order,
    to_values,
)
from approx_int.core.error_rate import analyze_error, bias_percent, error_rate
from approx_int.core.errors import (
    ApproxIntError,
    IntegerOverflowError,
    InvalidTupleError,
)
from approx_int.core.int_type import IntType
from approx_int.core.small_value import (
    MAX_BIASED_PERCENT,
    MAX_PERCENT,
    MIN_PERCENT,
    SmallValue,
)

__all__ = [
    # Core
    "SmallValue",
    "IntType",
    "MIN_PERCENT",
    "MAX_PERCENT",
    "MAX_BIASED_PERCENT",
    # Errors
    "ApproxIntError",
    "IntegerOverflowError",
    "InvalidTupleError",
    # Error rates
    "error_rate",
    "bias_percent",
    "analyze_error",
    # Batch encoding
    "TRIPLE_DTYPE",
    "encode_array",
    "decode_array",
    "bounds_array",
    "to_values",
    "sort_keys",
    "sort_order",
]
