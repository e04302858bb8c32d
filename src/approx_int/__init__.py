"""
approx-int: compact approximate integers

Integers of up to 128 bits are stored as a bit length, a percentage of that
bit length's ceiling and a sign flag (24 bits at most), from which an
order-of-magnitude accurate value can be reconstructed.
"""

__version__ = "0.1.0"

from approx_int.config import (
    ApproxIntConfig,
    LoggingConfig,
    get_default_config,
    load_config,
    validate_config,
)
from approx_int.core.batch import (
    TRIPLE_DTYPE,
    bounds_array,
    decode_array,
    encode_array,
    sort_keys,
    sort_order,
)
from approx_int.core.error_rate import analyze_error, error_rate
from approx_int.core.errors import (
    ApproxIntError,
    IntegerOverflowError,
    InvalidTupleError,
)
from approx_int.core.int_type import IntType
from approx_int.core.small_value import SmallValue
from approx_int.utils.logging_setup import configure_logging

__all__ = [
    # Core
    "SmallValue",
    "IntType",
    # Errors
    "ApproxIntError",
    "IntegerOverflowError",
    "InvalidTupleError",
    # Error rates
    "error_rate",
    "analyze_error",
    # Batch encoding
    "TRIPLE_DTYPE",
    "encode_array",
    "decode_array",
    "bounds_array",
    "sort_keys",
    "sort_order",
    # Configuration
    "ApproxIntConfig",
    "LoggingConfig",
    "load_config",
    "get_default_config",
    "validate_config",
    "configure_logging",
]
