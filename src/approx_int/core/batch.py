"""Encode and decode many integers at once.

Triples are held in a numpy structured array using the 3-byte record layout
of the wire format, which makes large approximate indexes cheap to keep in
memory and to sort.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Tuple, Union

import numpy as np

from .int_type import IntType
from .small_value import DEFAULT_INT_TYPE, SmallValue

logger = logging.getLogger(__name__)

TRIPLE_DTYPE = np.dtype(
    [("min_bits", np.uint8), ("percent", np.uint8), ("flag", np.bool_)]
)


def resolve_int_type(
    values: Any, int_type: Optional[Union[IntType, str]] = None
) -> IntType:
    """Pick the integer type for a batch of values.

    An explicit type wins, then the dtype of a numpy integer array, then
    ``i32``.
    """
    if int_type is not None:
        return IntType.parse(int_type)
    if isinstance(values, np.ndarray) and np.issubdtype(values.dtype, np.integer):
        return IntType.from_numpy(values.dtype)
    return DEFAULT_INT_TYPE


def _result_array(values: list, int_type: IntType) -> np.ndarray:
    dtype = int_type.numpy_dtype
    # 128-bit values have no numpy dtype and stay Python ints
    return np.array(values, dtype=dtype if dtype is not None else object)


def encode_array(
    values: Iterable[Any], int_type: Optional[Union[IntType, str]] = None
) -> np.ndarray:
    """Encode integers into an array of ``TRIPLE_DTYPE`` records.

    Args:
        values: Integers to encode
        int_type: Native type of the values, see :func:`resolve_int_type`

    Returns:
        Structured array with one record per value
    """
    resolved = resolve_int_type(values, int_type)
    encoded = [SmallValue.from_int(value, resolved).to_tuple() for value in values]
    logger.debug(f"Encoded {len(encoded)} {resolved} values")
    return np.array(encoded, dtype=TRIPLE_DTYPE)


def to_values(
    triples: np.ndarray,
    int_type: Optional[Union[IntType, str]] = None,
    validate: bool = True,
) -> list[SmallValue]:
    """Convert ``TRIPLE_DTYPE`` records back into SmallValue objects."""
    return [
        SmallValue.from_tuple(
            (int(record["min_bits"]), int(record["percent"]), bool(record["flag"])),
            int_type,
            validate,
        )
        for record in triples
    ]


def decode_array(
    triples: np.ndarray,
    int_type: Optional[Union[IntType, str]] = None,
    validate: bool = True,
) -> np.ndarray:
    """Reconstruct the approximate integers of an encoded array.

    Returns an array of the native numpy dtype, or an object array of Python
    ints for 128-bit types.
    """
    resolved = resolve_int_type(None, int_type)
    values = [value.approximate() for value in to_values(triples, resolved, validate)]
    return _result_array(values, resolved)


def bounds_array(
    triples: np.ndarray,
    int_type: Optional[Union[IntType, str]] = None,
    validate: bool = True,
) -> Tuple[np.ndarray, np.ndarray]:
    """Lower and upper bounds for every record of an encoded array."""
    resolved = resolve_int_type(None, int_type)
    pairs = [value.bounds() for value in to_values(triples, resolved, validate)]
    lows = [low for low, _ in pairs]
    highs = [high for _, high in pairs]
    return _result_array(lows, resolved), _result_array(highs, resolved)


def sort_keys(
    values: Iterable[Any], int_type: Optional[Union[IntType, str]] = None
) -> np.ndarray:
    """Approximate reconstructions usable as bucketed sort keys."""
    resolved = resolve_int_type(values, int_type)
    return decode_array(encode_array(values, resolved), resolved, validate=False)


def sort_order(
    values: Iterable[Any], int_type: Optional[Union[IntType, str]] = None
) -> np.ndarray:
    """Indices that sort ``values`` by their approximations.

    Values sharing a bucket keep their original relative order.
    """
    return np.argsort(sort_keys(values, int_type), kind="stable")
