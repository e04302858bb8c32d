"""Fixed-width integer types supported by approx-int.

Python integers are unbounded, so every encoded value carries an ``IntType``
tag describing the native integer it stands for: its width, its signedness
and the overflow behaviour of arithmetic on it. All arithmetic helpers here
follow two's-complement machine semantics (truncating division, wrapping
shifts) rather than Python's floor division.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Optional, Union

import numpy as np


class IntType(Enum):
    """Supported native integer types."""

    U32 = "u32"
    U64 = "u64"
    U128 = "u128"
    I32 = "i32"
    I64 = "i64"
    I128 = "i128"

    @property
    def bits(self) -> int:
        """Width of the type in bits."""
        return int(self.value[1:])

    @property
    def signed(self) -> bool:
        return self.value.startswith("i")

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        if self.signed:
            return (1 << (self.bits - 1)) - 1
        return (1 << self.bits) - 1

    @property
    def mask(self) -> int:
        return (1 << self.bits) - 1

    @property
    def zero(self) -> int:
        return 0

    @property
    def one(self) -> int:
        return 1

    @property
    def numpy_dtype(self) -> Optional[np.dtype]:
        """Matching numpy dtype, or None for widths numpy cannot hold."""
        mapping = {
            IntType.U32: np.uint32,
            IntType.U64: np.uint64,
            IntType.I32: np.int32,
            IntType.I64: np.int64,
        }
        if self not in mapping:
            return None
        return np.dtype(mapping[self])

    @classmethod
    def from_numpy(cls, dtype: Any) -> IntType:
        """Convert a numpy integer dtype to an IntType.

        Args:
            dtype: NumPy data type (or anything ``np.dtype`` accepts)

        Returns:
            Corresponding IntType

        Raises:
            ValueError: If dtype is not a supported integer type
        """
        mapping = {
            np.uint32: cls.U32,
            np.uint64: cls.U64,
            np.int32: cls.I32,
            np.int64: cls.I64,
        }

        dtype = np.dtype(dtype)
        if dtype.type not in mapping:
            raise ValueError(f"Unsupported dtype: {dtype}")

        return mapping[dtype.type]

    @classmethod
    def parse(cls, value: Union[str, IntType]) -> IntType:
        """Accept an IntType or its name (``"u32"``, ``"I128"``, ...)."""
        if isinstance(value, IntType):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = sorted(t.value for t in cls)
            raise ValueError(
                f"Unknown integer type {value!r}, expected one of {valid}"
            ) from None

    @classmethod
    def infer(cls, number: Any) -> Optional[IntType]:
        """Infer the type of a numpy integer scalar, None for plain ints."""
        if isinstance(number, np.integer):
            return cls.from_numpy(number.dtype)
        return None

    def contains(self, value: int) -> bool:
        """Return True if ``value`` is representable by this type."""
        return self.min_value <= value <= self.max_value

    def wrap(self, value: int) -> int:
        """Reinterpret the low ``bits`` of ``value`` as this type."""
        value &= self.mask
        if self.signed and value > self.max_value:
            value -= 1 << self.bits
        return value

    def leading_zeros(self, value: int) -> int:
        """Count leading zero bits of the two's-complement pattern."""
        return self.bits - (value & self.mask).bit_length()

    def _checked(self, value: int) -> Optional[int]:
        return value if self.contains(value) else None

    def checked_add(self, a: int, b: int) -> Optional[int]:
        return self._checked(a + b)

    def checked_sub(self, a: int, b: int) -> Optional[int]:
        return self._checked(a - b)

    def checked_mul(self, a: int, b: int) -> Optional[int]:
        return self._checked(a * b)

    def checked_div(self, a: int, b: int) -> Optional[int]:
        """Truncating division, None on zero divisor or overflow."""
        if b == 0:
            return None
        quotient = abs(a) // abs(b)
        if (a < 0) != (b < 0):
            quotient = -quotient
        return self._checked(quotient)

    def checked_rem(self, a: int, b: int) -> Optional[int]:
        """Remainder with the sign of the dividend, None where division fails."""
        quotient = self.checked_div(a, b)
        if quotient is None:
            return None
        return a - b * quotient

    def checked_shl(self, value: int, shift: int) -> Optional[int]:
        """Shift left, discarding overflowing bits; None if shift >= bits."""
        if shift < 0 or shift >= self.bits:
            return None
        return self.wrap(value << shift)

    def to_float(self, value: int) -> float:
        return float(value)

    def from_float(self, value: float) -> Optional[int]:
        """Truncate a float toward zero, None if it does not fit."""
        if not math.isfinite(value):
            return None
        return self._checked(int(value))

    def __str__(self) -> str:
        return self.value
