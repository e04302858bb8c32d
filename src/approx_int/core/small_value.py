"""Approximate integers stored as a bit length, a percentage and a sign.

A value is encoded by measuring how many bits its magnitude needs, taking the
largest number those bits can hold, and finding the highest percentage of that
ceiling which still undershoots the magnitude. The compact representation is a
triple ``(min_bits, percent, flag)``:

- ``min_bits`` - the number of bits required to store the magnitude
- ``percent`` - the fraction (1-99) of the ``min_bits`` ceiling, raised by up
  to 100 more for negative numbers
- ``flag`` - True if the original number was negative

In total the triple fits in 24 bits. When the number is known to be positive
the sign can be dropped and only 16 bits are needed. Positive values usually
reconstruct slightly below the original. Negative values are biased upward
during encoding, so their reconstruction may land on either side.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional, Tuple, Union

import numpy as np

from .error_rate import bias_percent
from .errors import IntegerOverflowError, InvalidTupleError
from .int_type import IntType

logger = logging.getLogger(__name__)

MIN_PERCENT = 1
MAX_PERCENT = 99
# Negative values add their truncated error, at most 100, to the percentage
MAX_BIASED_PERCENT = 2 * MAX_PERCENT + 1
DEFAULT_INT_TYPE = IntType.I32

# Stored fields are single bytes in the wire format
BYTE_MAX = 0xFF
_HUNDRED = 100

_PACKED_TRIPLE = struct.Struct("<BB?")
_PACKED_PAIR = struct.Struct("<BB")

Triple = Tuple[int, int, bool]
Pair = Tuple[int, int]


@dataclass(frozen=True)
class SmallValue:
    """An integer compressed to ``(min_bits, percent, flag)``.

    Construct from an integer with :meth:`from_int`. The dataclass constructor
    itself takes the raw triple unchecked; use :meth:`from_tuple` for triples
    coming from outside the process.

    Equality compares the stored triple and integer type. Ordering compares
    the reconstructed values, so two unequal values may still tie.

    ``/`` is integer division truncating toward zero, as on the native type.
    ``//`` is not defined since floor division rounds negative quotients the
    other way.

    Example:
        >>> value = SmallValue.from_int(128)
        >>> value.to_tuple()
        (8, 63, False)
        >>> value.approximate()
        126
    """

    min_bits: int
    percent: int
    flag: bool = False
    int_type: IntType = IntType.I32

    # ------------------------------------------------------------------
    # Encoding internals
    # ------------------------------------------------------------------

    @staticmethod
    def _bit_size(number: int, int_type: IntType) -> int:
        """Bits required for the magnitude of ``number``.

        Negative numbers are measured through their bitwise complement, so the
        minimum and maximum of a signed type need the same number of bits.
        """
        if number == 0:
            return 1
        measured = ~number if number < 0 else number
        return max(int_type.bits - int_type.leading_zeros(measured), 1)

    @staticmethod
    def _bit_pow(power: int, int_type: IntType) -> int:
        """Largest value representable in ``power`` bits, saturating at max."""
        if power >= int_type.bits:
            return int_type.max_value

        shifted = int_type.checked_shl(int_type.one, power)
        if shifted is None:
            return int_type.max_value
        ceiling = int_type.checked_sub(shifted, int_type.one)
        return int_type.max_value if ceiling is None else ceiling

    @staticmethod
    def _part_from_percentage(percentage: int, total: int, int_type: IntType) -> int:
        """``total * percentage / 100`` without overflowing the type."""
        if _HUNDRED > total:
            product = int_type.checked_mul(total, percentage)
            if product is not None:
                result = int_type.checked_div(product, _HUNDRED)
                if result is not None:
                    return result

        part = int_type.checked_div(total, _HUNDRED)
        if part is not None:
            part = int_type.checked_mul(part, percentage)
        return int_type.zero if part is None else part

    @staticmethod
    def _resolve_int_type(
        number: Any, int_type: Optional[Union[IntType, str]]
    ) -> IntType:
        if int_type is not None:
            return IntType.parse(int_type)
        inferred = IntType.infer(number)
        if inferred is not None:
            return inferred
        return DEFAULT_INT_TYPE

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_int(
        cls, number: Any, int_type: Optional[Union[IntType, str]] = None
    ) -> SmallValue:
        """Encode an integer.

        Args:
            number: Integer to encode (plain int or numpy integer scalar)
            int_type: Native type the number belongs to. Inferred from numpy
                scalars, otherwise ``i32``.

        Returns:
            Encoded SmallValue

        Raises:
            TypeError: If number is not an integer (floats and bools included)
            IntegerOverflowError: If number does not fit in int_type
        """
        if isinstance(number, bool) or not isinstance(number, (int, np.integer)):
            raise TypeError(f"Expected an integer, got {type(number).__name__}")
        int_type = cls._resolve_int_type(number, int_type)
        number = int(number)
        if not int_type.contains(number):
            raise IntegerOverflowError(f"{number} does not fit in {int_type}")

        min_bits = cls._bit_size(number, int_type)

        if number < 0:
            if number == int_type.min_value:
                # No positive counterpart exists, store the largest bucket
                logger.debug(f"Encoding {int_type} minimum as ({min_bits}, 99, True)")
                return cls(min_bits, MAX_PERCENT, True, int_type)
            abs_number, flag = -number, True
        else:
            abs_number, flag = number, False

        ceiling = cls._bit_pow(min_bits, int_type)
        for percent in range(MAX_PERCENT, MIN_PERCENT, -1):
            approx = cls._part_from_percentage(percent, ceiling, int_type)
            if abs_number > approx:
                if flag:
                    percent = cls._biased_percent(abs_number, min_bits, percent, int_type)
                return cls(min_bits, percent, flag, int_type)

        logger.debug(
            f"No percentage undershoots {abs_number} in {min_bits} bits, "
            f"using {MIN_PERCENT}"
        )
        return cls(min_bits, MIN_PERCENT, flag, int_type)

    @classmethod
    def _biased_percent(
        cls, abs_number: int, min_bits: int, percent: int, int_type: IntType
    ) -> int:
        """Raise the percentage of a negative value by its relative error.

        The result can exceed 99 (up to 199) and still fits the byte field.
        """
        approx = cls(min_bits, percent, False, int_type).approximate()
        return percent + bias_percent(abs_number, approx, int_type)

    @classmethod
    def default(cls, int_type: Optional[Union[IntType, str]] = None) -> SmallValue:
        """Encoding of zero."""
        return cls.from_int(0, int_type)

    @classmethod
    def from_tuple(
        cls,
        raw: Union[Triple, Pair],
        int_type: Optional[Union[IntType, str]] = None,
        validate: bool = True,
    ) -> SmallValue:
        """Build a value from a literal ``(min_bits, percent[, flag])`` tuple.

        Args:
            raw: Triple, or pair for values known to be positive
            int_type: Native type the triple describes
            validate: Check field ranges

        Raises:
            InvalidTupleError: If the tuple is malformed or out of range
        """
        int_type = cls._resolve_int_type(None, int_type)

        if len(raw) == 3:
            min_bits, percent, flag = raw  # type: ignore[misc]
        elif len(raw) == 2:
            min_bits, percent = raw  # type: ignore[misc]
            flag = False
        else:
            raise InvalidTupleError(
                f"Expected (min_bits, percent[, flag]), got {len(raw)} fields"
            )

        value = cls(int(min_bits), int(percent), bool(flag), int_type)
        if validate:
            value._validate()
        return value

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        int_type: Optional[Union[IntType, str]] = None,
        validate: bool = True,
    ) -> SmallValue:
        """Unpack the 3-byte (or signless 2-byte) wire form."""
        if len(data) == _PACKED_TRIPLE.size:
            raw: Union[Triple, Pair] = _PACKED_TRIPLE.unpack(data)
        elif len(data) == _PACKED_PAIR.size:
            raw = _PACKED_PAIR.unpack(data)
        else:
            raise InvalidTupleError(
                f"Expected {_PACKED_PAIR.size} or {_PACKED_TRIPLE.size} bytes, "
                f"got {len(data)}"
            )
        return cls.from_tuple(raw, int_type, validate)

    def _validate(self) -> None:
        if not 1 <= self.min_bits <= self.int_type.bits:
            raise InvalidTupleError(
                f"min_bits must be between 1 and {self.int_type.bits}, "
                f"got {self.min_bits}"
            )
        limit = MAX_BIASED_PERCENT if self.flag else MAX_PERCENT
        if not MIN_PERCENT <= self.percent <= limit:
            raise InvalidTupleError(
                f"percent must be between {MIN_PERCENT} and {limit}, "
                f"got {self.percent}"
            )
        if self.flag and not self.int_type.signed:
            raise InvalidTupleError(f"{self.int_type} values cannot be negative")

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def to_tuple(self) -> Triple:
        return (self.min_bits, self.percent, self.flag)

    def to_pair(self) -> Pair:
        """Signless form, only valid for non-negative values."""
        if self.flag:
            raise ValueError("Cannot drop the sign of a negative value")
        return (self.min_bits, self.percent)

    def to_bytes(self, include_sign: bool = True) -> bytes:
        """Pack into 3 bytes, or 2 when the sign is omitted."""
        if include_sign:
            return _PACKED_TRIPLE.pack(self.min_bits, self.percent, self.flag)
        return _PACKED_PAIR.pack(*self.to_pair())

    # ------------------------------------------------------------------
    # Reconstruction
    # ------------------------------------------------------------------

    def approximate(self) -> int:
        """Return the approximate value of the number.

        The result is usually smaller than the original. Negative values and
        small numbers (below 100) are the usual exceptions.

        Example:
            >>> SmallValue.from_int(8838183818381831838138182391233, "u128").approximate()
            8822848177588476634417054309410
        """
        int_type = self.int_type
        effective = min(self.percent + 1, BYTE_MAX) if self.flag else self.percent
        magnitude = self._part_from_percentage(
            effective, self._bit_pow(self.min_bits, int_type), int_type
        )

        if not self.flag:
            return magnitude
        negated = int_type.checked_sub(int_type.zero, magnitude)
        return int_type.min_value if negated is None else negated

    def bounds(self) -> Tuple[int, int]:
        """Return ``(min, max)`` believed to contain the original number.

        ``min`` is :meth:`approximate`. ``max`` is the reconstruction of the
        adjacent percentage bucket (one up for positive values, two down for
        negative ones).

        The original usually lies within the bounds, with exceptions for
        negative numbers and for numbers close to the type limits. Near
        ``u32`` max, for example, ``max`` saturates below the original, and
        the ``i64`` minimum reconstructs above itself.
        """
        if self.flag:
            percent = max(self.percent - 2, 0)
        else:
            percent = min(self.percent + 1, BYTE_MAX)
        return self.approximate(), replace(self, percent=percent).approximate()

    def __int__(self) -> int:
        return self.approximate()

    def __str__(self) -> str:
        return f"Exponent: {self.min_bits}, Percentage: {self.percent}"

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def _comparable(self, other: Any) -> bool:
        return isinstance(other, SmallValue) and other.int_type is self.int_type

    def __lt__(self, other: Any) -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.approximate() < other.approximate()

    def __le__(self, other: Any) -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.approximate() <= other.approximate()

    def __gt__(self, other: Any) -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.approximate() > other.approximate()

    def __ge__(self, other: Any) -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.approximate() >= other.approximate()

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _operands(self, other: SmallValue) -> Tuple[int, int]:
        if other.int_type is not self.int_type:
            raise TypeError(
                f"Cannot combine {self.int_type} and {other.int_type} values"
            )
        return self.approximate(), other.approximate()

    def _checked(
        self, other: SmallValue, op: Callable[[int, int], Optional[int]]
    ) -> Optional[SmallValue]:
        result = op(*self._operands(other))
        if result is None:
            return None
        return self.from_int(result, self.int_type)

    def _unchecked(
        self,
        other: Any,
        op: Callable[[int, int], Optional[int]],
        verb: str,
        divides: bool = False,
    ) -> SmallValue:
        if not isinstance(other, SmallValue):
            return NotImplemented
        lhs, rhs = self._operands(other)
        result = op(lhs, rhs)
        if result is None:
            if divides and rhs == 0:
                raise ZeroDivisionError(f"attempt to {verb} with a divisor of zero")
            raise IntegerOverflowError(f"attempt to {verb} with overflow")
        return self.from_int(result, self.int_type)

    def __add__(self, other: Any) -> SmallValue:
        return self._unchecked(other, self.int_type.checked_add, "add")

    def __sub__(self, other: Any) -> SmallValue:
        return self._unchecked(other, self.int_type.checked_sub, "subtract")

    def __mul__(self, other: Any) -> SmallValue:
        return self._unchecked(other, self.int_type.checked_mul, "multiply")

    def __truediv__(self, other: Any) -> SmallValue:
        """Integer division truncating toward zero, like the native type."""
        return self._unchecked(
            other, self.int_type.checked_div, "divide", divides=True
        )

    def __mod__(self, other: Any) -> SmallValue:
        return self._unchecked(
            other, self.int_type.checked_rem, "calculate the remainder", divides=True
        )

    def checked_add(self, rhs: SmallValue) -> Optional[SmallValue]:
        """Checked addition. Returns None if overflow occurred."""
        return self._checked(rhs, self.int_type.checked_add)

    def checked_sub(self, rhs: SmallValue) -> Optional[SmallValue]:
        """Checked subtraction. Returns None if overflow occurred."""
        return self._checked(rhs, self.int_type.checked_sub)

    def checked_mul(self, rhs: SmallValue) -> Optional[SmallValue]:
        """Checked multiplication. Returns None if overflow occurred."""
        return self._checked(rhs, self.int_type.checked_mul)

    def checked_div(self, rhs: SmallValue) -> Optional[SmallValue]:
        """Checked division. Returns None if the divisor is zero or on overflow."""
        return self._checked(rhs, self.int_type.checked_div)

    def checked_rem(self, rhs: SmallValue) -> Optional[SmallValue]:
        """Checked remainder. Returns None if the divisor is zero or on overflow."""
        return self._checked(rhs, self.int_type.checked_rem)
