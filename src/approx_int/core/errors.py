"""Exceptions raised by approx-int."""


class ApproxIntError(Exception):
    """Base exception for approx-int operations."""

    pass


class IntegerOverflowError(ApproxIntError, OverflowError):
    """Raised when a value does not fit the fixed-width integer type.

    Unchecked operators raise this where a native fixed-width integer would
    overflow. The ``checked_*`` counterparts return ``None`` instead.
    """

    pass


class InvalidTupleError(ApproxIntError, ValueError):
    """Raised when an externally supplied triple or byte string is malformed."""

    pass
