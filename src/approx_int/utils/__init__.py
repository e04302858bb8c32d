"""Utility functions for approx_int"""

from approx_int.utils.logging_setup import configure_logging

__all__ = [
    "configure_logging",
]
