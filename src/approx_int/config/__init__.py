"""Configuration for the approx-int logger.

Encoding and decoding take no configuration; these settings only feed
:func:`approx_int.configure_logging`.

Configuration Sources (Priority Order):
1. Environment Variables - APPROX_INT_LOGGING_* (highest)
2. Project Config - an explicit TOML file ([tool.approx_int] in pyproject.toml)
3. User Config - ~/.config/approx_int/config.toml
4. Defaults (lowest)

Example Usage:
    from approx_int import configure_logging
    from approx_int.config import load_config

    config = load_config(config_path=Path("pyproject.toml"))
    configure_logging(config.logging)
"""

from .loader import ConfigLoader, get_default_config, load_config
from .schema import ApproxIntConfig, LoggingConfig, LogLevel
from .validation import (
    ConfigValidationError,
    ValidationError,
    ValidationResult,
    validate_config,
)

__all__ = [
    "ApproxIntConfig",
    "LoggingConfig",
    "LogLevel",
    "ConfigLoader",
    "load_config",
    "get_default_config",
    "validate_config",
    "ValidationError",
    "ValidationResult",
    "ConfigValidationError",
]
