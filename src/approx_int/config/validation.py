"""Checks applied to a configuration before it is saved."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .schema import ApproxIntConfig, LogLevel

VALID_LOG_LEVELS = {level.value for level in LogLevel}


@dataclass
class ValidationError:
    """A single problem found in a configuration."""

    key: str
    message: str
    value: Any = None

    def __str__(self) -> str:
        text = f"{self.key}: {self.message}"
        if self.value is not None:
            text += f" (got: {self.value!r})"
        return text


@dataclass
class ValidationResult:
    """Errors block saving, warnings do not."""

    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def __bool__(self) -> bool:
        return self.valid


class ConfigValidationError(Exception):
    """Raised when an invalid configuration would be written to disk."""

    def __init__(self, message: str, result: ValidationResult) -> None:
        super().__init__(message)
        self.errors = result.errors
        self.warnings = result.warnings

    def __str__(self) -> str:
        problems = [f"  - {error}" for error in self.errors]
        return "\n".join([super().__str__(), *problems])


def validate_config(config: ApproxIntConfig) -> ValidationResult:
    """Check the logging section of a configuration.

    Args:
        config: Configuration to check

    Returns:
        ValidationResult listing errors and warnings
    """
    result = ValidationResult()
    logging_cfg = config.logging

    if str(logging_cfg.level).upper() not in VALID_LOG_LEVELS:
        result.errors.append(
            ValidationError(
                "logging.level",
                f"must be one of {sorted(VALID_LOG_LEVELS)}",
                logging_cfg.level,
            )
        )

    if not isinstance(logging_cfg.console, bool):
        result.errors.append(
            ValidationError("logging.console", "must be a boolean", logging_cfg.console)
        )

    if logging_cfg.file is not None and not isinstance(logging_cfg.file, str):
        result.errors.append(
            ValidationError("logging.file", "must be a path string", logging_cfg.file)
        )

    if logging_cfg.console is False and not logging_cfg.file:
        result.warnings.append(
            ValidationError(
                "logging.console",
                "no console or file handler configured, log output is discarded",
            )
        )

    return result
