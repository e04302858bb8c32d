"""Configuration schema for approx-int.

Encoding never reads configuration. The settings here only describe how the
package logger is wired up by :func:`approx_int.configure_logging`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

DEFAULT_LOG_FORMAT = "%(levelname)s - %(name)s - %(message)s"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class LoggingConfig:
    """Handlers and level for the ``approx_int`` logger."""

    level: str = LogLevel.INFO.value
    format: str = DEFAULT_LOG_FORMAT

    # Optional log file, parent directories are created on demand
    file: Optional[str] = None
    console: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "format": self.format,
            "file": self.file,
            "console": self.console,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LoggingConfig:
        defaults = cls()
        return cls(
            level=data.get("level", defaults.level),
            format=data.get("format", defaults.format),
            file=data.get("file", defaults.file),
            console=data.get("console", defaults.console),
        )


@dataclass
class ApproxIntConfig:
    """Top-level configuration, one attribute per TOML table.

    Sources are merged lowest to highest priority: built-in defaults, the
    user file ``~/.config/approx_int/config.toml``, an explicit project file,
    then ``APPROX_INT_*`` environment variables.
    """

    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> dict[str, Any]:
        return {"logging": self.logging.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ApproxIntConfig:
        return cls(logging=LoggingConfig.from_dict(data.get("logging", {})))
