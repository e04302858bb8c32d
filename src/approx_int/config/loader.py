"""Read and write approx-int configuration files.

Only :func:`approx_int.configure_logging` consults the result. Nothing in the
encoding path loads configuration.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

import tomli_w

from .schema import ApproxIntConfig
from .validation import ConfigValidationError, validate_config

# Use tomllib (3.11+) or tomli for older Python versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

USER_CONFIG_PATH = Path.home() / ".config" / "approx_int" / "config.toml"
ENV_PREFIX = "APPROX_INT_LOGGING_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_value(raw: str) -> Any:
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    if lowered in ("", "none", "null"):
        return None
    return raw


def _drop_none(section: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in section.items() if value is not None}


class ConfigLoader:
    """Merge user file, project file and environment into one config."""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        user_config_path: Optional[Path] = None,
    ):
        """
        Args:
            config_path: Project TOML file, a ``pyproject.toml`` works too
            user_config_path: Override for ``~/.config/approx_int/config.toml``
        """
        self.config_path = Path(config_path) if config_path else None
        self.user_config_path = Path(user_config_path or USER_CONFIG_PATH)

    def load(self) -> ApproxIntConfig:
        """Build the configuration, later sources overriding earlier ones."""
        settings: dict[str, Any] = {}

        if self.user_config_path.exists():
            settings.update(self._read_logging_table(self.user_config_path))

        if self.config_path is not None:
            if self.config_path.exists():
                settings.update(self._read_logging_table(self.config_path))
            else:
                logger.warning(f"Config file {self.config_path} does not exist")

        overrides = self._env_overrides()
        if overrides:
            logger.debug(f"Environment overrides for {sorted(overrides)}")
            settings.update(overrides)

        return ApproxIntConfig.from_dict({"logging": settings})

    def _read_logging_table(self, path: Path) -> dict[str, Any]:
        """Return the ``[logging]`` table of a TOML file, empty if unreadable."""
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning(f"Failed to load TOML config from {path}: {e}")
            return {}

        # pyproject.toml keeps package settings under [tool.approx_int]
        scoped = data.get("tool", {}).get("approx_int")
        if isinstance(scoped, dict):
            data = scoped

        section = data.get("logging", {})
        if not isinstance(section, dict):
            logger.warning(f"Ignoring non-table [logging] entry in {path}")
            return {}
        logger.debug(f"Loaded logging settings from {path}")
        return section

    def _env_overrides(self) -> dict[str, Any]:
        """``APPROX_INT_LOGGING_LEVEL=DEBUG`` sets ``logging.level`` and so on."""
        return {
            key[len(ENV_PREFIX) :].lower(): _env_value(value)
            for key, value in os.environ.items()
            if key.startswith(ENV_PREFIX)
        }

    def save(self, config: ApproxIntConfig, path: Optional[Path] = None) -> Path:
        """Write configuration as TOML.

        Args:
            config: Configuration to save
            path: Destination, defaults to the project config path

        Returns:
            Path written to

        Raises:
            ConfigValidationError: If the configuration is invalid
            ValueError: If no destination is known
        """
        result = validate_config(config)
        if not result.valid:
            raise ConfigValidationError("Refusing to save invalid configuration", result)

        target = Path(path) if path else self.config_path
        if target is None:
            raise ValueError("No config path set")

        target.parent.mkdir(parents=True, exist_ok=True)
        # TOML has no null, unset keys are left out
        document = {"logging": _drop_none(config.logging.to_dict())}
        with open(target, "wb") as f:
            tomli_w.dump(document, f)
        logger.info(f"Saved config to {target}")
        return target


def load_config(
    config_path: Optional[Path] = None,
    user_config_path: Optional[Path] = None,
) -> ApproxIntConfig:
    """Load configuration from the user file, a project file and environment."""
    return ConfigLoader(config_path, user_config_path).load()


def get_default_config() -> ApproxIntConfig:
    """Configuration with built-in defaults only."""
    return ApproxIntConfig()
