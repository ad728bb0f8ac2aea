"""
Main configuration class for simrun.

Values come from defaults, then ``~/.simrun/config.yaml`` (or the file named
by ``SIMRUN_CONFIG``), then environment variables.
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ..exceptions import ConfigurationError
from ..resilience import RetryConfig
from .runtime import BridgeConfig, LoggingConfig, RetrySettings, SimulatorsConfig
from .yaml_loader import YAMLConfigLoader

logger = logging.getLogger(__name__)

ENV_PREFIX = "SIMRUN_"
DEFAULT_CONFIG_PATH = Path.home() / ".simrun" / "config.yaml"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_bool(raw: str, name: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Expected a boolean for {name}, got '{raw}'")


def _coerce(current: Any, raw: Any, name: str) -> Any:
    """Coerce ``raw`` to the type of the field's current value."""
    if raw is None:
        if current is None:
            return None
        raise ConfigurationError(
            f"Missing value for {name}", details={"key": name, "value": None}
        )
    try:
        if isinstance(current, bool):
            return raw if isinstance(raw, bool) else _parse_bool(str(raw), name)
        if isinstance(current, int):
            return int(raw)
        if isinstance(current, float):
            return float(raw)
        if isinstance(current, Path):
            return Path(os.path.expanduser(str(raw)))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"Invalid value for {name}: {raw!r} ({e})",
            details={"key": name, "value": str(raw)},
        ) from e
    return str(raw)


@dataclass
class Config:
    """Main configuration class for simrun."""

    debug: bool = False

    simulators: SimulatorsConfig = field(default_factory=SimulatorsConfig)
    bridge: BridgeConfig = field(default_factory=BridgeConfig)
    retry: RetrySettings = field(default_factory=RetrySettings)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(
        cls,
        path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Config":
        """Build a Config from the YAML file and environment."""
        env = os.environ if environ is None else environ
        config = cls()

        if path is None:
            explicit = env.get(f"{ENV_PREFIX}CONFIG")
            path = Path(explicit) if explicit else DEFAULT_CONFIG_PATH

        try:
            data = YAMLConfigLoader.load_yaml_safe(path)
        except (yaml.YAMLError, OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(
                f"Could not read config file {path}: {e}",
                details={"path": str(path)},
            ) from e

        config.apply_dict(data)
        config.apply_env(env)
        config.validate()
        return config

    def apply_dict(self, data: Dict[str, Any]) -> None:
        """Apply values from a parsed config file."""
        for key, value in data.items():
            if key == "debug":
                self.debug = _coerce(self.debug, value, key)
                continue

            section = getattr(self, key, None)
            if section is None or not hasattr(section, "__dataclass_fields__"):
                logger.warning(f"Ignoring unknown config section '{key}'")
                continue
            if not isinstance(value, dict):
                raise ConfigurationError(
                    f"Config section '{key}' must be a mapping",
                    details={"section": key},
                )
            self._apply_section(section, key, value)

    def apply_env(self, env: Mapping[str, str]) -> None:
        """Apply ``SIMRUN_*`` overrides from the environment."""
        if env.get("DEBUG") == "1":
            self.debug = True
        if f"{ENV_PREFIX}DEBUG" in env:
            self.debug = _parse_bool(env[f"{ENV_PREFIX}DEBUG"], f"{ENV_PREFIX}DEBUG")
        if env.get(f"{ENV_PREFIX}DEFAULT_SIMULATOR"):
            self.simulators.default_simulator = env[f"{ENV_PREFIX}DEFAULT_SIMULATOR"]

        for section_field in fields(self):
            section = getattr(self, section_field.name)
            if not hasattr(section, "__dataclass_fields__"):
                continue
            prefix = f"{ENV_PREFIX}{section_field.name.upper()}__"
            overrides = {
                key[len(prefix) :].lower(): value
                for key, value in env.items()
                if key.startswith(prefix)
            }
            if overrides:
                self._apply_section(section, section_field.name, overrides)

    @staticmethod
    def _apply_section(section: Any, name: str, values: Mapping[str, Any]) -> None:
        known = {f.name for f in fields(section)}
        for key, raw in values.items():
            if key not in known:
                logger.warning(f"Ignoring unknown config key '{name}.{key}'")
                continue
            current = getattr(section, key)
            setattr(section, key, _coerce(current, raw, f"{name}.{key}"))

    @property
    def log_level(self) -> str:
        return "DEBUG" if self.debug else self.logging.level.upper()

    def validate(self) -> None:
        """Reject settings that would only fail later, mid-command."""
        if self.logging.level.upper() not in LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid logging.level '{self.logging.level}', "
                f"expected one of {', '.join(LOG_LEVELS)}",
                details={"key": "logging.level", "value": self.logging.level},
            )
        self.retry_config()

    def retry_config(self) -> RetryConfig:
        """Build the retry policy used around reconciliation."""
        try:
            return RetryConfig(
                max_attempts=self.retry.max_attempts,
                base_delay=self.retry.base_delay,
                max_delay=self.retry.max_delay,
                exponential_backoff=self.retry.exponential_backoff,
                jitter=self.retry.jitter,
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid retry settings: {e}") from e
