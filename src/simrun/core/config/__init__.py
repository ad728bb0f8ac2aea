"""
Configuration management for simrun.

Provides a clean public API for all configuration components.
"""

from .main import DEFAULT_CONFIG_PATH, Config
from .runtime import (
    DEFAULT_SIMULATOR,
    BridgeConfig,
    LoggingConfig,
    RetrySettings,
    SimulatorsConfig,
)

__all__ = [
    "Config",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_SIMULATOR",
    "BridgeConfig",
    "LoggingConfig",
    "RetrySettings",
    "SimulatorsConfig",
]
