"""
Runtime configuration sections for simrun.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

DEFAULT_SIMULATOR = "iPhone 15 (17.5)"


@dataclass
class SimulatorsConfig:
    """Simulator selection and file locations."""

    # None = use the booted simulator, then DEFAULT_SIMULATOR
    default_simulator: Optional[str] = None
    core_simulator_logs_dir: Path = field(
        default_factory=lambda: Path.home() / "Library" / "Logs" / "CoreSimulator"
    )


@dataclass
class BridgeConfig:
    """simctl invocation settings."""

    xcrun: str = "xcrun"
    command_timeout_s: float = 120.0
    boot_timeout_s: float = 180.0


@dataclass
class RetrySettings:
    """Retry policy applied around a reconciliation attempt."""

    max_attempts: int = 1
    base_delay: float = 2.0
    max_delay: float = 30.0
    exponential_backoff: bool = True
    jitter: bool = False


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"
    json_format: bool = False
