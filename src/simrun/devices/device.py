"""
Device model.

A Device is a point-in-time description of one simulator (or physical
device) as reported by the device lister. simrun only reads and selects
devices; it never creates or destroys them.
"""

from __future__ import annotations

from pathlib import Path
from typing import FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field

BOOTED = "Booted"
SHUTDOWN = "Shutdown"

PHYSICAL_ARCHITECTURES: FrozenSet[str] = frozenset({"armv7", "armv7s", "arm64", "arm64e"})
SIMULATOR_32_BIT_ARCHITECTURES: FrozenSet[str] = frozenset({"i386"})
# An i386 slice runs on any simulator; arm64 covers Apple silicon hosts.
SIMULATOR_64_BIT_ARCHITECTURES: FrozenSet[str] = frozenset(
    {"i386", "x86_64", "x86_64h", "arm64"}
)

# Simulator models that only run 32-bit code.
SIMULATOR_32_BIT_MODELS: FrozenSet[str] = frozenset(
    {"iPhone 4s", "iPhone 5", "iPhone 5c", "iPad 2", "iPad Retina"}
)

DEFAULT_LOGS_DIR = Path.home() / "Library" / "Logs" / "CoreSimulator"


class Device(BaseModel):
    """A simulator or physical device known to the device lister."""

    model_config = ConfigDict(frozen=True)

    udid: str
    name: str
    version: str = ""
    state: str = SHUTDOWN
    runtime: Optional[str] = None
    is_available: bool = True
    physical: bool = False
    device_type: Optional[str] = Field(default=None, description="simctl deviceTypeIdentifier")

    @property
    def instruments_identifier(self) -> str:
        """Human-readable identifier, e.g. ``iPhone 15 (17.5)``."""
        if self.physical:
            return self.udid
        if not self.version:
            return self.name
        return f"{self.name} ({self.version})"

    @property
    def is_booted(self) -> bool:
        return self.state == BOOTED

    @property
    def is_simulator(self) -> bool:
        return not self.physical

    @property
    def required_architectures(self) -> FrozenSet[str]:
        """Architecture slices a binary may contain to run on this device."""
        if self.physical:
            return PHYSICAL_ARCHITECTURES
        if self.name in SIMULATOR_32_BIT_MODELS:
            return SIMULATOR_32_BIT_ARCHITECTURES
        return SIMULATOR_64_BIT_ARCHITECTURES

    def simulator_log_file_path(self, logs_dir: Optional[Path] = None) -> Path:
        """Path to the simulator's system log."""
        return (logs_dir or DEFAULT_LOGS_DIR) / self.udid / "system.log"

    def __str__(self) -> str:
        return f"#<Simulator: {self.instruments_identifier} {self.udid} {self.state}>"
