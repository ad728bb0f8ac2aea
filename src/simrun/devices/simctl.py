"""Simulator discovery through ``xcrun simctl list``."""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from ..bridge.commands import run_command, simctl_command
from ..core.config import DEFAULT_SIMULATOR, Config
from ..core.exceptions import BridgeError
from .device import Device
from .resolver import find_booted_device

logger = logging.getLogger(__name__)

# com.apple.CoreSimulator.SimRuntime.iOS-17-5 or, in older Xcodes, "iOS 9.0"
_RUNTIME_RE = re.compile(r"(?:SimRuntime\.)?iOS[- ](?P<version>\d+(?:[-.]\d+)*)$")


def parse_runtime_version(runtime: str) -> Optional[str]:
    """Return the iOS version in ``runtime``, or None for non-iOS runtimes."""
    match = _RUNTIME_RE.search(runtime)
    if not match:
        return None
    return match.group("version").replace("-", ".")


def parse_simctl_devices(payload: Dict[str, Any]) -> List[Device]:
    """Build Devices from ``simctl list devices --json`` output.

    Only available iOS simulators are returned, in the order simctl lists
    them.
    """
    devices: List[Device] = []
    for runtime, entries in (payload.get("devices") or {}).items():
        version = parse_runtime_version(runtime)
        if version is None:
            continue
        for entry in entries:
            available = entry.get("isAvailable")
            if available is None:
                # Xcode < 9 reports availability as a string
                available = "unavailable" not in str(entry.get("availability", ""))
            if not available:
                continue
            devices.append(
                Device(
                    udid=entry["udid"],
                    name=entry["name"],
                    version=version,
                    state=entry.get("state", "Shutdown"),
                    runtime=runtime,
                    is_available=True,
                    device_type=entry.get("deviceTypeIdentifier"),
                )
            )
    return devices


class SimControl:
    """Lists simulators and supplies the default simulator identifier."""

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config or Config()
        self._devices: Optional[List[Device]] = None

    def list_devices(self) -> List[Device]:
        """Available iOS simulators, fetched once per instance."""
        if self._devices is None:
            cmd = simctl_command(
                self.config.bridge.xcrun, "list", "devices", "--json"
            )
            result = run_command(cmd, timeout=self.config.bridge.command_timeout_s)
            try:
                payload = json.loads(result.stdout)
            except json.JSONDecodeError as e:
                raise BridgeError(
                    f"Could not parse simctl device list: {e}", command=cmd
                ) from e
            self._devices = parse_simctl_devices(payload)
            logger.debug(f"Found {len(self._devices)} simulators")
        return self._devices

    def default_device_identifier(self) -> str:
        """Configured default, else the booted simulator, else a built-in default."""
        configured = self.config.simulators.default_simulator
        if configured:
            return configured

        booted = find_booted_device(self.list_devices())
        if booted is not None:
            return booted.instruments_identifier

        return DEFAULT_SIMULATOR

    def booted_device(self) -> Optional[Device]:
        return find_booted_device(self.list_devices())
