"""
Install bridge backed by ``xcrun simctl``.

One bridge is bound to one (device, app path) pair for the duration of one
reconciliation. Operations boot the simulator first if it is shut down.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from ..core.config import Config
from ..core.exceptions import BridgeError
from .commands import run_command, simctl_command

if TYPE_CHECKING:
    from ..bundles.app import App
    from ..devices.device import Device

logger = logging.getLogger(__name__)


class SimctlBridge:
    """InstallBridge implementation for iOS simulators."""

    def __init__(
        self,
        device: "Device",
        app_path: Union[str, Path],
        config: Optional[Config] = None,
    ) -> None:
        if device.physical:
            raise BridgeError(
                f"simctl cannot install on physical device {device.udid}",
                details={"udid": device.udid},
            )
        self.device = device
        self.app_path = Path(app_path)
        self.config = config or Config()
        self._booted = device.is_booted

    def _simctl(self, *args: str, timeout: Optional[float] = None, check: bool = True):
        cmd = simctl_command(self.config.bridge.xcrun, *args)
        return run_command(
            cmd,
            timeout=timeout or self.config.bridge.command_timeout_s,
            check=check,
        )

    def _ensure_booted(self) -> None:
        if self._booted:
            return

        udid = self.device.udid
        logger.info(f"Booting simulator {self.device.instruments_identifier}")
        result = self._simctl("boot", udid, check=False)
        if result.returncode != 0 and "current state: Booted" not in (result.stderr or ""):
            raise BridgeError(
                f"Could not boot simulator {udid}: {(result.stderr or '').strip()}",
                returncode=result.returncode,
                stderr=result.stderr,
            )
        self._simctl("bootstatus", udid, "-b", timeout=self.config.bridge.boot_timeout_s)
        self._booted = True

    def is_installed(self, bundle_id: str) -> bool:
        self._ensure_booted()
        result = self._simctl("get_app_container", self.device.udid, bundle_id, check=False)
        installed = result.returncode == 0
        logger.debug(f"'{bundle_id}' installed on {self.device.udid}: {installed}")
        return installed

    def install(self, app: "App") -> None:
        if Path(app.path).resolve() != self.app_path.resolve():
            raise BridgeError(
                f"Bridge is bound to '{self.app_path}', refusing to install '{app.path}'",
                details={"bound": str(self.app_path), "requested": str(app.path)},
            )
        self._ensure_booted()
        logger.info(f"Installing '{app.bundle_identifier}' on {self.device.udid}")
        self._simctl("install", self.device.udid, str(self.app_path))

    def uninstall(self, bundle_id: str) -> None:
        self._ensure_booted()
        logger.info(f"Uninstalling '{bundle_id}' from {self.device.udid}")
        self._simctl("uninstall", self.device.udid, bundle_id)

    def fetch_installed_bundle(self, bundle_id: str) -> Path:
        """Path of the installed .app inside the simulator's data container.

        Simulator containers live on the host filesystem, so no copy is made.
        """
        self._ensure_booted()
        result = self._simctl("get_app_container", self.device.udid, bundle_id, "app")
        installed = Path(result.stdout.strip())
        if not result.stdout.strip() or not installed.is_dir():
            raise BridgeError(
                f"Installed bundle for '{bundle_id}' not found at '{installed}'",
                details={"bundle_id": bundle_id, "path": str(installed)},
            )
        return installed
