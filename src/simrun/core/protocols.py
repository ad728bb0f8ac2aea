"""
Protocols and interfaces for simrun.

Defines the contracts the reconciliation core depends on, so concrete device
backends (simctl, test fakes) can be swapped without touching the core.
"""

from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Protocol, Union, runtime_checkable

if TYPE_CHECKING:
    from ..bundles.app import App
    from ..devices.device import Device


@runtime_checkable
class InstallBridge(Protocol):
    """Install/uninstall/fetch operations bound to one (device, app path) pair."""

    def is_installed(self, bundle_id: str) -> bool:
        """Return True if an app with ``bundle_id`` is installed on the device."""
        ...

    def install(self, app: "App") -> None:
        """Install ``app``. Raises BridgeError on failure."""
        ...

    def uninstall(self, bundle_id: str) -> None:
        """Uninstall ``bundle_id``. Raises BridgeError on failure."""
        ...

    def fetch_installed_bundle(self, bundle_id: str) -> Path:
        """Return a local directory holding the installed bundle."""
        ...


class DigestProvider(Protocol):
    """Computes a content fingerprint of a directory tree."""

    def __call__(self, path: Union[str, Path]) -> str:
        ...


class DeviceLister(Protocol):
    """Enumerates known devices and names the default one."""

    def list_devices(self) -> List["Device"]:
        ...

    def default_device_identifier(self) -> str:
        ...

    def booted_device(self) -> Optional["Device"]:
        ...
