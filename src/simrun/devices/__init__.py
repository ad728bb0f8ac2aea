"""Device model, discovery and selection."""

from .device import BOOTED, SHUTDOWN, Device
from .resolver import find_booted_device, resolve_device

__all__ = [
    "BOOTED",
    "SHUTDOWN",
    "Device",
    "find_booted_device",
    "resolve_device",
]
