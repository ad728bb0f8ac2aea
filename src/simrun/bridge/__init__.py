"""Install bridges: the backends that actually talk to devices."""

from .simctl_bridge import SimctlBridge

__all__ = ["SimctlBridge"]
