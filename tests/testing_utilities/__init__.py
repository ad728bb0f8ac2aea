"""
Testing utilities for simrun.

Provides a recording fake install bridge, a fake device lister, and app
bundle builders.
"""

from .bundles import fat_mach_o, make_app_bundle, thin_mach_o
from .fake_bridge import FakeBridge
from .fake_sim_control import FakeSimControl

__all__ = [
    "FakeBridge",
    "FakeSimControl",
    "fat_mach_o",
    "make_app_bundle",
    "thin_mach_o",
]
