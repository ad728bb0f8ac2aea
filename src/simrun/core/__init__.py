"""Core infrastructure: configuration, errors, logging, retry and interfaces."""

from .exceptions import (
    BridgeError,
    BundleError,
    ConfigurationError,
    DigestError,
    IncompatibleArchitectureError,
    NoMatchingDeviceError,
    SimrunError,
    ValidationError,
)

__all__ = [
    "BridgeError",
    "BundleError",
    "ConfigurationError",
    "DigestError",
    "IncompatibleArchitectureError",
    "NoMatchingDeviceError",
    "SimrunError",
    "ValidationError",
]
