"""
Exception hierarchy for simrun.

Provides structured error handling with specific error types for device
resolution, bundle validation, and the install bridge.
"""

from typing import Any, Dict, Iterable, Optional


class SimrunError(Exception):
    """Base exception for all simrun errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        component: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.component = component

    def __str__(self) -> str:
        """String representation of the error."""
        base_msg = f"[{self.component or 'simrun'}] {self.message}"
        if self.error_code:
            base_msg = f"[{self.error_code}] {base_msg}"
        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "component": self.component,
            "details": self.details,
        }


class ConfigurationError(SimrunError):
    """Exception raised when configuration is invalid or unreadable."""

    pass


class ValidationError(SimrunError):
    """Exception raised when user input (path, bundle, architecture) is invalid."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("error_code", "VALIDATION_ERROR")
        kwargs.setdefault("component", "validator")
        super().__init__(message, **kwargs)


class NoMatchingDeviceError(SimrunError):
    """Exception raised when no known device matches the requested identifier."""

    def __init__(
        self,
        requested: str,
        identifier: Optional[str] = None,
        is_default: bool = False,
        **kwargs: Any,
    ) -> None:
        if is_default:
            message = (
                f"Could not find a simulator matching the default "
                f"identifier '{identifier}'"
            )
        else:
            message = (
                f"Could not find a simulator with name or UDID that matches "
                f"'{requested}'"
            )
        super().__init__(
            message,
            error_code="NO_MATCHING_DEVICE",
            details={
                "requested": requested,
                "identifier": identifier,
                "is_default": is_default,
            },
            component="resolver",
            **kwargs,
        )
        self.requested = requested
        self.identifier = identifier
        self.is_default = is_default


class IncompatibleArchitectureError(SimrunError):
    """Exception raised when a binary has no slice the target device can run."""

    def __init__(
        self,
        binary_path: str,
        found: Iterable[str],
        expected: Iterable[str],
        reason: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        found_list = sorted(found)
        expected_list = sorted(expected)
        if reason:
            message = (
                f"Could not read the architectures of binary at "
                f"'{binary_path}': {reason}"
            )
        else:
            message = (
                f"Binary at '{binary_path}' does not contain a compatible "
                f"architecture for the target device. Expected one of "
                f"{expected_list} but found {found_list}."
            )
        super().__init__(
            message,
            error_code="INCOMPATIBLE_ARCHITECTURE",
            details={
                "binary_path": binary_path,
                "found": found_list,
                "expected": expected_list,
                "reason": reason,
            },
            component="lipo",
            **kwargs,
        )
        self.found = found_list
        self.expected = expected_list


class BundleError(SimrunError, RuntimeError):
    """Exception raised when app bundle metadata is missing or malformed."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("error_code", "BUNDLE_ERROR")
        kwargs.setdefault("component", "app")
        super().__init__(message, **kwargs)


class BridgeError(SimrunError):
    """Exception raised when the device install subsystem fails."""

    def __init__(
        self,
        message: str,
        command: Optional[Iterable[str]] = None,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        kwargs.setdefault("error_code", "BRIDGE_ERROR")
        kwargs.setdefault("component", "bridge")
        kwargs.setdefault(
            "details",
            {
                "command": list(command) if command else None,
                "returncode": returncode,
                "stderr": stderr,
            },
        )
        super().__init__(message, **kwargs)
        self.returncode = returncode
        self.stderr = stderr


class DigestError(SimrunError):
    """Exception raised when a directory cannot be fingerprinted."""

    def __init__(self, path: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            f"Cannot compute digest of '{path}': {reason}",
            error_code="DIGEST_ERROR",
            details={"path": path, "reason": reason},
            component="digest",
            **kwargs,
        )
