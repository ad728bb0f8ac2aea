"""
Structured logging configuration with device/bundle correlation.

Provides centralized logging configuration with context variables so every
log line emitted during a reconciliation carries the device and bundle it
concerns.
"""

import logging
import sys
import time
from contextvars import ContextVar
from typing import Any, Dict, List, Optional

import structlog
from structlog.stdlib import LoggerFactory

# Context variables for correlation
device_id_var: ContextVar[Optional[str]] = ContextVar("device_id", default=None)
bundle_id_var: ContextVar[Optional[str]] = ContextVar("bundle_id", default=None)


class StructuredLogger:
    """Structured logger with device/bundle correlation support."""

    def __init__(self, name: str):
        self.name = name
        self.logger = structlog.get_logger(name)

    def _get_context(self) -> Dict[str, Any]:
        """Get current correlation context for logging."""
        context = {}

        if device_id := device_id_var.get():
            context["device_id"] = device_id
        if bundle_id := bundle_id_var.get():
            context["bundle_id"] = bundle_id

        return context

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message with context."""
        self.logger.debug(message, **self._get_context(), **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message with context."""
        self.logger.info(message, **self._get_context(), **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message with context."""
        self.logger.warning(message, **self._get_context(), **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message with context."""
        self.logger.error(message, **self._get_context(), **kwargs)

    def log_processing_step(
        self,
        step: str,
        component: str,
        duration_ms: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        """Log a processing step with timing information."""
        log_data = {
            "step": step,
            "component": component,
            **self._get_context(),
            **kwargs,
        }

        if duration_ms is not None:
            log_data["duration_ms"] = duration_ms

        self.logger.debug(f"Processing step: {step}", **log_data)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(name)


def set_request_context(
    device_id: Optional[str] = None,
    bundle_id: Optional[str] = None,
) -> None:
    """Set correlation context for the current invocation."""
    if device_id:
        device_id_var.set(device_id)
    if bundle_id:
        bundle_id_var.set(bundle_id)


def clear_request_context() -> None:
    """Clear correlation context."""
    device_id_var.set(None)
    bundle_id_var.set(None)


def configure_logging(level: str = "WARNING", json_format: bool = False) -> None:
    """Configure structured logging for the application."""

    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.add_log_level,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    # Log output goes to stderr so stdout stays clean for command output
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


class ProcessingTimer:
    """Context manager for timing processing steps."""

    def __init__(
        self, logger: StructuredLogger, step: str, component: str, **kwargs: Any
    ):
        self.logger = logger
        self.step = step
        self.component = component
        self.kwargs = kwargs
        self.start_time: Optional[float] = None
        self.duration_ms: Optional[float] = None

    def __enter__(self) -> "ProcessingTimer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.start_time is not None:
            self.duration_ms = (time.perf_counter() - self.start_time) * 1000
            self.logger.log_processing_step(
                self.step,
                self.component,
                duration_ms=self.duration_ms,
                status="success" if exc_type is None else "error",
                **self.kwargs,
            )
