"""App bundle validation against a target device."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Union

from ..core.exceptions import BundleError, IncompatibleArchitectureError, ValidationError
from .app import APP_BUNDLE_SUFFIX, App
from .lipo import Lipo

if TYPE_CHECKING:
    from ..devices.device import Device

logger = logging.getLogger(__name__)


def validate_app_bundle(path: Union[str, Path], device: "Device") -> App:
    """Validate ``path`` as an app bundle that can run on ``device``.

    Checks run in a fixed order and stop at the first failure: existence,
    directory, ``.app`` suffix, bundle metadata, architecture.

    Raises:
        ValidationError: for every failure.
    """
    bundle_path = Path(path)

    if not bundle_path.exists():
        raise ValidationError(
            f"Expected '{bundle_path}' to exist: path does not exist",
            details={"path": str(bundle_path), "check": "exists"},
        )

    if not bundle_path.is_dir():
        raise ValidationError(
            f"Expected '{bundle_path}' to be a directory: path is not a directory",
            details={"path": str(bundle_path), "check": "directory"},
        )

    if bundle_path.suffix != APP_BUNDLE_SUFFIX:
        raise ValidationError(
            f"Expected '{bundle_path}' to end in {APP_BUNDLE_SUFFIX}: "
            f"path does not have expected extension {APP_BUNDLE_SUFFIX}",
            details={"path": str(bundle_path), "check": "extension"},
        )

    app = App(bundle_path)

    try:
        app.bundle_identifier
        app.executable_name
    except BundleError as e:
        raise ValidationError(
            e.message, details={"path": str(bundle_path), "check": "metadata"}
        ) from e

    try:
        Lipo(app).expect_compatible_arch(device)
    except IncompatibleArchitectureError as e:
        raise ValidationError(
            e.message,
            details={"path": str(bundle_path), "check": "architecture", **e.details},
        ) from e

    logger.debug(
        f"Validated '{app.bundle_identifier}' at '{bundle_path}' for {device.udid}"
    )
    return app
