"""App bundles: metadata, architecture inspection, digests and validation."""

from .app import APP_BUNDLE_SUFFIX, App
from .digest import directory_digest
from .lipo import Lipo
from .validator import validate_app_bundle

__all__ = [
    "APP_BUNDLE_SUFFIX",
    "App",
    "Lipo",
    "directory_digest",
    "validate_app_bundle",
]
