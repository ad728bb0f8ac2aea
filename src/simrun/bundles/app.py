"""
App bundle abstraction.

Identity is read lazily from ``Info.plist``; missing or malformed metadata
raises BundleError, a RuntimeError.
"""

import logging
import plistlib
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, FrozenSet, Union

from ..core.exceptions import BundleError

logger = logging.getLogger(__name__)

APP_BUNDLE_SUFFIX = ".app"
INFO_PLIST = "Info.plist"


class App:
    """An application bundle on the local filesystem."""

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def info_plist_path(self) -> Path:
        return self._path / INFO_PLIST

    @cached_property
    def info(self) -> Dict[str, Any]:
        """Parsed Info.plist (XML or binary)."""
        plist_path = self.info_plist_path
        if not plist_path.is_file():
            raise BundleError(f"Expected '{plist_path}' to exist")

        try:
            with open(plist_path, "rb") as f:
                data = plistlib.load(f)
        except Exception as e:
            # plistlib raises assorted error types for malformed values
            raise BundleError(f"Could not parse '{plist_path}': {e}") from e

        if not isinstance(data, dict):
            raise BundleError(f"Expected '{plist_path}' to contain a dictionary")
        return data

    def _info_value(self, key: str) -> str:
        value = self.info.get(key)
        if not isinstance(value, str) or not value:
            raise BundleError(
                f"Expected key '{key}' in '{self.info_plist_path}'",
                details={"key": key, "plist": str(self.info_plist_path)},
            )
        return value

    @cached_property
    def bundle_identifier(self) -> str:
        return self._info_value("CFBundleIdentifier")

    @cached_property
    def executable_name(self) -> str:
        return self._info_value("CFBundleExecutable")

    @property
    def executable_path(self) -> Path:
        return self._path / self.executable_name

    @cached_property
    def architectures(self) -> FrozenSet[str]:
        """Architecture slices of the bundle's executable."""
        from .lipo import Lipo

        return Lipo(self).info()

    def __repr__(self) -> str:
        return f"App({str(self._path)!r})"
