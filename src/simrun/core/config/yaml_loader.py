"""
Centralized YAML configuration loading utilities.

Provides consistent YAML loading with error handling and logging.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class YAMLConfigLoader:
    """Centralized YAML configuration loader with consistent error handling."""

    @staticmethod
    def load_yaml(path: Path) -> Dict[str, Any]:
        """
        Load YAML file with consistent error handling and logging.

        Args:
            path: Path to YAML file

        Returns:
            Dictionary containing YAML data, empty dict if file is empty

        Raises:
            FileNotFoundError: If file doesn't exist
            yaml.YAMLError: If YAML parsing fails
            ConfigurationError: If the top level is not a mapping
        """
        if not path.exists():
            raise FileNotFoundError(f"YAML file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)

            if data is None:
                logger.warning(f"YAML file is empty or contains only comments: {path}")
                return {}

            if not isinstance(data, dict):
                raise ConfigurationError(
                    f"YAML file {path} must contain a mapping, "
                    f"got {type(data).__name__}",
                    details={"path": str(path)},
                )

            logger.debug(f"Successfully loaded YAML from {path}")
            return data

        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML file {path}: {e}")
            raise

    @staticmethod
    def load_yaml_safe(
        path: Path, default: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Load YAML file safely, returning default when the file is missing.

        Parse errors still propagate.
        """
        if default is None:
            default = {}

        if not path.exists():
            logger.debug(f"No YAML file at {path}, using default")
            return default

        return YAMLConfigLoader.load_yaml(path)
