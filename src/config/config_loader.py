"""
Configuration loader for the GeoShard spatial search layer.

This module provides the ConfigLoader class that handles loading and validating
the JSON search configuration for multi-environment deployments.
"""

import json
from pathlib import Path
from typing import Dict, Any, List, Optional
from functools import lru_cache

from ..exceptions import GeoShardConfigurationError, GeoShardValidationError
from ..utils import get_logger


CONFIG_FILE_NAME = "search_config.json"
REQUIRED_SECTIONS = ["logging", "search"]
SUPPORTED_LOG_FORMATS = ["standard", "json"]


class ConfigLoader:
    """
    Configuration loader and validator for the search layer.

    Loads environment-specific configuration from ``search_config.json``,
    merges the ``shared`` block under each environment and validates the
    sections the search modules read.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize the configuration loader.

        Args:
            config_dir: Directory containing configuration files (defaults to 'config/')
        """
        self.logger = get_logger(__name__)
        self.config_dir = Path(config_dir) if config_dir else Path("config")

    @lru_cache(maxsize=2)
    def load_environment_config(self, environment: str) -> Dict[str, Any]:
        """
        Load configuration for a specific environment.

        Args:
            environment: Environment name (development/production)

        Returns:
            Environment configuration with shared sections merged underneath

        Raises:
            GeoShardConfigurationError: If configuration cannot be loaded
            GeoShardValidationError: If configuration structure is invalid
        """
        config_path = self.config_dir / CONFIG_FILE_NAME

        if not config_path.exists():
            raise GeoShardConfigurationError(
                f"Search configuration file not found: {config_path}"
            )

        try:
            with open(config_path, 'r') as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise GeoShardConfigurationError(
                f"Invalid JSON in search configuration: {str(e)}",
                {"path": str(config_path)}
            )

        self._validate_environment_config(config_data, environment)

        env_config = self._merge_shared(
            config_data.get("shared", {}),
            config_data["environments"][environment]
        )
        self._validate_sections(env_config, environment)

        self.logger.info(f"Loaded search configuration for environment: {environment}")
        return env_config

    def get_search_config(self, environment: str) -> Dict[str, Any]:
        """
        Get the ``search`` section for an environment.

        Args:
            environment: Environment name

        Returns:
            Copy of the search settings dictionary
        """
        return dict(self.load_environment_config(environment)["search"])

    def get_logging_config(self, environment: str) -> Dict[str, Any]:
        """
        Get the ``logging`` section for an environment.

        Args:
            environment: Environment name

        Returns:
            Copy of the logging settings dictionary
        """
        return dict(self.load_environment_config(environment)["logging"])

    def list_environments(self) -> List[str]:
        """Return the environment names declared in the configuration file."""
        config_path = self.config_dir / CONFIG_FILE_NAME
        if not config_path.exists():
            raise GeoShardConfigurationError(
                f"Search configuration file not found: {config_path}"
            )
        with open(config_path, 'r') as f:
            return list(json.load(f).get("environments", {}).keys())

    @staticmethod
    def _merge_shared(shared: Dict[str, Any], env_config: Dict[str, Any]) -> Dict[str, Any]:
        """Overlay environment sections on top of the shared ones, one level deep."""
        merged: Dict[str, Any] = {}
        for key in list(shared.keys()) + [k for k in env_config if k not in shared]:
            shared_value = shared.get(key)
            env_value = env_config.get(key)
            if isinstance(shared_value, dict) and isinstance(env_value, dict):
                section = dict(shared_value)
                section.update(env_value)
                merged[key] = section
            elif key in env_config:
                merged[key] = env_value
            else:
                merged[key] = shared_value
        return merged

    def _validate_environment_config(self, config_data: Dict[str, Any], environment: str) -> None:
        """
        Validate top-level configuration structure.

        Raises:
            GeoShardValidationError: If configuration is invalid
        """
        if "environments" not in config_data:
            raise GeoShardValidationError("Missing 'environments' key in configuration")

        if environment not in config_data["environments"]:
            available_envs = list(config_data["environments"].keys())
            raise GeoShardValidationError(
                f"Environment '{environment}' not found. Available: {available_envs}"
            )

    def _validate_sections(self, env_config: Dict[str, Any], environment: str) -> None:
        """
        Validate the merged environment sections.

        Raises:
            GeoShardValidationError: If a required section or value is missing
        """
        for key in REQUIRED_SECTIONS:
            if not isinstance(env_config.get(key), dict):
                raise GeoShardValidationError(
                    f"Missing required key '{key}' in {environment} configuration"
                )

        log_format = env_config["logging"].get("format", "standard")
        if log_format not in SUPPORTED_LOG_FORMATS:
            raise GeoShardValidationError(
                f"Unsupported log format '{log_format}' in {environment} configuration",
                {"supported": SUPPORTED_LOG_FORMATS}
            )

    def clear_cache(self) -> None:
        """Clear the configuration cache."""
        self.load_environment_config.cache_clear()
        self.logger.info("Configuration cache cleared")
