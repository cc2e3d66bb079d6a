"""
Configuration management for mdpreview.
"""

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli

from lib.markdown_preview import DEFAULT_OPTIONS

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "mdpreview.toml"


def replaceMatchToEnv(match: re.Match[str]) -> str:
    """Replace environment variable placeholders with actual values.

    Args:
        match: A regex match object containing the environment variable name.

    Returns:
        str: The value of the environment variable or the original placeholder
             if the variable is not set.
    """
    key = match.group(1)
    return os.getenv(key, match.group(0))


def substituteEnvVars(value: Any) -> Any:
    """Recursively substitute ${VAR_NAME} placeholders in configuration values.

    Strings, dictionaries and lists are processed; other values are returned
    unchanged.
    """
    if isinstance(value, str):
        return re.sub(r"\$\{([A-Za-z_][A-Za-z0-9_-]*)\}", replaceMatchToEnv, value)
    elif isinstance(value, dict):
        return {k: substituteEnvVars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substituteEnvVars(item) for item in value]
    return value


class ConfigManager:
    """Loads the TOML configuration of the preview engine and its front-end."""

    def __init__(
        self, configPath: str = DEFAULT_CONFIG_PATH, configDirs: Optional[List[str]] = None, required: bool = False
    ):
        """
        Initialize ConfigManager.

        Args:
            configPath: Main TOML file
            configDirs: Directories scanned recursively for additional .toml files
            required: Exit if the main file does not exist and no directories are given
        """
        self.config_path = configPath
        self.config_dirs = configDirs or []
        self.required = required
        self.config = substituteEnvVars(self._loadConfig())

    def _findTomlFilesRecursive(self, directory: str) -> List[Path]:
        """Recursively find all .toml files in a directory."""
        toml_files: List[Path] = []
        dir_path = Path(directory)

        if not dir_path.exists():
            logger.warning(f"Config directory {directory} does not exist, skipping")
            return toml_files

        if not dir_path.is_dir():
            logger.warning(f"Config path {directory} is not a directory, skipping")
            return toml_files

        for toml_file in dir_path.rglob("*.toml"):
            if toml_file.is_file():
                toml_files.append(toml_file)
                logger.debug(f"Found config file: {toml_file}")

        return sorted(toml_files)

    def _mergeConfigs(self, base_config: Dict[str, Any], new_config: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge two configuration dictionaries, new values win."""
        merged = base_config.copy()

        for key, value in new_config.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._mergeConfigs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def _loadConfig(self) -> Dict[str, Any]:
        """
        Load the main TOML file, then merge every .toml file found in the
        configured directories in sorted order.

        Raises:
            SystemExit: If a required main file is missing or the main file
                cannot be parsed.
        """
        config_file = Path(self.config_path)
        hasConfigFile = config_file.is_file()
        if not hasConfigFile:
            if self.required and not self.config_dirs:
                logger.error(f"Configuration file {self.config_path} not found!")
                sys.exit(1)
            logger.debug(f"Configuration file {self.config_path} not found, using defaults")

        config: Dict[str, Any] = {}
        if hasConfigFile:
            try:
                with open(config_file, "rb") as f:
                    config = tomli.load(f)
            except (OSError, tomli.TOMLDecodeError) as e:
                logger.error(f"Failed to load configuration: {e}")
                sys.exit(1)
            logger.info(f"Loaded main config from {self.config_path}")

        for config_dir in self.config_dirs:
            toml_files = self._findTomlFilesRecursive(config_dir)
            logger.info(f"Found {len(toml_files)} .toml files in {config_dir}")

            for toml_file in toml_files:
                try:
                    with open(toml_file, "rb") as f:
                        dir_config = tomli.load(f)
                except (OSError, tomli.TOMLDecodeError) as e:
                    logger.error(f"Failed to load config file {toml_file}: {e}")
                    # Continue with other files instead of exiting
                    continue

                config = self._mergeConfigs(config, dir_config)
                logger.info(f"Merged config from {toml_file}")

        return config

    def get(self, key: str, default=None) -> Any:
        """Get configuration value by key."""
        return self.config.get(key, default)

    def getLoggingConfig(self) -> Dict[str, Any]:
        """Get logging-specific configuration."""
        return self.get("logging", {})

    def getMarkdownConfig(self) -> Dict[str, Any]:
        """Get the raw [markdown] section."""
        return self.get("markdown", {})

    def getMarkdownOptions(self) -> Dict[str, Any]:
        """
        Get parser options from the [markdown] section.

        Keys are converted from TOML style (``code-class-prefix``) to option
        names (``code_class_prefix``). Unknown keys are logged and ignored.

        Returns:
            Dict[str, Any]: Options for lib.markdown_preview.MarkdownParser
        """
        options: Dict[str, Any] = {}
        for key, value in self.getMarkdownConfig().items():
            optionName = key.replace("-", "_")
            if optionName not in DEFAULT_OPTIONS:
                logger.warning(f"Unknown markdown option '{key}', ignoring")
                continue
            options[optionName] = value
        return options
