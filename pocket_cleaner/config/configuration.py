"""
Configuration management for the Pocket Cleaner.

Thin wrapper over the Pydantic configuration that gives the CLI and the
pipeline typed accessors and a single error type.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from .pydantic_config import CleanerConfig, ConfigurationManager
from ..utils.error_handler import ConfigurationError


class Configuration:
    """
    Configuration manager wrapping the Pydantic-based system.

    Any failure while loading or validating settings surfaces as
    ``ConfigurationError``.
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to user configuration file (TOML/JSON)
        """
        try:
            self._manager = ConfigurationManager(config_path)
        except (FileNotFoundError, ValueError) as e:
            raise ConfigurationError(str(e)) from e
        self._config = self._manager.config

    @property
    def config(self) -> CleanerConfig:
        """Get the underlying Pydantic configuration."""
        return self._config

    def update_from_args(self, args: Dict[str, Any]) -> None:
        """
        Update configuration from command-line arguments.

        Args:
            args: Dictionary of validated arguments
        """
        try:
            self._manager.update_from_cli_args(args)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        self._config = self._manager.config

    def get_input_extension(self) -> str:
        return self._config.input.extension

    def get_input_encoding(self) -> Optional[str]:
        return self._config.input.encoding

    def get_title_placeholder(self) -> str:
        return self._config.input.title_placeholder

    def get_tag_separator(self) -> str:
        return self._config.input.tag_separator

    def get_output_path(self) -> Path:
        """Get the cleaned CSV path, resolved against the working directory."""
        return self._config.output.path

    def get_table_name(self) -> str:
        return self._config.database.table_name

    def get_log_level(self) -> str:
        return self._config.logging.level

    def get_log_file(self) -> Optional[str]:
        return self._config.logging.log_file
