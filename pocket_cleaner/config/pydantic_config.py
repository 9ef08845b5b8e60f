"""
Pydantic-based configuration system for Pocket Cleaner.

Settings are grouped by concern (input, output, database, logging) and can be
loaded from a TOML or JSON file, with a couple of environment overrides.
"""

import json
import os
import re
from pathlib import Path
from typing import Dict, List, Literal, Optional

import toml
from pydantic import BaseModel, Field, ValidationError, field_validator

DEFAULT_CONFIG_FILES = ("pocket_cleaner.toml", "pocket_cleaner.json")
DEFAULT_OUTPUT_PATH = Path("..") / "output" / "cleaned_links.csv"

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class InputConfig(BaseModel):
    """Source file discovery and row parsing settings."""

    extension: str = Field(
        default="csv",
        min_length=1,
        description="File extension of source exports (case-insensitive)",
    )
    encoding: Optional[str] = Field(
        default=None,
        description="Force a source encoding instead of detecting it",
    )
    title_placeholder: str = Field(
        default="<no-title>",
        min_length=1,
        description="Title used when the title field is blank",
    )
    tag_separator: str = Field(
        default="|",
        min_length=1,
        description="Separator between tags in the tag field",
    )

    @field_validator("extension", mode="before")
    @classmethod
    def strip_leading_dot(cls, v):
        """Accept '.csv' as well as 'csv'."""
        if isinstance(v, str):
            return v.strip().lstrip(".")
        return v


class OutputConfig(BaseModel):
    """Cleaned CSV output settings."""

    path: Path = Field(
        default=DEFAULT_OUTPUT_PATH,
        description="Cleaned CSV path, relative to the working directory",
    )

    @field_validator("path", mode="before")
    @classmethod
    def validate_path(cls, v):
        """Ensure the output path is a Path object."""
        if isinstance(v, str):
            if not v.strip():
                raise ValueError("Output path must not be empty")
            return Path(v)
        return v


class DatabaseConfig(BaseModel):
    """Keyed table sink settings."""

    table_name: str = Field(
        default="pocket_items",
        description="Table the cleaned records are upserted into",
    )

    @field_validator("table_name")
    @classmethod
    def validate_table_name(cls, v):
        """Table names are interpolated into SQL, so keep them plain identifiers."""
        if not _IDENTIFIER_RE.match(v):
            raise ValueError(
                f"Table name must be a plain SQL identifier (got: {v!r})"
            )
        return v


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Root log level",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Write a timestamped log file under ./logs when set",
    )

    @field_validator("level", mode="before")
    @classmethod
    def upper_case_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v


class CleanerConfig(BaseModel):
    """Main configuration model."""

    input: InputConfig = Field(default_factory=InputConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigurationManager:
    """Manages loading and validation of configuration from multiple sources."""

    ENV_OUTPUT = "POCKET_CLEANER_OUTPUT"
    ENV_LOG_LEVEL = "POCKET_CLEANER_LOG_LEVEL"

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to configuration file (TOML or JSON)
        """
        self._config: Optional[CleanerConfig] = None
        self._load_configuration(config_path)

    def _get_default_config_paths(self) -> List[Path]:
        """Get list of default configuration file paths to try."""
        return [Path.cwd() / name for name in DEFAULT_CONFIG_FILES]

    def _load_configuration(self, config_path: Optional[Path] = None) -> None:
        """Load configuration from file or use defaults."""
        config_data: Dict = {}

        if config_path:
            config_data = self._load_config_file(Path(config_path))
        else:
            for path in self._get_default_config_paths():
                if path.exists():
                    config_data = self._load_config_file(path)
                    break

        self._apply_env_overrides(config_data)

        try:
            self._config = CleanerConfig(**config_data)
        except ValidationError as e:
            raise ValueError(ConfigurationErrorFormatter.format_validation_error(e))

    def _load_config_file(self, config_path: Path) -> Dict:
        """Load configuration from TOML or JSON file."""
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        suffix = config_path.suffix.lower()
        if suffix not in (".toml", ".json"):
            raise ValueError(
                f"Unsupported configuration file format: {config_path.suffix}"
            )

        try:
            if suffix == ".toml":
                return toml.load(config_path)
            with open(config_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, toml.TomlDecodeError, json.JSONDecodeError) as e:
            raise ValueError(f"Failed to load configuration from {config_path}: {e}")

    def _apply_env_overrides(self, config_data: Dict) -> None:
        """Apply environment variable overrides on top of file settings."""
        output_path = os.getenv(self.ENV_OUTPUT)
        if output_path:
            config_data.setdefault("output", {})["path"] = output_path

        log_level = os.getenv(self.ENV_LOG_LEVEL)
        if log_level:
            config_data.setdefault("logging", {})["level"] = log_level

    def update_from_cli_args(self, args: Dict) -> None:
        """Update configuration from command-line arguments."""
        if not self._config:
            raise RuntimeError("Configuration not loaded")

        config_dict = self._config.model_dump()

        if args.get("output_path"):
            config_dict["output"]["path"] = args["output_path"]

        if args.get("verbose"):
            config_dict["logging"]["level"] = "DEBUG"

        try:
            self._config = CleanerConfig(**config_dict)
        except ValidationError as e:
            raise ValueError(ConfigurationErrorFormatter.format_validation_error(e))

    @property
    def config(self) -> CleanerConfig:
        """Get the current configuration."""
        if not self._config:
            raise RuntimeError("Configuration not loaded")
        return self._config

    @staticmethod
    def create_sample_config(output_path: Path, format: str = "toml") -> None:
        """Create a sample configuration file."""
        sample_config = {
            "input": {
                "extension": "csv",
                "title_placeholder": "<no-title>",
                "tag_separator": "|",
            },
            "output": {"path": str(DEFAULT_OUTPUT_PATH)},
            "database": {"table_name": "pocket_items"},
            "logging": {"level": "WARNING"},
        }

        if format.lower() == "toml":
            with open(output_path, "w", encoding="utf-8") as f:
                toml.dump(sample_config, f)
        elif format.lower() == "json":
            with open(output_path, "w", encoding="utf-8") as f:
                json.dump(sample_config, f, indent=2)
        else:
            raise ValueError(f"Unsupported format: {format}")


class ConfigurationErrorFormatter:
    """Formats Pydantic validation errors into user-friendly messages."""

    @staticmethod
    def format_validation_error(error: ValidationError) -> str:
        """
        Convert Pydantic ValidationError into a user-friendly error message.

        Args:
            error: Pydantic ValidationError instance

        Returns:
            Formatted error message
        """
        error_messages = []

        for error_detail in error.errors():
            location = ConfigurationErrorFormatter._format_error_location(
                error_detail["loc"]
            )
            error_messages.append(
                ConfigurationErrorFormatter._format_by_error_type(
                    location,
                    error_detail["type"],
                    error_detail,
                    error_detail.get("input", "N/A"),
                )
            )

        header = "Configuration Validation Failed:\n"
        separator = "-" * 60 + "\n"
        return header + separator + "\n".join(error_messages)

    @staticmethod
    def _format_error_location(location: tuple) -> str:
        """Format the error location path."""
        if not location:
            return "Configuration"

        path_parts = []
        for part in location:
            if isinstance(part, str):
                path_parts.append(part)
            else:
                path_parts.append(f"[{part}]")

        return ".".join(path_parts)

    @staticmethod
    def _format_by_error_type(
        location: str, error_type: str, error_detail: dict, input_value
    ) -> str:
        """Format error message based on Pydantic error type."""
        if error_type == "missing":
            return f"- {location}: Required field is missing"

        elif error_type == "literal_error":
            expected = error_detail.get("ctx", {}).get("expected", "valid option")
            return f"- {location}: Must be one of {expected} (got: {input_value})"

        elif error_type == "string_too_short":
            min_length = error_detail.get("ctx", {}).get("min_length", "minimum")
            return (
                f"- {location}: String too short, minimum {min_length} "
                f"characters (got: {input_value!r})"
            )

        msg = error_detail.get("msg", "Invalid configuration value")
        return f"- {location}: {msg} (got: {input_value})"

