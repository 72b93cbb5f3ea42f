"""
Pydantic-based configuration system for the bookmark importer.

Settings are grouped per importer plus logging, and can be loaded from a
TOML or JSON file with a small set of environment variable overrides.
"""

import json
import os
from pathlib import Path
from typing import Dict, Literal, Optional

import toml
from pydantic import BaseModel, Field, ValidationError, field_validator

from bookmark_importer.core.chrome_html_parser import CHROME_WORKSPACE_NAME
from bookmark_importer.core.data_models import WorkspaceColorId

ENV_ARC_SIDEBAR = "BOOKMARK_IMPORTER_ARC_SIDEBAR"
ENV_LOG_LEVEL = "BOOKMARK_IMPORTER_LOG_LEVEL"


class ChromeImportConfig(BaseModel):
    """Chrome HTML import settings."""

    workspace_name: str = Field(
        default=CHROME_WORKSPACE_NAME,
        min_length=1,
        description="Name of the workspace created by a Chrome import",
    )
    color_id: WorkspaceColorId = Field(
        default=WorkspaceColorId.EMBER,
        description="Colour tag of the imported workspace",
    )

    @field_validator("workspace_name")
    @classmethod
    def validate_workspace_name(cls, v):
        """Reject names made only of whitespace."""
        if not v.strip():
            raise ValueError("Workspace name cannot be blank")
        return v.strip()


class ArcImportConfig(BaseModel):
    """Arc StorableSidebar.json import settings."""

    sidebar_path: Optional[Path] = Field(
        default=None,
        description="Location of StorableSidebar.json (defaults to Arc's data directory)",
    )
    first_color_id: WorkspaceColorId = Field(
        default=WorkspaceColorId.EMBER,
        description="Colour of the first imported space; later spaces cycle onward",
    )
    skip_empty_spaces: bool = Field(
        default=False,
        description="Drop spaces whose pinned container holds no bookmarks",
    )

    @field_validator("sidebar_path", mode="before")
    @classmethod
    def validate_sidebar_path(cls, v):
        """Expand ``~`` in the configured sidebar path."""
        if v is None or v == "":
            return None
        return Path(v).expanduser()


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Root log level"
    )
    log_file: Optional[Path] = Field(default=None, description="Optional log file")
    console_output: bool = Field(default=True, description="Log to stdout")

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v


class ImporterConfig(BaseModel):
    """Main configuration model."""

    chrome: ChromeImportConfig = Field(default_factory=ChromeImportConfig)
    arc: ArcImportConfig = Field(default_factory=ArcImportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigurationManager:
    """Manages loading and validation of configuration from multiple sources."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to configuration file (TOML or JSON)
        """
        self._config: Optional[ImporterConfig] = None
        self._load_configuration(config_path)

    def _load_configuration(self, config_path: Optional[Path] = None) -> None:
        """Load configuration from file or use defaults."""
        config_data: Dict = {}

        if config_path:
            config_data = self._load_config_file(Path(config_path))

        self._apply_env_overrides(config_data)

        try:
            self._config = ImporterConfig(**config_data)
        except ValidationError as e:
            raise ValueError(format_config_error(e))

    def _load_config_file(self, config_path: Path) -> Dict:
        """Load configuration from TOML or JSON file."""
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            if config_path.suffix.lower() == ".toml":
                return toml.load(config_path)
            elif config_path.suffix.lower() == ".json":
                with open(config_path, "r", encoding="utf-8") as f:
                    return json.load(f)
            else:
                raise ValueError(
                    f"Unsupported configuration file format: {config_path.suffix}"
                )
        except Exception as e:
            raise ValueError(f"Failed to load configuration from {config_path}: {e}")

    def _apply_env_overrides(self, config_data: Dict) -> None:
        """Environment variables win over file values."""
        sidebar = os.getenv(ENV_ARC_SIDEBAR)
        if sidebar:
            config_data.setdefault("arc", {})["sidebar_path"] = sidebar

        level = os.getenv(ENV_LOG_LEVEL)
        if level:
            config_data.setdefault("logging", {})["level"] = level

    def update_from_cli_args(self, args: Dict) -> None:
        """Update configuration from command-line arguments."""
        if not self._config:
            raise RuntimeError("Configuration not loaded")

        config_dict = self._config.model_dump()

        if args.get("workspace_name"):
            config_dict["chrome"]["workspace_name"] = args["workspace_name"]

        if args.get("arc_path"):
            config_dict["arc"]["sidebar_path"] = args["arc_path"]

        if args.get("verbose"):
            config_dict["logging"]["level"] = "DEBUG"

        if args.get("log_file"):
            config_dict["logging"]["log_file"] = args["log_file"]

        if args.get("json_output"):
            # stdout carries the JSON document
            config_dict["logging"]["console_output"] = False

        try:
            self._config = ImporterConfig(**config_dict)
        except ValidationError as e:
            raise ValueError(format_config_error(e))

    @property
    def config(self) -> ImporterConfig:
        """Get the current configuration."""
        if not self._config:
            raise RuntimeError("Configuration not loaded")
        return self._config

    def create_sample_config(self, output_path: Path, format: str = "toml") -> None:
        """Create a sample configuration file."""
        sample_config = {
            "chrome": {
                "workspace_name": CHROME_WORKSPACE_NAME,
                "color_id": WorkspaceColorId.EMBER.value,
            },
            "arc": {
                "sidebar_path": "~/Library/Application Support/Arc/StorableSidebar.json",
                "first_color_id": WorkspaceColorId.EMBER.value,
                "skip_empty_spaces": False,
            },
            "logging": {"level": "INFO", "console_output": True},
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
        footer = (
            "\n\nTips:\n"
            "- Check the configuration file format (TOML or JSON)\n"
            "- Colour ids must be one of: "
            + ", ".join(color.value for color in WorkspaceColorId)
            + "\n- Use 'bookmark-importer --create-config PATH' to generate a sample file"
        )

        return header + separator + "\n".join(error_messages) + footer

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

        return " -> ".join(path_parts)

    @staticmethod
    def _format_by_error_type(
        location: str, error_type: str, error_detail: dict, input_value
    ) -> str:
        """Format error message based on Pydantic error type."""
        if error_type == "missing":
            return f"{location}: Required field is missing"

        elif error_type in ("enum", "literal_error"):
            expected = error_detail.get("ctx", {}).get("expected", "valid option")
            return f"{location}: Must be one of {expected} (got: {input_value})"

        elif error_type == "string_too_short":
            return f"{location}: Value cannot be empty"

        elif error_type == "value_error":
            msg = error_detail.get("msg", "Invalid value")
            return f"{location}: {msg} (got: {input_value})"

        msg = error_detail.get("msg", "Invalid configuration value")
        return f"{location}: {msg} (got: {input_value})"


def format_config_error(error: Exception) -> str:
    """
    Format any configuration-related error into a user-friendly message.

    Args:
        error: Exception that occurred during configuration

    Returns:
        Formatted error message
    """
    if isinstance(error, ValidationError):
        return ConfigurationErrorFormatter.format_validation_error(error)

    elif isinstance(error, FileNotFoundError):
        return (
            "Configuration File Not Found:\n"
            f"{error}\n\n"
            "Create one with: bookmark-importer --create-config user_config.toml"
        )

    return f"Configuration Error:\n{error}"
