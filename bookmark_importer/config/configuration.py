"""
Configuration facade used by the command line interface.

Wraps the Pydantic ``ConfigurationManager`` and answers the handful of
questions the CLI asks: where the Arc sidebar lives, what to call the
Chrome workspace, and how to set up logging.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from bookmark_importer.core.arc_json_parser import ArcSidebarParser
from bookmark_importer.core.data_models import WorkspaceColorId

from .pydantic_config import ConfigurationManager, ImporterConfig


class Configuration:
    """Configuration manager wrapping the Pydantic-based system."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to user configuration file (TOML/JSON)
        """
        self._manager = ConfigurationManager(config_path)
        self._config = self._manager.config

    @property
    def config(self) -> ImporterConfig:
        """Get the underlying Pydantic configuration."""
        return self._config

    def update_from_args(self, args: Dict[str, Any]) -> None:
        """
        Update configuration from command-line arguments.

        Args:
            args: Dictionary of validated arguments
        """
        self._manager.update_from_cli_args(args)
        self._config = self._manager.config

    def arc_sidebar_path(self) -> Path:
        """Configured Arc sidebar file, or Arc's standard location."""
        if self._config.arc.sidebar_path is not None:
            return self._config.arc.sidebar_path
        return ArcSidebarParser.default_sidebar_path()

    def chrome_workspace_name(self) -> str:
        return self._config.chrome.workspace_name

    def chrome_color_id(self) -> WorkspaceColorId:
        return self._config.chrome.color_id

    def create_sample_config(self, output_path: Path, format: str = "toml") -> None:
        """Write a sample configuration file."""
        self._manager.create_sample_config(output_path, format)
