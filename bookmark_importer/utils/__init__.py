"""
Utility modules for the bookmark importer.

This package contains the exception hierarchy, input validation helpers
and logging setup.
"""

from .error_handler import (
    ArcImportError,
    BookmarkImportError,
    BookmarkImporterError,
    ChromeImportError,
    ConfigurationError,
    ImportErrorKind,
    ValidationError,
    WorkspaceStoreError,
)
from .validation import decode_html_entities, is_importable_url

__all__ = [
    # Exceptions
    "ArcImportError",
    "BookmarkImportError",
    "BookmarkImporterError",
    "ChromeImportError",
    "ConfigurationError",
    "ImportErrorKind",
    "ValidationError",
    "WorkspaceStoreError",
    # Validation helpers
    "decode_html_entities",
    "is_importable_url",
]
