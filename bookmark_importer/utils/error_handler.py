"""
Unified exception hierarchy for the bookmark importer.

All custom exceptions for the project are defined here. Importers never let
these escape the import boundary; they are carried inside an
``ImportOutcome`` and surfaced to the consumer, which owns user-facing
messaging.
"""

from enum import Enum
from typing import Optional


class BookmarkImporterError(Exception):
    """Base exception for all bookmark importer errors."""

    pass


# ============================================================================
# Validation Errors
# ============================================================================


class ValidationError(BookmarkImporterError):
    """Command-line and input validation errors."""

    pass


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(BookmarkImporterError):
    """Configuration-related errors."""

    pass


# ============================================================================
# Workspace Store Errors
# ============================================================================


class WorkspaceStoreError(BookmarkImporterError):
    """Raised when a store mutation violates a tree invariant."""

    pass


# ============================================================================
# Import Errors
# ============================================================================


class ImportErrorKind(Enum):
    """Failure categories shared by both importers."""

    FILE_NOT_FOUND = "file_not_found"
    INVALID_HTML = "invalid_html"
    INVALID_JSON = "invalid_json"
    NO_DATA_CONTAINER = "no_data_container"
    NO_BOOKMARKS_FOUND = "no_bookmarks_found"
    PARSING_FAILED = "parsing_failed"


class BookmarkImportError(BookmarkImporterError):
    """
    A fatal import failure.

    Every import error has a ``kind`` and, for ``PARSING_FAILED``, a
    human-readable ``detail``. Two errors are equal when they have the same
    class, kind and detail, which keeps test assertions simple.
    """

    source_name = "bookmarks"

    def __init__(self, kind: ImportErrorKind, detail: Optional[str] = None):
        self.kind = kind
        self.detail = detail
        super().__init__(self.message)

    @classmethod
    def file_not_found(cls) -> "BookmarkImportError":
        return cls(ImportErrorKind.FILE_NOT_FOUND)

    @classmethod
    def no_bookmarks_found(cls) -> "BookmarkImportError":
        return cls(ImportErrorKind.NO_BOOKMARKS_FOUND)

    @classmethod
    def parsing_failed(cls, detail: str) -> "BookmarkImportError":
        return cls(ImportErrorKind.PARSING_FAILED, detail)

    @property
    def message(self) -> str:
        """User-facing description of the failure."""
        if self.kind == ImportErrorKind.FILE_NOT_FOUND:
            return "The selected file could not be found."
        if self.kind == ImportErrorKind.INVALID_HTML:
            return "The selected file is not a valid Chrome bookmarks HTML file."
        if self.kind == ImportErrorKind.INVALID_JSON:
            return f"The {self.source_name} file is not valid JSON: {self.detail}"
        if self.kind == ImportErrorKind.NO_DATA_CONTAINER:
            return f"No bookmark data container was found in the {self.source_name} file."
        if self.kind == ImportErrorKind.NO_BOOKMARKS_FOUND:
            return "No bookmarks were found in the file."
        return f"Failed to parse {self.source_name}: {self.detail}"

    def __eq__(self, other) -> bool:
        if not isinstance(other, BookmarkImportError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.kind == other.kind
            and self.detail == other.detail
        )

    def __hash__(self) -> int:
        return hash((type(self), self.kind, self.detail))

    def __repr__(self) -> str:
        if self.detail is None:
            return f"{type(self).__name__}({self.kind.name})"
        return f"{type(self).__name__}({self.kind.name}, {self.detail!r})"


class ChromeImportError(BookmarkImportError):
    """Chrome HTML import errors."""

    source_name = "Chrome bookmarks"

    @classmethod
    def invalid_html(cls) -> "ChromeImportError":
        return cls(ImportErrorKind.INVALID_HTML)


class ArcImportError(BookmarkImportError):
    """Arc StorableSidebar.json import errors."""

    source_name = "Arc sidebar"

    @classmethod
    def invalid_json(cls, detail: str) -> "ArcImportError":
        return cls(ImportErrorKind.INVALID_JSON, detail)

    @classmethod
    def no_data_container(cls) -> "ArcImportError":
        return cls(ImportErrorKind.NO_DATA_CONTAINER)
