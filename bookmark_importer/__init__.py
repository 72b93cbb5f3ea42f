"""
Bookmark Importer

Imports Chrome bookmark HTML exports and Arc browser sidebars into
workspaces of nested links and folders.
"""

__version__ = "1.0.0"

from .core.data_models import (
    ArcImportResult,
    ChromeImportResult,
    Folder,
    ImportOutcome,
    ImportWorkspace,
    Link,
    Node,
    WorkspaceColorId,
)
from .core.import_module import (
    MultiFormatImporter,
    filter_nodes,
    import_arc_bookmarks,
    import_chrome_bookmarks,
)
from .core.workspace_store import WorkspaceStore, merge_nodes
from .utils.error_handler import ArcImportError, BookmarkImportError, ChromeImportError

__all__ = [
    "ArcImportError",
    "ArcImportResult",
    "BookmarkImportError",
    "ChromeImportError",
    "ChromeImportResult",
    "Folder",
    "ImportOutcome",
    "ImportWorkspace",
    "Link",
    "MultiFormatImporter",
    "Node",
    "WorkspaceColorId",
    "WorkspaceStore",
    "filter_nodes",
    "import_arc_bookmarks",
    "import_chrome_bookmarks",
    "merge_nodes",
]
