"""
Core bookmark import modules.

This package contains the bookmark tree models, the Chrome HTML and Arc
sidebar importers, search filtering and the workspace store.
"""

from .arc_json_parser import ArcImportService, ArcSidebarParser
from .chrome_html_parser import ChromeHTMLParser, ChromeImportService
from .data_models import (
    ArcImportResult,
    ChromeImportResult,
    Folder,
    ImportOutcome,
    ImportWorkspace,
    Link,
    Node,
    Workspace,
    WorkspaceColorId,
    count_nodes,
)
from .filters import NodeFilter, QueryFilter, SearchCoordinator
from .workspace_store import WorkspaceStore, merge_nodes
from .import_module import (
    MultiFormatImporter,
    filter_nodes,
    import_arc_bookmarks,
    import_chrome_bookmarks,
)

__all__ = [
    "ArcImportResult",
    "ArcImportService",
    "ArcSidebarParser",
    "ChromeHTMLParser",
    "ChromeImportResult",
    "ChromeImportService",
    "Folder",
    "ImportOutcome",
    "ImportWorkspace",
    "Link",
    "MultiFormatImporter",
    "Node",
    "NodeFilter",
    "QueryFilter",
    "SearchCoordinator",
    "Workspace",
    "WorkspaceColorId",
    "WorkspaceStore",
    "count_nodes",
    "filter_nodes",
    "import_arc_bookmarks",
    "import_chrome_bookmarks",
    "merge_nodes",
]
