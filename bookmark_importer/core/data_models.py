"""
Data models for the bookmark importer.

This module defines the bookmark tree shared by both importers: the
``Link``/``Folder`` node types, the workspace containers, import result
records and the ``ImportOutcome`` result wrapper.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Generic, Iterator, List, Optional, TypeVar, Union

from bookmark_importer.utils.error_handler import BookmarkImportError

UNTITLED_LINK = "Untitled"
UNTITLED_FOLDER = "Untitled Folder"
UNTITLED_WORKSPACE = "Untitled"


class WorkspaceColorId(Enum):
    """Colour tag attached to a workspace."""

    EMBER = "ember"
    RUBY = "ruby"
    CORAL = "coral"
    TANGERINE = "tangerine"
    SUNFLOWER = "sunflower"
    MOSS = "moss"
    OCEAN = "ocean"
    LAVENDER = "lavender"
    GRAPHITE = "graphite"

    @classmethod
    def cycle(cls, index: int, start: Optional["WorkspaceColorId"] = None) -> "WorkspaceColorId":
        """Return the colour ``index`` steps after ``start``, wrapping around."""
        members = list(cls)
        offset = members.index(start) if start is not None else 0
        return members[(offset + index) % len(members)]

    @property
    def display_name(self) -> str:
        return self.value.title()


@dataclass
class Link:
    """A single bookmark."""

    url: str
    title: str = UNTITLED_LINK
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    favicon_path: Optional[Path] = None

    def __post_init__(self):
        if not self.title:
            self.title = UNTITLED_LINK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "link",
            "id": str(self.id),
            "title": self.title,
            "url": self.url,
            "favicon_path": str(self.favicon_path) if self.favicon_path else None,
        }


@dataclass
class Folder:
    """A folder owning an ordered list of child nodes."""

    name: str = UNTITLED_FOLDER
    children: List["Node"] = field(default_factory=list)
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    is_expanded: bool = False

    def __post_init__(self):
        if not self.name:
            self.name = UNTITLED_FOLDER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "folder",
            "id": str(self.id),
            "name": self.name,
            "is_expanded": self.is_expanded,
            "children": [child.to_dict() for child in self.children],
        }


Node = Union[Link, Folder]


@dataclass
class NodeCounts:
    """Link and folder totals for a forest."""

    links: int = 0
    folders: int = 0

    def __add__(self, other: "NodeCounts") -> "NodeCounts":
        return NodeCounts(self.links + other.links, self.folders + other.folders)


def count_nodes(nodes: List[Node]) -> NodeCounts:
    """
    Count links and folders in a forest by walking it.

    Import statistics are always derived from this walk so the reported
    counts cannot drift from the returned tree.

    Args:
        nodes: Root-level nodes

    Returns:
        NodeCounts for the whole forest
    """
    counts = NodeCounts()
    for node in iter_nodes(nodes):
        if isinstance(node, Folder):
            counts.folders += 1
        else:
            counts.links += 1
    return counts


def iter_nodes(nodes: List[Node]) -> Iterator[Node]:
    """Yield every node of a forest depth-first, parents before children."""
    stack = [iter(nodes)]
    while stack:
        node = next(stack[-1], None)
        if node is None:
            stack.pop()
            continue
        yield node
        if isinstance(node, Folder):
            stack.append(iter(node.children))


def forest_to_dicts(nodes: List[Node]) -> List[Dict[str, Any]]:
    """Convert a forest to JSON-serializable dictionaries."""
    return [node.to_dict() for node in nodes]


@dataclass
class ImportWorkspace:
    """A workspace produced by an importer, before the store assigns an id."""

    name: str
    color_id: WorkspaceColorId
    nodes: List[Node] = field(default_factory=list)
    browser_profile: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            self.name = UNTITLED_WORKSPACE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "color_id": self.color_id.value,
            "browser_profile": self.browser_profile,
            "nodes": forest_to_dicts(self.nodes),
        }


@dataclass
class Workspace:
    """A workspace living in a WorkspaceStore."""

    name: str
    color_id: WorkspaceColorId
    nodes: List[Node] = field(default_factory=list)
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    browser_profile: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            self.name = UNTITLED_WORKSPACE


@dataclass
class ChromeImportResult:
    """Result of a Chrome bookmark import."""

    workspace: ImportWorkspace
    links_imported: int
    folders_imported: int

    @classmethod
    def from_workspace(cls, workspace: ImportWorkspace) -> "ChromeImportResult":
        counts = count_nodes(workspace.nodes)
        return cls(
            workspace=workspace,
            links_imported=counts.links,
            folders_imported=counts.folders,
        )


@dataclass
class ArcImportResult:
    """Result of an Arc sidebar import: one workspace per Arc space."""

    workspaces: List[ImportWorkspace]
    links_imported: int
    folders_imported: int

    @property
    def workspaces_created(self) -> int:
        return len(self.workspaces)

    @classmethod
    def from_workspaces(cls, workspaces: List[ImportWorkspace]) -> "ArcImportResult":
        counts = NodeCounts()
        for workspace in workspaces:
            counts = counts + count_nodes(workspace.nodes)
        return cls(
            workspaces=workspaces,
            links_imported=counts.links,
            folders_imported=counts.folders,
        )


T = TypeVar("T")


@dataclass
class ImportOutcome(Generic[T]):
    """
    Result of an import call: either a value or an error, never both.

    Importers return this instead of raising so that a failure crosses the
    import/consumer boundary as data. ``unwrap()`` converts back to an
    exception for callers that prefer one.
    """

    value: Optional[T] = None
    error: Optional[BookmarkImportError] = None

    def __post_init__(self):
        if (self.value is None) == (self.error is None):
            raise ValueError("ImportOutcome needs exactly one of value or error")

    @classmethod
    def success(cls, value: T) -> "ImportOutcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BookmarkImportError) -> "ImportOutcome[T]":
        return cls(error=error)

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value
