"""
Arc browser sidebar parser module.

Arc keeps its sidebar in ``StorableSidebar.json``: a flat list of items
linked by ``parentID`` and ``childrenIds``, plus a list of spaces that point
at a pinned and an unpinned container. This module turns the pinned
container of every space into a workspace holding a ``Node`` forest.

The format is unversioned and reverse engineered. Two rules come from
observed files rather than documentation: the pinned container id is the
entry following the literal ``"pinned"`` in a space's ``containerIDs``, and
a parent's ``childrenIds`` wins over a child's own ``parentID``.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Union

from bookmark_importer.utils.error_handler import ArcImportError
from bookmark_importer.utils.validation import is_importable_url

from .data_models import (
    ArcImportResult,
    Folder,
    ImportOutcome,
    ImportWorkspace,
    Link,
    Node,
    UNTITLED_FOLDER,
    UNTITLED_LINK,
    UNTITLED_WORKSPACE,
    WorkspaceColorId,
)

ARC_SIDEBAR_FILENAME = "StorableSidebar.json"
PINNED_TOKEN = "pinned"
_EXHAUSTED = object()


def _text(value: Any) -> str:
    """Arc fields may be null or missing; anything that isn't a string is empty."""
    return value if isinstance(value, str) else ""


def _dicts(entries: Any) -> List[Dict[str, Any]]:
    # Arc interleaves bare id strings with the objects they name
    if not isinstance(entries, list):
        return []
    return [entry for entry in entries if isinstance(entry, dict)]


class ArcItemIndex:
    """
    Items of one data container, indexed by id.

    Also records every id that appears in some item's ``childrenIds``. Such
    an item belongs to the parent that lists it, whatever its own
    ``parentID`` says, so the ``parentID`` fallback leaves it out.
    """

    def __init__(self, items: Any):
        self.items: Dict[str, Dict[str, Any]] = {}
        self.claimed_ids = set()

        for item in _dicts(items):
            item_id = item.get("id")
            if isinstance(item_id, str):
                self.items[item_id] = item

        for item in self.items.values():
            self.claimed_ids.update(
                child_id for child_id in self.children_ids(item) if isinstance(child_id, str)
            )

    def __len__(self) -> int:
        return len(self.items)

    def get(self, item_id: str) -> Optional[Dict[str, Any]]:
        return self.items.get(item_id)

    @staticmethod
    def children_ids(item: Dict[str, Any]) -> List[Any]:
        child_ids = item.get("childrenIds")
        return child_ids if isinstance(child_ids, list) else []

    def child_ids_of(self, parent_id: str) -> List[Any]:
        """
        Ordered child ids of a container or folder.

        A parent present in the index with a non-empty ``childrenIds``
        contributes that list. Otherwise the unclaimed items whose
        ``parentID`` names the parent are used, in document order.
        """
        parent = self.items.get(parent_id)
        if parent is not None and self.children_ids(parent):
            return self.children_ids(parent)

        return [
            item_id
            for item_id, item in self.items.items()
            if item.get("parentID") == parent_id and item_id not in self.claimed_ids
        ]


class ArcSidebarParser:
    """Parses Arc sidebar data into one ImportWorkspace per space."""

    def __init__(
        self,
        data: Dict[str, Any],
        first_color_id: WorkspaceColorId = WorkspaceColorId.EMBER,
        skip_empty_spaces: bool = False,
    ):
        self.data = data
        self.first_color_id = first_color_id
        self.skip_empty_spaces = skip_empty_spaces
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def default_sidebar_path() -> Path:
        """Location of Arc's sidebar file for the current user."""
        return Path.home() / "Library" / "Application Support" / "Arc" / ARC_SIDEBAR_FILENAME

    def data_containers(self) -> List[Dict[str, Any]]:
        """
        Return the containers that hold spaces and items.

        Raises:
            ArcImportError: If the sidebar or container structure is absent
        """
        sidebar = self.data.get("sidebar")
        if not isinstance(sidebar, dict):
            raise ArcImportError.no_data_container()

        containers = sidebar.get("containers")
        if not isinstance(containers, list):
            raise ArcImportError.no_data_container()

        data_containers = [
            container
            for container in containers
            if isinstance(container, dict) and "spaces" in container and "items" in container
        ]
        if not data_containers:
            raise ArcImportError.no_data_container()

        return data_containers

    def parse(self) -> List[ImportWorkspace]:
        """
        Build one workspace per space, across all data containers.

        Returns:
            Workspaces in document order

        Raises:
            ArcImportError: If no data container exists
        """
        workspaces: List[ImportWorkspace] = []

        for container in self.data_containers():
            index = ArcItemIndex(container.get("items"))
            self.logger.debug(f"Indexed {len(index)} Arc items")

            for space in _dicts(container.get("spaces")):
                workspace = self._build_workspace(space, index, len(workspaces))
                if workspace is not None:
                    workspaces.append(workspace)

        return workspaces

    def _build_workspace(
        self, space: Dict[str, Any], index: ArcItemIndex, position: int
    ) -> Optional[ImportWorkspace]:
        name = _text(space.get("title")) or UNTITLED_WORKSPACE

        container_id = self.find_pinned_container_id(space)
        if container_id is None:
            self.logger.debug(f"Space {name!r} has no pinned container, skipping")
            return None

        nodes = self.resolve_children(container_id, index)
        if not nodes and self.skip_empty_spaces:
            self.logger.debug(f"Space {name!r} has no pinned bookmarks, skipping")
            return None

        return ImportWorkspace(
            name=name,
            color_id=WorkspaceColorId.cycle(position, self.first_color_id),
            nodes=nodes,
            browser_profile=self._profile_name(space),
        )

    @staticmethod
    def find_pinned_container_id(space: Dict[str, Any]) -> Optional[str]:
        """
        Find the pinned container id of a space.

        ``containerIDs`` pairs a marker with an id, commonly
        ``["unpinned", <id>, "pinned", <id>]``. The id after ``"pinned"`` is
        returned; unpinned containers are never used.
        """
        container_ids = space.get("containerIDs")
        if not isinstance(container_ids, list):
            return None

        for position, entry in enumerate(container_ids[:-1]):
            if entry == PINNED_TOKEN:
                candidate = container_ids[position + 1]
                return candidate if isinstance(candidate, str) else None

        return None

    @staticmethod
    def _profile_name(space: Dict[str, Any]) -> Optional[str]:
        """Browser profile directory of a space, when Arc records a custom one."""
        profile = space.get("profile")
        if not isinstance(profile, dict):
            return None
        custom = profile.get("custom")
        if not isinstance(custom, dict):
            return None
        details = custom.get("_0")
        if not isinstance(details, dict):
            return None
        return _text(details.get("directoryBasename")) or None

    def resolve_children(
        self,
        parent_id: str,
        index: ArcItemIndex,
        ancestors: FrozenSet[str] = frozenset(),
    ) -> List[Node]:
        """
        Resolve the ordered children of a container or folder.

        Folders are expanded with an explicit work stack, so nesting depth is
        not bounded by the interpreter's recursion limit. Ids already on the
        current path are skipped so cyclic data cannot loop forever. Ids
        listed twice under one parent are kept once.

        Args:
            parent_id: Container or folder id
            index: Item index for the current data container
            ancestors: Ids on the path from the space root to ``parent_id``

        Returns:
            Child nodes in display order
        """
        roots: List[Node] = []
        on_path = set(ancestors)
        on_path.add(parent_id)

        # (folder id, pending child ids, list receiving the children, ids taken)
        stack = [(parent_id, iter(index.child_ids_of(parent_id)), roots, set())]
        while stack:
            folder_id, pending, nodes, seen = stack[-1]
            child_id = next(pending, _EXHAUSTED)
            if child_id is _EXHAUSTED:
                stack.pop()
                on_path.discard(folder_id)
                continue

            if not isinstance(child_id, str) or child_id in seen:
                continue
            seen.add(child_id)

            if child_id in on_path:
                self.logger.warning(f"Skipping Arc item {child_id} to break a parent cycle")
                continue

            item = index.get(child_id)
            if item is None:
                self.logger.debug(f"Arc item {child_id} listed as a child but not found")
                continue

            data = item.get("data")
            tab = data.get("tab") if isinstance(data, dict) else None
            if isinstance(tab, dict):
                link = self._build_link(child_id, tab)
                if link is not None:
                    nodes.append(link)
                continue

            folder = Folder(name=_text(item.get("title")) or UNTITLED_FOLDER)
            nodes.append(folder)
            on_path.add(child_id)
            stack.append((child_id, iter(index.child_ids_of(child_id)), folder.children, set()))

        return roots

    def _build_link(self, item_id: str, tab: Dict[str, Any]) -> Optional[Link]:
        url = _text(tab.get("savedURL"))
        if not is_importable_url(url):
            self.logger.debug(f"Skipping Arc tab {item_id} with unusable URL {url!r}")
            return None
        return Link(url=url, title=_text(tab.get("savedTitle")) or UNTITLED_LINK)


class ArcImportService:
    """
    Imports an Arc ``StorableSidebar.json`` file.

    Missing leaf fields never fail an import; only a missing file, invalid
    JSON, an absent container structure or a sidebar with no spaces do.
    """

    def __init__(
        self,
        first_color_id: WorkspaceColorId = WorkspaceColorId.EMBER,
        skip_empty_spaces: bool = False,
    ):
        self.first_color_id = first_color_id
        self.skip_empty_spaces = skip_empty_spaces
        self.logger = logging.getLogger(__name__)

    def import_from_arc(
        self, file_path: Union[str, Path, None] = None
    ) -> ImportOutcome[ArcImportResult]:
        """
        Import bookmarks from an Arc sidebar file.

        Args:
            file_path: Path to StorableSidebar.json; Arc's standard location
                when omitted

        Returns:
            ImportOutcome holding an ArcImportResult or an ArcImportError
        """
        file_path = Path(file_path) if file_path else ArcSidebarParser.default_sidebar_path()
        self.logger.info(f"Starting Arc import: {file_path}")

        try:
            result = self._import(file_path)
        except ArcImportError as e:
            self.logger.warning(f"Arc import failed: {e.message}")
            return ImportOutcome.failure(e)
        except Exception as e:
            self.logger.error(f"Error parsing Arc sidebar {file_path}: {e}")
            return ImportOutcome.failure(ArcImportError.parsing_failed(str(e)))

        self.logger.info(
            f"Arc import completed: {result.workspaces_created} workspaces, "
            f"{result.links_imported} links, {result.folders_imported} folders"
        )
        return ImportOutcome.success(result)

    def _import(self, file_path: Path) -> ArcImportResult:
        if not file_path.exists():
            raise ArcImportError.file_not_found()

        data = self._read_json(file_path)
        parser = ArcSidebarParser(
            data,
            first_color_id=self.first_color_id,
            skip_empty_spaces=self.skip_empty_spaces,
        )
        workspaces = parser.parse()

        if not workspaces:
            raise ArcImportError.no_bookmarks_found()

        return ArcImportResult.from_workspaces(workspaces)

    def _read_json(self, file_path: Path) -> Dict[str, Any]:
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ArcImportError.invalid_json(str(e))
        except (UnicodeDecodeError, OSError) as e:
            raise ArcImportError.invalid_json(f"Unable to read file: {e}")

        if not isinstance(data, dict):
            raise ArcImportError.invalid_json("Top-level value is not an object")

        return data
