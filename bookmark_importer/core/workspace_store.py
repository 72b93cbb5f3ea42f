"""
In-memory workspace store.

The store owns the workspaces a consumer works with and is the only place
their trees are mutated. Import results are merged into it with
``merge_nodes`` or ``WorkspaceStore.apply_import``.
"""

import logging
import threading
import uuid
from collections import deque
from typing import Dict, List, Optional, Tuple

from bookmark_importer.utils.error_handler import WorkspaceStoreError
from bookmark_importer.utils.validation import is_importable_url

from .data_models import (
    Folder,
    ImportWorkspace,
    Link,
    Node,
    Workspace,
    WorkspaceColorId,
    iter_nodes,
)


class WorkspaceStore:
    """
    Single-writer store of workspaces and their bookmark trees.

    Every mutation runs under one re-entrant lock. Ids are unique across
    the whole store: a requested id that is already taken is replaced with
    a fresh one.
    """

    def __init__(self):
        self._workspaces: Dict[uuid.UUID, Workspace] = {}
        self._ids: set = set()
        # folder id -> (owning workspace id, folder)
        self._folders: Dict[uuid.UUID, Tuple[uuid.UUID, Folder]] = {}
        self._selected_id: Optional[uuid.UUID] = None
        self.lock = threading.RLock()
        self.logger = logging.getLogger(__name__)

    @property
    def workspaces(self) -> List[Workspace]:
        """Workspaces in creation order."""
        with self.lock:
            return list(self._workspaces.values())

    @property
    def selected_workspace_id(self) -> Optional[uuid.UUID]:
        return self._selected_id

    def contains_id(self, item_id: uuid.UUID) -> bool:
        """True if a workspace or node already uses ``item_id``."""
        with self.lock:
            return item_id in self._ids

    def _claim_id(self, requested: Optional[uuid.UUID]) -> uuid.UUID:
        if requested is None or requested in self._ids:
            if requested is not None:
                self.logger.debug(f"Id {requested} already in use, assigning a new one")
            requested = uuid.uuid4()
        self._ids.add(requested)
        return requested

    def get_workspace(self, workspace_id: uuid.UUID) -> Optional[Workspace]:
        with self.lock:
            return self._workspaces.get(workspace_id)

    def _require_workspace(self, workspace_id: uuid.UUID) -> Workspace:
        workspace = self._workspaces.get(workspace_id)
        if workspace is None:
            raise WorkspaceStoreError(f"Unknown workspace: {workspace_id}")
        return workspace

    def create_workspace(
        self,
        name: str,
        color_id: WorkspaceColorId = WorkspaceColorId.EMBER,
        browser_profile: Optional[str] = None,
        workspace_id: Optional[uuid.UUID] = None,
    ) -> Workspace:
        """
        Create an empty workspace and select it.

        Args:
            name: Workspace name
            color_id: Colour tag
            browser_profile: Browser profile the workspace opens links in
            workspace_id: Preferred id; replaced when already taken

        Returns:
            The new workspace
        """
        with self.lock:
            workspace = Workspace(
                name=name,
                color_id=color_id,
                id=self._claim_id(workspace_id),
                browser_profile=browser_profile,
            )
            self._workspaces[workspace.id] = workspace
            self._selected_id = workspace.id
            self.logger.debug(f"Created workspace {workspace.name!r} ({workspace.id})")
            return workspace

    def select_workspace(self, workspace_id: uuid.UUID) -> None:
        with self.lock:
            self._require_workspace(workspace_id)
            self._selected_id = workspace_id

    def find_node(self, workspace_id: uuid.UUID, node_id: uuid.UUID) -> Optional[Node]:
        """Find a link or folder anywhere in a workspace's tree."""
        with self.lock:
            workspace = self._require_workspace(workspace_id)
            for node in iter_nodes(workspace.nodes):
                if node.id == node_id:
                    return node
            return None

    def _children_of(self, workspace: Workspace, parent_id: Optional[uuid.UUID]) -> List[Node]:
        if parent_id is None:
            return workspace.nodes

        entry = self._folders.get(parent_id)
        if entry is None:
            if parent_id in self._ids:
                raise WorkspaceStoreError(f"Parent {parent_id} is not a folder")
            raise WorkspaceStoreError(f"Unknown parent folder: {parent_id}")

        owner_id, folder = entry
        if owner_id != workspace.id:
            raise WorkspaceStoreError(
                f"Parent folder {parent_id} belongs to another workspace"
            )
        return folder.children

    def add_link(
        self,
        workspace_id: uuid.UUID,
        url: str,
        title: str,
        parent_id: Optional[uuid.UUID] = None,
        link_id: Optional[uuid.UUID] = None,
    ) -> Link:
        """
        Append a link to a workspace root or to a folder.

        Raises:
            WorkspaceStoreError: For an unusable URL, an unknown workspace or
                an unknown parent folder
        """
        if not is_importable_url(url):
            raise WorkspaceStoreError(f"Invalid URL: {url!r}")

        with self.lock:
            workspace = self._require_workspace(workspace_id)
            siblings = self._children_of(workspace, parent_id)
            link = Link(url=url, title=title, id=self._claim_id(link_id))
            siblings.append(link)
            return link

    def add_folder(
        self,
        workspace_id: uuid.UUID,
        name: str,
        parent_id: Optional[uuid.UUID] = None,
        folder_id: Optional[uuid.UUID] = None,
    ) -> Folder:
        """
        Append an empty folder to a workspace root or to a folder.

        Raises:
            WorkspaceStoreError: For an unknown workspace or parent folder
        """
        with self.lock:
            workspace = self._require_workspace(workspace_id)
            siblings = self._children_of(workspace, parent_id)
            folder = Folder(name=name, id=self._claim_id(folder_id))
            siblings.append(folder)
            self._folders[folder.id] = (workspace.id, folder)
            return folder

    def apply_import(self, workspaces: List[ImportWorkspace]) -> List[Workspace]:
        """
        Create one workspace per imported workspace and merge its nodes.

        The workspace selected before the import stays selected. With no
        prior selection the first imported workspace is selected.

        Args:
            workspaces: Workspaces from a Chrome or Arc import

        Returns:
            The created workspaces, in import order
        """
        with self.lock:
            previous = self._selected_id
            created: List[Workspace] = []

            for imported in workspaces:
                workspace = self.create_workspace(
                    imported.name,
                    imported.color_id,
                    browser_profile=imported.browser_profile,
                )
                merge_nodes(imported.nodes, self, workspace.id)
                created.append(workspace)

            if previous is not None:
                self._selected_id = previous
            elif created:
                self._selected_id = created[0].id

            self.logger.info(f"Merged {len(created)} imported workspaces into the store")
            return created


def merge_nodes(
    imported_forest: List[Node],
    store: WorkspaceStore,
    workspace_id: uuid.UUID,
    parent_id: Optional[uuid.UUID] = None,
) -> List[Node]:
    """
    Insert an imported forest into a workspace, preserving order.

    Links are added directly; folders are created first and their children
    merged beneath them. Imported ids are reused unless the store already
    holds them. Folders are expanded level by level from a queue, so deep
    trees do not recurse.

    Args:
        imported_forest: Root-level nodes from an import
        store: Destination store
        workspace_id: Destination workspace
        parent_id: Destination folder, or None for the workspace root

    Returns:
        The nodes created at the destination level
    """
    created: List[Node] = []
    pending = deque([(imported_forest, parent_id)])

    with store.lock:
        while pending:
            nodes, target_id = pending.popleft()
            for node in nodes:
                if isinstance(node, Link):
                    merged = store.add_link(
                        workspace_id, node.url, node.title, target_id, link_id=node.id
                    )
                else:
                    merged = store.add_folder(
                        workspace_id, node.name, target_id, folder_id=node.id
                    )
                    if node.children:
                        pending.append((node.children, merged.id))

                if nodes is imported_forest:
                    created.append(merged)
    return created
