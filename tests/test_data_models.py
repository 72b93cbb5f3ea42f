"""
Unit tests for data models module.

Tests the bookmark tree nodes, workspaces, counting helpers and the
ImportOutcome wrapper.
"""

import uuid

import pytest

from bookmark_importer.core.data_models import (
    ArcImportResult,
    ChromeImportResult,
    Folder,
    ImportOutcome,
    ImportWorkspace,
    Link,
    NodeCounts,
    Workspace,
    WorkspaceColorId,
    count_nodes,
    forest_to_dicts,
    iter_nodes,
)
from bookmark_importer.utils.error_handler import ChromeImportError


@pytest.fixture
def forest():
    """Two root links around a folder with one nested folder."""
    return [
        Link(url="https://a.com", title="A"),
        Folder(
            name="Outer",
            children=[
                Link(url="https://b.com", title="B"),
                Folder(name="Inner", children=[Link(url="https://c.com", title="C")]),
            ],
        ),
        Link(url="https://d.com", title="D"),
    ]


class TestNodes:
    """Test Link and Folder."""

    def test_link_defaults(self):
        link = Link(url="https://example.com")
        assert link.title == "Untitled"
        assert isinstance(link.id, uuid.UUID)
        assert link.favicon_path is None

    def test_link_empty_title_becomes_untitled(self):
        assert Link(url="https://example.com", title="").title == "Untitled"

    def test_folder_defaults(self):
        folder = Folder()
        assert folder.name == "Untitled Folder"
        assert folder.children == []
        assert folder.is_expanded is False

    def test_folder_empty_name(self):
        assert Folder(name="").name == "Untitled Folder"

    def test_ids_are_unique(self):
        assert Link(url="https://x.com").id != Link(url="https://x.com").id

    def test_folder_children_not_shared(self):
        first, second = Folder(), Folder()
        first.children.append(Link(url="https://x.com"))
        assert second.children == []

    def test_to_dict(self, forest):
        data = forest[1].to_dict()
        assert data["type"] == "folder"
        assert data["name"] == "Outer"
        assert data["children"][0] == {
            "type": "link",
            "id": str(forest[1].children[0].id),
            "title": "B",
            "url": "https://b.com",
            "favicon_path": None,
        }
        assert data["children"][1]["children"][0]["title"] == "C"

    def test_forest_to_dicts(self, forest):
        assert [entry["type"] for entry in forest_to_dicts(forest)] == ["link", "folder", "link"]


class TestCounting:
    """Test count_nodes and iter_nodes."""

    def test_count_nodes(self, forest):
        assert count_nodes(forest) == NodeCounts(links=4, folders=2)

    def test_count_empty(self):
        assert count_nodes([]) == NodeCounts()

    def test_node_counts_add(self):
        assert NodeCounts(1, 2) + NodeCounts(3, 4) == NodeCounts(4, 6)

    def test_iter_nodes_depth_first(self, forest):
        labels = [getattr(node, "title", None) or node.name for node in iter_nodes(forest)]
        assert labels == ["A", "Outer", "B", "Inner", "C", "D"]

    def test_count_deeply_nested(self):
        root = Folder(name="0")
        folder = root
        for level in range(1, 2000):
            child = Folder(name=str(level))
            folder.children.append(child)
            folder = child
        folder.children.append(Link(url="https://bottom.com"))

        assert count_nodes([root]) == NodeCounts(links=1, folders=2000)
        assert len(list(iter_nodes([root]))) == 2001


class TestWorkspaceColorId:
    """Test colour cycling."""

    def test_cycle_from_start(self):
        assert WorkspaceColorId.cycle(0) == WorkspaceColorId.EMBER
        assert WorkspaceColorId.cycle(1) == WorkspaceColorId.RUBY
        assert WorkspaceColorId.cycle(9) == WorkspaceColorId.EMBER

    def test_cycle_with_offset(self):
        assert WorkspaceColorId.cycle(0, WorkspaceColorId.OCEAN) == WorkspaceColorId.OCEAN
        assert WorkspaceColorId.cycle(3, WorkspaceColorId.OCEAN) == WorkspaceColorId.EMBER

    def test_display_name(self):
        assert WorkspaceColorId.SUNFLOWER.display_name == "Sunflower"

    def test_nine_colours(self):
        assert [color.value for color in WorkspaceColorId] == [
            "ember",
            "ruby",
            "coral",
            "tangerine",
            "sunflower",
            "moss",
            "ocean",
            "lavender",
            "graphite",
        ]


class TestWorkspaces:
    """Test workspace containers and results."""

    def test_import_workspace_empty_name(self):
        assert ImportWorkspace(name="", color_id=WorkspaceColorId.EMBER).name == "Untitled"

    def test_import_workspace_to_dict(self, forest):
        workspace = ImportWorkspace("Mine", WorkspaceColorId.MOSS, forest, browser_profile="Work")
        data = workspace.to_dict()
        assert data["name"] == "Mine"
        assert data["color_id"] == "moss"
        assert data["browser_profile"] == "Work"
        assert len(data["nodes"]) == 3

    def test_workspace_has_id(self):
        workspace = Workspace(name="W", color_id=WorkspaceColorId.RUBY)
        assert isinstance(workspace.id, uuid.UUID)
        assert workspace.nodes == []

    def test_chrome_result_counts(self, forest):
        result = ChromeImportResult.from_workspace(
            ImportWorkspace("Chrome", WorkspaceColorId.EMBER, forest)
        )
        assert (result.links_imported, result.folders_imported) == (4, 2)

    def test_arc_result_counts(self, forest):
        workspaces = [
            ImportWorkspace("One", WorkspaceColorId.EMBER, forest),
            ImportWorkspace("Two", WorkspaceColorId.RUBY, [Link(url="https://e.com")]),
        ]
        result = ArcImportResult.from_workspaces(workspaces)
        assert result.workspaces_created == 2
        assert (result.links_imported, result.folders_imported) == (5, 2)


class TestImportOutcome:
    """Test the success/failure wrapper."""

    def test_success(self):
        outcome = ImportOutcome.success(42)
        assert outcome.succeeded
        assert not outcome.failed
        assert outcome.unwrap() == 42

    def test_failure(self):
        error = ChromeImportError.invalid_html()
        outcome = ImportOutcome.failure(error)
        assert outcome.failed
        assert outcome.error is error
        with pytest.raises(ChromeImportError):
            outcome.unwrap()

    def test_requires_exactly_one(self):
        with pytest.raises(ValueError):
            ImportOutcome()
        with pytest.raises(ValueError):
            ImportOutcome(value=1, error=ChromeImportError.invalid_html())
