"""
Tests for the high-level import interface and MultiFormatImporter.
"""

from concurrent.futures import Future

import pytest

import bookmark_importer
from bookmark_importer.config.pydantic_config import ImporterConfig
from bookmark_importer.core.data_models import (
    ArcImportResult,
    ChromeImportResult,
    WorkspaceColorId,
)
from bookmark_importer.core.import_module import (
    FORMAT_ARC_JSON,
    FORMAT_CHROME_HTML,
    MultiFormatImporter,
    filter_nodes,
    import_arc_bookmarks,
    import_chrome_bookmarks,
)
from bookmark_importer.utils.error_handler import BookmarkImportError, ImportErrorKind


CHROME_BODY = """<DT><H3>Bookmarks bar</H3>
<DL><p>
<DT><A HREF="https://example.com">Example</A>
<DT><H3>Dev</H3>
<DL><p>
<DT><A HREF="https://python.org">Python</A>
</DL><p>
</DL><p>"""


@pytest.fixture
def chrome_file(write_chrome_html):
    return write_chrome_html(CHROME_BODY)


@pytest.fixture
def arc_file(arc, write_arc_json):
    return write_arc_json(
        [arc.space(title="Personal")],
        [arc.link("l1", saved_title="Arc Link", saved_url="https://arc.net")],
    )


class TestConvenienceFunctions:
    """Test import_chrome_bookmarks, import_arc_bookmarks and filter_nodes."""

    def test_import_chrome_bookmarks(self, chrome_file):
        outcome = import_chrome_bookmarks(chrome_file)
        assert isinstance(outcome.value, ChromeImportResult)
        assert outcome.value.links_imported == 2

    def test_import_chrome_uses_config(self, chrome_file):
        config = ImporterConfig(chrome={"workspace_name": "From Config", "color_id": "lavender"})
        workspace = import_chrome_bookmarks(chrome_file, config).value.workspace
        assert workspace.name == "From Config"
        assert workspace.color_id == WorkspaceColorId.LAVENDER

    def test_import_arc_bookmarks(self, arc_file):
        outcome = import_arc_bookmarks(arc_file)
        assert isinstance(outcome.value, ArcImportResult)
        assert outcome.value.workspaces[0].name == "Personal"

    def test_import_arc_uses_configured_path(self, arc_file):
        config = ImporterConfig(arc={"sidebar_path": str(arc_file)})
        outcome = import_arc_bookmarks(config=config)
        assert outcome.value.links_imported == 1

    def test_import_arc_configured_colour(self, arc_file):
        config = ImporterConfig(arc={"first_color_id": "coral"})
        outcome = import_arc_bookmarks(arc_file, config)
        assert outcome.value.workspaces[0].color_id == WorkspaceColorId.CORAL

    def test_filter_nodes(self, chrome_file):
        nodes = import_chrome_bookmarks(chrome_file).value.workspace.nodes
        assert filter_nodes(nodes, "") is nodes
        result = filter_nodes(nodes, "python")
        assert result[0].name == "Dev"

    def test_package_exports(self):
        assert bookmark_importer.import_chrome_bookmarks is import_chrome_bookmarks
        assert bookmark_importer.import_arc_bookmarks is import_arc_bookmarks
        assert bookmark_importer.filter_nodes is filter_nodes


class TestFormatDetection:
    """Test MultiFormatImporter.detect_format."""

    def setup_method(self):
        """Set up test fixtures."""
        self.importer = MultiFormatImporter()

    def teardown_method(self):
        self.importer.shutdown()

    def test_by_extension(self, chrome_file, arc_file):
        assert self.importer.detect_format(chrome_file) == FORMAT_CHROME_HTML
        assert self.importer.detect_format(arc_file) == FORMAT_ARC_JSON

    def test_sniff_chrome_content(self, write_chrome_html):
        path = write_chrome_html(CHROME_BODY, name="bookmarks.export")
        assert self.importer.detect_format(path) == FORMAT_CHROME_HTML

    def test_sniff_arc_content(self, write_arc_json):
        path = write_arc_json([], [], name="sidebar.backup")
        assert self.importer.detect_format(path) == FORMAT_ARC_JSON

    def test_unrecognized(self, write_raw_file, temp_dir):
        assert self.importer.detect_format(write_raw_file("hello", "notes.txt")) is None
        assert self.importer.detect_format(write_raw_file('{"a": 1}', "data.cfg")) is None
        assert self.importer.detect_format(temp_dir / "missing.html") is None


class TestMultiFormatImporter:
    """Test dispatching, file info and worker-thread submission."""

    def test_import_file_dispatches(self, chrome_file, arc_file):
        with MultiFormatImporter() as importer:
            assert isinstance(importer.import_file(chrome_file).value, ChromeImportResult)
            assert isinstance(importer.import_file(arc_file).value, ArcImportResult)

    def test_import_file_missing(self, temp_dir):
        with MultiFormatImporter() as importer:
            outcome = importer.import_file(temp_dir / "gone.html")
        assert outcome.error == BookmarkImportError.file_not_found()

    def test_import_file_unrecognized(self, write_raw_file):
        path = write_raw_file("hello", "notes.txt")
        with MultiFormatImporter() as importer:
            outcome = importer.import_file(path)

        assert outcome.failed
        assert outcome.error.kind == ImportErrorKind.PARSING_FAILED
        assert "Unsupported or unrecognized bookmark file" in outcome.error.message

    def test_submit_unrecognized_resolves_to_failure(self, write_raw_file):
        path = write_raw_file("hello", "notes.txt")
        with MultiFormatImporter() as importer:
            outcome = importer.submit(path).result(timeout=10)
        assert outcome.error.kind == ImportErrorKind.PARSING_FAILED

    def test_get_file_info_chrome(self, chrome_file):
        info = MultiFormatImporter().get_file_info(chrome_file)
        assert info["format"] == FORMAT_CHROME_HTML
        assert info["is_supported"] is True
        assert info["estimated_bookmarks"] == 2
        assert info["size_bytes"] > 0

    def test_get_file_info_missing(self, temp_dir):
        info = MultiFormatImporter().get_file_info(temp_dir / "missing.json")
        assert info["exists"] is False
        assert info["is_supported"] is False

    def test_submit_chrome(self, chrome_file):
        with MultiFormatImporter() as importer:
            future = importer.submit_chrome(chrome_file)
            assert isinstance(future, Future)
            outcome = future.result(timeout=10)
        assert outcome.value.links_imported == 2

    def test_submit_arc(self, arc_file):
        with MultiFormatImporter() as importer:
            outcome = importer.submit_arc(arc_file).result(timeout=10)
        assert outcome.value.workspaces_created == 1

    def test_submit_failure_is_an_outcome(self, temp_dir):
        with MultiFormatImporter() as importer:
            outcome = importer.submit_chrome(temp_dir / "missing.html").result(timeout=10)
        assert outcome.error.kind == ImportErrorKind.FILE_NOT_FOUND

    def test_submit_detects_format(self, chrome_file, arc_file):
        with MultiFormatImporter() as importer:
            futures = [importer.submit(chrome_file), importer.submit(arc_file)]
            results = [future.result(timeout=10).value for future in futures]
        assert isinstance(results[0], ChromeImportResult)
        assert isinstance(results[1], ArcImportResult)

    def test_shutdown_is_idempotent(self, chrome_file):
        importer = MultiFormatImporter()
        importer.submit_chrome(chrome_file).result(timeout=10)
        importer.shutdown()
        importer.shutdown()
        # A new pool is created on demand after shutdown
        assert importer.submit_chrome(chrome_file).result(timeout=10).succeeded
        importer.shutdown()
