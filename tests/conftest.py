"""
Pytest configuration and shared fixtures for bookmark importer tests.

This module provides temporary-file writers for Chrome bookmark exports and
Arc sidebar files, plus builders for the Arc item shapes used across tests.
"""

import json
import shutil
import tempfile
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, Generator, List, Optional

import pytest

from bookmark_importer.config.pydantic_config import ENV_ARC_SIDEBAR, ENV_LOG_LEVEL

# ============================================================================
# Pytest Configuration
# ============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep developer environment overrides out of the tests."""
    monkeypatch.delenv(ENV_ARC_SIDEBAR, raising=False)
    monkeypatch.delenv(ENV_LOG_LEVEL, raising=False)


# ============================================================================
# Temporary Directory and File Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp(prefix="bookmark_test_"))
    try:
        yield temp_path
    finally:
        if temp_path.exists():
            shutil.rmtree(temp_path)


# ============================================================================
# Chrome Fixtures
# ============================================================================


CHROME_HEADER = """<!DOCTYPE NETSCAPE-Bookmark-file-1>
<META HTTP-EQUIV="Content-Type" CONTENT="text/html; charset=UTF-8">
<TITLE>Bookmarks</TITLE>
<H1>Bookmarks</H1>
<DL><p>
"""

CHROME_FOOTER = """
</DL><p>
"""


def chrome_document(body: str) -> str:
    """Wrap bookmark lines in the header and root list of a Chrome export."""
    return CHROME_HEADER + body + CHROME_FOOTER


@pytest.fixture
def write_chrome_html(temp_dir: Path):
    """Return a function that writes a Chrome export and returns its path."""

    def _write(body: str, name: str = "bookmarks.html", raw: bool = False) -> Path:
        path = temp_dir / name
        content = body if raw else chrome_document(body)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_chrome_body() -> str:
    """A bookmarks bar with a nested folder plus an Other bookmarks folder."""
    return """    <DT><H3 ADD_DATE="1715434444" PERSONAL_TOOLBAR_FOLDER="true">Bookmarks bar</H3>
    <DL><p>
        <DT><H3 ADD_DATE="1717175257">Machine Learning</H3>
        <DL><p>
            <DT><A HREF="https://example.com/" ADD_DATE="1717175221">Example Site</A>
            <DT><A HREF="https://test.com/" ADD_DATE="1717175261">Test Site</A>
        </DL><p>
        <DT><A HREF="https://direct.com/" ADD_DATE="1717175273">Direct Bookmark</A>
    </DL><p>
    <DT><H3 ADD_DATE="1634868593">Other bookmarks</H3>
    <DL><p>
        <DT><A HREF="https://python.org/" ADD_DATE="1634868593">Python</A>
    </DL><p>"""


# ============================================================================
# Arc Fixtures
# ============================================================================


def arc_space(
    space_id: str = "space1",
    title: Optional[str] = "My Space",
    container_ids: Optional[List[Any]] = None,
) -> Dict[str, Any]:
    return {
        "id": space_id,
        "title": title,
        "containerIDs": container_ids if container_ids is not None else ["pinned", "container1"],
    }


def arc_link(
    item_id: str,
    parent_id: Optional[str] = "container1",
    saved_title: Optional[str] = "Link",
    saved_url: Optional[str] = "https://example.com",
) -> Dict[str, Any]:
    return {
        "id": item_id,
        "title": saved_title,
        "parentID": parent_id,
        "childrenIds": [],
        "data": {
            "tab": {
                "savedTitle": saved_title,
                "savedURL": saved_url,
                "timeLastActiveAt": 1234567890.0,
            }
        },
    }


def arc_folder(
    item_id: str,
    parent_id: Optional[str] = "container1",
    title: Optional[str] = "Folder",
    children_ids: Optional[List[str]] = None,
) -> Dict[str, Any]:
    return {
        "id": item_id,
        "title": title,
        "parentID": parent_id,
        "childrenIds": children_ids or [],
        "data": None,
    }


def arc_document(spaces: List[Any], items: List[Any]) -> Dict[str, Any]:
    """Sidebar document with an empty global container and one data container."""
    return {
        "version": 1,
        "sidebar": {
            "containers": [
                {"global": {}},
                {"spaces": spaces, "items": items, "topAppsContainerIDs": []},
            ]
        },
    }


@pytest.fixture
def arc():
    """Builders for Arc spaces, items and documents."""
    return SimpleNamespace(
        space=arc_space, link=arc_link, folder=arc_folder, document=arc_document
    )


@pytest.fixture
def write_arc_json(temp_dir: Path):
    """Return a function that writes an Arc sidebar file and returns its path."""

    def _write(
        spaces: List[Any],
        items: List[Any],
        name: str = "StorableSidebar.json",
    ) -> Path:
        path = temp_dir / name
        path.write_text(json.dumps(arc_document(spaces, items)), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_raw_file(temp_dir: Path):
    """Return a function that writes arbitrary text and returns its path."""

    def _write(content: str, name: str) -> Path:
        path = temp_dir / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
