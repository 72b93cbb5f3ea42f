"""
Chrome HTML bookmark parser module.

This module converts Chrome's Netscape-format bookmark export into a
``Node`` forest. The export is not well-formed HTML, so instead of building
a DOM the parser scans it line by line, keeping an explicit stack of the
forest being built at each nesting depth.
"""

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from bookmark_importer.utils.error_handler import ChromeImportError
from bookmark_importer.utils.validation import decode_html_entities, is_importable_url

from .data_models import (
    ChromeImportResult,
    Folder,
    ImportOutcome,
    ImportWorkspace,
    Link,
    Node,
    UNTITLED_LINK,
    WorkspaceColorId,
)

CHROME_WORKSPACE_NAME = "Imported Bookmarks"


class ChromeHTMLParser:
    """
    Line scanner for the Netscape bookmark file format.

    Each line is matched against four case-insensitive patterns, first match
    wins: folder header, link, ``<DL>`` and ``</DL>``. A folder header
    records a pending name; the next ``<DL>`` opens a new level for its
    children and the matching ``</DL>`` closes it into a ``Folder``.
    Malformed nesting is tolerated: an unmatched ``</DL>`` is ignored.
    """

    FOLDER_PATTERN = re.compile(r"<DT><H3[^>]*>(.*?)</H3>", re.IGNORECASE)
    LINK_PATTERN = re.compile(r'<DT><A\s+HREF="([^"]*)"[^>]*>(.*?)</A>', re.IGNORECASE)
    DL_OPEN_PATTERN = re.compile(r"<DL>", re.IGNORECASE)
    DL_CLOSE_PATTERN = re.compile(r"</DL>", re.IGNORECASE)

    # Chrome's fixed top-level containers; their contents are spliced into the root
    TOP_LEVEL_FOLDER_NAMES = frozenset(
        ["Bookmarks bar", "Other bookmarks", "Mobile bookmarks", "Bookmarks Bar"]
    )

    def __init__(self):
        """Initialize the Chrome HTML parser."""
        self.logger = logging.getLogger(__name__)

    def parse(self, content: str) -> List[Node]:
        """
        Parse bookmark HTML into root-level nodes.

        Args:
            content: Full text of the exported file

        Returns:
            Root-level nodes in file order
        """
        stack: List[List[Node]] = [[]]
        folder_names: List[str] = []
        pending_folder = False

        for line in content.splitlines():
            trimmed = line.strip()

            folder_match = self.FOLDER_PATTERN.search(trimmed)
            if folder_match:
                folder_names.append(decode_html_entities(folder_match.group(1)))
                pending_folder = True
                continue

            link_match = self.LINK_PATTERN.search(trimmed)
            if link_match:
                link = self._build_link(link_match.group(1), link_match.group(2))
                if link is not None:
                    stack[-1].append(link)
                continue

            if self.DL_OPEN_PATTERN.search(trimmed):
                if pending_folder:
                    stack.append([])
                    pending_folder = False
                continue

            if self.DL_CLOSE_PATTERN.search(trimmed):
                self._close_level(stack, folder_names)
                continue

        return stack[0]

    def _build_link(self, url: str, raw_title: str) -> Optional[Link]:
        """Create a Link, or None when the URL cannot be imported."""
        if not is_importable_url(url):
            self.logger.debug(f"Skipping bookmark with unsupported URL: {url!r}")
            return None

        title = decode_html_entities(raw_title) or UNTITLED_LINK
        return Link(url=url, title=title)

    def _close_level(self, stack: List[List[Node]], folder_names: List[str]) -> None:
        """Pop one nesting level into its parent, flattening Chrome's root folders."""
        if len(stack) <= 1 or not folder_names:
            self.logger.debug("Ignoring unmatched </DL>")
            return

        children = stack.pop()
        folder_name = folder_names.pop()

        if len(stack) == 1 and folder_name in self.TOP_LEVEL_FOLDER_NAMES:
            stack[-1].extend(children)
        else:
            stack[-1].append(Folder(name=folder_name, children=children))


class ChromeImportService:
    """
    Imports a Chrome bookmark export into a single workspace.

    The service is stateless between calls; every call gets its own parser
    state. Failures are returned inside the ``ImportOutcome``, never raised.
    """

    NETSCAPE_MARKER = "NETSCAPE-Bookmark-file-1"
    _DL_TAG_PATTERN = re.compile(r"<DL>", re.IGNORECASE)

    def __init__(
        self,
        workspace_name: str = CHROME_WORKSPACE_NAME,
        color_id: WorkspaceColorId = WorkspaceColorId.EMBER,
    ):
        self.workspace_name = workspace_name
        self.color_id = color_id
        self.logger = logging.getLogger(__name__)

    def import_from_chrome(
        self, file_path: Union[str, Path]
    ) -> ImportOutcome[ChromeImportResult]:
        """
        Import bookmarks from a Chrome bookmarks HTML file.

        Args:
            file_path: Path to the exported Chrome bookmarks HTML file

        Returns:
            ImportOutcome holding a ChromeImportResult or a ChromeImportError
        """
        file_path = Path(file_path)
        self.logger.info(f"Starting Chrome import: {file_path}")

        try:
            result = self._import(file_path)
        except ChromeImportError as e:
            self.logger.warning(f"Chrome import failed: {e.message}")
            return ImportOutcome.failure(e)
        except Exception as e:
            self.logger.error(f"Error parsing Chrome HTML file {file_path}: {e}")
            return ImportOutcome.failure(ChromeImportError.parsing_failed(str(e)))

        self.logger.info(
            f"Chrome import completed: {result.links_imported} links, "
            f"{result.folders_imported} folders"
        )
        return ImportOutcome.success(result)

    def _import(self, file_path: Path) -> ChromeImportResult:
        if not file_path.exists():
            raise ChromeImportError.file_not_found()

        content = self._read_html_file(file_path)

        if not self.looks_like_bookmark_html(content):
            raise ChromeImportError.invalid_html()

        nodes = ChromeHTMLParser().parse(content)

        if not nodes:
            raise ChromeImportError.no_bookmarks_found()

        workspace = ImportWorkspace(
            name=self.workspace_name,
            color_id=self.color_id,
            nodes=nodes,
        )
        return ChromeImportResult.from_workspace(workspace)

    def _read_html_file(self, file_path: Path) -> str:
        """Read the export as UTF-8, tolerating a byte order mark."""
        try:
            return file_path.read_text(encoding="utf-8-sig")
        except UnicodeDecodeError as e:
            raise ChromeImportError.parsing_failed(f"File is not valid UTF-8: {e}")
        except OSError as e:
            raise ChromeImportError.parsing_failed(f"Error reading file: {e}")

    @classmethod
    def looks_like_bookmark_html(cls, content: str) -> bool:
        """A bookmark export carries the Netscape marker or at least one <DL>."""
        return cls.NETSCAPE_MARKER in content or bool(cls._DL_TAG_PATTERN.search(content))

    def validate_file(self, file_path: Union[str, Path]) -> bool:
        """
        Validate if a file looks like a Chrome HTML bookmark export.

        Args:
            file_path: Path to the file to validate

        Returns:
            True if file appears to be a Chrome bookmark export
        """
        file_path = Path(file_path)
        if not file_path.is_file():
            return False

        try:
            with open(file_path, "r", encoding="utf-8", errors="ignore") as f:
                header = f.read(4096)
        except OSError:
            return False

        return self.looks_like_bookmark_html(header)

    def get_file_info(self, file_path: Union[str, Path]) -> Dict[str, Any]:
        """
        Get information about a Chrome HTML bookmark file.

        Args:
            file_path: Path to the file

        Returns:
            Dictionary with file information
        """
        file_path = Path(file_path)

        info = {
            "path": str(file_path),
            "exists": file_path.exists(),
            "size_bytes": 0,
            "is_chrome_bookmarks": False,
            "estimated_bookmark_count": 0,
        }

        if not info["exists"]:
            return info

        info["size_bytes"] = file_path.stat().st_size
        info["is_chrome_bookmarks"] = self.validate_file(file_path)

        if info["is_chrome_bookmarks"]:
            content = file_path.read_text(encoding="utf-8", errors="ignore")
            info["estimated_bookmark_count"] = len(
                re.findall(r"<A\s+HREF=", content, re.IGNORECASE)
            )

        return info
