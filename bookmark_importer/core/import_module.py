"""
Main import interface for Chrome and Arc bookmarks.

This module is the entry point consumers use: one call per browser, plus
``MultiFormatImporter`` for callers that hold a file path of unknown format
or want imports to run off the calling thread.
"""

import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from bookmark_importer.config.pydantic_config import ImporterConfig
from bookmark_importer.utils.error_handler import BookmarkImportError

from .arc_json_parser import ARC_SIDEBAR_FILENAME, ArcImportService
from .chrome_html_parser import ChromeImportService
from .data_models import ArcImportResult, ChromeImportResult, ImportOutcome, Node
from .filters import filter_nodes as _filter_nodes

FORMAT_CHROME_HTML = "chrome_html"
FORMAT_ARC_JSON = "arc_json"

CHROME_EXTENSIONS = (".html", ".htm")
ARC_EXTENSIONS = (".json",)


def _chrome_service(config: Optional[ImporterConfig]) -> ChromeImportService:
    config = config or ImporterConfig()
    return ChromeImportService(
        workspace_name=config.chrome.workspace_name,
        color_id=config.chrome.color_id,
    )


def _arc_service(config: Optional[ImporterConfig]) -> ArcImportService:
    config = config or ImporterConfig()
    return ArcImportService(
        first_color_id=config.arc.first_color_id,
        skip_empty_spaces=config.arc.skip_empty_spaces,
    )


def import_chrome_bookmarks(
    file_path: Union[str, Path], config: Optional[ImporterConfig] = None
) -> ImportOutcome[ChromeImportResult]:
    """
    Import a Chrome bookmarks HTML export.

    Args:
        file_path: Path to the exported HTML file
        config: Optional importer configuration

    Returns:
        ImportOutcome holding a ChromeImportResult or a ChromeImportError
    """
    return _chrome_service(config).import_from_chrome(file_path)


def import_arc_bookmarks(
    file_path: Union[str, Path, None] = None, config: Optional[ImporterConfig] = None
) -> ImportOutcome[ArcImportResult]:
    """
    Import an Arc StorableSidebar.json file.

    Args:
        file_path: Path to the sidebar file; falls back to the configured
            path, then to Arc's standard location
        config: Optional importer configuration

    Returns:
        ImportOutcome holding an ArcImportResult or an ArcImportError
    """
    if file_path is None and config is not None:
        file_path = config.arc.sidebar_path
    return _arc_service(config).import_from_arc(file_path)


def filter_nodes(nodes: List[Node], query: str) -> List[Node]:
    """Filter a forest by search query; a blank query returns ``nodes`` unchanged."""
    return _filter_nodes(nodes, query)


class MultiFormatImporter:
    """
    Imports bookmark files whose format is detected from the file itself.

    Imports can also be submitted to a worker thread; each submission
    returns a ``Future`` that resolves to the ``ImportOutcome``. The worker
    pool is created lazily and released by ``shutdown()`` or on leaving a
    ``with`` block.
    """

    def __init__(self, config: Optional[ImporterConfig] = None, max_workers: int = 2):
        """
        Initialize the importer.

        Args:
            config: Importer configuration; defaults apply when omitted
            max_workers: Worker threads used by the ``submit`` methods
        """
        self.config = config or ImporterConfig()
        self.max_workers = max_workers
        self.logger = logging.getLogger(__name__)
        self._executor: Optional[ThreadPoolExecutor] = None

    def __enter__(self) -> "MultiFormatImporter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()

    def detect_format(self, file_path: Union[str, Path]) -> Optional[str]:
        """
        Detect the bookmark format of a file.

        The extension decides first. Files with another extension are
        sniffed: a Netscape bookmark header or ``<DL>`` means Chrome HTML,
        a JSON object with a ``sidebar`` key means Arc.

        Args:
            file_path: Path to the file

        Returns:
            ``"chrome_html"``, ``"arc_json"`` or None when unrecognized
        """
        file_path = Path(file_path)
        if not file_path.is_file():
            return None

        suffix = file_path.suffix.lower()
        if suffix in CHROME_EXTENSIONS:
            return FORMAT_CHROME_HTML
        if suffix in ARC_EXTENSIONS or file_path.name == ARC_SIDEBAR_FILENAME:
            return FORMAT_ARC_JSON

        return self._sniff_format(file_path)

    def _sniff_format(self, file_path: Path) -> Optional[str]:
        try:
            content = file_path.read_text(encoding="utf-8", errors="ignore")
        except OSError as e:
            self.logger.warning(f"Could not read {file_path} for format detection: {e}")
            return None

        if ChromeImportService.looks_like_bookmark_html(content[:4096]):
            return FORMAT_CHROME_HTML

        if content.lstrip().startswith("{"):
            try:
                data = json.loads(content)
            except json.JSONDecodeError:
                return None
            if isinstance(data, dict) and "sidebar" in data:
                return FORMAT_ARC_JSON

        return None

    def import_chrome(self, file_path: Union[str, Path]) -> ImportOutcome[ChromeImportResult]:
        return import_chrome_bookmarks(file_path, self.config)

    def import_arc(
        self, file_path: Union[str, Path, None] = None
    ) -> ImportOutcome[ArcImportResult]:
        return import_arc_bookmarks(file_path, self.config)

    def import_file(self, file_path: Union[str, Path]) -> ImportOutcome:
        """
        Import a file with the importer matching its detected format.

        Args:
            file_path: Path to a Chrome export or an Arc sidebar file

        Returns:
            ImportOutcome from the matching importer. A missing path fails
            with file-not-found and an undetectable format with
            parsing-failed.
        """
        if not Path(file_path).exists():
            return ImportOutcome.failure(BookmarkImportError.file_not_found())

        file_format = self.detect_format(file_path)
        self.logger.info(f"Detected format {file_format} for {file_path}")

        if file_format == FORMAT_CHROME_HTML:
            return self.import_chrome(file_path)
        if file_format == FORMAT_ARC_JSON:
            return self.import_arc(file_path)

        self.logger.warning(f"Could not detect the bookmark format of {file_path}")
        return ImportOutcome.failure(
            BookmarkImportError.parsing_failed(
                f"Unsupported or unrecognized bookmark file: {file_path}"
            )
        )

    def get_file_info(self, file_path: Union[str, Path]) -> Dict[str, Any]:
        """
        Get information about a bookmark file without importing it.

        Returns:
            Dictionary with path, existence, size, detected format and
            whether the format is supported
        """
        file_path = Path(file_path)
        file_format = self.detect_format(file_path)

        info: Dict[str, Any] = {
            "path": str(file_path),
            "exists": file_path.exists(),
            "size_bytes": file_path.stat().st_size if file_path.is_file() else 0,
            "format": file_format,
            "is_supported": file_format is not None,
        }

        if file_format == FORMAT_CHROME_HTML:
            chrome_info = _chrome_service(self.config).get_file_info(file_path)
            info["estimated_bookmarks"] = chrome_info["estimated_bookmark_count"]

        return info

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="bookmark-import"
            )
        return self._executor

    def submit_chrome(self, file_path: Union[str, Path]) -> "Future[ImportOutcome[ChromeImportResult]]":
        """Run a Chrome import on a worker thread."""
        return self._get_executor().submit(self.import_chrome, file_path)

    def submit_arc(
        self, file_path: Union[str, Path, None] = None
    ) -> "Future[ImportOutcome[ArcImportResult]]":
        """Run an Arc import on a worker thread."""
        return self._get_executor().submit(self.import_arc, file_path)

    def submit(self, file_path: Union[str, Path]) -> "Future[ImportOutcome]":
        """Run ``import_file`` on a worker thread."""
        return self._get_executor().submit(self.import_file, file_path)

    def shutdown(self, wait: bool = True) -> None:
        """Release the worker threads."""
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None


__all__ = [
    "FORMAT_ARC_JSON",
    "FORMAT_CHROME_HTML",
    "MultiFormatImporter",
    "filter_nodes",
    "import_arc_bookmarks",
    "import_chrome_bookmarks",
]
