"""
Input validation utilities for the bookmark importer.

This module holds the URL acceptance rule shared by both importers and the
workspace store, the HTML entity decoder used by the Chrome importer, and
validation functions for command-line arguments.
"""

import os
import re
from pathlib import Path
from typing import Iterable, Optional, Union
from urllib.parse import urlparse

from bookmark_importer.utils.error_handler import ValidationError

# Schemes a bookmark must never carry
REJECTED_URL_PREFIXES = ("javascript:", "chrome://")

_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
_ILLEGAL_URL_CHARACTERS = re.compile(r'[\s<>"\x00-\x1f\x7f]')

HTML_ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
}
_ENTITY_PATTERN = re.compile("|".join(re.escape(entity) for entity in HTML_ENTITIES))


def decode_html_entities(text: str) -> str:
    """
    Decode the five entities Chrome writes into bookmark exports.

    The replacement is a single left-to-right pass, so the output of one
    replacement is never decoded again: ``&amp;lt;`` becomes ``&lt;``, not
    ``<``.

    Args:
        text: Raw text captured from the HTML

    Returns:
        Decoded text
    """
    return _ENTITY_PATTERN.sub(lambda match: HTML_ENTITIES[match.group(0)], text)


def is_valid_url_syntax(url: str) -> bool:
    """Check that a URL has a scheme, no illegal characters and a parsable authority."""
    if not url or _ILLEGAL_URL_CHARACTERS.search(url):
        return False

    # Relative and scheme-less references are not bookmarks; an absolute URL is required
    if not _SCHEME_PATTERN.match(url):
        return False

    try:
        parsed = urlparse(url)
        # Accessing port raises ValueError for non-numeric or out-of-range ports
        parsed.port
    except ValueError:
        return False

    remainder = url[len(parsed.scheme) + 1 :]
    return bool(remainder)


def is_importable_url(url: Optional[str]) -> bool:
    """
    Decide whether a URL may become a bookmark link.

    A URL is importable when it is non-empty, does not use a rejected scheme
    (``javascript:``, ``chrome://``) and passes syntax validation.

    Args:
        url: Candidate URL, possibly None

    Returns:
        True if a Link may be built from this URL
    """
    if not url:
        return False

    if url.lower().startswith(REJECTED_URL_PREFIXES):
        return False

    return is_valid_url_syntax(url)


def validate_input_file(
    file_path: Union[str, Path, None],
    allowed_extensions: Optional[Iterable[str]] = None,
) -> Optional[Path]:
    """
    Validate that an input file exists and is readable.

    Args:
        file_path: Path to the input file, or None when not supplied
        allowed_extensions: Optional list of accepted suffixes

    Returns:
        Validated Path object, or None when no path was given

    Raises:
        ValidationError: If file doesn't exist or isn't readable
    """
    if file_path is None:
        return None

    path = Path(file_path).expanduser()

    if not path.exists():
        raise ValidationError(f"Input file does not exist: {file_path}")

    if not path.is_file():
        raise ValidationError(f"Input path is not a file: {file_path}")

    if not os.access(path, os.R_OK):
        raise ValidationError(f"Input file is not readable: {file_path}")

    if allowed_extensions is not None:
        allowed = [ext.lower() for ext in allowed_extensions]
        if path.suffix.lower() not in allowed:
            raise ValidationError(
                f"Input file must be one of {', '.join(allowed)}, got: {path.suffix or 'no extension'}"
            )

    return path


def validate_config_file(file_path: Union[str, Path, None]) -> Optional[Path]:
    """Validate an optional configuration file path (TOML or JSON)."""
    if file_path is None:
        return None
    return validate_input_file(file_path, allowed_extensions=[".toml", ".json"])


def validate_search_query(query: Optional[str]) -> Optional[str]:
    """Normalize a search query; whitespace-only queries mean no search."""
    if query is None:
        return None
    query = query.strip()
    return query or None
