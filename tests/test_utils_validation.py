"""
Unit tests for validation utilities.
"""

import pytest

from bookmark_importer.utils.error_handler import ValidationError
from bookmark_importer.utils.validation import (
    decode_html_entities,
    is_importable_url,
    is_valid_url_syntax,
    validate_config_file,
    validate_input_file,
    validate_search_query,
)


class TestDecodeHtmlEntities:
    """Test decode_html_entities."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Tom &amp; Jerry", "Tom & Jerry"),
            ("&lt;tag&gt;", "<tag>"),
            ("say &quot;hi&quot;", 'say "hi"'),
            ("it&#39;s", "it's"),
            ("plain text", "plain text"),
            ("", ""),
        ],
    )
    def test_known_entities(self, raw, expected):
        assert decode_html_entities(raw) == expected

    def test_single_pass(self):
        assert decode_html_entities("&amp;lt;") == "&lt;"
        assert decode_html_entities("&amp;amp;") == "&amp;"

    def test_unknown_entities_left_alone(self):
        assert decode_html_entities("&nbsp;&copy;") == "&nbsp;&copy;"


class TestUrlRules:
    """Test is_importable_url and is_valid_url_syntax."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com",
            "http://example.com/path?q=1#frag",
            "ftp://files.example.com/file.txt",
            "file:///Users/me/notes.html",
            "mailto:someone@example.com",
            "https://example.com:8443/",
        ],
    )
    def test_importable(self, url):
        assert is_importable_url(url)

    @pytest.mark.parametrize(
        "url",
        [
            None,
            "",
            "javascript:alert(1)",
            "JavaScript:void(0)",
            "chrome://settings",
            "CHROME://flags",
            "not a url",
            "example.com",
            "https://exa mple.com",
            "https://example.com:99999/",
            "https:",
        ],
    )
    def test_not_importable(self, url):
        assert not is_importable_url(url)

    def test_syntax_allows_rejected_schemes(self):
        # Scheme rejection is a separate rule from syntax
        assert is_valid_url_syntax("chrome://settings")


class TestValidateInputFile:
    """Test validate_input_file."""

    def test_none(self):
        assert validate_input_file(None) is None

    def test_existing_file(self, temp_dir):
        path = temp_dir / "bookmarks.html"
        path.write_text("x")
        assert validate_input_file(str(path)) == path

    def test_missing_file(self, temp_dir):
        with pytest.raises(ValidationError, match="does not exist"):
            validate_input_file(temp_dir / "missing.html")

    def test_directory(self, temp_dir):
        with pytest.raises(ValidationError, match="not a file"):
            validate_input_file(temp_dir)

    def test_extension_checked(self, temp_dir):
        path = temp_dir / "bookmarks.csv"
        path.write_text("x")
        with pytest.raises(ValidationError, match="must be one of"):
            validate_input_file(path, allowed_extensions=[".html", ".htm"])

    def test_extension_case_insensitive(self, temp_dir):
        path = temp_dir / "Bookmarks.HTML"
        path.write_text("x")
        assert validate_input_file(path, allowed_extensions=[".html"]) == path


class TestValidateConfigFile:
    """Test validate_config_file."""

    def test_none(self):
        assert validate_config_file(None) is None

    @pytest.mark.parametrize("name", ["config.toml", "config.json"])
    def test_supported(self, temp_dir, name):
        path = temp_dir / name
        path.write_text("")
        assert validate_config_file(path) == path

    def test_unsupported(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("")
        with pytest.raises(ValidationError):
            validate_config_file(path)


class TestValidateSearchQuery:
    """Test validate_search_query."""

    def test_none(self):
        assert validate_search_query(None) is None

    def test_blank_means_no_search(self):
        assert validate_search_query("   ") is None

    def test_trimmed(self):
        assert validate_search_query("  rust ") == "rust"
