"""Tests for pagesync.paths."""

import pytest

from pagesync.errors import UnsupportedFileName, UnsupportedFolderKey
from pagesync.paths import (
    folder_key_from_reference,
    page_filepath,
    validate_page_name,
)


# -- folder_key_from_reference ---------------------------------------------

class TestFolderKeyFromReference:
    def test_bare_key(self):
        assert folder_key_from_reference("a") == "a"

    def test_uses_leaf_of_path(self):
        assert folder_key_from_reference("site/pages/b") == "b"

    def test_trailing_slash(self):
        assert folder_key_from_reference("/srv/site/c/") == "c"

    def test_windows_separators(self):
        assert folder_key_from_reference("C:\\site\\d") == "d"

    def test_strips_whitespace(self):
        assert folder_key_from_reference("  e ") == "e"

    def test_rejects_unknown_leaf(self):
        with pytest.raises(UnsupportedFolderKey, match="does not resolve"):
            folder_key_from_reference("site/a/nested")

    def test_rejects_uppercase(self):
        with pytest.raises(UnsupportedFolderKey):
            folder_key_from_reference("A")

    def test_rejects_empty(self):
        with pytest.raises(UnsupportedFolderKey):
            folder_key_from_reference("")

    def test_custom_domain(self):
        keys = ("docs", "blog")
        assert folder_key_from_reference("x/blog", keys) == "blog"
        with pytest.raises(UnsupportedFolderKey):
            folder_key_from_reference("a", keys)


# -- validate_page_name ----------------------------------------------------

class TestValidatePageName:
    def test_accepts_plain_name(self):
        assert validate_page_name(" apple.html ") == "apple.html"

    @pytest.mark.parametrize("name", ["../x.html", "a/b.html", "a\\b.html", "..", "."])
    def test_rejects_path_like_names(self, name):
        with pytest.raises(UnsupportedFileName):
            validate_page_name(name)

    def test_rejects_empty(self):
        with pytest.raises(UnsupportedFileName, match="Empty"):
            validate_page_name("   ")


# -- page_filepath ---------------------------------------------------------

class TestPageFilepath:
    def test_basic_mapping(self, site_root):
        result = page_filepath("a", "apple.html", site_root)
        assert result == site_root / "a" / "apple.html"

    def test_rejects_traversal(self, site_root):
        with pytest.raises(UnsupportedFileName):
            page_filepath("a", "../b/x.html", site_root)
