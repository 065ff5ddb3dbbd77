"""Tests for vt_utils module."""

import hashlib

import pytest

from vt_utils import (
    file_report_url,
    format_detection,
    is_supported_algorithm,
    split_hash,
    strip_url_fragment,
    url_report_url,
    validate_hash,
)


class TestSplitHash:
    """Tests for split_hash function."""

    def test_tagged_hash(self):
        """Test algo:hexhash tokens."""
        assert split_hash("sha1:ABC") == ("sha1", "ABC")

    def test_tag_is_lowercased(self):
        """Test that algorithm tags compare case-insensitively."""
        assert split_hash("MD5:abc") == ("md5", "abc")

    def test_bare_hash_defaults_to_sha256(self):
        """Test untagged tokens."""
        assert split_hash("abc") == ("sha256", "abc")


class TestAlgorithms:
    """Tests for algorithm and digest validation."""

    @pytest.mark.parametrize("algorithm", ["md5", "sha1", "sha256", "SHA1"])
    def test_supported(self, algorithm):
        assert is_supported_algorithm(algorithm)

    @pytest.mark.parametrize("algorithm", ["sha512", "crc32", ""])
    def test_unsupported(self, algorithm):
        assert not is_supported_algorithm(algorithm)

    def test_validate_lengths(self):
        """Test digest length per algorithm."""
        assert validate_hash("a" * 32, "md5")
        assert validate_hash("a" * 40, "sha1")
        assert validate_hash("A" * 64)
        assert not validate_hash("a" * 63)
        assert not validate_hash("g" * 64)
        assert not validate_hash("a" * 128, "sha512")


class TestFormatting:
    """Tests for URL and report helpers."""

    def test_strip_rename_fragment(self):
        assert strip_url_fragment("https://x/a.exe#/setup.exe") == "https://x/a.exe"
        assert strip_url_fragment("https://x/a.exe") == "https://x/a.exe"

    def test_file_report_url(self):
        assert file_report_url("ABC") == "https://www.virustotal.com/#/file/abc/detection"

    def test_url_report_url(self):
        expected = hashlib.sha256(b"https://x/a").hexdigest()
        assert url_report_url("https://x/a").endswith(f"/url/{expected}/detection")

    def test_format_detection(self):
        assert format_detection(4, 70) == "4/70"
