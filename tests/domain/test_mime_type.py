"""Tests for filename content-type classification."""

from __future__ import annotations

import pytest

from domain.value_objects.mime_type import EXTENSION_MIME_TYPES, MimeType


class TestMimeTypeFromFilename:
    @pytest.mark.parametrize(
        ("filename", "expected"),
        [
            ("a.txt", "text/plain"),
            ("a.PNG", "image/png"),
            ("noext", "text/plain"),
            ("a.b.json", "application/json"),
            ("index.html", "text/html"),
            ("style.css", "text/css"),
            ("app.js", "application/javascript"),
            ("photo.jpg", "image/jpeg"),
            ("photo.JPEG", "image/jpeg"),
            ("anim.gif", "image/gif"),
            ("paper.pdf", "application/pdf"),
            ("icon.svg", "image/svg+xml"),
            ("install.sh", "application/x-sh"),
            ("hypr.conf", "text/plain"),
            ("theme.rasi", "text/rasi"),
            ("Main.qml", "text/x-qml"),
            ("data.csv", "text/csv"),
            ("feed.xml", "application/xml"),
        ],
    )
    def test_known_extensions(self, filename: str, expected: str) -> None:
        assert MimeType.from_filename(filename) == expected

    @pytest.mark.parametrize("filename", ["archive.tar.gz", "Makefile", ".bashrc", "x.", "bin.exe"])
    def test_unknown_or_missing_extension_is_plain_text(self, filename: str) -> None:
        assert MimeType.from_filename(filename) is MimeType.TEXT

    def test_extensionless_name_matching_table_key_is_plain_text(self) -> None:
        """A bare name like 'json' has no extension at all."""
        assert MimeType.from_filename("json") is MimeType.TEXT

    def test_directory_dots_do_not_leak_into_extension(self) -> None:
        assert MimeType.from_filename("config.d/picom") is MimeType.TEXT
        assert MimeType.from_filename("config.d/picom.conf") is MimeType.TEXT

    def test_result_is_a_plain_string(self) -> None:
        assert MimeType.from_filename("a.png").value == "image/png"
        assert isinstance(MimeType.from_filename("a.png"), str)


def test_table_values_are_all_mime_types() -> None:
    assert all(isinstance(value, MimeType) for value in EXTENSION_MIME_TYPES.values())
    assert all(key == key.lower() for key in EXTENSION_MIME_TYPES)
