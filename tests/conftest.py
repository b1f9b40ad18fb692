"""Shared test fixtures and configuration."""

from __future__ import annotations

import io
import zipfile

import pytest

from domain.services.request_authorizer import RequestAuthorizer
from domain.value_objects.mirror_source import MirrorSource

AUTH_SECRET = "s3cret"


def make_zip(entries: dict[str, bytes | None], compression: int = zipfile.ZIP_DEFLATED) -> bytes:
    """Build a zip archive in memory. A ``None`` value marks a directory entry."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=compression) as archive:
        for name, content in entries.items():
            if content is None:
                archive.writestr(zipfile.ZipInfo(name.rstrip("/") + "/"), b"")
            else:
                archive.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def mirror_source() -> MirrorSource:
    """Return the mirror configuration used across tests."""
    return MirrorSource(user="acme", repo="dots", branch="main")


@pytest.fixture
def authorizer() -> RequestAuthorizer:
    return RequestAuthorizer(secret=AUTH_SECRET)


@pytest.fixture
def snapshot_zip() -> bytes:
    """A branch snapshot laid out the way the archive host serves it."""
    return make_zip(
        {
            "dots-main/": None,
            "dots-main/README.txt": b"dotfiles\n",
            "dots-main/install.sh": b"#!/bin/bash\necho hi\n",
            "dots-main/config/": None,
            "dots-main/config/rofi/theme.rasi": b"* { bg: #000; }\n",
            "dots-main/assets/logo.PNG": b"\x89PNG\r\n\x1a\n",
        },
    )
