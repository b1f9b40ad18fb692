"""Domain service turning a zipped repository snapshot into storable entries."""

from __future__ import annotations

import io
import zipfile
import zlib

import structlog

from domain.exceptions import ArchiveDecodeError
from domain.value_objects.archive_entry import ArchiveEntry
from domain.value_objects.mime_type import MimeType

logger = structlog.get_logger()

# Errors zipfile surfaces for corrupt members (bad CRC, truncated data,
# unsupported compression or encryption).
_ENTRY_DECODE_ERRORS = (zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError, EOFError)


def strip_prefix(path: str, prefix: str) -> str:
    """Remove a leading ``"{prefix}/"`` from an in-archive path, if present."""
    return path.removeprefix(f"{prefix}/")


def extract_archive(data: bytes, prefix: str) -> list[ArchiveEntry]:
    """Extract every file entry of a zip archive held in memory.

    Directory markers are dropped. Entries keep the archive's enumeration
    order and are named by their path with the top-level ``prefix``
    directory removed.

    Args:
        data: Raw bytes of a zip archive
        prefix: Name of the archive's top-level directory, e.g. ``dots-main``

    Returns:
        The file entries, each tagged with the content type of its name

    Raises:
        ArchiveDecodeError: If the buffer is not a zip archive or an entry
            cannot be decompressed

    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as e:
        msg = f"Not a valid ZIP archive: {e!s}"
        raise ArchiveDecodeError(msg) from e

    entries: list[ArchiveEntry] = []
    with archive:
        for info in archive.infolist():
            if info.is_dir():
                continue

            try:
                content = archive.read(info)
            except _ENTRY_DECODE_ERRORS as e:
                msg = f"Failed to decode archive entry {info.filename}: {e!s}"
                raise ArchiveDecodeError(msg) from e

            name = strip_prefix(info.filename, prefix)
            mime_type = MimeType.from_filename(name)

            logger.info(
                "archive_entry_processed",
                name=name,
                size_bytes=len(content),
                mime_type=mime_type.value,
            )
            entries.append(
                ArchiveEntry(name=name, path=info.filename, content=content, mime_type=mime_type),
            )

    return entries
