from .archive_entry import ArchiveEntry
from .mime_type import MimeType
from .mirror_source import MirrorSource
from .stored_blob import StoredBlob

__all__ = [
    "ArchiveEntry",
    "MimeType",
    "MirrorSource",
    "StoredBlob",
]
