"""Domain layer exports."""

from domain.exceptions import (
    ArchiveDecodeError,
    DomainError,
    InfrastructureError,
    RefreshFailedError,
    StorageOperationError,
    UpstreamFetchError,
)
from domain.value_objects import ArchiveEntry, MimeType, MirrorSource, StoredBlob

__all__ = [
    "ArchiveDecodeError",
    "ArchiveEntry",
    "DomainError",
    "InfrastructureError",
    "MimeType",
    "MirrorSource",
    "RefreshFailedError",
    "StorageOperationError",
    "StoredBlob",
    "UpstreamFetchError",
]
