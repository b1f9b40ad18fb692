from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from domain.value_objects.stored_blob import StoredBlob


class BlobStore(Protocol):
    """Key-value blob storage with content-type and etag metadata.

    Implementations raise ``StorageOperationError`` when the backend fails.
    """

    async def get(self, key: str) -> StoredBlob | None:
        """Return the blob stored under ``key``, or None if there is none."""
        ...

    async def put(
        self,
        key: str,
        data: bytes,
        *,
        content_type: str | None = None,
    ) -> StoredBlob: ...

    async def delete(self, key: str) -> None:
        """Remove ``key``. Deleting a missing key is not an error."""
        ...
