import structlog
from returns.result import Failure, Result, Success

from application.dtos.blob_dtos import BlobResponse, DeleteBlobResponse, PutBlobResponse
from application.dtos.errors import AppError
from application.ports.blob_store import BlobStore
from domain.exceptions import InfrastructureError

logger = structlog.get_logger()


class GetBlobUseCase:
    """Read a blob and the metadata needed to serve it over HTTP."""

    def __init__(self, blob_store: BlobStore) -> None:
        self.blob_store = blob_store

    async def execute(self, key: str) -> Result[BlobResponse, AppError]:
        try:
            blob = await self.blob_store.get(key)
        except InfrastructureError as e:
            logger.exception("blob_get_failed", key=key)
            return Failure(AppError("storage", f"Failed to read blob: {e!s}"))

        if blob is None:
            return Failure(AppError("not_found", "Object Not Found"))

        return Success(
            BlobResponse(
                key=blob.key,
                content=blob.content,
                content_type=blob.content_type,
                etag=blob.http_etag,
            ),
        )


class PutBlobUseCase:
    """Store a request body under a key.

    No content type is passed down, so the backend default applies.
    """

    def __init__(self, blob_store: BlobStore) -> None:
        self.blob_store = blob_store

    async def execute(self, key: str, data: bytes) -> Result[PutBlobResponse, AppError]:
        try:
            stored = await self.blob_store.put(key, data)
        except InfrastructureError as e:
            logger.exception("blob_put_failed", key=key)
            return Failure(AppError("storage", f"Failed to write blob: {e!s}"))

        logger.info("blob_put", key=key, size_bytes=stored.size_bytes)
        return Success(PutBlobResponse(key=key, size_bytes=stored.size_bytes))


class DeleteBlobUseCase:
    """Remove a blob. Succeeds whether or not the key existed."""

    def __init__(self, blob_store: BlobStore) -> None:
        self.blob_store = blob_store

    async def execute(self, key: str) -> Result[DeleteBlobResponse, AppError]:
        try:
            await self.blob_store.delete(key)
        except InfrastructureError as e:
            logger.exception("blob_delete_failed", key=key)
            return Failure(AppError("storage", f"Failed to delete blob: {e!s}"))

        logger.info("blob_deleted", key=key)
        return Success(DeleteBlobResponse(key=key))
