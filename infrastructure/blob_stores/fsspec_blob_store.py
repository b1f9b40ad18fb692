from __future__ import annotations

import asyncio
import contextlib
import hashlib
import json
import posixpath
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any

import fsspec
import structlog

from application.ports.blob_store import BlobStore
from domain.exceptions import StorageOperationError
from domain.value_objects.stored_blob import StoredBlob

if TYPE_CHECKING:
    from collections.abc import Callable

logger = structlog.get_logger()


# Errors raised when a path component names a file where a directory is
# expected (or the reverse). For reads and deletes that means "no blob here".
_PATH_SHAPE_ERRORS = (FileNotFoundError, IsADirectoryError, NotADirectoryError)


class FsspecBlobStore(BlobStore):
    """Blob store over any fsspec filesystem (local, memory, s3, gcs, ...).

    Blob bytes live at ``{base_url}/{key}``. Plain filesystems have no place
    for HTTP metadata, so the content type and etag of each blob are kept
    as a small JSON record at ``{metadata_url}/{sha256(key)}.json``. The
    metadata tree is flat, so no key can shadow another key's record.

    On directory-tree backends such as ``file://`` a key cannot be both
    a blob and a prefix of other keys: with ``a`` stored, writing ``a/b``
    fails with ``StorageOperationError`` and ``a`` is left untouched.
    Object stores (s3, gcs) have no such restriction.
    """

    def __init__(
        self,
        base_url: str,
        *,
        metadata_url: str | None = None,
        storage_options: dict | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.metadata_url = (metadata_url or f"{self.base_url}-meta").rstrip("/")
        self.storage_options = storage_options or {}

        self._fs, self._root = fsspec.core.url_to_fs(self.base_url, **self.storage_options)
        self._meta_fs, self._meta_root = fsspec.core.url_to_fs(
            self.metadata_url,
            **self.storage_options,
        )

    def _path(self, key: str) -> str:
        if ".." in PurePosixPath(key).parts:
            msg = f"Key escapes the storage root: {key!r}"
            raise StorageOperationError(msg)
        return f"{self._root}/{key}"

    def _meta_path(self, key: str) -> str:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return f"{self._meta_root}/{digest}.json"

    async def _run(self, func: Callable[..., Any], *args: Any) -> Any:  # noqa: ANN401
        try:
            return await asyncio.to_thread(func, *args)
        except StorageOperationError:
            raise
        except Exception as e:
            msg = f"{func.__name__.lstrip('_')} failed: {e!s}"
            raise StorageOperationError(msg) from e

    async def get(self, key: str) -> StoredBlob | None:
        return await self._run(self._get_sync, key)

    async def put(
        self,
        key: str,
        data: bytes,
        *,
        content_type: str | None = None,
    ) -> StoredBlob:
        return await self._run(self._put_sync, key, data, content_type)

    async def delete(self, key: str) -> None:
        await self._run(self._delete_sync, key)

    def _get_sync(self, key: str) -> StoredBlob | None:
        try:
            content = self._fs.cat_file(self._path(key))
        except _PATH_SHAPE_ERRORS:
            return None

        metadata = self._read_metadata(key)
        return StoredBlob(
            key=key,
            content=content,
            content_type=metadata.get("content_type"),
            etag=metadata.get("etag") or hashlib.sha256(content).hexdigest(),
        )

    def _put_sync(self, key: str, data: bytes, content_type: str | None) -> StoredBlob:
        path = self._path(key)
        etag = hashlib.sha256(data).hexdigest()

        # Blob first: if it cannot be written, the old record stays valid.
        self._fs.makedirs(posixpath.dirname(path), exist_ok=True)
        self._fs.pipe_file(path, data)

        self._meta_fs.makedirs(self._meta_root, exist_ok=True)
        self._meta_fs.pipe_file(
            self._meta_path(key),
            json.dumps({"key": key, "content_type": content_type, "etag": etag}).encode("utf-8"),
        )

        return StoredBlob(key=key, content=data, content_type=content_type, etag=etag)

    def _delete_sync(self, key: str) -> None:
        path = self._path(key)
        # A prefix of other keys is a directory here, not a blob.
        if self._fs.isfile(path):
            with contextlib.suppress(FileNotFoundError):
                self._fs.rm_file(path)
        with contextlib.suppress(*_PATH_SHAPE_ERRORS):
            self._meta_fs.rm_file(self._meta_path(key))

    def _read_metadata(self, key: str) -> dict:
        try:
            raw = self._meta_fs.cat_file(self._meta_path(key))
        except _PATH_SHAPE_ERRORS:
            # Written by something other than this store; serve without a content type.
            return {}
        return json.loads(raw)
