from __future__ import annotations

from lagom import Container

from application.ports.archive_fetcher import ArchiveFetcher
from application.ports.blob_store import BlobStore
from application.ports.mirror_scheduler import MirrorScheduler
from application.use_cases.blob_use_cases import (
    DeleteBlobUseCase,
    GetBlobUseCase,
    PutBlobUseCase,
)
from application.use_cases.mirror_use_cases import RefreshMirrorUseCase
from domain.services.request_authorizer import RequestAuthorizer
from domain.value_objects.mirror_source import MirrorSource
from infrastructure.blob_stores.fsspec_blob_store import FsspecBlobStore
from infrastructure.config import Settings
from infrastructure.http.httpx_archive_fetcher import HttpxArchiveFetcher
from infrastructure.temporal.orchestrator import TemporalMirrorScheduler


def create_container(settings: Settings) -> Container:
    container = Container()

    # Configuration values shared by the request handler and the refresh job
    container[Settings] = settings
    container[MirrorSource] = settings.mirror_source

    # Blob storage (fsspec)
    blob_store_instance = FsspecBlobStore(
        base_url=settings.blob_base_url,
        metadata_url=settings.blob_metadata_url,
        storage_options=settings.blob_storage_options,
    )
    container[BlobStore] = blob_store_instance

    # Archive download
    container[ArchiveFetcher] = lambda _: HttpxArchiveFetcher(
        timeout=settings.archive_fetch_timeout_seconds,
    )

    # Write authorization
    container[RequestAuthorizer] = RequestAuthorizer(
        secret=settings.auth_key_secret,
        header_name=settings.auth_header_name,
    )

    # Scheduler (Temporal)
    container[MirrorScheduler] = lambda _: TemporalMirrorScheduler(settings=settings)

    # Blob Use Cases
    container[GetBlobUseCase] = lambda c: GetBlobUseCase(blob_store=c[BlobStore])
    container[PutBlobUseCase] = lambda c: PutBlobUseCase(blob_store=c[BlobStore])
    container[DeleteBlobUseCase] = lambda c: DeleteBlobUseCase(blob_store=c[BlobStore])

    # Mirror Use Cases
    container[RefreshMirrorUseCase] = lambda c: RefreshMirrorUseCase(
        source=c[MirrorSource],
        archive_fetcher=c[ArchiveFetcher],
        blob_store=c[BlobStore],
    )

    return container
