import asyncio

import structlog
from returns.result import Failure, Result, Success

from application.dtos.errors import AppError
from application.dtos.mirror_dtos import RefreshReport
from application.ports.archive_fetcher import ArchiveFetcher
from application.ports.blob_store import BlobStore
from domain.exceptions import ArchiveDecodeError, UpstreamFetchError
from domain.services.archive_extractor import extract_archive
from domain.value_objects.archive_entry import ArchiveEntry
from domain.value_objects.mirror_source import MirrorSource

logger = structlog.get_logger()


class RefreshMirrorUseCase:
    """Re-mirror the configured repository snapshot into blob storage.

    Every cycle downloads the full archive, unpacks it in memory and writes
    every file entry. Keys that disappeared from the archive are left in
    storage; there is no diffing and no cleanup.
    """

    def __init__(
        self,
        source: MirrorSource,
        archive_fetcher: ArchiveFetcher,
        blob_store: BlobStore,
    ) -> None:
        self.source = source
        self.archive_fetcher = archive_fetcher
        self.blob_store = blob_store

    async def execute(self) -> Result[RefreshReport, AppError]:
        """Fetch, extract and fan out writes for one refresh cycle.

        The archive is fully fetched and extracted before any write is
        issued. Writes then run concurrently and all of them are awaited,
        even when some fail, so one bad key never stops the others.
        Writes that succeeded are not rolled back.

        Returns:
            Result containing the cycle report, or an error whose category is
            'upstream', 'archive' or 'storage'

        """
        url = self.source.archive_url
        log = logger.bind(archive_url=url)

        try:
            data = await self.archive_fetcher.fetch(url)
        except UpstreamFetchError as e:
            log.error("mirror_fetch_failed", status_code=e.status_code, error=str(e))
            return Failure(AppError("upstream", str(e)))

        try:
            entries = extract_archive(data, self.source.archive_prefix)
        except ArchiveDecodeError as e:
            log.error("mirror_extract_failed", error=str(e))
            return Failure(AppError("archive", str(e)))

        log.info("mirror_archive_extracted", entries=len(entries), size_bytes=len(data))

        outcomes = await asyncio.gather(
            *(self._write_entry(entry) for entry in entries),
            return_exceptions=True,
        )

        report = RefreshReport(archive_url=url, entries_extracted=len(entries))
        for entry, outcome in zip(entries, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                log.error("mirror_write_failed", key=entry.name, error=str(outcome))
                report.failed_keys.append(entry.name)
            else:
                report.written_keys.append(entry.name)

        if not report.succeeded:
            log.error(
                "mirror_refresh_failed",
                written=len(report.written_keys),
                failed=len(report.failed_keys),
            )
            return Failure(
                AppError(
                    "storage",
                    f"Failed to write {len(report.failed_keys)} of {len(entries)} entries: "
                    + ", ".join(report.failed_keys),
                ),
            )

        log.info("mirror_refresh_completed", written=len(report.written_keys))
        return Success(report)

    async def _write_entry(self, entry: ArchiveEntry) -> None:
        await self.blob_store.put(entry.name, entry.content, content_type=entry.mime_type.value)
        logger.info("mirror_entry_saved", key=entry.name, mime_type=entry.mime_type.value)
