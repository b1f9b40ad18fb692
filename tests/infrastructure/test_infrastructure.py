"""Tests for infrastructure components."""

from __future__ import annotations

import hashlib
import logging
import logging.handlers
from datetime import timedelta
from uuid import uuid4

import fsspec
import httpx
import pytest
import structlog
from returns.result import Failure, Success
from temporalio.client import ScheduleAlreadyRunningError, ScheduleOverlapPolicy

from application.dtos.errors import AppError
from application.dtos.mirror_dtos import RefreshReport
from domain.exceptions import RefreshFailedError, StorageOperationError, UpstreamFetchError
from infrastructure.blob_stores.fsspec_blob_store import FsspecBlobStore
from infrastructure.config import Settings
from infrastructure.http.httpx_archive_fetcher import HttpxArchiveFetcher
from infrastructure.logging import INTERCEPTED_LOGGERS, setup_logging
from infrastructure.temporal.activities.mirror_activities import create_refresh_mirror_activity
from infrastructure.temporal.orchestrator import TemporalMirrorScheduler

ARCHIVE_URL = "https://github.com/acme/dots/archive/refs/heads/main.zip"


@pytest.fixture
def blob_store() -> FsspecBlobStore:
    return FsspecBlobStore(f"memory://blobs-{uuid4().hex}")


class TestFsspecBlobStore:
    @pytest.mark.asyncio
    async def test_put_then_get_round_trips_content_and_metadata(
        self,
        blob_store: FsspecBlobStore,
    ) -> None:
        stored = await blob_store.put("config/theme.rasi", b"* {}", content_type="text/rasi")
        fetched = await blob_store.get("config/theme.rasi")

        assert fetched is not None
        assert fetched.content == b"* {}"
        assert fetched.content_type == "text/rasi"
        assert fetched.etag == stored.etag == hashlib.sha256(b"* {}").hexdigest()

    @pytest.mark.asyncio
    async def test_put_without_content_type(self, blob_store: FsspecBlobStore) -> None:
        await blob_store.put("a.bin", b"\x00\x01")

        fetched = await blob_store.get("a.bin")

        assert fetched is not None
        assert fetched.content_type is None

    @pytest.mark.asyncio
    async def test_get_missing_key_returns_none(self, blob_store: FsspecBlobStore) -> None:
        assert await blob_store.get("missing.txt") is None

    @pytest.mark.asyncio
    async def test_get_directory_returns_none(self, blob_store: FsspecBlobStore) -> None:
        await blob_store.put("dir/b.png", b"x")

        assert await blob_store.get("dir") is None

    @pytest.mark.asyncio
    async def test_delete_removes_blob(self, blob_store: FsspecBlobStore) -> None:
        await blob_store.put("a.txt", b"x", content_type="text/plain")

        await blob_store.delete("a.txt")

        assert await blob_store.get("a.txt") is None

    @pytest.mark.asyncio
    async def test_delete_missing_key_is_noop(self, blob_store: FsspecBlobStore) -> None:
        await blob_store.delete("never-existed.txt")

    @pytest.mark.asyncio
    async def test_blob_without_metadata_record(self, blob_store: FsspecBlobStore) -> None:
        fs = fsspec.filesystem("memory")
        fs.pipe_file(f"{blob_store._root}/external.txt", b"dropped in")

        fetched = await blob_store.get("external.txt")

        assert fetched is not None
        assert fetched.content_type is None
        assert fetched.etag == hashlib.sha256(b"dropped in").hexdigest()

    @pytest.mark.asyncio
    async def test_metadata_defaults_to_sibling_location(self) -> None:
        base = f"memory://blobs-{uuid4().hex}"
        store = FsspecBlobStore(base)

        await store.put("a.txt", b"x", content_type="text/plain")

        fs = fsspec.filesystem("memory")
        digest = hashlib.sha256(b"a.txt").hexdigest()
        assert fs.exists(f"/{base.removeprefix('memory://')}-meta/{digest}.json")

    @pytest.mark.asyncio
    async def test_key_escaping_root_is_rejected(self, blob_store: FsspecBlobStore) -> None:
        with pytest.raises(StorageOperationError):
            await blob_store.put("../outside.txt", b"x")

    @pytest.mark.asyncio
    async def test_local_filesystem_backend(self, tmp_path) -> None:
        store = FsspecBlobStore(f"file://{tmp_path / 'blobs'}")

        await store.put("nested/dir/file.json", b"{}", content_type="application/json")
        fetched = await store.get("nested/dir/file.json")

        assert fetched is not None
        assert fetched.content == b"{}"
        assert (tmp_path / "blobs" / "nested" / "dir" / "file.json").read_bytes() == b"{}"
        digest = hashlib.sha256(b"nested/dir/file.json").hexdigest()
        assert (tmp_path / "blobs-meta" / f"{digest}.json").exists()


@pytest.fixture
def local_store(tmp_path) -> FsspecBlobStore:
    return FsspecBlobStore(f"file://{tmp_path / 'blobs'}")


class TestLocalFsspecBlobStore:
    """Keys that share path segments on a real directory tree."""

    @pytest.mark.asyncio
    async def test_delete_of_key_prefix_is_noop(self, local_store: FsspecBlobStore) -> None:
        await local_store.put("config/rofi/theme.rasi", b"x", content_type="text/rasi")

        await local_store.delete("config")

        fetched = await local_store.get("config/rofi/theme.rasi")
        assert fetched is not None
        assert fetched.content == b"x"

    @pytest.mark.asyncio
    async def test_delete_missing_key_is_noop(self, local_store: FsspecBlobStore) -> None:
        await local_store.delete("never-existed.txt")

    @pytest.mark.asyncio
    async def test_delete_below_existing_blob_is_noop(self, local_store: FsspecBlobStore) -> None:
        await local_store.put("a", b"x")

        await local_store.delete("a/b")

        assert await local_store.get("a") is not None

    @pytest.mark.asyncio
    async def test_key_ending_in_json_does_not_clash_with_metadata(
        self,
        local_store: FsspecBlobStore,
    ) -> None:
        await local_store.put("a", b"first", content_type="text/plain")
        await local_store.put("a.json/x", b"second", content_type="application/json")

        first = await local_store.get("a")
        second = await local_store.get("a.json/x")

        assert first is not None
        assert first.content_type == "text/plain"
        assert second is not None
        assert second.content == b"second"
        assert second.content_type == "application/json"

    @pytest.mark.asyncio
    async def test_get_below_existing_blob_returns_none(self, local_store: FsspecBlobStore) -> None:
        await local_store.put("a", b"x")

        assert await local_store.get("a/b") is None

    @pytest.mark.asyncio
    async def test_key_under_existing_blob_is_refused(self, local_store: FsspecBlobStore) -> None:
        await local_store.put("a", b"x", content_type="text/plain")

        with pytest.raises(StorageOperationError):
            await local_store.put("a/b", b"y")

        kept = await local_store.get("a")
        assert kept is not None
        assert kept.content == b"x"
        assert kept.content_type == "text/plain"

    @pytest.mark.asyncio
    async def test_unreadable_metadata_record_is_treated_as_missing(
        self,
        local_store: FsspecBlobStore,
        tmp_path,
    ) -> None:
        await local_store.put("a.txt", b"x", content_type="text/plain")
        record = tmp_path / "blobs-meta" / f"{hashlib.sha256(b'a.txt').hexdigest()}.json"
        record.unlink()
        record.mkdir()

        fetched = await local_store.get("a.txt")

        assert fetched is not None
        assert fetched.content_type is None
        assert fetched.etag == hashlib.sha256(b"x").hexdigest()


class TestHttpxArchiveFetcher:
    @pytest.mark.asyncio
    async def test_fetch_returns_body(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"PK\x03\x04"))
        fetcher = HttpxArchiveFetcher(transport=transport)

        assert await fetcher.fetch(ARCHIVE_URL) == b"PK\x03\x04"

    @pytest.mark.asyncio
    async def test_fetch_follows_redirects(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "github.com":
                return httpx.Response(
                    302,
                    headers={"Location": "https://codeload.github.com/acme/dots/zip/refs/heads/main"},
                )
            return httpx.Response(200, content=b"zip-bytes")

        fetcher = HttpxArchiveFetcher(transport=httpx.MockTransport(handler))

        assert await fetcher.fetch(ARCHIVE_URL) == b"zip-bytes"

    @pytest.mark.asyncio
    async def test_non_success_status_raises(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(404))
        fetcher = HttpxArchiveFetcher(transport=transport)

        with pytest.raises(UpstreamFetchError) as exc_info:
            await fetcher.fetch(ARCHIVE_URL)

        assert exc_info.value.status_code == 404
        assert exc_info.value.reason == "Not Found"
        assert ARCHIVE_URL in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            msg = "connection refused"
            raise httpx.ConnectError(msg, request=request)

        fetcher = HttpxArchiveFetcher(transport=httpx.MockTransport(handler))

        with pytest.raises(UpstreamFetchError) as exc_info:
            await fetcher.fetch(ARCHIVE_URL)

        assert exc_info.value.status_code is None
        assert "connection refused" in str(exc_info.value)


@pytest.fixture
def restore_logging():
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers = handlers
    root_logger.setLevel(level)
    for logger_name in INTERCEPTED_LOGGERS:
        intercepted = logging.getLogger(logger_name)
        intercepted.handlers = []
        intercepted.propagate = True
    structlog.reset_defaults()


class TestSetupLogging:
    @pytest.mark.usefixtures("restore_logging")
    def test_repeated_setup_does_not_stack_handlers(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path,
    ) -> None:
        monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
        monkeypatch.setenv("APP_ENV", "production")
        settings = Settings()

        setup_logging(settings)
        setup_logging(settings)

        file_handlers = [
            handler
            for handler in logging.getLogger().handlers
            if isinstance(handler, logging.handlers.TimedRotatingFileHandler)
        ]
        assert len(file_handlers) == 1
        assert (tmp_path / "logs" / "production.log").exists()
        assert logging.getLogger("temporalio").propagate is False
        assert logging.getLogger("httpx").level == logging.WARNING


class TestSettings:
    def test_mirror_source_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_USER", "acme")
        monkeypatch.setenv("GITHUB_REPO", "dots")
        monkeypatch.delenv("GITHUB_BRANCH", raising=False)

        source = Settings().mirror_source

        assert source.archive_url == ARCHIVE_URL
        assert source.archive_prefix == "dots-main"

    def test_empty_branch_falls_back_to_main(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_USER", "acme")
        monkeypatch.setenv("GITHUB_REPO", "dots")
        monkeypatch.setenv("GITHUB_BRANCH", "")

        assert Settings().mirror_source.branch == "main"

    def test_auth_secret_is_unset_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("AUTH_KEY_SECRET", raising=False)

        settings = Settings()

        assert settings.auth_key_secret is None
        assert settings.auth_header_name == "X-Custom-Auth-Key"


class FakeUseCase:
    def __init__(self, result: object) -> None:
        self._result = result

    async def execute(self):  # type: ignore[no-untyped-def]
        return self._result


class TestRefreshMirrorActivity:
    @pytest.mark.asyncio
    async def test_success_returns_summary(self) -> None:
        report = RefreshReport(
            archive_url=ARCHIVE_URL,
            entries_extracted=2,
            written_keys=["a.txt", "b.png"],
        )
        activity_fn = create_refresh_mirror_activity(FakeUseCase(Success(report)))

        result = await activity_fn()

        assert result == {
            "status": "success",
            "archive_url": ARCHIVE_URL,
            "entries_extracted": 2,
            "written": 2,
        }

    @pytest.mark.asyncio
    async def test_failure_is_raised_to_the_runtime(self) -> None:
        failure = Failure(AppError("upstream", "Failed to fetch ZIP file: 404 Not Found"))
        activity_fn = create_refresh_mirror_activity(FakeUseCase(failure))

        with pytest.raises(RefreshFailedError, match="404 Not Found"):
            await activity_fn()


class FakeTemporalClient:
    def __init__(self, already_exists: bool = False) -> None:
        self.already_exists = already_exists
        self.created: list[str] = []

    async def create_schedule(self, schedule_id: str, schedule: object) -> None:
        if self.already_exists:
            raise ScheduleAlreadyRunningError
        self.created.append(schedule_id)


class TestTemporalMirrorScheduler:
    def _settings(self, monkeypatch: pytest.MonkeyPatch) -> Settings:
        monkeypatch.setenv("REFRESH_INTERVAL_MINUTES", "15")
        monkeypatch.setenv("TEMPORAL_TASK_QUEUE", "mirror_refresh")
        monkeypatch.setenv("REFRESH_SCHEDULE_ID", "mirror-refresh")
        return Settings()

    def test_schedule_fires_on_configured_interval(self, monkeypatch: pytest.MonkeyPatch) -> None:
        scheduler = TemporalMirrorScheduler(settings=self._settings(monkeypatch))

        schedule = scheduler.build_schedule()

        assert schedule.spec.intervals[0].every == timedelta(minutes=15)
        assert schedule.action.task_queue == "mirror_refresh"
        assert schedule.policy.overlap == ScheduleOverlapPolicy.ALLOW_ALL

    @pytest.mark.asyncio
    async def test_ensure_schedule_creates_it(self, monkeypatch: pytest.MonkeyPatch) -> None:
        client = FakeTemporalClient()
        scheduler = TemporalMirrorScheduler(settings=self._settings(monkeypatch), client=client)

        schedule_id = await scheduler.ensure_refresh_schedule()

        assert schedule_id == "mirror-refresh"
        assert client.created == ["mirror-refresh"]

    @pytest.mark.asyncio
    async def test_ensure_schedule_keeps_existing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        client = FakeTemporalClient(already_exists=True)
        scheduler = TemporalMirrorScheduler(settings=self._settings(monkeypatch), client=client)

        assert await scheduler.ensure_refresh_schedule() == "mirror-refresh"
        assert client.created == []
