from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.value_objects.mirror_source import MirrorSource


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # make it absolute so reload/CWD doesn't break it
        env_file=Path(__file__).resolve().parents[1] / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="BlobMirror", validation_alias="APP_NAME")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        validation_alias="APP_ENV",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_dir: Path = Field(
        default=Path(__file__).resolve().parents[1] / "logs",
        validation_alias="LOG_DIR",
    )

    # Mirrored repository
    github_host: str = Field(default="github.com", validation_alias="GITHUB_HOST")
    github_user: str = Field(default="", validation_alias="GITHUB_USER")
    github_repo: str = Field(default="", validation_alias="GITHUB_REPO")
    github_branch: str = Field(default="main", validation_alias="GITHUB_BRANCH")
    archive_fetch_timeout_seconds: float = Field(
        default=60.0,
        validation_alias="ARCHIVE_FETCH_TIMEOUT_SECONDS",
    )

    # Write authorization
    auth_key_secret: str | None = Field(default=None, validation_alias="AUTH_KEY_SECRET")
    auth_header_name: str = Field(
        default="X-Custom-Auth-Key",
        validation_alias="AUTH_HEADER_NAME",
    )

    # API
    api_host: str = Field(default="127.0.0.1", validation_alias="API_HOST")
    api_port: int = Field(default=8000, validation_alias="API_PORT")

    # Blob Storage
    blob_base_url: str = Field(
        default="file://" + str(Path(__file__).resolve().parents[1] / "blobs"),
        validation_alias="BLOB_BASE_URL",
    )
    blob_metadata_url: str | None = Field(
        default=None,
        validation_alias="BLOB_METADATA_URL",
        description="Where content-type/etag records live. Defaults to a sibling of the blob root.",
    )
    blob_storage_options: dict = {}

    # Temporal
    temporal_address: str = Field(
        default="localhost:7233",
        validation_alias="TEMPORAL_ADDRESS",
    )
    temporal_task_queue: str = Field(
        default="mirror_refresh",
        validation_alias="TEMPORAL_TASK_QUEUE",
    )
    refresh_schedule_id: str = Field(
        default="mirror-refresh",
        validation_alias="REFRESH_SCHEDULE_ID",
    )
    refresh_interval_minutes: int = Field(
        default=60,
        gt=0,
        validation_alias="REFRESH_INTERVAL_MINUTES",
    )

    @property
    def mirror_source(self) -> MirrorSource:
        return MirrorSource(
            user=self.github_user,
            repo=self.github_repo,
            branch=self.github_branch or "main",
            host=self.github_host,
        )


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process. Entry points pass the result on explicitly."""
    return Settings()
