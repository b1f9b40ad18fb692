from pydantic import BaseModel, Field


class RefreshReport(BaseModel):
    """Outcome of one mirror refresh cycle."""

    archive_url: str = Field(..., description="URL the snapshot was downloaded from")
    entries_extracted: int = Field(..., description="Number of file entries found in the archive")
    written_keys: list[str] = Field(default_factory=list)
    failed_keys: list[str] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failed_keys
