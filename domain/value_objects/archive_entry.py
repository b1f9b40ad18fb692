from pydantic import BaseModel, ConfigDict, Field

from domain.value_objects.mime_type import MimeType


class ArchiveEntry(BaseModel):
    """Value object representing one file unpacked from a mirrored archive."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Path relative to the archive's top-level directory")
    path: str = Field(..., description="Original path inside the archive")
    content: bytes = Field(..., repr=False)
    mime_type: MimeType

    @property
    def size_bytes(self) -> int:
        return len(self.content)
