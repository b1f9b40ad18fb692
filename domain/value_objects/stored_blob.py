from pydantic import BaseModel, ConfigDict


class StoredBlob(BaseModel):
    """Value object representing a blob read from or written to object storage."""

    model_config = ConfigDict(frozen=True)

    key: str
    content: bytes
    content_type: str | None = None
    etag: str | None = None

    @property
    def size_bytes(self) -> int:
        return len(self.content)

    @property
    def http_etag(self) -> str | None:
        """Etag quoted for use in an HTTP ``etag`` header."""
        if self.etag is None:
            return None
        return f'"{self.etag}"'
