from pydantic import BaseModel, Field


class BlobResponse(BaseModel):
    key: str = Field(..., description="Storage key of the blob")
    content: bytes = Field(..., repr=False, description="Raw blob content")
    content_type: str | None = Field(None, description="Stored content type, if any")
    etag: str | None = Field(None, description="Quoted etag suitable for an HTTP header")

    def http_headers(self) -> dict[str, str]:
        """Storage metadata to copy onto an HTTP response."""
        headers: dict[str, str] = {}
        if self.content_type:
            headers["content-type"] = self.content_type
        if self.etag:
            headers["etag"] = self.etag
        return headers


class PutBlobResponse(BaseModel):
    key: str = Field(..., description="Storage key that was written")
    size_bytes: int = Field(..., description="Number of bytes stored")

    @property
    def message(self) -> str:
        return f"Put {self.key} successfully!"


class DeleteBlobResponse(BaseModel):
    key: str = Field(..., description="Storage key that was removed")

    @property
    def message(self) -> str:
        return "Deleted!"
