"""Domain exceptions for mirror and storage failures."""


class DomainError(Exception):
    """Base exception for domain layer."""


class ArchiveDecodeError(DomainError):
    """Raised when a downloaded archive cannot be parsed or an entry cannot be read."""


class InfrastructureError(DomainError):
    """Raised when infrastructure operations fail (storage, network, etc.)."""


class UpstreamFetchError(InfrastructureError):
    """Raised when the archive host answers with a non-success status or is unreachable."""

    def __init__(self, url: str, status_code: int | None = None, reason: str | None = None) -> None:
        self.url = url
        self.status_code = status_code
        self.reason = reason
        detail = f"{status_code} {reason}" if status_code is not None else (reason or "unreachable")
        super().__init__(f"Failed to fetch ZIP file from {url}: {detail}")


class StorageOperationError(InfrastructureError):
    """Raised when the blob backend fails a get, put or delete."""


class RefreshFailedError(DomainError):
    """Raised to the scheduling runtime when a refresh cycle does not complete."""
