"""Port for downloading repository snapshots."""

from __future__ import annotations

from typing import Protocol


class ArchiveFetcher(Protocol):
    """Abstract port for retrieving an archive over the network."""

    async def fetch(self, url: str) -> bytes:
        """Download ``url`` and return the full response body.

        Raises:
            UpstreamFetchError: If the response status is not a success or
                the host cannot be reached.

        """
        ...
