from __future__ import annotations

import httpx
import structlog

from application.ports.archive_fetcher import ArchiveFetcher
from domain.exceptions import UpstreamFetchError

logger = structlog.get_logger()


class HttpxArchiveFetcher(ArchiveFetcher):
    """ArchiveFetcher adapter backed by ``httpx.AsyncClient``.

    Branch archive URLs answer with a redirect to a separate download host,
    so redirects are followed.
    """

    def __init__(
        self,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    async def fetch(self, url: str) -> bytes:
        logger.info("archive_fetch_start", url=url)

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
        except httpx.RequestError as e:
            raise UpstreamFetchError(url, reason=str(e) or type(e).__name__) from e

        if not response.is_success:
            raise UpstreamFetchError(url, response.status_code, response.reason_phrase)

        logger.info("archive_fetch_complete", url=url, size_bytes=len(response.content))
        return response.content
