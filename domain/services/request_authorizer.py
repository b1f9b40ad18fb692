"""Domain service deciding whether a request may touch storage."""

from __future__ import annotations

from collections.abc import Mapping

DEFAULT_AUTH_HEADER = "X-Custom-Auth-Key"
WRITE_METHODS = frozenset({"PUT", "DELETE"})


class RequestAuthorizer:
    """Shared-secret gate for mutating requests.

    Reads are always allowed. Writes need the auth header to match the
    configured secret exactly; with no secret configured, every write is
    refused. Every other method is refused too, which means unsupported
    methods are answered with 403 before they can reach the 405 branch of
    the request handler.
    """

    def __init__(self, secret: str | None, header_name: str = DEFAULT_AUTH_HEADER) -> None:
        self.secret = secret
        self.header_name = header_name

    def is_authorized(self, method: str, headers: Mapping[str, str]) -> bool:
        if method == "GET":
            return True
        if method not in WRITE_METHODS or self.secret is None:
            return False
        return headers.get(self.header_name) == self.secret
