"""Bookkeeping of release pages that still have to be fetched."""

from __future__ import annotations

from dataclasses import dataclass

from neptune_actions.support_window.fetcher import ReleaseTransport, RepositoryEdge


@dataclass(frozen=True)
class ReleaseRequest:
    """Request for the page of releases before ``cursor``."""

    library: str
    cursor: str
    org: str


class FetchCoordinator:
    """Collects earlier-page requests during a pass and fetches them after it."""

    def __init__(self):
        self.requests: list[ReleaseRequest] = []

    def add_release_request(self, library: str, cursor: str, org: str):
        """Request the releases of a library published before ``cursor``."""
        request = ReleaseRequest(library=library, cursor=cursor, org=org)
        if request not in self.requests:
            self.requests.append(request)

    @property
    def pending(self) -> bool:
        """Return True if any page requests are outstanding."""
        return len(self.requests) > 0

    def fetch(
        self,
        transport: ReleaseTransport,
        pages: dict[str, dict[str, RepositoryEdge]],
    ) -> bool:
        """Fetch all requested pages and merge them into ``pages``.

        All pages are merged before returning, so the next pass sees every
        fetched page at once.

        Args:
            transport: Source of release pages
            pages: Repository edges per organisation and repository name

        Returns:
            True if pages were fetched and another pass is needed
        """
        if not self.pending:
            return False

        requests, self.requests = self.requests, []

        for request in requests:
            page = transport.fetch_earlier_releases(request.org, request.library, request.cursor)
            pages[request.org][request.library].prepend(page)

        return True
