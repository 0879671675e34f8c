"""Fetch repository release pages from the GitHub GraphQL API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

import requests

from neptune_actions.support_window.config import GITHUB_GRAPHQL_URL, PAGE_SIZE, POLICY_FILE

RELEASE_FIELDS = """
pageInfo { hasPreviousPage startCursor }
edges {
  node {
    publishedAt
    tag {
      name
      target { oid ... on Tag { target { oid } } }
    }
  }
}
"""

ORGANIZATION_QUERY = """
query($org: String!, $after: String, $policy: String!) {
  organization(login: $org) {
    repositories(first: %(page_size)d, after: $after) {
      pageInfo { hasNextPage endCursor }
      edges {
        node {
          name
          policy: object(expression: $policy) { ... on Blob { text } }
          releases(last: %(page_size)d) { %(release_fields)s }
        }
      }
    }
  }
}
""" % {"page_size": PAGE_SIZE, "release_fields": RELEASE_FIELDS}

EARLIER_RELEASES_QUERY = """
query($owner: String!, $name: String!, $before: String!) {
  repository(owner: $owner, name: $name) {
    releases(last: %(page_size)d, before: $before) { %(release_fields)s }
  }
}
""" % {"page_size": PAGE_SIZE, "release_fields": RELEASE_FIELDS}


class TransportError(RuntimeError):
    """Raised when release data cannot be fetched."""


@dataclass
class ReleaseEdge:
    """One release as reported by GitHub."""

    tag_name: str
    commit: str
    published_at: str


@dataclass
class ReleasePage:
    """A page of releases, oldest first."""

    releases: list[ReleaseEdge] = field(default_factory=list)
    has_previous_page: bool = False
    start_cursor: str | None = None


@dataclass
class RepositoryEdge:
    """A repository together with the releases fetched so far."""

    name: str
    releases: ReleasePage = field(default_factory=ReleasePage)
    policy_text: str | None = None

    def prepend(self, page: ReleasePage):
        """Merge an earlier page of releases into this repository."""
        self.releases = ReleasePage(
            releases=page.releases + self.releases.releases,
            has_previous_page=page.has_previous_page,
            start_cursor=page.start_cursor,
        )


class ReleaseTransport(Protocol):
    """Source of repository release pages."""

    def fetch_organization(self, org: str) -> list[RepositoryEdge]:
        ...

    def fetch_earlier_releases(self, org: str, repo: str, cursor: str) -> ReleasePage:
        ...


def parse_release_page(data: dict | None) -> ReleasePage:
    """Parse a GraphQL ``releases`` connection.

    Args:
        data: The ``releases`` object of a repository node

    Returns:
        ReleasePage with the release edges
    """
    if not data:
        return ReleasePage()

    page_info = data.get("pageInfo") or {}
    releases = []

    for edge in data.get("edges") or []:
        node = (edge or {}).get("node") or {}
        tag = node.get("tag") or {}
        target = tag.get("target") or {}

        # Annotated tags point to a tag object, which points to the commit
        commit = (target.get("target") or {}).get("oid") or target.get("oid") or ""

        releases.append(
            ReleaseEdge(
                tag_name=tag.get("name") or "",
                commit=commit,
                published_at=node.get("publishedAt") or "",
            )
        )

    return ReleasePage(
        releases=releases,
        has_previous_page=bool(page_info.get("hasPreviousPage", False)),
        start_cursor=page_info.get("startCursor"),
    )


def parse_repository_edge(edge: dict) -> RepositoryEdge:
    """Parse one edge of a GraphQL ``repositories`` connection."""
    node = edge.get("node") or {}
    policy = node.get("policy") or {}

    return RepositoryEdge(
        name=node.get("name", ""),
        releases=parse_release_page(node.get("releases")),
        policy_text=policy.get("text"),
    )


class GitHubTransport:
    """Fetches repositories and their releases through GitHub GraphQL."""

    def __init__(
        self,
        token: str,
        url: str = GITHUB_GRAPHQL_URL,
        policy_file: str = POLICY_FILE,
        timeout: int = 30,
    ):
        """Initialize the transport.

        Args:
            token: GitHub API token
            url: GraphQL endpoint
            policy_file: Repository file holding the support policy
            timeout: Request timeout in seconds
        """
        self.token = token
        self.url = url
        self.policy_file = policy_file
        self.timeout = timeout

    def query(self, query: str, variables: dict) -> dict:
        """Run a GraphQL query and return its ``data`` object.

        Raises:
            TransportError: If the request fails or GraphQL reports errors
        """
        try:
            response = requests.post(
                self.url,
                json={"query": query, "variables": variables},
                headers={"Authorization": f"bearer {self.token}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            raise TransportError(f"GraphQL request failed: {e}") from e

        if payload.get("errors"):
            messages = "; ".join(err.get("message", str(err)) for err in payload["errors"])
            raise TransportError(f"GraphQL query failed: {messages}")

        return payload.get("data") or {}

    def fetch_organization(self, org: str) -> list[RepositoryEdge]:
        """Fetch all repositories of an organisation with their latest releases.

        Args:
            org: Organisation login

        Returns:
            List of RepositoryEdge objects

        Raises:
            TransportError: If the organisation can't be fetched
        """
        repositories = []
        after = None

        while True:
            data = self.query(
                ORGANIZATION_QUERY,
                {"org": org, "after": after, "policy": f"HEAD:{self.policy_file}"},
            )

            organization = data.get("organization")
            if organization is None:
                raise TransportError(f"Organisation not found: {org}")

            connection = organization["repositories"]
            repositories.extend(parse_repository_edge(e) for e in connection.get("edges") or [])

            page_info = connection.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break
            after = page_info.get("endCursor")

        return repositories

    def fetch_earlier_releases(self, org: str, repo: str, cursor: str) -> ReleasePage:
        """Fetch the page of releases published before the given cursor.

        Raises:
            TransportError: If the repository can't be fetched
        """
        data = self.query(
            EARLIER_RELEASES_QUERY, {"owner": org, "name": repo, "before": cursor}
        )

        repository = data.get("repository")
        if repository is None:
            raise TransportError(f"Repository not found: {org}/{repo}")

        return parse_release_page(repository.get("releases"))
