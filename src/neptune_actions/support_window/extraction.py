"""Extract library releases and mark the supported ones."""

from __future__ import annotations

from datetime import date

from neptune_actions.common.parser import VersionParseError, parse_timestamp, parse_version_tag
from neptune_actions.common.reporter import Reporter
from neptune_actions.support_window.coordinator import FetchCoordinator
from neptune_actions.support_window.engine import apply_decisions, mark_supported
from neptune_actions.support_window.fetcher import ReleaseEdge, ReleaseTransport, RepositoryEdge
from neptune_actions.support_window.models import Release, Track, by_version
from neptune_actions.support_window.policy import MissingPolicy, PolicyParseError, YamlPolicySource
from neptune_actions.support_window.registry import ReleaseRegistry

POLICY_SUGGESTION = (
    "Set `library: true` and optionally "
    "`support-guarantees: {minor-versions: N, major-months: M}` in the policy file"
)
TAG_SUGGESTION = "Tag releases as vMAJOR.MINOR.PATCH"


def parse_release(edge: ReleaseEdge, org: str) -> Release:
    """Create a Release from a release edge.

    Raises:
        VersionParseError: If the tag is not a semantic version
        ValueError: If the publish time can't be parsed
    """
    return Release(
        version=parse_version_tag(edge.tag_name),
        commit=edge.commit,
        owner=org,
        published=parse_timestamp(edge.published_at),
    )


def parse_release_edges(
    edges: list[ReleaseEdge], org: str
) -> tuple[list[Release], list[tuple[ReleaseEdge, ValueError]]]:
    """Parse release edges, separating releases from unparsable edges.

    Args:
        edges: Release edges of one repository
        org: Organisation owning the repository

    Returns:
        Tuple of (parsed releases, list of (edge, error) for failures)
    """
    releases = []
    failures = []

    for edge in edges:
        try:
            releases.append(parse_release(edge, org))
        except ValueError as e:  # VersionParseError is a ValueError
            failures.append((edge, e))

    return releases, failures


class LibraryExtractor:
    """Extracts and holds library release information."""

    def __init__(self, reporter: Reporter | None = None):
        self.registry = ReleaseRegistry()
        self.fetcher = FetchCoordinator()
        self.reporter = reporter or Reporter()
        self._reported: set[tuple[str, str, str]] = set()

    def releases_for_commit(self, library: str, commit: str) -> list[Release]:
        """Return the releases of the library containing the given commit."""
        return self.registry.releases_for_commit(library, commit)

    def extract_info(
        self,
        transport: ReleaseTransport,
        organizations: list[str],
        policy_source: YamlPolicySource | None = None,
        max_passes: int | None = None,
        today: date | None = None,
    ) -> int:
        """Extract library release info, fetching older pages while needed.

        Args:
            transport: Source of repository release pages
            organizations: Organisations to check
            policy_source: Support policies per repository. Built from the
                           policy files the transport reports if None.
            max_passes: Stop after this many passes and answer with the
                        history known by then
            today: Reference date (for testing)

        Returns:
            Number of passes made

        Raises:
            TransportError: If the transport fails
        """
        today = today or date.today()

        pages: dict[str, dict[str, RepositoryEdge]] = {}
        for org in organizations:
            pages[org] = {repo.name: repo for repo in transport.fetch_organization(org)}

        if policy_source is None:
            policy_source = YamlPolicySource(
                {
                    f"{org}/{name}": repo.policy_text
                    for org, repos in pages.items()
                    for name, repo in repos.items()
                }
            )

        passes = 0

        # Keep fetching info while it's incomplete
        while True:
            passes += 1
            final = max_passes is not None and passes >= max_passes

            for org in organizations:
                self.try_extract_info(org, pages[org], policy_source, today, final)

            if final:
                break

            if not self.fetcher.fetch(transport, pages):
                break

        return passes

    def try_extract_info(
        self,
        org: str,
        repositories: dict[str, RepositoryEdge],
        policy_source: YamlPolicySource,
        today: date,
        final: bool = False,
    ):
        """Extract library release info of one organisation.

        If not enough release information is present for a library, a
        request for its previous page of releases is added.

        Args:
            org: Organisation to extract data for
            repositories: Repository edges of the organisation
            policy_source: Support policies per repository
            today: Reference date
            final: Treat the known history as complete
        """
        self.reporter.print(f"\n{org} REPOS: {len(repositories)}\n=================\n")

        for lib_name, repo in repositories.items():
            owner_name = f"{org}/{lib_name}"

            try:
                policy = policy_source.resolve(owner_name)
            except MissingPolicy:
                self.reporter.print(f"Skipping {owner_name} which has no meta info")
                continue
            except PolicyParseError as e:
                self._warn_once(
                    owner_name,
                    "policy",
                    f"Skipping {owner_name}. Failed to parse policy",
                    str(e),
                    suggestion=POLICY_SUGGESTION,
                )
                continue

            # Skip non-library projects
            if not policy.library:
                continue

            releases, failures = parse_release_edges(repo.releases.releases, org)

            for edge, error in failures:
                if isinstance(error, VersionParseError):
                    message = f"Skipping unparsable version {edge.tag_name!r}"
                    suggestion = TAG_SUGGESTION
                else:
                    message = f"Skipping release {edge.tag_name!r} with invalid publish time"
                    suggestion = ""
                self._warn_once(owner_name, edge.tag_name, message, str(error), suggestion)

            self.registry.add_all(org, lib_name, releases)

            lib = self.registry.get(org, lib_name)
            if not lib:
                self.reporter.print(f"No releases found in {lib_name}")
                continue

            has_more = repo.releases.has_previous_page and not final

            results = [
                mark_supported(
                    lib,
                    complete=not has_more,
                    maintained_minor_versions=policy.minor_versions,
                    maintained_major_months=policy.major_months,
                    track=track,
                    today=today,
                )
                for track in (Track.NORMAL, Track.VARIANT)
            ]
            apply_decisions(lib, *results)

            need_more = any(r.need_more_data for r in results)

            if need_more and has_more and repo.releases.start_cursor:
                self.reporter.print(
                    f"Requesting prev page: {owner_name} ({len(repo.releases.releases)})"
                )
                self.fetcher.add_release_request(lib_name, repo.releases.start_cursor, org)
                continue

            supported = [str(r) for r in sorted(lib, key=by_version) if r.supported]
            self.reporter.print(f"LIB: {lib_name} Releases: {supported}")
            self.reporter.set_supported(owner_name, supported)

    def _warn_once(
        self, owner_name: str, key: str, message: str, details: str, suggestion: str = ""
    ):
        """Add a warning unless the same problem was reported in an earlier pass."""
        if (owner_name, key, message) in self._reported:
            return
        self._reported.add((owner_name, key, message))
        self.reporter.add_warning(
            library=owner_name, message=message, details=details, suggestion=suggestion
        )
