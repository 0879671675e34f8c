"""Registry of known releases per organisation and library."""

from __future__ import annotations

from typing import Iterable

from neptune_actions.support_window.models import Release


class ReleaseRegistry:
    """Two-level mapping org -> library -> releases, unique by commit."""

    def __init__(self):
        self.libs: dict[str, dict[str, list[Release]]] = {}

    def add(self, org: str, library: str, release: Release) -> bool:
        """Add a release unless its commit is already known for the library.

        Args:
            org: Organisation owning the library
            library: Library (repository) name
            release: Release to add

        Returns:
            True if the release was added, False if it was a duplicate
        """
        releases = self.libs.setdefault(org, {}).setdefault(library, [])

        if any(r.commit == release.commit for r in releases):
            return False

        releases.append(release)
        return True

    def add_all(self, org: str, library: str, releases: Iterable[Release]) -> int:
        """Add several releases and return how many were new."""
        return sum(1 for release in releases if self.add(org, library, release))

    def get(self, org: str, library: str) -> list[Release] | None:
        """Return the release list of a library, or None if unknown."""
        return self.libs.get(org, {}).get(library)

    def releases_for_commit(self, library: str, commit: str) -> list[Release]:
        """Return the releases of the library that contains the given commit.

        A library name may exist in several organisations. The first
        organisation (in insertion order) whose release list includes the
        commit wins.

        Args:
            library: Name of the library
            commit: SHA of the commit matching a version

        Returns:
            List of releases, empty if no organisation has the commit
        """
        for org_libs in self.libs.values():
            releases = org_libs.get(library)

            if releases is None:
                continue

            if any(r.commit == commit for r in releases):
                return releases

        return []

    def __len__(self) -> int:
        return sum(len(rels) for org_libs in self.libs.values() for rels in org_libs.values())
