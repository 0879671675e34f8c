"""Support window computation for the releases of one library."""

from __future__ import annotations

from datetime import date
from typing import Sequence

from neptune_actions.common.parser import metadata_tokens, prerelease_tokens
from neptune_actions.support_window.config import RC_TAG, VARIANT_TAG
from neptune_actions.support_window.models import (
    Release,
    SupportDecision,
    SupportResult,
    Track,
    add_months,
    by_published_date,
    by_version,
)


def is_relevant(release: Release, track: Track) -> bool:
    """Check if a release takes part in support marking on the given track.

    Only final releases and release candidates count. On the normal track
    the version must carry no build metadata, on the variant track it must
    carry the variant tag. Other prereleases and metadata are ignored, as
    there is no known way to handle them.

    Args:
        release: Release to check
        track: Track being evaluated

    Returns:
        True if the release is relevant
    """
    prerelease = prerelease_tokens(release.version)
    if prerelease and prerelease[0] != RC_TAG:
        return False

    metadata = metadata_tokens(release.version)
    if track == Track.NORMAL:
        return not metadata
    return VARIANT_TAG in metadata


def mark_supported(
    releases: Sequence[Release],
    complete: bool,
    maintained_minor_versions: int,
    maintained_major_months: int,
    track: Track = Track.NORMAL,
    today: date | None = None,
) -> SupportResult:
    """Find out which releases of a library are supported.

    Every major version is supported until ``maintained_major_months``
    after the next major was published; the latest major indefinitely.
    Within a supported major the newest release of each of the
    ``maintained_minor_versions`` most recent minor lines is supported.
    The latest release is always supported.

    The releases are not modified; use apply_decisions() to store the
    result on them.

    Args:
        releases: All known releases of one library, in any order
        complete: True if no older pages of releases remain to be fetched
        maintained_minor_versions: Number of maintained minor versions
        maintained_major_months: Months a major version stays supported
                                 after no longer being the latest major
        track: Which releases to consider (normal or variant builds)
        today: Reference date (for testing)

    Returns:
        SupportResult; need_more_data is True if older releases have to be
        fetched before the result can be trusted
    """
    today = today or date.today()

    relevant = [r for r in releases if is_relevant(r, track)]

    # Skip early if no releases to mark for us exist
    if not relevant:
        return SupportResult()

    rel_by_date = sorted(relevant, key=by_published_date)
    oldest = rel_by_date[0]

    # If the oldest release we have is outside the major term, there can't
    # be an older supported release and we can skip major detection
    oldest_support_end = add_months(oldest.published, maintained_major_months)
    oldest_supported = oldest_support_end >= today

    majors = [r for r in rel_by_date if r.version.minor == 0 and r.version.patch == 0]

    # No major release known, but the oldest release could still be within
    # the major support term
    if not majors and not complete and oldest_supported:
        return SupportResult(need_more_data=True)

    decisions = {r.commit: SupportDecision() for r in relevant}

    # The oldest release acts as a major in case the versions don't start
    # with a x.0.0 release
    gates = [oldest] + [m for m in majors if m is not oldest]

    # Support end of each major is relative to the next major's release
    for gate in gates:
        successor = next(
            (g for g in gates if g is not gate and g.version.major == gate.version.major + 1),
            None,
        )

        if successor is None:
            continue

        support_end = add_months(successor.published, maintained_major_months)
        decisions[gate.commit] = SupportDecision(
            supported=support_end >= today, support_end=support_end
        )

    rel_by_version = sorted(relevant, key=by_version)
    latest = rel_by_version[-1]

    # The latest release is _always_ supported
    decisions[latest.commit].supported = True

    anchors = gates if latest in gates else gates + [latest]

    # A supported major only lends support to the newest patch release of
    # its maintained minor lines; the major itself isn't supported unless
    # it is one of those
    for anchor in anchors:
        anchor_decision = decisions[anchor.commit]
        if not anchor_decision.supported:
            continue

        support_end = anchor_decision.support_end
        anchor_decision.supported = False

        for line_release in _newest_per_minor_line(
            rel_by_version, anchor.version.major, maintained_minor_versions
        ):
            decisions[line_release.commit] = SupportDecision(
                supported=True, support_end=support_end
            )

    decisions[latest.commit].supported = True

    return SupportResult(need_more_data=False, decisions=decisions)


def _newest_per_minor_line(
    rel_by_version: list[Release], major: int, count: int
) -> list[Release]:
    """Return the newest release of the ``count`` most recent minor lines of a major."""
    newest: list[Release] = []
    seen_minors: set[int] = set()

    for release in reversed(rel_by_version):
        if len(newest) >= count:
            break
        if release.version.major != major or release.version.minor in seen_minors:
            continue
        seen_minors.add(release.version.minor)
        newest.append(release)

    return newest


def apply_decisions(releases: Sequence[Release], *results: SupportResult) -> None:
    """Store engine results on the releases they were computed for.

    Support state of every release in the list is reset first, so state
    from an earlier pass never leaks into the new result.

    Args:
        releases: Release list of one library
        results: Results of mark_supported() for the tracks evaluated
    """
    for release in releases:
        release.supported = False
        release.support_end = None

    for result in results:
        for release in releases:
            decision = result.decisions.get(release.commit)
            if decision is None:
                continue
            release.supported = decision.supported
            release.support_end = decision.support_end
