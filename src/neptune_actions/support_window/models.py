"""Release data types used by the support window engine."""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

import semver


class Track(Enum):
    """Eligibility track a library's releases are evaluated on."""

    NORMAL = "normal"
    VARIANT = "variant"


@dataclass(eq=False)
class Release:
    """One published release of a library.

    Only ``supported`` and ``support_end`` change after creation; both are
    recomputed from scratch whenever the library is evaluated.
    """

    version: semver.Version
    commit: str
    owner: str
    published: date
    support_end: date | None = None
    supported: bool = False

    def __str__(self) -> str:
        return f"v{self.version}"


@dataclass
class SupportDecision:
    """Support state the engine computed for one release."""

    supported: bool = False
    support_end: date | None = None


@dataclass
class SupportResult:
    """Outcome of evaluating one library on one track.

    ``decisions`` maps commit ids of every relevant release of the track to
    its decision. It is empty when ``need_more_data`` is set.
    """

    need_more_data: bool = False
    decisions: dict[str, SupportDecision] = field(default_factory=dict)

    @property
    def supported_commits(self) -> set[str]:
        """Return commits of releases decided as supported."""
        return {commit for commit, d in self.decisions.items() if d.supported}


def by_published_date(release: Release) -> date:
    """Sort key ordering releases by publish date."""
    return release.published


def by_version(release: Release) -> semver.Version:
    """Sort key ordering releases by semantic version precedence."""
    return release.version


def add_months(day: date, months: int) -> date:
    """Add calendar months to a date.

    The day is clamped to the last day of the resulting month, so
    2024-01-31 plus one month is 2024-02-29.

    Args:
        day: Date to start from
        months: Number of months to add (may be negative)

    Returns:
        The shifted date
    """
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))
