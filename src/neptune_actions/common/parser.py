"""Parser utilities for release tags, timestamps and run configuration."""

from __future__ import annotations

import re
from datetime import date, datetime
from pathlib import Path

import semver
import tomlkit

# Release tags are plain semantic versions, optionally prefixed with "v"
# Matches: v1.2.3, 1.2.3-rc.1, v2.0.0+d2
TAG_PREFIX_RE = re.compile(r"^[vV](?=\d)")


class VersionParseError(ValueError):
    """Raised when a release tag is not a valid semantic version."""

    def __init__(self, tag: str, reason: str = ""):
        self.tag = tag
        self.reason = reason
        message = f"Invalid version tag: {tag!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


def parse_version_tag(tag: str) -> semver.Version:
    """Parse a release tag into a semantic version.

    Args:
        tag: Tag name like "v1.2.3", "1.2.3-rc.1" or "v2.0.0+d2"

    Returns:
        Parsed semver.Version

    Raises:
        VersionParseError: If the tag is not a valid semantic version
    """
    if not isinstance(tag, str):
        raise VersionParseError(str(tag), "tag is not a string")

    version_str = TAG_PREFIX_RE.sub("", tag.strip())

    try:
        return semver.Version.parse(version_str)
    except (ValueError, TypeError) as e:
        raise VersionParseError(tag, str(e)) from e


def prerelease_tokens(version: semver.Version) -> tuple[str, ...]:
    """Return the dot-separated prerelease identifiers of a version."""
    if not version.prerelease:
        return ()
    return tuple(version.prerelease.split("."))


def metadata_tokens(version: semver.Version) -> frozenset[str]:
    """Return the dot-separated build metadata identifiers of a version."""
    if not version.build:
        return frozenset()
    return frozenset(version.build.split("."))


def parse_timestamp(value: str) -> date:
    """Parse an ISO 8601 timestamp as reported by GitHub into a date.

    Args:
        value: Timestamp like "2018-03-01T12:00:00Z"

    Returns:
        The calendar date part of the timestamp

    Raises:
        ValueError: If the timestamp cannot be parsed
    """
    if not value:
        raise ValueError("Empty timestamp")

    # fromisoformat() only understands the "Z" suffix on Python 3.11+
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"

    return datetime.fromisoformat(value).date()


def parse_config_file(path: Path | str) -> dict:
    """Parse a TOML configuration file and return its contents.

    Args:
        path: Path to the TOML file

    Returns:
        Dictionary containing the parsed TOML data

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomlkit.exceptions.ParseError: If the file is invalid TOML
    """
    path = Path(path)
    with open(path) as f:
        return tomlkit.load(f)
