"""Per-repository support policies read from the repository's YAML file."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

import yaml

from neptune_actions.support_window.config import DEFAULT_MAJOR_MONTHS, DEFAULT_MINOR_VERSIONS


class PolicyParseError(ValueError):
    """Raised when a repository's policy file is malformed."""


class MissingPolicy(LookupError):
    """Raised when a repository has no policy metadata at all."""


@dataclass
class SupportPolicy:
    """Support guarantees of one repository."""

    library: bool
    minor_versions: int = DEFAULT_MINOR_VERSIONS
    major_months: int = DEFAULT_MAJOR_MONTHS


def _get_int(data: dict, key: str, default: int) -> int:
    value = data.get(key, default)
    # bool is an int subclass, but "minor-versions: yes" is a typo
    if isinstance(value, bool) or not isinstance(value, int):
        raise PolicyParseError(f"'{key}' must be an integer, got {value!r}")
    return value


def parse_support_guarantees(yaml_content: str) -> SupportPolicy:
    """Parse support guarantees from policy YAML.

    Expected layout::

        library: true
        support-guarantees:
          minor-versions: 2
          major-months: 6

    Args:
        yaml_content: Raw YAML content of the policy file

    Returns:
        SupportPolicy; ``library`` is False for non-library projects

    Raises:
        PolicyParseError: If the YAML or one of its values is malformed
    """
    try:
        data = yaml.safe_load(yaml_content)
    except yaml.YAMLError as e:
        raise PolicyParseError(f"Invalid YAML: {e}") from e

    # An empty file declares nothing
    if data is None:
        return SupportPolicy(library=False)

    if not isinstance(data, dict):
        raise PolicyParseError("Policy must be a mapping")

    library = data.get("library", False)
    if not isinstance(library, bool):
        raise PolicyParseError(f"'library' must be a boolean, got {library!r}")

    guarantees = data.get("support-guarantees") or {}
    if not isinstance(guarantees, dict):
        raise PolicyParseError("'support-guarantees' must be a mapping")

    return SupportPolicy(
        library=library,
        minor_versions=_get_int(guarantees, "minor-versions", DEFAULT_MINOR_VERSIONS),
        major_months=_get_int(guarantees, "major-months", DEFAULT_MAJOR_MONTHS),
    )


class YamlPolicySource:
    """Resolves support policies from policy file contents per repository."""

    def __init__(self, meta_info: Mapping[str, str | None] | None = None):
        """Initialize the policy source.

        Args:
            meta_info: Maps "org/repo" to the policy file content, or None
                       if the repository has no policy file
        """
        self.meta_info: dict[str, str | None] = dict(meta_info or {})

    def set(self, owner_name: str, yaml_content: str | None):
        """Set the policy file content of a repository."""
        self.meta_info[owner_name] = yaml_content

    def resolve(self, owner_name: str) -> SupportPolicy:
        """Return the support policy of a repository.

        Args:
            owner_name: Repository as "org/repo"

        Returns:
            SupportPolicy of the repository

        Raises:
            MissingPolicy: If the repository has no policy metadata
            PolicyParseError: If the policy metadata is malformed
        """
        yaml_content = self.meta_info.get(owner_name)
        if yaml_content is None:
            raise MissingPolicy(owner_name)

        return parse_support_guarantees(yaml_content)
