"""Support window configuration constants and run configuration loading."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from neptune_actions.common.parser import parse_config_file

# Assumed support guarantees when a library's policy doesn't state them
DEFAULT_MINOR_VERSIONS = 2
DEFAULT_MAJOR_MONTHS = 6

# Build metadata tag marking releases of the variant (D2) track
VARIANT_TAG = "d2"

# Prerelease identifier that still counts as a release candidate
RC_TAG = "rc"

# Repository file holding the support policy
POLICY_FILE = ".neptune.yaml"

# Environment variable holding the GitHub API token
TOKEN_ENV = "GITHUB_TOKEN"

GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"

# GitHub GraphQL connections are limited to 100 nodes per page
PAGE_SIZE = 100

CONFIG_TABLE = "neptune-actions"


@dataclass
class RunConfig:
    """Options for one support window run."""

    organizations: list[str] = field(default_factory=list)
    policy_file: str = POLICY_FILE
    token_env: str = TOKEN_ENV
    max_passes: int | None = None


def load_config(path: Path | str | None = None) -> RunConfig:
    """Load run configuration from a TOML file.

    The options live in a ``[neptune-actions]`` table, or in
    ``[tool.neptune-actions]`` when the file is a pyproject.toml.

    Args:
        path: Path to the TOML file (None returns the defaults)

    Returns:
        RunConfig with values from the file

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If an option has the wrong type
    """
    if path is None:
        return RunConfig()

    data = parse_config_file(path)
    table = data.get(CONFIG_TABLE) or data.get("tool", {}).get(CONFIG_TABLE) or {}

    organizations = table.get("organizations", [])
    if not isinstance(organizations, list) or not all(isinstance(o, str) for o in organizations):
        raise ValueError(f"{path}: 'organizations' must be a list of strings")

    max_passes = table.get("max-passes")
    if max_passes is not None and (
        isinstance(max_passes, bool) or not isinstance(max_passes, int) or max_passes < 1
    ):
        raise ValueError(f"{path}: 'max-passes' must be a positive integer")

    return RunConfig(
        organizations=[str(o) for o in organizations],
        policy_file=str(table.get("policy-file", POLICY_FILE)),
        token_env=str(table.get("token-env", TOKEN_ENV)),
        max_passes=int(max_passes) if max_passes is not None else None,
    )
