"""Common utilities shared between neptune actions."""

from neptune_actions.common.parser import (
    VersionParseError,
    parse_version_tag,
    parse_timestamp,
    parse_config_file,
)
from neptune_actions.common.reporter import Reporter, Violation, Warning

__all__ = [
    "VersionParseError",
    "parse_version_tag",
    "parse_timestamp",
    "parse_config_file",
    "Reporter",
    "Violation",
    "Warning",
]
