"""Support window computation for versioned libraries."""

from neptune_actions.support_window.engine import apply_decisions, mark_supported
from neptune_actions.support_window.extraction import LibraryExtractor
from neptune_actions.support_window.models import Release, SupportResult, Track
from neptune_actions.support_window.registry import ReleaseRegistry
from neptune_actions.support_window.config import DEFAULT_MINOR_VERSIONS, DEFAULT_MAJOR_MONTHS, VARIANT_TAG

__all__ = [
    "mark_supported",
    "apply_decisions",
    "LibraryExtractor",
    "Release",
    "SupportResult",
    "Track",
    "ReleaseRegistry",
    "DEFAULT_MINOR_VERSIONS",
    "DEFAULT_MAJOR_MONTHS",
    "VARIANT_TAG",
]
