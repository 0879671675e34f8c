"""Reporter utilities for GitHub Actions output formatting."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import TextIO


class Severity(Enum):
    """Severity level for issues."""

    ERROR = "error"
    WARNING = "warning"


@dataclass
class Issue:
    """Represents a problem found while computing support windows."""

    severity: Severity
    library: str
    message: str
    details: str = ""
    suggestion: str = ""

    def format_plain(self) -> str:
        """Format issue for plain text output."""
        prefix = "[ERROR]" if self.severity == Severity.ERROR else "[WARN]"

        lines = [f"{prefix} {self.library}: {self.message}"]
        if self.details:
            for detail in self.details.split("\n"):
                lines.append(f"        {detail}")
        if self.suggestion:
            lines.append(f"        Suggested: {self.suggestion}")

        return "\n".join(lines)

    def format_github(self) -> str:
        """Format issue as GitHub Actions annotation."""
        title = f"Support window: {self.library}"
        msg = self.message
        if self.details:
            msg += f" - {self.details}"

        return f"::{self.severity.value} title={title}::{msg}"


# Convenience aliases
@dataclass
class Violation(Issue):
    """An error that should fail the run."""

    severity: Severity = field(default=Severity.ERROR, init=False)


@dataclass
class Warning(Issue):
    """A warning about input that was skipped."""

    severity: Severity = field(default=Severity.WARNING, init=False)


class Reporter:
    """Collects issues and supported releases and formats the results."""

    def __init__(
        self,
        title: str = "Supported Releases",
        github_actions: bool | None = None,
        output: TextIO | None = None,
    ):
        """Initialize the reporter.

        Args:
            title: Title for the report
            github_actions: Whether to output GitHub Actions annotations.
                           Auto-detected if None.
            output: Output stream (defaults to stdout)
        """
        self.title = title
        self.github_actions = (
            github_actions if github_actions is not None else os.environ.get("GITHUB_ACTIONS") == "true"
        )
        self.output = output or sys.stdout
        self.issues: list[Issue] = []
        # "org/library" -> supported version strings
        self.supported: dict[str, list[str]] = {}

    def add_issue(self, issue: Issue):
        """Add an issue to the report."""
        self.issues.append(issue)

    def add_error(
        self, library: str, message: str, details: str = "", suggestion: str = ""
    ):
        """Add an error issue."""
        self.add_issue(
            Violation(library=library, message=message, details=details, suggestion=suggestion)
        )

    def add_warning(
        self, library: str, message: str, details: str = "", suggestion: str = ""
    ):
        """Add a warning issue."""
        self.add_issue(
            Warning(library=library, message=message, details=details, suggestion=suggestion)
        )

    def set_supported(self, library: str, versions: list[str]):
        """Record the supported versions of a library, replacing earlier passes."""
        self.supported[library] = list(versions)

    @property
    def errors(self) -> list[Issue]:
        """Return all error-level issues."""
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Issue]:
        """Return all warning-level issues."""
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def has_errors(self) -> bool:
        """Return True if there are any errors."""
        return len(self.errors) > 0

    @property
    def has_warnings(self) -> bool:
        """Return True if there are any warnings."""
        return len(self.warnings) > 0

    def print(self, text: str = ""):
        """Print text to output stream."""
        print(text, file=self.output)

    def print_report(self):
        """Print the full report."""
        self.print(self.title)
        self.print("=" * len(self.title))
        self.print()

        if self.supported:
            self.print("SUPPORTED:")
            for library, versions in sorted(self.supported.items()):
                listed = ", ".join(versions) if versions else "-"
                self.print(f"  {library}: {listed}")
            self.print()

        if self.errors:
            self.print("ERRORS:")
            for issue in self.errors:
                self.print(issue.format_plain())
                self.print()

        if self.warnings:
            self.print("WARNINGS:")
            for issue in self.warnings:
                self.print(issue.format_plain())
                self.print()

        # Print GitHub Actions annotations
        if self.github_actions:
            for issue in self.issues:
                self.print(issue.format_github())

        # Print summary
        n_errors = len(self.errors)
        n_warnings = len(self.warnings)
        self.print(
            f"Summary: {len(self.supported)} librar{'y' if len(self.supported) == 1 else 'ies'}, "
            f"{n_errors} error(s), {n_warnings} warning(s)"
        )

        if self.has_errors:
            self.print("Status: FAILED")
        elif self.has_warnings:
            self.print("Status: PASSED (with warnings)")
        else:
            self.print("Status: PASSED")

    def write_github_summary(self):
        """Write a job summary for GitHub Actions."""
        summary_file = os.environ.get("GITHUB_STEP_SUMMARY")
        if not summary_file:
            return

        with open(summary_file, "a") as f:
            f.write(f"## {self.title}\n\n")

            if self.supported:
                f.write("| Library | Supported releases |\n")
                f.write("|---------|--------------------|\n")
                for library, versions in sorted(self.supported.items()):
                    listed = ", ".join(versions) if versions else "-"
                    f.write(f"| {library} | {listed} |\n")
                f.write("\n")

            if not self.issues:
                f.write("No problems found.\n")
                return

            _write_issue_table(f, "Errors", self.errors)
            _write_issue_table(f, "Warnings", self.warnings)

    def get_exit_code(self, fail_on_warning: bool = False) -> int:
        """Return appropriate exit code.

        Args:
            fail_on_warning: If True, warnings also cause failure

        Returns:
            0 for success, 1 for failure
        """
        if self.has_errors:
            return 1
        if fail_on_warning and self.has_warnings:
            return 1
        return 0


def _write_issue_table(f: TextIO, heading: str, issues: list[Issue]):
    """Write issues as a markdown table under a heading, if there are any."""
    if not issues:
        return

    f.write(f"### {heading}\n\n")
    f.write("| Library | Issue | Suggestion |\n")
    f.write("|---------|-------|------------|\n")
    for issue in issues:
        f.write(f"| {issue.library} | {issue.message} | {issue.suggestion or '-'} |\n")
    f.write("\n")
