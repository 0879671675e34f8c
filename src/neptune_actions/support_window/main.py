"""CLI entry point for the support window computation."""

from __future__ import annotations

import argparse
import os
import sys
from datetime import date

from neptune_actions.common.reporter import Reporter
from neptune_actions.support_window.config import load_config
from neptune_actions.support_window.extraction import LibraryExtractor
from neptune_actions.support_window.fetcher import GitHubTransport, TransportError


def positive_int(value: str) -> int:
    """Parse a command line value that must be an integer of at least 1."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def main(args: list[str] | None = None) -> int:
    """Main entry point for the support window computation.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = argparse.ArgumentParser(
        description="List the library releases that are currently supported",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s sociomantic-tsunami             # Check one organisation
  %(prog)s --config neptune.toml           # Organisations from a config file
  %(prog)s org-a org-b --max-passes 3      # Limit history fetching
        """,
    )

    parser.add_argument(
        "organizations",
        nargs="*",
        help="GitHub organisations to check (default: from --config)",
    )

    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help="Path to TOML file with a [neptune-actions] table",
    )

    parser.add_argument(
        "--token-env",
        default=None,
        help="Environment variable holding the GitHub token (default: GITHUB_TOKEN)",
    )

    parser.add_argument(
        "--policy-file",
        default=None,
        help="Repository file holding the support policy (default: .neptune.yaml)",
    )

    parser.add_argument(
        "--max-passes",
        type=positive_int,
        default=None,
        help="Stop fetching older releases after this many passes",
    )

    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Reference date in YYYY-MM-DD format (default: today)",
    )

    parser.add_argument(
        "--fail-on-warning",
        "-w",
        action="store_true",
        help="Treat warnings as errors (return non-zero exit code)",
    )

    parsed_args = parser.parse_args(args)

    try:
        config = load_config(parsed_args.config)
    except (OSError, ValueError) as e:
        print(f"Error: Could not load config: {e}", file=sys.stderr)
        return 1

    organizations = parsed_args.organizations or config.organizations
    if not organizations:
        print("Error: No organisations given", file=sys.stderr)
        return 1

    token_env = parsed_args.token_env or config.token_env
    token = os.environ.get(token_env)
    if not token:
        print(f"Error: {token_env} is not set", file=sys.stderr)
        return 1

    max_passes = parsed_args.max_passes or config.max_passes

    reporter = Reporter(title="Supported Releases")
    transport = GitHubTransport(token, policy_file=parsed_args.policy_file or config.policy_file)
    extractor = LibraryExtractor(reporter)

    try:
        extractor.extract_info(
            transport,
            organizations,
            max_passes=max_passes,
            today=parsed_args.today,
        )
    except TransportError as e:
        reporter.add_error(
            library="github",
            message=f"Failed to fetch releases: {e}",
            suggestion=f"Check that ${token_env} holds a valid GitHub token",
        )

    # Output results
    reporter.print_report()
    reporter.write_github_summary()

    return reporter.get_exit_code(fail_on_warning=parsed_args.fail_on_warning)


if __name__ == "__main__":
    sys.exit(main())
