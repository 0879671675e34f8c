"""Tests for the support window CLI."""

import pytest
from unittest.mock import patch

from neptune_actions.support_window import main as support_main
from neptune_actions.support_window.fetcher import (
    ReleaseEdge,
    ReleasePage,
    RepositoryEdge,
    TransportError,
)


class FakeTransport:
    """Transport serving one library with a complete history."""

    def __init__(self, fail=False):
        self.fail = fail

    def fetch_organization(self, org):
        if self.fail:
            raise TransportError("Bad credentials")
        return [
            RepositoryEdge(
                name="ocean",
                releases=ReleasePage(
                    releases=[
                        ReleaseEdge("v1.0.0", "a", "2024-01-01T00:00:00Z"),
                        ReleaseEdge("v1.1.0", "b", "2024-02-01T00:00:00Z"),
                        ReleaseEdge("nightly", "c", "2024-02-02T00:00:00Z"),
                    ]
                ),
                policy_text="library: true\n",
            )
        ]

    def fetch_earlier_releases(self, org, repo, cursor):
        raise AssertionError("no earlier pages expected")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Run outside of GitHub Actions."""
    monkeypatch.delenv("GITHUB_ACTIONS", raising=False)
    monkeypatch.delenv("GITHUB_STEP_SUMMARY", raising=False)


class TestMain:
    """Tests for the CLI entry point."""

    def test_success(self, monkeypatch, capsys):
        """Test a run prints the supported releases."""
        monkeypatch.setenv("GITHUB_TOKEN", "secret")

        with patch.object(support_main, "GitHubTransport", return_value=FakeTransport()) as cls:
            exit_code = support_main.main(["sociomantic", "--today", "2024-06-15"])

        assert exit_code == 0
        assert cls.call_args[0][0] == "secret"
        out = capsys.readouterr().out
        assert "sociomantic/ocean: v1.0.0, v1.1.0" in out
        assert "Status: PASSED (with warnings)" in out

    def test_fail_on_warning(self, monkeypatch):
        """Test warnings fail the run with --fail-on-warning."""
        monkeypatch.setenv("GITHUB_TOKEN", "secret")

        with patch.object(support_main, "GitHubTransport", return_value=FakeTransport()):
            exit_code = support_main.main(["sociomantic", "--fail-on-warning"])

        assert exit_code == 1

    def test_transport_error(self, monkeypatch, capsys):
        """Test transport failures are reported as errors."""
        monkeypatch.setenv("GITHUB_TOKEN", "secret")

        with patch.object(support_main, "GitHubTransport", return_value=FakeTransport(fail=True)):
            exit_code = support_main.main(["sociomantic"])

        assert exit_code == 1
        out = capsys.readouterr().out
        assert "Bad credentials" in out
        assert "Suggested: Check that $GITHUB_TOKEN holds a valid GitHub token" in out

    def test_missing_token(self, monkeypatch, capsys):
        """Test a missing token is an error."""
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)

        assert support_main.main(["sociomantic"]) == 1
        assert "GITHUB_TOKEN is not set" in capsys.readouterr().err

    def test_no_organizations(self, monkeypatch, capsys):
        """Test running without organisations is an error."""
        monkeypatch.setenv("GITHUB_TOKEN", "secret")

        assert support_main.main([]) == 1
        assert "No organisations given" in capsys.readouterr().err

    def test_organizations_from_config(self, monkeypatch, tmp_path):
        """Test organisations and token variable are read from the config file."""
        config = tmp_path / "neptune.toml"
        config.write_text('[neptune-actions]\norganizations = ["sociomantic"]\ntoken-env = "GH_TOKEN"\n')
        monkeypatch.setenv("GH_TOKEN", "other-secret")

        with patch.object(support_main, "GitHubTransport", return_value=FakeTransport()) as cls:
            exit_code = support_main.main(["--config", str(config)])

        assert exit_code == 0
        assert cls.call_args[0][0] == "other-secret"

    @pytest.mark.parametrize("value", ["0", "-1", "two"])
    def test_invalid_max_passes(self, monkeypatch, capsys, value):
        """Test --max-passes rejects values below one before anything is fetched."""
        monkeypatch.setenv("GITHUB_TOKEN", "secret")

        with patch.object(support_main, "GitHubTransport") as cls:
            with pytest.raises(SystemExit) as exc_info:
                support_main.main(["sociomantic", "--max-passes", value])

        assert exc_info.value.code == 2
        assert "--max-passes" in capsys.readouterr().err
        cls.assert_not_called()

    def test_max_passes(self, monkeypatch):
        """Test --max-passes is handed to the extractor."""
        monkeypatch.setenv("GITHUB_TOKEN", "secret")

        with patch.object(support_main, "GitHubTransport", return_value=FakeTransport()):
            with patch.object(support_main.LibraryExtractor, "extract_info", return_value=1) as extract:
                assert support_main.main(["sociomantic", "--max-passes", "1"]) == 0

        assert extract.call_args.kwargs["max_passes"] == 1

    def test_invalid_config(self, tmp_path, capsys):
        """Test an unreadable config file is an error."""
        assert support_main.main(["--config", str(tmp_path / "missing.toml")]) == 1
        assert "Could not load config" in capsys.readouterr().err
