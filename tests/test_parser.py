"""Tests for parser utilities."""

import pytest
from datetime import date

from neptune_actions.common.parser import (
    VersionParseError,
    metadata_tokens,
    parse_config_file,
    parse_timestamp,
    parse_version_tag,
    prerelease_tokens,
)


class TestParseVersionTag:
    """Tests for release tag parsing."""

    def test_with_v_prefix(self):
        """Test tags with a leading v."""
        version = parse_version_tag("v1.2.3")
        assert (version.major, version.minor, version.patch) == (1, 2, 3)

    def test_without_prefix(self):
        """Test plain version tags."""
        assert str(parse_version_tag("4.0.1")) == "4.0.1"

    def test_prerelease(self):
        """Test prerelease identifiers are split into tokens."""
        version = parse_version_tag("v1.0.0-rc.1")
        assert prerelease_tokens(version) == ("rc", "1")

    def test_build_metadata(self):
        """Test build metadata is split into tokens."""
        version = parse_version_tag("v2.0.0+d2")
        assert metadata_tokens(version) == frozenset({"d2"})
        assert metadata_tokens(parse_version_tag("v2.0.0+d2.auto")) == frozenset({"d2", "auto"})

    def test_no_prerelease_or_metadata(self):
        """Test plain versions have no tokens."""
        version = parse_version_tag("v1.0.0")
        assert prerelease_tokens(version) == ()
        assert metadata_tokens(version) == frozenset()

    def test_release_orders_after_release_candidate(self):
        """Test a final release is greater than its release candidates."""
        assert parse_version_tag("v1.0.0") > parse_version_tag("v1.0.0-rc.2")
        assert parse_version_tag("v1.0.0-rc.2") > parse_version_tag("v1.0.0-rc.1")
        assert parse_version_tag("v1.0.1-rc.1") > parse_version_tag("v1.0.0")

    @pytest.mark.parametrize("tag", ["v1.2", "nightly", "v1.2.3.4", "", "vv1.0.0", "v01.0.0"])
    def test_invalid(self, tag):
        """Test malformed tags raise VersionParseError."""
        with pytest.raises(VersionParseError) as excinfo:
            parse_version_tag(tag)
        assert excinfo.value.tag == tag

    def test_error_is_value_error(self):
        """Test VersionParseError can be handled as ValueError."""
        with pytest.raises(ValueError):
            parse_version_tag("not-a-version")


class TestParseTimestamp:
    """Tests for GitHub timestamp parsing."""

    def test_utc_suffix(self):
        """Test timestamps with a Z suffix."""
        assert parse_timestamp("2018-03-01T12:00:00Z") == date(2018, 3, 1)

    def test_offset(self):
        """Test timestamps with an explicit offset."""
        assert parse_timestamp("2018-03-01T23:30:00+00:00") == date(2018, 3, 1)

    def test_empty(self):
        """Test empty timestamps are rejected."""
        with pytest.raises(ValueError):
            parse_timestamp("")

    def test_garbage(self):
        """Test malformed timestamps are rejected."""
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")


class TestParseConfigFile:
    """Tests for TOML config parsing."""

    def test_parse(self, tmp_path):
        """Test reading a TOML file."""
        path = tmp_path / "neptune.toml"
        path.write_text('[neptune-actions]\norganizations = ["sociomantic"]\n')

        data = parse_config_file(path)
        assert data["neptune-actions"]["organizations"] == ["sociomantic"]

    def test_missing(self, tmp_path):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            parse_config_file(tmp_path / "missing.toml")
