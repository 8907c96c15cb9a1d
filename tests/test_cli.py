"""
Tests for CLI interface.
"""

import json

import pytest
from click.testing import CliRunner

from cefcodec.cli.main import cli


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


class TestCLI:
    """Tests for CLI commands."""

    def test_cli_version(self, runner):
        """Test --version flag."""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_cli_help(self, runner):
        """Test --help flag."""
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Common Event Format" in result.output
        assert "parse" in result.output
        assert "serialize" in result.output

    def test_parse_help(self, runner):
        """Test parse --help."""
        result = runner.invoke(cli, ["parse", "--help"])
        assert result.exit_code == 0
        assert "--output" in result.output
        assert "--strict" in result.output


class TestParseCommand:
    """Tests for parse command."""

    def test_parse_json(self, runner, bare_line):
        """Test JSON output for a line argument."""
        result = runner.invoke(cli, ["parse", "--output", "json", bare_line])
        assert result.exit_code == 0

        records = json.loads(result.output)
        assert records[0]["device_vendor"] == "Security"
        assert records[0]["extensions"] == {"src": "10.0.0.1", "dst": "2.1.2.2", "spt": 1232}

    def test_parse_stdin(self, runner, sample_cef_lines):
        """Test reading lines from stdin."""
        result = runner.invoke(
            cli, ["parse", "-o", "json", "-"], input="\n".join(sample_cef_lines) + "\n"
        )
        assert result.exit_code == 0
        assert len(json.loads(result.output)) == len(sample_cef_lines)

    def test_parse_table(self, runner, syslog_line):
        """Test table output."""
        result = runner.invoke(cli, ["parse", syslog_line])
        assert result.exit_code == 0
        assert "threatmanager" in result.output
        assert "Total: 1 records" in result.output

    def test_parse_invalid_line(self, runner):
        """Invalid lines set a failing exit code."""
        result = runner.invoke(cli, ["parse", "not a cef line"])
        assert result.exit_code == 1

    def test_parse_strict(self, runner):
        """Strict mode fails on malformed extensions."""
        result = runner.invoke(cli, ["parse", "--strict", "CEF:0|a|b|c|d|e|5|a=b=c"])
        assert result.exit_code == 1


class TestTimestampCommand:
    """Tests for timestamp command."""

    def test_epoch(self, runner):
        """Epoch strings are echoed as floats."""
        result = runner.invoke(cli, ["timestamp", "1561554774.901402"])
        assert result.exit_code == 0
        assert result.output.strip() == "1561554774.901402"

    def test_invalid(self, runner):
        """Unparseable timestamps fail."""
        result = runner.invoke(cli, ["timestamp", "yesterday"])
        assert result.exit_code == 1


class TestSerializeCommand:
    """Tests for serialize command."""

    @pytest.fixture
    def record_file(self, tmp_path):
        path = tmp_path / "record.json"
        path.write_text(json.dumps({
            "version": 0,
            "device_vendor": "Fake",
            "device_product": "Product",
            "device_version": "0.1",
            "signature_id": 0,
            "signature": "Nothing",
            "severity": 6,
            "extensions": {"a": "subtest", "b": 695217},
        }))
        return path

    def test_serialize_file(self, runner, record_file):
        """Test serializing a JSON record file."""
        result = runner.invoke(cli, ["serialize", str(record_file)])
        assert result.exit_code == 0
        assert result.output.strip() == "CEF:0|Fake|Product|0.1|0|Nothing|6|a=subtest b=695217"

    def test_serialize_ldp(self, runner, record_file):
        """Test the LDP naming flag."""
        result = runner.invoke(cli, ["serialize", "--ldp", str(record_file)])
        assert result.exit_code == 0
        assert result.output.strip().endswith("a=subtest b_double=695217")

    def test_serialize_stdin_invalid_json(self, runner):
        """Invalid JSON fails."""
        result = runner.invoke(cli, ["serialize"], input="{not json")
        assert result.exit_code == 1

    def test_serialize_missing_field(self, runner):
        """Missing header fields fail."""
        result = runner.invoke(cli, ["serialize"], input=json.dumps({"version": 0}))
        assert result.exit_code == 1

    def test_serialize_invalid_severity(self, runner):
        """Severity validation is reported, not raised."""
        payload = {
            "device_vendor": "a", "device_product": "b", "device_version": "c",
            "signature_id": 1, "signature": "e", "severity": 42,
        }
        result = runner.invoke(cli, ["serialize"], input=json.dumps(payload))
        assert result.exit_code == 1
