"""Tests for the command line interface."""
from typer.testing import CliRunner

from stockchat.cli.app import app

runner = CliRunner()


class TestRenderCommand:
    """Tests for `stockchat render`."""

    def test_render_markdown_file(self, tmp_path):
        """Test rendering a markdown file to the console."""
        path = tmp_path / "answer.md"
        path.write_text("# Stock\n\n- apples **12**\n- pears 3\n", encoding="utf-8")

        result = runner.invoke(app, ["render", str(path)])

        assert result.exit_code == 0
        assert "Stock" in result.output
        assert "apples 12" in result.output

    def test_missing_file(self, tmp_path):
        """Test that a missing file is a usage error."""
        result = runner.invoke(app, ["render", str(tmp_path / "missing.md")])

        assert result.exit_code != 0


class TestSheetCommand:
    """Tests for `stockchat sheet`."""

    def test_requires_sheet_id(self, monkeypatch):
        """Test the error when no sheet is configured."""
        monkeypatch.delenv("STOCKCHAT_SHEET_ID", raising=False)

        result = runner.invoke(app, ["sheet"])

        assert result.exit_code == 1
        assert "STOCKCHAT_SHEET_ID not set" in result.output


class TestSettingsErrors:
    """Tests for invalid configuration handling."""

    def test_invalid_setting_exits(self, monkeypatch):
        """Test that an invalid variable is reported and exits with code 1."""
        monkeypatch.setenv("STOCKCHAT_REQUEST_TIMEOUT", "-5")

        result = runner.invoke(app, ["health"])

        assert result.exit_code == 1
        assert "STOCKCHAT_REQUEST_TIMEOUT" in result.output
