"""Integration tests for the pack CLI command."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from panelcut.cli.main import app

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures" / "jobs"


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


class TestPackCommand:
    """Tests for the pack command."""

    def test_text_report(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["pack", str(FIXTURES_PATH / "six_panels.json")])

        assert result.exit_code == 0
        assert "CUTTING LAYOUT" in result.output
        assert "Sheets used: 1" in result.output

    def test_json_to_stdout(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["pack", str(FIXTURES_PATH / "six_panels.json"), "--format", "json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert len(data["sheets"]) == 1
        assert sum(len(s["placements"]) for s in data["sheets"]) == 6

    def test_json_to_file(self, runner: CliRunner, tmp_path: Path) -> None:
        output = tmp_path / "layout.json"
        result = runner.invoke(
            app,
            ["pack", str(FIXTURES_PATH / "kitchen.json"), "-f", "json", "-o", str(output)],
        )

        assert result.exit_code == 0
        assert "Layout written to" in result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert sum(len(s["placements"]) for s in data["sheets"]) == 20

    def test_optimize_with_seed(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app,
            [
                "pack",
                str(FIXTURES_PATH / "kitchen.json"),
                "--optimize",
                "--seed",
                "3",
                "--time-budget",
                "0.5",
            ],
        )

        assert result.exit_code == 0
        assert "Pieces placed: 20" in result.output

    def test_show_cuts(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["pack", str(FIXTURES_PATH / "six_panels.json"), "--show-cuts"]
        )

        assert result.exit_code == 0
        assert "Cuts:" in result.output

    def test_unknown_format(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["pack", str(FIXTURES_PATH / "six_panels.json"), "--format", "xml"]
        )

        assert result.exit_code == 1
        assert "Unknown format" in result.output

    def test_packing_failure_exits_with_error(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["pack", str(FIXTURES_PATH / "oversized.json")])

        assert result.exit_code == 1
        assert "PACKING FAILED" in result.output
        assert "big" in result.output

    def test_invalid_job_exits_with_error(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["pack", str(FIXTURES_PATH / "invalid_grain.json")])

        assert result.exit_code == 1
        assert "Validation failed" in result.output
