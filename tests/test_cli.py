"""Tests for CLI interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from psychrocalc.calculation.csv_format import OUTPUT_COLUMNS, generate_sample_csv
from psychrocalc.core.config import PsychroConfig, load_config
from psychrocalc.main import app, main

runner = CliRunner()


class TestCalcCommand:
    """Tests for the calc command."""

    def test_table_output(self) -> None:
        """Prints the property table."""
        result = runner.invoke(app, ["calc", "dbt_wbt", "25", "20"])

        assert result.exit_code == 0
        assert "Psychrometric Properties" in result.stdout
        assert "Humidity Ratio" in result.stdout
        assert "101.325" in result.stdout

    def test_json_output(self) -> None:
        """--json prints the rounded state."""
        result = runner.invoke(
            app, ["calc", "dbt_rh", "30", "65", "--altitude", "500", "--json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["dbt"] == 30.0
        assert data["rh"] == 65.0
        assert data["converged"] is True
        assert data["dpt"] < data["wbt"] < data["dbt"]

    def test_negative_temperature(self) -> None:
        """Sub-zero values are read as arguments, not options."""
        result = runner.invoke(app, ["calc", "dbt_dpt", "5", "-3"])

        assert result.exit_code == 0
        assert "Psychrometric Properties" in result.stdout

    def test_negative_temperatures_with_options(self) -> None:
        """Negative values mix with known options."""
        result = runner.invoke(
            app, ["calc", "dbt_wbt", "-2.5", "-4", "-a", "300", "--json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["dbt"] == -2.5
        assert data["wbt"] == -4.0
        assert data["pressure"] < 101.325

    def test_invalid_kind(self) -> None:
        """Unknown kinds exit with an error."""
        result = runner.invoke(app, ["calc", "bogus", "25", "20"])

        assert result.exit_code == 1
        assert "Invalid input kind" in result.stdout

    def test_validation_error(self) -> None:
        """Out-of-range inputs are rejected before resolving."""
        result = runner.invoke(app, ["calc", "dbt_wbt", "20", "25"])

        assert result.exit_code == 1
        assert "cannot be greater than dry bulb" in result.stdout

    def test_altitude_limit(self) -> None:
        """Single calculations are limited to 10 000 m."""
        result = runner.invoke(app, ["calc", "dbt_rh", "25", "50", "-a", "15000"])

        assert result.exit_code == 1
        assert "Altitude must be between" in result.stdout

    def test_fallback_warning_shown(self) -> None:
        """Solver fallbacks are reported."""
        result = runner.invoke(app, ["calc", "wbt_rh", "20", "0"])

        assert result.exit_code == 0
        assert "Warning:" in result.stdout

    def test_with_config(self, tmp_path: Path) -> None:
        """Solver settings are read from the config file."""
        config = tmp_path / "psychro.yaml"
        config.write_text("solver:\n  fixed_point_max_iter: 1\n")

        result = runner.invoke(
            app,
            ["calc", "dbt_rh", "30", "65", "-a", "500", "--json", "-c", str(config)],
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout)["converged"] is False

    def test_missing_config(self) -> None:
        """A missing config file is an error."""
        result = runner.invoke(
            app, ["calc", "dbt_wbt", "25", "20", "--config", "/nonexistent/c.yaml"]
        )

        assert result.exit_code == 1
        assert "not found" in result.stdout


class TestBatchCommand:
    """Tests for the batch command."""

    def test_writes_output(self, sample_csv_path: Path, tmp_path: Path) -> None:
        """Processes the file and writes the output CSV."""
        output = tmp_path / "out.csv"

        result = runner.invoke(app, ["batch", str(sample_csv_path), "-o", str(output)])

        assert result.exit_code == 0
        assert "Succeeded: 5" in result.stdout
        lines = output.read_text().split("\n")
        assert lines[0] == ",".join(OUTPUT_COLUMNS)
        assert len(lines) == 6

    def test_default_output_path(self, sample_csv_path: Path) -> None:
        """Output defaults to <input>_results.csv."""
        result = runner.invoke(app, ["batch", str(sample_csv_path), "-q"])

        assert result.exit_code == 0
        assert (sample_csv_path.parent / "readings_results.csv").exists()

    def test_quiet(self, sample_csv_path: Path, tmp_path: Path) -> None:
        """Quiet mode prints nothing."""
        result = runner.invoke(
            app, ["batch", str(sample_csv_path), "-o", str(tmp_path / "o.csv"), "-q"]
        )

        assert result.exit_code == 0
        assert result.stdout.strip() == ""

    def test_invalid_file(self, tmp_path: Path) -> None:
        """Validation errors stop processing."""
        path = tmp_path / "bad.csv"
        path.write_text("InputType,Value1,Value2,Altitude\nbogus,25,20,0\n")

        result = runner.invoke(app, ["batch", str(path)])

        assert result.exit_code == 1
        assert "Row 2: Invalid InputType 'bogus'" in result.stdout
        assert not (tmp_path / "bad_results.csv").exists()

    def test_missing_file(self) -> None:
        """A missing input file is an error."""
        result = runner.invoke(app, ["batch", "/nonexistent/input.csv"])

        assert result.exit_code == 1
        assert "not found" in result.stdout


class TestSampleCommand:
    """Tests for the sample command."""

    def test_writes_template(self, tmp_path: Path) -> None:
        """Writes the sample template."""
        output = tmp_path / "template.csv"

        result = runner.invoke(app, ["sample", "-o", str(output)])

        assert result.exit_code == 0
        assert output.read_text() == generate_sample_csv()
        assert "Created:" in result.stdout


class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid_file(self, sample_csv_path: Path) -> None:
        """A valid file reports its row count."""
        result = runner.invoke(app, ["validate", str(sample_csv_path)])

        assert result.exit_code == 0
        assert "Valid:" in result.stdout
        assert "5 rows" in result.stdout

    def test_invalid_file(self, tmp_path: Path) -> None:
        """Errors are listed and the exit code is 1."""
        path = tmp_path / "bad.csv"
        path.write_text("InputType,Value1,Value2,Altitude\ndbt_rh,30,150,0\n")

        result = runner.invoke(app, ["validate", str(path)])

        assert result.exit_code == 1
        assert "Relative humidity must be between 0% and 100%" in result.stdout

    def test_warnings_listed(self, tmp_path: Path) -> None:
        """Warnings do not fail validation."""
        path = tmp_path / "extra.csv"
        path.write_text("InputType,Value1,Value2,Altitude,Site\ndbt_wbt,25,20,0,A\n")

        result = runner.invoke(app, ["validate", str(path)])

        assert "Extra columns found" in result.stdout


class TestInitConfigCommand:
    """Tests for the init-config command."""

    def test_writes_defaults(self, tmp_path: Path) -> None:
        """Writes a loadable default configuration."""
        output = tmp_path / "psychro.yaml"

        result = runner.invoke(app, ["init-config", "-o", str(output)])

        assert result.exit_code == 0
        assert load_config(output) == PsychroConfig()


class TestMain:
    """Tests for the entry point."""

    def test_no_args_shows_help(self) -> None:
        """Running without a command prints usage."""
        result = runner.invoke(app, [])
        assert "calc" in result.output

    def test_verbose_flag(self) -> None:
        """The verbose flag is accepted before a command."""
        result = runner.invoke(app, ["--verbose", "calc", "dbt_wbt", "25", "20"])
        assert result.exit_code == 0

    def test_main_returns_exit_code(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """main() converts SystemExit into a return code."""
        output = tmp_path / "t.csv"
        monkeypatch.setattr("sys.argv", ["psychro", "sample", "-o", str(output)])

        assert main() == 0
        assert output.exists()
