"""Tests for the salarystats command-line interface."""

from pathlib import Path

import yaml
from typer.testing import CliRunner

from salarystats import __version__
from salarystats.cli import app

runner = CliRunner()


class TestVersion:
    """Tests for the version command."""

    def test_version(self) -> None:
        """Test that the package version is printed."""
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestValidate:
    """Tests for the validate command."""

    def test_valid_file(self, sample_csv: Path) -> None:
        """Test that the sample file loads and normalizes."""
        result = runner.invoke(app, ["validate", "--input", str(sample_csv)])
        assert result.exit_code == 0
        assert "Rows: 9" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing input exits with an error."""
        result = runner.invoke(app, ["validate", "--input", str(tmp_path / "nope.csv")])
        assert result.exit_code == 1

    def test_requires_source(self) -> None:
        """Test that neither --config nor --input is an error."""
        result = runner.invoke(app, ["validate"])
        assert result.exit_code == 1


class TestRun:
    """Tests for the run command."""

    def test_run_with_input(self, sample_csv: Path, tmp_path: Path) -> None:
        """Test a full run into an explicit output directory."""
        out = tmp_path / "out"
        result = runner.invoke(app, ["run", "--input", str(sample_csv), "--output", str(out)])

        assert result.exit_code == 0
        assert (out / "salary_wrk.csv").is_file()
        assert (out / "manifest.json").is_file()
        assert (out / "reports" / "salary_overall.csv").is_file()

    def test_run_with_config(self, sample_csv: Path, tmp_path: Path) -> None:
        """Test that output paths come from the config file."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            yaml.safe_dump(
                {
                    "project": "cli-test",
                    "data": {"input": str(sample_csv)},
                    "output": {"root": str(tmp_path / "output"), "formats": ["json"]},
                }
            ),
            encoding="utf-8",
        )
        result = runner.invoke(app, ["run", "--config", str(config_path)])

        assert result.exit_code == 0
        reports_dir = tmp_path / "output" / "cli-test" / "reports"
        assert (reports_dir / "salary_by_gender.json").is_file()
        assert not (reports_dir / "salary_by_gender.csv").exists()

    def test_invalid_config(self, tmp_path: Path) -> None:
        """Test that an invalid config exits with an error."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("cleaning:\n  salary_floor: 100\n", encoding="utf-8")
        result = runner.invoke(app, ["run", "--config", str(config_path)])
        assert result.exit_code == 1


class TestProfileAndAssess:
    """Tests for the profile and assess commands."""

    def test_profile(self, sample_csv: Path) -> None:
        """Test null counts with value counts for one column."""
        result = runner.invoke(
            app, ["profile", "--input", str(sample_csv), "--column", "gender"]
        )
        assert result.exit_code == 0
        assert "Null Counts" in result.output
        assert "gender values" in result.output

    def test_profile_unknown_column(self, sample_csv: Path) -> None:
        """Test that a non-text column has no value counts."""
        result = runner.invoke(app, ["profile", "--input", str(sample_csv), "--column", "age"])
        assert result.exit_code == 1

    def test_assess_warns_only(self, sample_csv: Path) -> None:
        """Test that unmapped education warns without failing."""
        result = runner.invoke(app, ["assess", "--input", str(sample_csv)])
        assert result.exit_code == 0
        assert "Working Set Assessment" in result.output
