"""Tests for configuration system."""

from pathlib import Path
from typing import Any

import pytest
import yaml
from pydantic import ValidationError

from salarystats.config import (
    AgeBand,
    CleaningConfig,
    ExportFormat,
    ReportConfig,
    StdConvention,
    build_config,
    default_config,
    load_config,
)
from salarystats.exceptions import ConfigurationError


def _write_yaml(path: Path, data: dict[str, Any]) -> Path:
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestDefaults:
    """Tests for default configuration values."""

    def test_cleaning_defaults(self) -> None:
        """Test the cleaning thresholds and rewrite maps."""
        config = CleaningConfig()
        assert config.min_working_age == 16
        assert config.salary_floor == 10000
        assert config.salary_inspect_ceiling == 500000
        assert config.education_rewrites == {
            "Bachelor's Degree": "Bachelor's",
            "Master's Degree": "Master's",
        }
        assert config.job_title_rewrites["Juniour HR Coordinator"] == "Junior HR Coordinator"

    def test_report_defaults(self) -> None:
        """Test report threshold, std convention and bands."""
        config = ReportConfig()
        assert config.count_threshold == 20
        assert config.std_convention is StdConvention.POPULATION
        assert config.top_n is None
        assert config.education_order == ["High School", "Bachelor's", "Master's", "PhD"]
        assert [band.lower for band in config.age_bands] == [21, 25, 35, 45]

    def test_std_convention_ddof(self) -> None:
        """Test population and sample ddof."""
        assert StdConvention.POPULATION.ddof == 0
        assert StdConvention.SAMPLE.ddof == 1

    def test_default_config_paths(self, tmp_path: Path) -> None:
        """Test output paths derive from root and project."""
        config = default_config(tmp_path / "in.csv", output={"root": str(tmp_path)})
        assert config.input_path == tmp_path / "in.csv"
        assert config.output_dir == tmp_path / "salary"
        assert config.reports_dir == tmp_path / "salary" / "reports"

    def test_config_is_frozen(self, tmp_path: Path) -> None:
        """Test that configuration models are immutable."""
        config = default_config(tmp_path / "in.csv")
        with pytest.raises(ValidationError):
            config.project = "other"  # type: ignore[misc]


class TestAgeBand:
    """Tests for AgeBand and band validation."""

    def test_contains_bounds(self) -> None:
        """Test that both bounds are inclusive."""
        band = AgeBand(label="2) Young Adults (25–34)", lower=25, upper=34)
        assert band.contains(25)
        assert band.contains(34)
        assert not band.contains(35)

    def test_lower_above_upper(self) -> None:
        """Test that an inverted band is rejected."""
        with pytest.raises(ValidationError, match="lower"):
            AgeBand(label="bad", lower=40, upper=30)

    def test_overlapping_bands(self) -> None:
        """Test that overlapping bands are rejected."""
        with pytest.raises(ValidationError, match="overlap"):
            ReportConfig(
                age_bands=[
                    AgeBand(label="a", lower=20, upper=30),
                    AgeBand(label="b", lower=30, upper=40),
                ]
            )

    def test_duplicate_education_order(self) -> None:
        """Test that a repeated education level is rejected."""
        with pytest.raises(ValidationError, match="duplicates"):
            ReportConfig(education_order=["PhD", "PhD"])


class TestLoadConfig:
    """Tests for YAML configuration loading."""

    def test_load_valid_config(self, tmp_path: Path, base_config: dict[str, Any]) -> None:
        """Test loading a valid configuration file."""
        path = _write_yaml(tmp_path / "config.yaml", base_config)
        config = load_config(path)

        assert config.project == "salary-test"
        assert config.reports.count_threshold == 20
        assert config.output.formats == [ExportFormat.CSV, ExportFormat.JSON]

    def test_relative_input_resolved(self, tmp_path: Path) -> None:
        """Test that data.input is resolved against the config directory."""
        config_dir = tmp_path / "configs"
        config_dir.mkdir()
        path = _write_yaml(config_dir / "c.yaml", {"data": {"input": "../data/s.csv"}})

        config = load_config(path)
        assert config.input_path == config_dir / "../data/s.csv"

    def test_relative_output_root_resolved(self, tmp_path: Path) -> None:
        """Test that output.root is resolved against the config directory."""
        config_dir = tmp_path / "configs"
        config_dir.mkdir()
        path = _write_yaml(
            config_dir / "c.yaml",
            {"project": "p", "data": {"input": "/x.csv"}, "output": {"root": "./out"}},
        )

        config = load_config(path)
        assert config.output.output_root == config_dir / "out"
        assert config.output_dir == config_dir / "out" / "p"

    def test_env_interpolation(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test ${VAR} and ${VAR:default} substitution."""
        monkeypatch.setenv("SALARY_PROJECT", "from-env")
        monkeypatch.delenv("SALARY_MISSING", raising=False)
        path = tmp_path / "c.yaml"
        path.write_text(
            "project: ${SALARY_PROJECT}\n"
            "data:\n"
            "  input: ${SALARY_MISSING:/data/fallback.csv}\n",
            encoding="utf-8",
        )

        config = load_config(path)
        assert config.project == "from-env"
        assert config.input_path == Path("/data/fallback.csv")

    def test_unset_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that a variable without default must be set."""
        monkeypatch.delenv("SALARY_MISSING", raising=False)
        path = tmp_path / "c.yaml"
        path.write_text("data:\n  input: ${SALARY_MISSING}\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="'SALARY_MISSING' used by 'data.input'"):
            load_config(path)

    def test_base_config_merged(self, tmp_path: Path) -> None:
        """Test that a sibling base.yaml is merged underneath."""
        _write_yaml(
            tmp_path / "base.yaml",
            {"cleaning": {"salary_floor": 5000, "min_working_age": 18}},
        )
        path = _write_yaml(
            tmp_path / "run.yaml",
            {"data": {"input": "/x.csv"}, "cleaning": {"salary_floor": 12000}},
        )

        config = load_config(path)
        assert config.cleaning.salary_floor == 12000
        assert config.cleaning.min_working_age == 18

    def test_shipped_default_config(self, project_root: Path) -> None:
        """Test that the example configuration loads."""
        config = load_config(project_root / "configs" / "default.yaml")
        assert config.cleaning.salary_floor == 10000
        assert len(config.cleaning.job_title_rewrites) == 7
        assert config.reports.std_convention is StdConvention.POPULATION

    def test_missing_input(self, tmp_path: Path) -> None:
        """Test that data.input is required."""
        path = _write_yaml(tmp_path / "c.yaml", {"project": "x"})
        with pytest.raises(ConfigurationError, match=r"data\.input"):
            load_config(path)

    def test_duplicate_keys_rejected(self, tmp_path: Path) -> None:
        """Test that a duplicate mapping key is a configuration error."""
        path = tmp_path / "c.yaml"
        path.write_text(
            "data:\n  input: a.csv\n"
            "cleaning:\n  education_rewrites:\n"
            "    Bachelors: \"Bachelor's\"\n"
            "    Bachelors: \"Master's\"\n",
            encoding="utf-8",
        )
        with pytest.raises(ConfigurationError, match="Duplicate key"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Test that unparsable YAML is a configuration error."""
        path = tmp_path / "c.yaml"
        path.write_text("data: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Cannot parse"):
            load_config(path)

    def test_invalid_value(self, base_config: dict[str, Any]) -> None:
        """Test that model validation errors become ConfigurationError."""
        base_config["reports"]["count_threshold"] = -1
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            build_config(base_config)

    def test_section_must_be_mapping(self, base_config: dict[str, Any]) -> None:
        """Test that a scalar section is rejected."""
        base_config["cleaning"] = "strict"
        with pytest.raises(ConfigurationError, match="cleaning"):
            build_config(base_config)
