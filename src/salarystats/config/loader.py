"""
Configuration loading utilities.

Supports environment variable interpolation and config inheritance.
A minimal config only needs ``data.input``; everything else has defaults.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from salarystats.config.settings import (
    CleaningConfig,
    DataConfig,
    LoggingConfig,
    OutputConfig,
    PipelineConfig,
    ReportConfig,
)
from salarystats.exceptions import ConfigurationError


class _UniqueKeyLoader(yaml.SafeLoader):
    """Safe YAML loader that rejects duplicate mapping keys."""

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> Any:
        seen: set[Any] = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)  # type: ignore[no-untyped-call]
            if key in seen:
                msg = f"Duplicate key {key!r} {key_node.start_mark}"
                raise ConfigurationError(msg)
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


# ${VAR} or ${VAR:default}
_ENV_VAR = re.compile(
    r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::(?P<default>[^}]*))?\}"
)


def _interpolate(obj: Any, where: str = "") -> Any:
    """
    Substitute environment variables in every string of a parsed config.

    Raises:
        ConfigurationError: If a variable without default is unset.
    """
    if isinstance(obj, dict):
        prefix = f"{where}." if where else ""
        return {k: _interpolate(v, f"{prefix}{k}") for k, v in obj.items()}
    if isinstance(obj, list):
        return [_interpolate(item, f"{where}[{i}]") for i, item in enumerate(obj)]
    if not isinstance(obj, str):
        return obj

    def substitute(match: re.Match[str]) -> str:
        name, default = match.group("name"), match.group("default")
        value = os.environ.get(name, default)
        if value is None:
            msg = f"Environment variable '{name}' used by '{where}' is not set"
            raise ConfigurationError(msg)
        return value

    return _ENV_VAR.sub(substitute, obj)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` onto ``base``; nested mappings merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        below = merged.get(key)
        merged[key] = (
            _deep_merge(below, value)
            if isinstance(below, dict) and isinstance(value, dict)
            else value
        )
    return merged


def load_yaml(path: Path) -> dict[str, Any]:
    """
    Parse one YAML config file and substitute environment variables.

    Raises:
        ConfigurationError: On YAML syntax errors, duplicate keys, a
            non-mapping root or an unset variable.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        msg = f"Cannot read config {path}: {e}"
        raise ConfigurationError(msg) from e
    try:
        data = yaml.load(text, Loader=_UniqueKeyLoader)  # noqa: S506
    except yaml.YAMLError as e:
        msg = f"Cannot parse config {path}: {e}"
        raise ConfigurationError(msg) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Config root must be a mapping: {path}"
        raise ConfigurationError(msg)
    return _interpolate(data)


def _section(merged: dict[str, Any], name: str) -> dict[str, Any]:
    section = merged.get(name) or {}
    if not isinstance(section, dict):
        msg = f"Config section '{name}' must be a mapping"
        raise ConfigurationError(msg)
    return section


def _resolve(path: Path, config_dir: Path | None) -> Path:
    if config_dir is None or path.is_absolute():
        return path
    return config_dir / path


def build_config(merged: dict[str, Any], *, config_dir: Path | None = None) -> PipelineConfig:
    """
    Build a validated PipelineConfig from a plain dictionary.

    Relative ``data.input`` and ``output.root`` paths are resolved against
    ``config_dir``.

    Raises:
        ConfigurationError: If required keys are missing or values are invalid.
    """
    data_data = _section(merged, "data")
    input_path = data_data.get("input")
    if not input_path:
        msg = "Config must specify 'data.input'"
        raise ConfigurationError(msg)
    input_path = _resolve(Path(input_path), config_dir)

    try:
        data = DataConfig(
            input_path=input_path,
            delimiter=data_data.get("delimiter", ","),
            encoding=data_data.get("encoding", "utf-8-sig"),
        )

        cleaning_data = _section(merged, "cleaning")
        cleaning = CleaningConfig(**cleaning_data)

        reports_data = _section(merged, "reports")
        reports = ReportConfig(**reports_data)

        output_data = _section(merged, "output")
        output = OutputConfig(
            output_root=_resolve(Path(output_data.get("root", "./output")), config_dir),
            **({"formats": output_data["formats"]} if "formats" in output_data else {}),
        )

        logging_data = _section(merged, "logging")
        logging_config = LoggingConfig(**logging_data)

        return PipelineConfig(
            project=merged.get("project", "salary"),
            data=data,
            cleaning=cleaning,
            reports=reports,
            output=output,
            logging=logging_config,
        )
    except ValidationError as e:
        msg = f"Invalid configuration: {e}"
        raise ConfigurationError(msg) from e


def load_config(
    config_path: Path,
    base_path: Path | None = None,
) -> PipelineConfig:
    """
    Load pipeline configuration from YAML file(s).

    Minimal config requires only:
        - data.input: path to the raw salary CSV

    Args:
        config_path: Path to the main configuration file.
        base_path: Optional path to base configuration for inheritance.

    Returns:
        Fully validated PipelineConfig instance.

    Raises:
        ConfigurationError: If the file cannot be parsed or is invalid.
    """
    if base_path is None:
        sibling = config_path.parent / "base.yaml"
        if sibling.is_file() and sibling.resolve() != config_path.resolve():
            base_path = sibling

    merged = load_yaml(config_path)
    if base_path is not None:
        merged = _deep_merge(load_yaml(base_path), merged)
    return build_config(merged, config_dir=config_path.parent)


def default_config(input_path: Path, **overrides: Any) -> PipelineConfig:
    """
    Build a configuration with all defaults for a single input file.

    Args:
        input_path: Path to the raw salary CSV.
        **overrides: Top-level sections (e.g. ``reports={"top_n": 10}``).
    """
    merged = _deep_merge({"data": {"input": str(input_path)}}, overrides)
    return build_config(merged)
