"""
Configuration management with typed Pydantic models.

Provides YAML loading with environment interpolation and base-config
inheritance, plus defaults for running on a bare input file.
"""

from salarystats.config.loader import build_config, default_config, load_config
from salarystats.config.settings import (
    AgeBand,
    CleaningConfig,
    DataConfig,
    ExportFormat,
    LoggingConfig,
    OutputConfig,
    PipelineConfig,
    ReportConfig,
    StdConvention,
)

__all__ = [
    "AgeBand",
    "CleaningConfig",
    "DataConfig",
    "ExportFormat",
    "LoggingConfig",
    "OutputConfig",
    "PipelineConfig",
    "ReportConfig",
    "StdConvention",
    "build_config",
    "default_config",
    "load_config",
]
