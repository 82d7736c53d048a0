"""
Export report tables for BI tools.

Writes each report as CSV and/or JSON (records orientation, nulls as
``null``), the working set as ``salary_wrk.csv`` and a JSON run manifest.
"""

import json
import math
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pandas as pd

from salarystats.config.settings import ExportFormat
from salarystats.utils.logging import get_logger

if TYPE_CHECKING:
    from salarystats.etl.working_set import WorkingSet

log = get_logger(__name__)

WORKING_SET_FILENAME = "salary_wrk.csv"
MANIFEST_FILENAME = "manifest.json"


def _sanitize_for_json(obj: Any) -> Any:
    """
    Recursively sanitize data for JSON serialization.

    Replaces NaN/Infinity/pd.NA with None (becomes null in JSON).
    """
    if obj is None:
        return None
    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            return None
        return obj
    if isinstance(obj, dict):
        return {str(k): _sanitize_for_json(v) for k, v in obj.items()}
    if isinstance(obj, list | tuple):
        return [_sanitize_for_json(item) for item in obj]
    if isinstance(obj, Path):
        return str(obj)
    if obj is pd.NA:
        return None
    # Handle numpy types
    if hasattr(obj, "item"):  # numpy scalar
        val = obj.item()
        if isinstance(val, float) and (math.isnan(val) or math.isinf(val)):
            return None
        return val
    return obj


def report_records(report: pd.DataFrame) -> list[dict[str, Any]]:
    """Report rows as JSON-safe dictionaries."""
    records = report.astype(object).to_dict(orient="records")
    return _sanitize_for_json(records)


def export_reports(
    reports: Mapping[str, pd.DataFrame],
    directory: Path,
    formats: Iterable[ExportFormat] = (ExportFormat.CSV, ExportFormat.JSON),
) -> list[Path]:
    """
    Write every report to ``directory``.

    Args:
        reports: Report name to table.
        directory: Target directory (created if missing).
        formats: File formats to write.

    Returns:
        Paths written, in report order.
    """
    directory.mkdir(parents=True, exist_ok=True)
    formats = list(formats)
    written: list[Path] = []

    for name, report in reports.items():
        if ExportFormat.CSV in formats:
            path = directory / f"{name}.csv"
            report.to_csv(path, index=False)
            written.append(path)
        if ExportFormat.JSON in formats:
            path = directory / f"{name}.json"
            with path.open("w", encoding="utf-8") as f:
                json.dump(report_records(report), f, indent=2, ensure_ascii=False, allow_nan=False)
            written.append(path)

    log.info("Exported reports", directory=str(directory), files=len(written))
    return written


def export_working_set(working_set: "WorkingSet", directory: Path) -> Path:
    """Write the working set as ``salary_wrk.csv`` in ``directory``."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / WORKING_SET_FILENAME
    working_set.frame().to_csv(path, index=False)
    log.info("Exported working set", path=str(path), rows=len(working_set))
    return path


def write_manifest(payload: Mapping[str, Any], directory: Path) -> Path:
    """Write the run manifest as JSON in ``directory``."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / MANIFEST_FILENAME
    with path.open("w", encoding="utf-8") as f:
        json.dump(
            _sanitize_for_json(dict(payload)), f, indent=2, ensure_ascii=False, allow_nan=False
        )
    return path
