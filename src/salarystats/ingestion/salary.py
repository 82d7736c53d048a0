"""
Salary dataset ingestion.

Reads the raw delimited file as text so that type coercion happens in one
place (the normalizer) and bad values can be reported with row context.
"""

import re
from pathlib import Path

import pandas as pd

from salarystats.config.loader import default_config
from salarystats.config.settings import PipelineConfig
from salarystats.exceptions import LoadError
from salarystats.ingestion.base import DataLoader
from salarystats.utils.logging import get_logger

log = get_logger(__name__)

# Byte-order marks as they appear after decoding with the wrong codec
BOM_ARTIFACTS: tuple[str, ...] = (
    "\ufeff",  # correctly decoded BOM
    "ï»¿",  # latin-1 / cp1252
    "п»ї",  # cp1251
    "ďťż",  # cp1250
    "∩╗┐",  # cp437
)

# Leading non-printable / non-ASCII junk directly in front of an ASCII name
_LEADING_JUNK = re.compile(r"^[^\x21-\x7e]+(?=[A-Za-z])")

MIN_COLUMNS = 6


def clean_header(name: str) -> str:
    """
    Strip encoding artifacts and surrounding whitespace from a header name.

    Examples:
        >>> clean_header("п»їAge")
        'Age'
        >>> clean_header("  Job Title ")
        'Job Title'
    """
    cleaned = str(name)
    for artifact in BOM_ARTIFACTS:
        cleaned = cleaned.replace(artifact, "")
    cleaned = cleaned.strip()
    return _LEADING_JUNK.sub("", cleaned)


class SalaryDatasetLoader(DataLoader):
    """Loader for the raw salary CSV."""

    source_name = "salary dataset"

    def _load_raw(self, path: Path) -> pd.DataFrame:
        """
        Read the delimited file with every cell as text.

        The header line is parsed as an ordinary row so that it fixes the
        field count: a data row with more fields is a parser error instead
        of being read as an implicit index.
        """
        raw = pd.read_csv(
            path,
            sep=self.config.data.delimiter,
            encoding=self.config.data.encoding,
            header=None,
            dtype=str,
            keep_default_na=False,
        )

        header = [str(name) for name in raw.iloc[0]]
        renamed = {name: clean_header(name) for name in header}
        artifacts = {k: v for k, v in renamed.items() if k != v}
        if artifacts:
            log.warning("Stripped header artifacts", renamed=artifacts)

        df = raw.iloc[1:].reset_index(drop=True)
        df.columns = [renamed[name] for name in header]
        return df

    def _validate(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Check header and row shape.

        Short rows are padded with NaN by the parser; with
        ``keep_default_na=False`` a real blank cell is an empty string,
        so any NaN marks a row with too few fields.
        """
        names = list(df.columns)
        if "" in names:
            msg = f"Salary dataset has blank header names: {names}"
            raise LoadError(msg)

        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            msg = f"Salary dataset has duplicate header names: {duplicates}"
            raise LoadError(msg)

        if len(names) < MIN_COLUMNS:
            msg = (
                f"Salary dataset has {len(names)} columns, "
                f"expected at least {MIN_COLUMNS}: {names}"
            )
            raise LoadError(msg)

        short_rows = df.index[df.isna().any(axis=1)]
        if len(short_rows) > 0:
            # +2: 1-based numbering plus the header line
            lines = [int(i) + 2 for i in short_rows[:5]]
            msg = (
                f"Salary dataset has {len(short_rows)} row(s) with too few "
                f"fields (lines {lines})"
            )
            raise LoadError(msg)

        return df


def load_salary_dataset(
    source: PipelineConfig | Path | str, *, validate: bool = True
) -> pd.DataFrame:
    """
    Convenience function to load the raw salary table.

    Args:
        source: Pipeline configuration, or a path to the CSV (defaults apply).
        validate: Whether to run structural validation.

    Returns:
        Raw DataFrame with cleaned header names and text cells.
    """
    config = source if isinstance(source, PipelineConfig) else default_config(Path(source))
    return SalaryDatasetLoader(config).load(validate=validate)
