"""
Base class for raw table loaders.

A loader reads one file into a fresh DataFrame of text cells, checks its
shape and hands it over; it keeps no reference to what it returned.
"""

from abc import ABC, abstractmethod
from pathlib import Path

import pandas as pd

from salarystats.config.settings import PipelineConfig
from salarystats.exceptions import LoadError
from salarystats.utils.logging import get_logger

log = get_logger(__name__)


class DataLoader(ABC):
    """
    Abstract base class for raw table loaders.

    Subclasses implement ``_load_raw`` (parse the file) and ``_validate``
    (check its structure). Reader failures are translated to LoadError here
    so every loader reports them the same way.
    """

    #: Human-readable name used in error messages.
    source_name = "dataset"

    def __init__(self, config: PipelineConfig) -> None:
        self.config = config

    @property
    def source_path(self) -> Path:
        """Path of the configured input file."""
        return self.config.data.input_path

    @abstractmethod
    def _load_raw(self, path: Path) -> pd.DataFrame:
        """Parse ``path`` into a DataFrame of text cells."""

    @abstractmethod
    def _validate(self, df: pd.DataFrame) -> pd.DataFrame:
        """Check the structure of a parsed frame, raising LoadError."""

    def load(self, *, validate: bool = True) -> pd.DataFrame:
        """
        Read the source file and optionally check its structure.

        Args:
            validate: Whether to run the structural checks.

        Returns:
            A new DataFrame owned by the caller.

        Raises:
            LoadError: If the file is missing, unreadable, undecodable,
                empty or malformed.
        """
        path = self.source_path
        if not path.is_file():
            msg = f"{self.source_name.capitalize()} not found: {path}"
            raise LoadError(msg)

        encoding = self.config.data.encoding
        try:
            df = self._load_raw(path)
        except UnicodeDecodeError as e:
            msg = f"Cannot decode {path} as {encoding}: {e}"
            raise LoadError(msg) from e
        except pd.errors.EmptyDataError as e:
            msg = f"{self.source_name.capitalize()} is empty: {path}"
            raise LoadError(msg) from e
        except pd.errors.ParserError as e:
            msg = f"Malformed {self.source_name} {path}: {e}"
            raise LoadError(msg) from e
        except OSError as e:
            msg = f"Cannot read {self.source_name} {path}: {e}"
            raise LoadError(msg) from e

        log.info(
            "Read raw table",
            loader=type(self).__name__,
            rows=len(df),
            columns=list(df.columns),
        )

        if validate:
            df = self._validate(df)
        return df
