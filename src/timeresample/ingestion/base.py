"""
Base classes for table sources.

A table source is a caller-owned handle that produces a DataFrame and
validates it against the declared column types at the system boundary.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping

import pandas as pd
import pandera.pandas as pa

from timeresample.schemas.table import ColumnType, build_table_schema
from timeresample.utils.logging import get_logger

log = get_logger(__name__)


class TableSource(ABC):
    """
    Abstract base class for table sources.

    Subclasses implement ``_load_raw``; ``load`` adds logging and schema
    validation.
    """

    def __init__(self, columns: Mapping[str, ColumnType | str] | None = None) -> None:
        """
        Initialize table source.

        Args:
            columns: Declared column types. Undeclared columns are passed
                through unchecked.
        """
        self.columns = {name: ColumnType(t) for name, t in (columns or {}).items()}
        self.schema: pa.DataFrameSchema = build_table_schema(
            self.columns, name=self.__class__.__name__
        )

    @abstractmethod
    def _load_raw(self) -> pd.DataFrame:
        """Load raw data from source. Implemented by subclasses."""
        ...

    def load(self, *, validate: bool = True) -> pd.DataFrame:
        """
        Load and optionally validate data.

        Args:
            validate: Whether to validate against the declared schema.

        Returns:
            Loaded (and optionally validated) DataFrame.

        Raises:
            FileNotFoundError: If the underlying file does not exist.
            pandera.errors.SchemaError: If validation fails.
        """
        log.info("Loading table", source=self.__class__.__name__)

        df = self._load_raw()
        log.info("Loaded raw table", rows=len(df), columns=list(df.columns))

        if validate and self.columns:
            df = self.schema.validate(df)
            log.info("Schema validation passed", columns=len(self.columns))

        return df
