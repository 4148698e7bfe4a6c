"""CSV table source."""

from collections.abc import Callable, Iterable, Mapping
from pathlib import Path

import pandas as pd

from timeresample.ingestion.base import TableSource
from timeresample.schemas.table import ColumnType
from timeresample.utils.logging import get_logger

log = get_logger(__name__)


class CsvTableSource(TableSource):
    """
    Loads a table from a CSV file.

    Columns declared as strings, and columns listed in ``text_columns``, are
    read as text so that date strings such as ``20160712`` and identifiers
    keep their exact spelling. Other columns use pandas type inference
    before schema coercion.
    """

    def __init__(
        self,
        path: Path,
        columns: Mapping[str, ColumnType | str] | None = None,
        *,
        text_columns: Iterable[str] = (),
        column_key: Callable[[str], str] | None = None,
        delimiter: str = ",",
        encoding: str = "utf-8",
    ) -> None:
        """
        Initialize CSV source.

        Args:
            path: CSV file.
            columns: Declared column types, keyed by header name.
            text_columns: Further columns to read as text.
            column_key: Maps a header name to the name matched against
                ``text_columns``, e.g. the name after renaming.
            delimiter: Field delimiter.
            encoding: File encoding.
        """
        super().__init__(columns)
        self.path = path
        self.text_columns = frozenset(text_columns)
        self.column_key = column_key
        self.delimiter = delimiter
        self.encoding = encoding

    def _text_dtypes(self) -> dict[str, str]:
        dtypes = {
            name: "string" for name, t in self.columns.items() if t is ColumnType.STRING
        }
        if self.text_columns:
            header = pd.read_csv(
                self.path, sep=self.delimiter, encoding=self.encoding, nrows=0
            ).columns
            key = self.column_key or str
            for name in header:
                if key(str(name)) in self.text_columns:
                    dtypes[name] = "string"
        return dtypes

    def _load_raw(self) -> pd.DataFrame:
        """Load the CSV file."""
        if not self.path.exists():
            msg = f"Input table not found: {self.path}"
            raise FileNotFoundError(msg)

        log.info("Reading CSV", path=str(self.path))

        return pd.read_csv(
            self.path,
            sep=self.delimiter,
            encoding=self.encoding,
            dtype=self._text_dtypes() or None,
        )
