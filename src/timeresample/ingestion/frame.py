"""In-memory table source."""

from collections.abc import Mapping

import pandas as pd

from timeresample.ingestion.base import TableSource
from timeresample.schemas.table import ColumnType


class FrameTableSource(TableSource):
    """Wraps an existing DataFrame owned by the caller."""

    def __init__(
        self,
        frame: pd.DataFrame,
        columns: Mapping[str, ColumnType | str] | None = None,
    ) -> None:
        super().__init__(columns)
        self.frame = frame

    def _load_raw(self) -> pd.DataFrame:
        # Later steps never modify their input, but the caller still owns the frame
        return self.frame.copy()
