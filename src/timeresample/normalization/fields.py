"""
Calendar-field extraction.

Fields are returned as nullable Int64 so that missing dates stay missing.
Sub-day fields (hour, minute, second) of a date-only value are 0.
"""

import re
from collections.abc import Iterable
from enum import Enum

import pandas as pd

from timeresample.normalization.dates import as_datetime
from timeresample.utils.logging import get_logger

log = get_logger(__name__)


class CalendarField(str, Enum):
    """Calendar fields that can be extracted from a date column."""

    YEAR = "year"
    QUARTER = "quarter"
    MONTH = "month"
    DAY = "day"
    DAY_OF_MONTH = "day_of_month"
    DAY_OF_YEAR = "day_of_year"
    DAY_OF_WEEK = "day_of_week"
    WEEK_OF_YEAR = "week_of_year"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"

    @classmethod
    def from_name(cls, name: "str | CalendarField") -> "CalendarField":
        """
        Resolve a field from its snake_case or camelCase name.

        Raises:
            ValueError: If the name is not a calendar field.
        """
        if isinstance(name, CalendarField):
            return name
        raw = name.strip()
        key = raw.lower() if raw.isupper() else re.sub(r"(?<!^)(?=[A-Z])", "_", raw).lower()
        try:
            return cls(key)
        except ValueError:
            valid = ", ".join(f.value for f in cls)
            msg = f"Unknown calendar field {name!r}. Valid: {valid}"
            raise ValueError(msg) from None


def extract(dates: pd.Series, field: "CalendarField | str") -> pd.Series:
    """
    Extract a calendar field from a date column.

    ``week_of_year`` is the ISO week number. ``day_of_week`` counts from
    1 (Sunday) to 7 (Saturday).

    Args:
        dates: Date or timestamp Series.
        field: Field to extract.

    Returns:
        Int64 Series, <NA> where the date is missing.
    """
    field = CalendarField.from_name(field)
    dt = as_datetime(dates).dt

    if field is CalendarField.WEEK_OF_YEAR:
        values = dt.isocalendar().week
    elif field is CalendarField.DAY_OF_WEEK:
        values = (dt.weekday + 1) % 7 + 1
    elif field in (CalendarField.DAY, CalendarField.DAY_OF_MONTH):
        values = dt.day
    elif field is CalendarField.DAY_OF_YEAR:
        values = dt.dayofyear
    else:
        values = getattr(dt, field.value)

    return values.astype("Int64").rename(dates.name)


def derive_calendar_fields(
    df: pd.DataFrame,
    column: str,
    fields: Iterable["CalendarField | str"],
    *,
    prefix: str = "",
) -> pd.DataFrame:
    """
    Add one column per calendar field derived from a date column.

    Output columns are named ``{prefix}{field}``, e.g. ``sale_month`` for
    prefix ``sale_`` and field ``month``.

    Args:
        df: Input table.
        column: Date column to derive from.
        fields: Fields to extract.
        prefix: Prefix for the new column names.

    Returns:
        New DataFrame with the derived columns appended.
    """
    if column not in df.columns:
        msg = f"Date column not found: {column!r}"
        raise ValueError(msg)

    resolved = [CalendarField.from_name(f) for f in fields]
    df = df.copy()
    for field in resolved:
        df[f"{prefix}{field.value}"] = extract(df[column], field)

    log.debug(
        "Derived calendar fields",
        column=column,
        fields=[f.value for f in resolved],
    )
    return df
