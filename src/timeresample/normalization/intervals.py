"""
Interval operations between two date columns.

Both functions take ``start`` and ``end`` as keyword arguments and return
``end - start``. Swapping them flips the sign; the order is never corrected.
"""

import numpy as np
import pandas as pd

from timeresample.normalization.dates import as_datetime

SECONDS_PER_DAY = 86_400
# Fractional months are measured against a fixed 31-day month
DAYS_PER_MONTH = 31


def days_between(*, start: pd.Series, end: pd.Series) -> pd.Series:
    """
    Signed number of days from ``start`` to ``end``.

    Time of day is ignored.

    Returns:
        Int64 Series, negative where ``end`` precedes ``start``.
    """
    start = as_datetime(start).dt.normalize()
    end = as_datetime(end).dt.normalize()
    return (end - start).dt.days.astype("Int64")


def months_between(
    *,
    start: pd.Series,
    end: pd.Series,
    round_off: bool = True,
) -> pd.Series:
    """
    Signed fractional number of months from ``start`` to ``end``.

    When both dates fall on the same day of month, or both on the last day
    of their months, the result is a whole number of months. Otherwise the
    day and time-of-day difference is added as a fraction of a 31-day month.

    Args:
        start: Start dates.
        end: End dates.
        round_off: Round the result to 8 decimal places.

    Returns:
        Float Series, NaN where either input is missing.
    """
    start = as_datetime(start)
    end = as_datetime(end)

    whole = (end.dt.year - start.dt.year) * 12 + (end.dt.month - start.dt.month)

    same_day = end.dt.day == start.dt.day
    both_month_end = end.dt.is_month_end & start.dt.is_month_end
    seconds_of_day = (end - end.dt.normalize()).dt.total_seconds() - (
        start - start.dt.normalize()
    ).dt.total_seconds()
    fraction = ((end.dt.day - start.dt.day) * SECONDS_PER_DAY + seconds_of_day) / (
        DAYS_PER_MONTH * SECONDS_PER_DAY
    )

    months = pd.Series(
        np.where(same_day | both_month_end, whole, whole + fraction),
        index=end.index,
        dtype="float64",
    )
    if round_off:
        months = months.round(8)
    return months
