"""
Relative-date operations on date columns.

Every operation returns a new Series of dates at midnight and keeps NaT
wherever the input is NaT.
"""

import pandas as pd

from timeresample.exceptions import UnsupportedOperationError
from timeresample.normalization.dates import as_datetime

WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

# Period aliases whose start_time is the first day of the enclosing unit.
# W-SUN periods run Monday through Sunday.
TRUNCATION_UNITS: dict[str, str] = {
    "year": "Y",
    "quarter": "Q",
    "month": "M",
    "week": "W-SUN",
}


def weekday_index(name: str) -> int:
    """
    Resolve a weekday name to its index (Monday = 0).

    Accepts full names and two- or three-letter abbreviations in any case.

    Raises:
        ValueError: If the name is not a weekday.
    """
    key = name.strip().lower()
    if len(key) >= 2:
        for index, weekday in enumerate(WEEKDAYS):
            if weekday == key or (len(key) <= 3 and weekday.startswith(key)):
                return index
    msg = f"Unknown weekday name: {name!r}"
    raise ValueError(msg)


def end_of_month(dates: pd.Series) -> pd.Series:
    """Last calendar day of each date's month."""
    return as_datetime(dates).dt.normalize() + pd.offsets.MonthEnd(0)


def next_weekday(dates: pd.Series, weekday: str) -> pd.Series:
    """
    First date strictly after each date that falls on ``weekday``.

    A date already on ``weekday`` moves forward a full week.
    """
    target = weekday_index(weekday)
    dates = as_datetime(dates).dt.normalize()
    delta = (target - dates.dt.weekday) % 7
    delta = delta.where(delta != 0, 7)
    return dates + pd.to_timedelta(delta, unit="D")


def add_months(dates: pd.Series, months: int) -> pd.Series:
    """
    Shift dates by whole calendar months.

    The day of month is clamped to the length of the target month, so
    2016-01-31 plus one month is 2016-02-29.
    """
    return as_datetime(dates).dt.normalize() + pd.DateOffset(months=int(months))


def add_days(dates: pd.Series, days: "int | pd.Series") -> pd.Series:
    """
    Shift dates forward by ``days``.

    Args:
        dates: Date Series.
        days: Day count, or a per-row Series of day counts. Negative values
            shift backward.
    """
    dates = as_datetime(dates).dt.normalize()
    if isinstance(days, pd.Series):
        offset = pd.to_timedelta(pd.to_numeric(days, errors="coerce"), unit="D")
        return dates + offset
    return dates + pd.Timedelta(days=int(days))


def sub_days(dates: pd.Series, days: "int | pd.Series") -> pd.Series:
    """Shift dates backward by ``days``."""
    return add_days(dates, -days)


def truncate(dates: pd.Series, unit: str) -> pd.Series:
    """
    First day of the year, quarter, month or ISO week containing each date.

    Raises:
        UnsupportedOperationError: If ``unit`` is not a known unit.
    """
    key = unit.strip().lower()
    if key not in TRUNCATION_UNITS:
        raise UnsupportedOperationError(unit, list(TRUNCATION_UNITS))
    dates = as_datetime(dates)
    return dates.dt.to_period(TRUNCATION_UNITS[key]).dt.start_time.astype(dates.dtype)


RELATIVE_OPERATIONS = {
    "end_of_month": end_of_month,
    "next_weekday": next_weekday,
    "add_months": add_months,
    "add_days": add_days,
    "sub_days": sub_days,
    "truncate": truncate,
}


def apply_relative(
    dates: pd.Series,
    operation: str,
    argument: "int | str | None" = None,
) -> pd.Series:
    """
    Apply a relative-date operation by name.

    Args:
        dates: Date Series.
        operation: One of RELATIVE_OPERATIONS.
        argument: Scalar parameter (weekday name, month or day count, or
            truncation unit). Not used by ``end_of_month``.

    Raises:
        UnsupportedOperationError: If the operation is unknown.
        ValueError: If the operation needs an argument and none is given.
    """
    if operation not in RELATIVE_OPERATIONS:
        raise UnsupportedOperationError(operation, list(RELATIVE_OPERATIONS))
    func = RELATIVE_OPERATIONS[operation]
    if operation == "end_of_month":
        return func(dates)
    if argument is None:
        msg = f"Operation {operation!r} requires an argument"
        raise ValueError(msg)
    return func(dates, argument)
