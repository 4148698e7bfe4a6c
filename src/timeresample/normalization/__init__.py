"""
Date normalization layer.

Handles date parsing, calendar-field extraction, relative dates, intervals
and column naming so that later steps see canonical date columns.
"""

from timeresample.normalization.dates import (
    DateFormat,
    format_dates,
    from_unix_timestamp,
    normalize_date_columns,
    parse_dates,
    parse_timestamps,
    to_unix_timestamp,
)
from timeresample.normalization.fields import (
    CalendarField,
    derive_calendar_fields,
    extract,
)
from timeresample.normalization.intervals import days_between, months_between
from timeresample.normalization.relative import (
    add_days,
    add_months,
    apply_relative,
    end_of_month,
    next_weekday,
    sub_days,
    truncate,
)

__all__ = [
    "CalendarField",
    "DateFormat",
    "add_days",
    "add_months",
    "apply_relative",
    "days_between",
    "derive_calendar_fields",
    "end_of_month",
    "extract",
    "format_dates",
    "from_unix_timestamp",
    "months_between",
    "next_weekday",
    "normalize_date_columns",
    "parse_dates",
    "parse_timestamps",
    "sub_days",
    "to_unix_timestamp",
    "truncate",
]
