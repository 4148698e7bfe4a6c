"""
Date parsing for textual date columns in non-default layouts.

Patterns use the common date-pattern letters (``MM/dd/yyyy``, ``MM/yyyy``,
``dd MMM yyyy HH:mm``). They are translated to strptime directives for
parsing and rendered token by token for formatting, so that a date formatted
with a pattern parses back to the same value.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import cached_property

import numpy as np
import pandas as pd

from timeresample.utils.logging import get_logger

log = get_logger(__name__)

UNIX_EPOCH = pd.Timestamp("1970-01-01")
DEFAULT_TIMESTAMP_FORMAT = "yyyy-MM-dd HH:mm:ss"

# Quoted literal, run of one pattern letter, or any other single character
_TOKEN_RE = re.compile(r"'(?:[^']|'')*'|([A-Za-z])\1*|.", re.DOTALL)

_NUMERIC_DIRECTIVES: dict[str, str] = {
    "d": "%d",
    "D": "%j",
    "H": "%H",
    "h": "%I",
    "m": "%M",
    "s": "%S",
    "S": "%f",
}


@dataclass(frozen=True)
class Token:
    """A single element of a date pattern."""

    letter: str | None
    width: int
    literal: str = ""

    @property
    def is_literal(self) -> bool:
        return self.letter is None


def _directive(token: Token) -> str:
    """Translate a pattern token to a strptime directive."""
    letter, width = token.letter, token.width
    if letter == "y":
        return "%y" if width == 2 else "%Y"
    if letter == "M":
        if width >= 4:
            return "%B"
        if width == 3:
            return "%b"
        return "%m"
    if letter == "E":
        return "%A" if width >= 4 else "%a"
    if letter == "a":
        return "%p"
    return _NUMERIC_DIRECTIVES[letter]  # type: ignore[index]


SUPPORTED_LETTERS = frozenset("yMdDHhmsSaE")


def tokenize(pattern: str) -> list[Token]:
    """
    Split a date pattern into tokens.

    Args:
        pattern: Date pattern such as ``MM/dd/yyyy``.

    Returns:
        List of pattern and literal tokens.

    Raises:
        ValueError: If the pattern is empty or uses an unsupported letter.
    """
    if not pattern:
        msg = "Date pattern must not be empty"
        raise ValueError(msg)

    tokens: list[Token] = []
    for match in _TOKEN_RE.finditer(pattern):
        text = match.group(0)
        if text.startswith("'"):
            literal = "'" if text == "''" else text[1:-1].replace("''", "'")
            tokens.append(Token(letter=None, width=len(literal), literal=literal))
        elif match.group(1):
            letter = match.group(1)
            if letter not in SUPPORTED_LETTERS:
                msg = (
                    f"Unsupported pattern letter {letter!r} in {pattern!r}. "
                    f"Supported: {''.join(sorted(SUPPORTED_LETTERS))}"
                )
                raise ValueError(msg)
            tokens.append(Token(letter=letter, width=len(text)))
        else:
            tokens.append(Token(letter=None, width=1, literal=text))
    return tokens


@dataclass(frozen=True)
class DateFormat:
    """
    A textual date layout.

    Attributes:
        pattern: Date pattern, e.g. ``MM/dd/yyyy``.
    """

    pattern: str

    def __post_init__(self) -> None:
        # Fail fast on bad patterns
        tokenize(self.pattern)

    @cached_property
    def tokens(self) -> tuple[Token, ...]:
        return tuple(tokenize(self.pattern))

    @cached_property
    def strptime_pattern(self) -> str:
        """Equivalent strptime pattern used for parsing."""
        parts = []
        for token in self.tokens:
            if token.is_literal:
                parts.append(token.literal.replace("%", "%%"))
            else:
                parts.append(_directive(token))
        return "".join(parts)

    @property
    def has_time(self) -> bool:
        return any(t.letter in {"H", "h", "m", "s", "S", "a"} for t in self.tokens)

    def format(self, value: pd.Timestamp) -> str:
        """Render a timestamp using this layout."""
        return "".join(_render(token, value) for token in self.tokens)

    def __str__(self) -> str:
        return self.pattern


def _render(token: Token, value: pd.Timestamp) -> str:
    """Render one token of a timestamp."""
    letter, width = token.letter, token.width
    if letter is None:
        return token.literal
    if letter == "y":
        if width == 2:
            return f"{value.year % 100:02d}"
        return str(value.year).zfill(width)
    if letter == "M" and width >= 3:
        return value.strftime("%B" if width >= 4 else "%b")
    if letter == "E":
        return value.strftime("%A" if width >= 4 else "%a")
    if letter == "a":
        return "AM" if value.hour < 12 else "PM"
    if letter == "S":
        return f"{value.microsecond:06d}"[:width].ljust(width, "0")

    number = {
        "M": value.month,
        "d": value.day,
        "D": value.dayofyear,
        "H": value.hour,
        "h": value.hour % 12 or 12,
        "m": value.minute,
        "s": value.second,
    }[letter]
    return str(number).zfill(width)


def as_date_format(fmt: "DateFormat | str") -> DateFormat:
    """Coerce a pattern string to a DateFormat."""
    return fmt if isinstance(fmt, DateFormat) else DateFormat(fmt)


def _as_text(values: pd.Series) -> pd.Series:
    """
    Render raw values as strings.

    Whole numbers held as floats (a ``yyyyMMdd`` column read with blank
    cells) are written without a trailing ``.0``.
    """
    if pd.api.types.is_float_dtype(values):
        present = values.dropna()
        if np.isfinite(present).all() and (present == present.round()).all():
            return values.astype("Int64").astype("string")
    return values.astype("string")


def parse_timestamps(values: pd.Series, fmt: DateFormat | str) -> pd.Series:
    """
    Parse strings to timestamps, keeping the time of day.

    Empty strings, missing values and strings that do not match the layout
    all become NaT.

    Args:
        values: Series of raw strings.
        fmt: Date layout.

    Returns:
        Series of datetime64 values.
    """
    fmt = as_date_format(fmt)
    text = _as_text(values).str.strip()
    raw = pd.Series(
        text.mask(text.eq("").fillna(False)).to_numpy(dtype=object, na_value=None),
        index=values.index,
        name=values.name,
    )
    parsed = pd.to_datetime(raw, format=fmt.strptime_pattern, errors="coerce")
    return parsed.astype("datetime64[ns]")


def parse_dates(values: pd.Series, fmt: DateFormat | str) -> pd.Series:
    """
    Parse strings to calendar dates.

    Fields missing from the layout default to their first value, so
    ``MM/yyyy`` yields the first of the month.

    Args:
        values: Series of raw strings.
        fmt: Date layout.

    Returns:
        Series of datetime64 values at midnight, NaT where unparseable.
    """
    return parse_timestamps(values, fmt).dt.normalize()


def format_dates(dates: pd.Series, fmt: DateFormat | str) -> pd.Series:
    """
    Format timestamps as strings.

    Args:
        dates: Series of datetime64 values.
        fmt: Date layout.

    Returns:
        Object Series of strings, None where the input is NaT.
    """
    fmt = as_date_format(fmt)
    dates = as_datetime(dates)
    return dates.map(lambda value: None if pd.isna(value) else fmt.format(value)).astype(
        object
    )


def to_unix_timestamp(
    values: pd.Series,
    fmt: DateFormat | str = DEFAULT_TIMESTAMP_FORMAT,
) -> pd.Series:
    """
    Convert strings or timestamps to seconds since the Unix epoch.

    Args:
        values: Series of strings (parsed with ``fmt``) or datetime64 values.
        fmt: Layout used when ``values`` holds strings.

    Returns:
        Int64 Series of epoch seconds, <NA> where unparseable.
    """
    if pd.api.types.is_datetime64_any_dtype(values):
        stamps = values
    else:
        stamps = parse_timestamps(values, fmt)
    seconds = (stamps - UNIX_EPOCH) // pd.Timedelta(seconds=1)
    return seconds.astype("Int64")


def from_unix_timestamp(
    seconds: pd.Series,
    fmt: DateFormat | str | None = None,
) -> pd.Series:
    """
    Convert epoch seconds to timestamps, or to strings when ``fmt`` is given.

    Args:
        seconds: Series of seconds since the Unix epoch.
        fmt: Optional layout for string output.

    Returns:
        Series of datetime64 values, or of strings when formatted.
    """
    numeric = pd.to_numeric(seconds, errors="coerce").astype("float64")
    stamps = pd.to_datetime(numeric, unit="s")
    if fmt is None:
        return stamps
    return format_dates(stamps, fmt)


def as_datetime(values: pd.Series) -> pd.Series:
    """Ensure a Series holds datetime64 values, coercing invalid entries to NaT."""
    if pd.api.types.is_datetime64_any_dtype(values):
        return values
    return pd.to_datetime(values, errors="coerce")


def normalize_date_columns(
    df: pd.DataFrame,
    formats: Mapping[str, DateFormat | str],
    *,
    keep_time: Iterable[str] = (),
) -> pd.DataFrame:
    """
    Parse several textual date columns of a table.

    Args:
        df: Input table.
        formats: Column name -> date layout.
        keep_time: Columns parsed as timestamps rather than dates.

    Returns:
        New DataFrame with the listed columns converted.

    Raises:
        ValueError: If a listed column is missing.
    """
    missing = [col for col in formats if col not in df.columns]
    if missing:
        msg = f"Missing date columns: {missing}"
        raise ValueError(msg)

    keep_time = set(keep_time)
    df = df.copy()
    for column, fmt in formats.items():
        parser = parse_timestamps if column in keep_time else parse_dates
        raw = df[column]
        df[column] = parser(raw, fmt)

        blank = (raw.astype("string").str.strip() == "").fillna(True).astype(bool)
        rejected = df[column].isna() & ~blank
        log.info(
            "Parsed date column",
            column=column,
            format=str(fmt),
            rows=len(df),
            nulls=int(df[column].isna().sum()),
            rejected=int(rejected.sum()),
        )

    return df
