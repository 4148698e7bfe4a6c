"""
Column name normalization.

Renames source columns to the names used by the date and resample steps and
checks that required columns are present.
"""

import re
from collections.abc import Mapping

import pandas as pd

from timeresample.utils.logging import get_logger

log = get_logger(__name__)


def to_snake_case(name: str) -> str:
    """Convert a column header such as ``Sale Date`` or ``saleDate`` to ``sale_date``."""
    name = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", name.strip())
    return re.sub(r"[^0-9a-zA-Z]+", "_", name).strip("_").lower()


def normalized_name(
    name: str,
    mapping: Mapping[str, str] | None = None,
    *,
    snake_case: bool = False,
) -> str:
    """
    Name a source column will have after ``normalize_columns``.

    Explicit renames win; otherwise the name is snake-cased when requested.
    """
    mapping = mapping or {}
    if name in mapping:
        return mapping[name]
    return to_snake_case(name) if snake_case else name


def normalize_columns(
    df: pd.DataFrame,
    mapping: Mapping[str, str] | None = None,
    *,
    snake_case: bool = False,
) -> pd.DataFrame:
    """
    Normalize column names.

    Args:
        df: DataFrame to normalize.
        mapping: Explicit source -> target renames, applied first.
        snake_case: Convert remaining column names to snake_case.

    Returns:
        DataFrame with normalized column names.

    Raises:
        ValueError: If normalization produces duplicate column names.
    """
    rename_dict = {}
    for col in df.columns:
        new = normalized_name(str(col), mapping, snake_case=snake_case)
        if new != col:
            rename_dict[col] = new

    if rename_dict:
        log.debug("Normalizing columns", renamed=list(rename_dict.keys()))
        df = df.rename(columns=rename_dict)

    duplicates = df.columns[df.columns.duplicated()].tolist()
    if duplicates:
        msg = f"Column normalization produced duplicate names: {duplicates}"
        raise ValueError(msg)

    return df


def validate_required_columns(
    df: pd.DataFrame,
    required: list[str],
    *,
    raise_on_missing: bool = True,
) -> list[str]:
    """
    Check that required columns are present.

    Args:
        df: DataFrame to check.
        required: List of required column names.
        raise_on_missing: Whether to raise error if columns missing.

    Returns:
        List of missing columns.

    Raises:
        ValueError: If raise_on_missing and columns are missing.
    """
    missing = [col for col in required if col not in df.columns]

    if missing and raise_on_missing:
        msg = f"Missing required columns: {missing}"
        raise ValueError(msg)

    if missing:
        log.warning("Missing columns", missing=missing)

    return missing
