"""Pytest configuration and shared fixtures."""

from pathlib import Path
from typing import Any

import pandas as pd
import pytest
import yaml


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def sample_rates() -> pd.DataFrame:
    """Create sample rate observations with textual dates."""
    return pd.DataFrame(
        {
            "observed": [
                "07/12/2016",
                "08/03/2016",
                "",
                "01/15/2017",
                "not a date",
                "02/28/2017",
            ],
            "period": ["07/2016", "08/2016", "09/2016", "01/2017", "", "02/2017"],
            "rate": [1.0, 3.0, 4.0, 5.0, 9.0, 7.0],
        }
    )


@pytest.fixture
def dates() -> pd.Series:
    """Create a date Series with one missing value."""
    return pd.Series(
        pd.to_datetime(["2016-07-12", "2013-07-27", None]),
        name="observed",
    )


@pytest.fixture
def base_config() -> dict[str, Any]:
    """Create a minimal pipeline configuration dictionary."""
    return {
        "project": "rates-test",
        "data": {
            "input": "rates.csv",
        },
        "columns": {
            "observed": "string",
            "period": "string",
            "rate": "float",
        },
        "dates": [
            {"column": "observed", "format": "MM/dd/yyyy"},
            {"column": "period", "format": "MM/yyyy"},
        ],
        "derive": [
            {"column": "observed", "fields": ["year", "month"]},
        ],
        "resample": {
            "group_by": ["year"],
            "aggregations": {
                "avg_rate": {"column": "rate", "function": "mean"},
            },
        },
    }


@pytest.fixture
def write_config(tmp_path: Path):
    """Write a configuration dictionary to a YAML file and return its path."""

    def _write(config: dict[str, Any], name: str = "config.yaml") -> Path:
        path = tmp_path / name
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(config, f)
        return path

    return _write
