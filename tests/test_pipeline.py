"""Tests for the resample pipeline."""

from pathlib import Path
from typing import Any

import pandas as pd
import pandera.pandas as pa
import pytest

from timeresample.config import PipelineConfig
from timeresample.etl import ResamplePipeline, run_pipeline
from timeresample.ingestion import CsvTableSource, FrameTableSource


@pytest.fixture
def full_config(base_config: dict[str, Any]) -> dict[str, Any]:
    """Extend the base config with relative dates and intervals."""
    base_config["relative"] = [
        {"column": "observed", "operation": "end_of_month", "output": "month_end"},
        {
            "column": "observed",
            "operation": "next_weekday",
            "argument": "Sunday",
            "output": "next_sunday",
        },
        {"column": "period", "operation": "add_months", "argument": 1, "output": "next_period"},
    ]
    base_config["intervals"] = [
        {"start": "observed", "end": "month_end", "unit": "days", "output": "days_left"},
        {"start": "period", "end": "observed", "unit": "months", "output": "months_in"},
    ]
    return base_config


class TestResamplePipeline:
    """Tests for ResamplePipeline."""

    def test_normalize(self, full_config: dict[str, Any], sample_rates: pd.DataFrame) -> None:
        """Test parsing and derivation on the row-level table."""
        pipeline = ResamplePipeline(PipelineConfig.model_validate(full_config))
        df = pipeline.normalize(sample_rates)

        first = df.iloc[0]
        assert first["observed"] == pd.Timestamp(2016, 7, 12)
        assert first["period"] == pd.Timestamp(2016, 7, 1)
        assert first["year"] == 2016
        assert first["month"] == 7
        assert first["month_end"] == pd.Timestamp(2016, 7, 31)
        assert first["next_sunday"] == pd.Timestamp(2016, 7, 17)
        assert first["next_period"] == pd.Timestamp(2016, 8, 1)
        assert first["days_left"] == 19
        assert first["months_in"] == pytest.approx(11 / 31, abs=1e-8)

    def test_derived_columns_null_with_source(
        self, full_config: dict[str, Any], sample_rates: pd.DataFrame
    ) -> None:
        """Test that every derived column is null where its date is null."""
        pipeline = ResamplePipeline(PipelineConfig.model_validate(full_config))
        df = pipeline.normalize(sample_rates)
        missing = df[df["observed"].isna()]
        assert len(missing) == 2
        for column in ["year", "month", "month_end", "next_sunday", "days_left", "months_in"]:
            assert missing[column].isna().all(), column

    def test_run_with_frame_source(
        self, base_config: dict[str, Any], sample_rates: pd.DataFrame
    ) -> None:
        """Test a full run grouped by year with a null-year group."""
        config = PipelineConfig.model_validate(base_config)
        result = run_pipeline(config, source=FrameTableSource(sample_rates))

        assert result.n_input_rows == 6
        assert result.n_groups == 3
        assert result.null_dates == {"observed": 2, "period": 1}

        resampled = result.resampled
        assert list(resampled.columns) == ["year", "avg_rate"]
        assert resampled["year"].iloc[:2].tolist() == [2016, 2017]
        assert resampled["avg_rate"].tolist() == [2.0, 6.0, 6.5]
        assert pd.isna(resampled["year"].iloc[2])

    def test_run_input_not_mutated(
        self, base_config: dict[str, Any], sample_rates: pd.DataFrame
    ) -> None:
        """Test that the caller's frame is unchanged after a run."""
        before = sample_rates.copy()
        run_pipeline(
            PipelineConfig.model_validate(base_config),
            source=FrameTableSource(sample_rates),
        )
        pd.testing.assert_frame_equal(sample_rates, before)

    def test_run_from_csv_writes_output(
        self, base_config: dict[str, Any], sample_rates: pd.DataFrame, tmp_path: Path
    ) -> None:
        """Test reading the configured CSV and writing the result."""
        sample_rates.to_csv(tmp_path / "rates.csv", index=False)
        base_config["data"] = {
            "data_root": str(tmp_path),
            "input": "rates.csv",
            "output": "out/resampled.csv",
        }
        result = run_pipeline(PipelineConfig.model_validate(base_config))

        assert result.output_path == tmp_path / "out" / "resampled.csv"
        written = pd.read_csv(result.output_path)
        assert len(written) == 3
        assert list(written.columns) == ["year", "avg_rate"]

    def test_numeric_layout_from_csv(self, base_config: dict[str, Any], tmp_path: Path) -> None:
        """Test an undeclared yyyyMMdd column with a blank cell keeps its valid dates."""
        (tmp_path / "rates.csv").write_text(
            "observed,rate\n20160712,1.0\n,2.0\n20160801,3.0\n", encoding="utf-8"
        )
        base_config["data"] = {"data_root": str(tmp_path), "input": "rates.csv"}
        base_config["columns"] = {}
        base_config["dates"] = [{"column": "observed", "format": "yyyyMMdd"}]
        base_config["derive"] = [{"column": "observed", "fields": ["month"]}]
        base_config["resample"] = {
            "group_by": ["month"],
            "aggregations": {"avg_rate": {"column": "rate"}},
        }
        result = run_pipeline(PipelineConfig.model_validate(base_config))

        assert result.normalized["observed"].tolist()[::2] == [
            pd.Timestamp(2016, 7, 12),
            pd.Timestamp(2016, 8, 1),
        ]
        assert result.null_dates == {"observed": 1}
        assert result.resampled["month"].iloc[:2].tolist() == [7, 8]
        assert result.resampled["avg_rate"].tolist() == [1.0, 3.0, 2.0]

    def test_numeric_layout_renamed_column(
        self, base_config: dict[str, Any], tmp_path: Path
    ) -> None:
        """Test that date columns are read as text under their input header names."""
        (tmp_path / "rates.csv").write_text(
            "Observed Date,Rate\n20160712,1.0\n,2.0\n", encoding="utf-8"
        )
        base_config["data"] = {"data_root": str(tmp_path), "input": "rates.csv"}
        base_config["columns"] = {}
        base_config["snake_case_columns"] = True
        base_config["dates"] = [{"column": "observed_date", "format": "yyyyMMdd"}]
        base_config["derive"] = [{"column": "observed_date", "fields": ["year"]}]
        result = run_pipeline(PipelineConfig.model_validate(base_config))

        assert result.normalized["observed_date"].iloc[0] == pd.Timestamp(2016, 7, 12)
        assert result.null_dates == {"observed_date": 1}

    def test_default_source(self, base_config: dict[str, Any], tmp_path: Path) -> None:
        """Test the default source points at the configured input."""
        base_config["data"] = {"data_root": str(tmp_path), "input": "rates.csv"}
        source = ResamplePipeline(PipelineConfig.model_validate(base_config)).default_source()
        assert isinstance(source, CsvTableSource)
        assert source.path == tmp_path / "rates.csv"

    def test_missing_input_file(self, base_config: dict[str, Any], tmp_path: Path) -> None:
        """Test that a missing input file raises FileNotFoundError."""
        base_config["data"] = {"data_root": str(tmp_path), "input": "missing.csv"}
        with pytest.raises(FileNotFoundError):
            run_pipeline(PipelineConfig.model_validate(base_config))

    def test_rename_and_snake_case(self, base_config: dict[str, Any]) -> None:
        """Test column normalization before date parsing."""
        raw = pd.DataFrame(
            {"Observed Date": ["07/12/2016"], "Period": ["07/2016"], "Rate": [1.5]}
        )
        base_config["columns"] = {}
        base_config["rename"] = {"Observed Date": "observed"}
        base_config["snake_case_columns"] = True
        result = run_pipeline(
            PipelineConfig.model_validate(base_config), source=FrameTableSource(raw)
        )
        assert result.normalized.columns.tolist()[:3] == ["observed", "period", "rate"]
        assert result.resampled["avg_rate"].tolist() == [1.5]

    def test_schema_violation(self, base_config: dict[str, Any]) -> None:
        """Test that a declared column missing from the source fails validation."""
        raw = pd.DataFrame({"observed": ["07/12/2016"], "period": ["07/2016"]})
        with pytest.raises(pa.errors.SchemaError):
            run_pipeline(
                PipelineConfig.model_validate(base_config),
                source=FrameTableSource(raw, {"rate": "float"}),
            )
