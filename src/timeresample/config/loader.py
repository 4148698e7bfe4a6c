"""
Configuration loading utilities.

Supports environment variable interpolation and config inheritance.
Minimal configs only need: project, data.input, resample.aggregations
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from timeresample.config.settings import PipelineConfig


def _interpolate_env_vars(value: str) -> str:
    """
    Interpolate environment variables in string values.

    Supports ${VAR} and ${VAR:default} syntax.
    """
    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        return os.environ.get(var_name, default if default is not None else "")

    return re.sub(pattern, replacer, value)


def _process_config_values(obj: Any) -> Any:
    """Recursively process config values for env var interpolation."""
    if isinstance(obj, str):
        return _interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _process_config_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_process_config_values(item) for item in obj]
    return obj


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _normalize_aggregations(raw: dict[str, Any]) -> dict[str, Any]:
    """
    Expand shorthand aggregation entries.

    ``avg_rate: rate`` means the mean of ``rate``;
    ``max_rate: [rate, max]`` names the function explicitly.
    """
    expanded: dict[str, Any] = {}
    for name, spec in raw.items():
        if isinstance(spec, str):
            expanded[name] = {"column": spec}
        elif isinstance(spec, list):
            if len(spec) != 2:
                msg = f"Aggregation '{name}' must be [column, function], got {spec!r}"
                raise ValueError(msg)
            expanded[name] = {"column": spec[0], "function": spec[1]}
        else:
            expanded[name] = spec
    return expanded


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and process environment variables."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return _process_config_values(data) if data else {}


def load_config(
    config_path: Path,
    base_path: Path | None = None,
) -> PipelineConfig:
    """
    Load pipeline configuration from YAML file(s).

    Minimal config requires only:
        - project: str
        - data.input: path
        - resample.aggregations: mapping

    Args:
        config_path: Path to the main configuration file.
        base_path: Optional path to base configuration for inheritance.

    Returns:
        Fully validated PipelineConfig instance.
    """
    if base_path is not None:
        base_data = load_yaml(base_path)
    else:
        potential_base = config_path.parent / "base.yaml"
        if potential_base.exists() and potential_base.resolve() != config_path.resolve():
            base_data = load_yaml(potential_base)
        else:
            base_data = {}

    main_data = load_yaml(config_path)
    merged = _deep_merge(base_data, main_data)

    if not merged.get("project"):
        msg = "Config must specify 'project' name"
        raise ValueError(msg)

    data_data = merged.get("data") or {}
    if not data_data.get("input"):
        msg = "Config must specify 'data.input'"
        raise ValueError(msg)
    data_data = dict(data_data)
    if "root" in data_data:
        data_data["data_root"] = data_data.pop("root")
    merged["data"] = data_data

    resample_data = merged.get("resample") or {}
    if not resample_data.get("aggregations"):
        msg = "Config must specify 'resample.aggregations'"
        raise ValueError(msg)
    merged["resample"] = {
        **resample_data,
        "aggregations": _normalize_aggregations(resample_data["aggregations"]),
    }

    return PipelineConfig.model_validate(merged)
