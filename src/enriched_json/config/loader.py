from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .models import ReportConfig

DEFAULT_CONFIG_NAME = "enriched_json.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}") from exc
    except OSError as exc:
        raise FileNotFoundError(f"Unable to read {path}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a YAML mapping in {path}")
    return data


def load_config(path: Path) -> ReportConfig:
    """Load report settings, resolving relative output paths against the config file."""
    config_path = path
    if config_path.is_dir():
        config_path = config_path / DEFAULT_CONFIG_NAME
    if not config_path.is_file():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    data = _load_yaml(config_path)
    for key in ("output_path", "html_path"):
        value = data.get(key)
        if isinstance(value, str) and not Path(value).is_absolute():
            data[key] = str((config_path.parent / value).resolve())
    try:
        return ReportConfig.model_validate(data)
    except ValueError as exc:
        raise ValueError(f"Invalid config in {config_path}: {exc}") from exc


def default_config_data() -> dict[str, Any]:
    return ReportConfig(output_path="enriched_json_out/report.json").model_dump()
