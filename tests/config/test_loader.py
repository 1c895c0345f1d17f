from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from enriched_json.config import ReportConfig, SerializationLimits, default_config_data, load_config


def _write_yaml(path: Path, data: dict) -> None:
    path.write_text(yaml.safe_dump(data), encoding="utf-8")


def test_load_config_from_dir(tmp_path: Path) -> None:
    _write_yaml(
        tmp_path / "enriched_json.yaml",
        {"output_path": "out/report.json", "limits": {"max_depth": 3}},
    )

    config = load_config(tmp_path)

    assert config.output_path == str((tmp_path / "out/report.json").resolve())
    assert config.html_path is None
    assert config.limits.max_depth == 3
    assert config.limits.max_string_length == 1000
    assert config.capture_passing is True


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(path) == ReportConfig()


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    _write_yaml(path, {"output_path": "r.json", "colour": "blue"})

    with pytest.raises(ValueError, match="Invalid config"):
        load_config(path)


def test_non_positive_caps_are_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    _write_yaml(path, {"limits": {"max_sequence_size": 0}})

    with pytest.raises(ValueError):
        load_config(path)


def test_invalid_yaml_and_missing_file(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("output_path: [unclosed", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_config(path)
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_non_mapping_yaml_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Expected a YAML mapping"):
        load_config(path)


def test_default_config_round_trips(tmp_path: Path) -> None:
    path = tmp_path / "enriched_json.yaml"
    path.write_text(yaml.safe_dump(default_config_data()), encoding="utf-8")

    config = load_config(path)

    assert config.limits == SerializationLimits()
    assert config.output_path is not None
    assert config.output_path.endswith("report.json")
