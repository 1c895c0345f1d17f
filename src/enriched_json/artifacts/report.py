from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from enriched_json import __version__ as enriched_json_version


def _pluralize(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def summary_line(
    example_count: int,
    failure_count: int,
    pending_count: int,
    errors_outside_of_examples_count: int,
) -> str:
    parts = [_pluralize(example_count, "example"), _pluralize(failure_count, "failure")]
    if pending_count:
        parts.append(f"{pending_count} pending")
    line = ", ".join(parts)
    if errors_outside_of_examples_count:
        noun = _pluralize(errors_outside_of_examples_count, "error")
        line += f", {noun} occurred outside of examples"
    return line


def build_report(
    examples: list[dict[str, Any]],
    *,
    errors: list[dict[str, Any]],
    duration: float,
    seed: int | None = None,
) -> dict[str, Any]:
    failure_count = sum(1 for example in examples if example.get("status") == "failed")
    pending_count = sum(1 for example in examples if example.get("status") == "pending")

    report: dict[str, Any] = {"version": enriched_json_version}
    if seed is not None:
        report["seed"] = seed
    report["examples"] = examples
    report["summary"] = {
        "duration": duration,
        "example_count": len(examples),
        "failure_count": failure_count,
        "pending_count": pending_count,
        "errors_outside_of_examples_count": len(errors),
    }
    report["summary_line"] = summary_line(len(examples), failure_count, pending_count, len(errors))
    report["errors"] = errors
    return report


def write_report(path: Path, report: dict[str, Any]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(report, indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    return path


def load_report(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise FileNotFoundError(f"Report not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Report must be a JSON object: {path}")
    return data
