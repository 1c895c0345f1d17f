from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import yaml

ROOT = Path(__file__).resolve().parents[2]


def _run_cli(args: list[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    env.setdefault("PYTHONPATH", str(ROOT / "src"))
    env["COLUMNS"] = "200"
    return subprocess.run(
        [sys.executable, "-m", "enriched_json", *args],
        cwd=cwd,
        text=True,
        capture_output=True,
        env=env,
    )


def _write_report(path: Path) -> Path:
    report = {
        "version": "0.1.0",
        "examples": [
            {
                "id": "tests/test_math.py::test_adds",
                "description": "test_adds",
                "full_description": "test_adds",
                "status": "passed",
                "file_path": "tests/test_math.py",
                "line_number": 4,
                "run_time": 0.001,
                "pending_message": None,
                "metadata": {
                    "location": "tests/test_math.py:4",
                    "absolute_file_path": "/repo/tests/test_math.py",
                    "rerun_file_path": "tests/test_math.py::test_adds",
                },
                "details": {"expected": 2, "actual": 2, "matcher_name": "Eq", "negated": False, "passed": True},
            },
            {
                "id": "tests/test_math.py::test_names",
                "description": "test_names",
                "full_description": "test_names",
                "status": "failed",
                "file_path": "tests/test_math.py",
                "line_number": 8,
                "run_time": 0.002,
                "pending_message": None,
                "metadata": {
                    "location": "tests/test_math.py:8",
                    "absolute_file_path": "/repo/tests/test_math.py",
                    "rerun_file_path": "tests/test_math.py::test_names",
                },
                "exception": {"class": "AssertionError", "message": "names differ", "backtrace": []},
                "details": {
                    "expected": "Alice",
                    "actual": "Bob",
                    "matcher_name": "Eq",
                    "negated": False,
                    "diffable": True,
                    "diff": "--- expected\n+++ actual\n@@ -1 +1 @@\n-Alice\n+Bob",
                },
            },
        ],
        "summary": {
            "duration": 0.01,
            "example_count": 2,
            "failure_count": 1,
            "pending_count": 0,
            "errors_outside_of_examples_count": 0,
        },
        "summary_line": "2 examples, 1 failure",
        "errors": [],
    }
    path.write_text(json.dumps(report), encoding="utf-8")
    return path


def test_show_lists_examples_and_diffs(tmp_path: Path) -> None:
    report = _write_report(tmp_path / "report.json")

    result = _run_cli(["show", str(report), "--diff"], cwd=ROOT)

    assert result.returncode == 0, result.stdout + result.stderr
    assert "test_adds" in result.stdout
    assert "test_names" in result.stdout
    assert "+Bob" in result.stdout
    assert "2 examples, 1 failure" in result.stdout


def test_show_failures_only(tmp_path: Path) -> None:
    report = _write_report(tmp_path / "report.json")

    result = _run_cli(["show", str(report), "--failures-only"], cwd=ROOT)

    assert result.returncode == 0
    assert "test_names" in result.stdout
    assert "test_adds" not in result.stdout


def test_show_missing_report(tmp_path: Path) -> None:
    result = _run_cli(["show", str(tmp_path / "missing.json")], cwd=ROOT)

    assert result.returncode == 1
    assert "Failed to load report" in result.stdout


def test_validate(tmp_path: Path) -> None:
    report = _write_report(tmp_path / "report.json")
    assert _run_cli(["validate", str(report)], cwd=ROOT).returncode == 0

    data = json.loads(report.read_text(encoding="utf-8"))
    data["summary"]["failure_count"] = -1
    report.write_text(json.dumps(data), encoding="utf-8")

    result = _run_cli(["validate", str(report)], cwd=ROOT)
    assert result.returncode == 1
    assert "summary/failure_count" in result.stdout


def test_html(tmp_path: Path) -> None:
    report = _write_report(tmp_path / "report.json")
    out = tmp_path / "site" / "report.html"

    result = _run_cli(["html", str(report), "--out", str(out)], cwd=ROOT)

    assert result.returncode == 0
    assert out.is_file()
    assert "enriched-json-data" in out.read_text(encoding="utf-8")


def test_init_config(tmp_path: Path) -> None:
    target = tmp_path / "enriched_json.yaml"

    result = _run_cli(["init-config", "--path", str(target)], cwd=ROOT)

    assert result.returncode == 0
    data = yaml.safe_load(target.read_text(encoding="utf-8"))
    assert data["limits"]["max_depth"] == 5
    assert data["capture_passing"] is True

    again = _run_cli(["init-config", "--path", str(target)], cwd=ROOT)
    assert again.returncode == 1
    assert _run_cli(["init-config", "--path", str(target), "--force"], cwd=ROOT).returncode == 0
