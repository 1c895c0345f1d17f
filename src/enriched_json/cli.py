from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
import yaml
from rich.console import Console
from rich.table import Table

from enriched_json.artifacts.html import write_html
from enriched_json.artifacts.report import load_report
from enriched_json.artifacts.schema import validate_report
from enriched_json.config.loader import DEFAULT_CONFIG_NAME, default_config_data

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()

_CELL_WIDTH = 60


def _fmt(value: Any) -> str:
    if value is None:
        return "n/a"
    text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False, sort_keys=True)
    if len(text) > _CELL_WIDTH:
        return text[: _CELL_WIDTH - 3] + "..."
    return text


def _status(value: object) -> str:
    if value == "passed":
        return "[green]PASS[/green]"
    if value == "failed":
        return "[red]FAIL[/red]"
    return "[yellow]PENDING[/yellow]"


def _load(report: str) -> dict[str, Any]:
    try:
        return load_report(Path(report))
    except Exception as exc:
        console.print(f"[red]Failed to load report:[/red] {exc}")
        raise typer.Exit(code=1)


@app.command()
def show(
    report: str = typer.Argument(..., help="Path to an enriched JSON report"),
    failures_only: bool = typer.Option(False, "--failures-only", help="Only list failed examples"),
    diff: bool = typer.Option(False, "--diff", help="Print diffs of failed examples"),
) -> None:
    """Print the examples of a report with their captured values."""
    data = _load(report)
    examples = [item for item in data.get("examples", []) if isinstance(item, dict)]
    if failures_only:
        examples = [item for item in examples if item.get("status") == "failed"]

    table = Table(title="Enriched JSON Results", show_lines=False)
    table.add_column("Example")
    table.add_column("Status")
    table.add_column("Matcher")
    table.add_column("Expected")
    table.add_column("Actual")
    for item in examples:
        details = item.get("details") or {}
        expected = _fmt(details.get("expected")) if "expected" in details else ""
        actual = _fmt(details.get("actual")) if "actual" in details else ""
        if details.get("negated"):
            expected = f"not {expected}"
        table.add_row(
            str(item.get("id")),
            _status(item.get("status")),
            str(details.get("matcher_name", "")),
            expected,
            actual,
        )
    console.print(table)

    if diff:
        for item in examples:
            text = (item.get("details") or {}).get("diff")
            if text:
                console.print(f"[bold]{item.get('id')}[/bold]")
                console.print(text, markup=False, highlight=False)

    summary_line = data.get("summary_line")
    if summary_line:
        console.print(summary_line)
    for error in data.get("errors", []):
        if isinstance(error, dict):
            label = error.get("exception_class") or "Error"
            console.print(f"[red]{label}:[/red] {error.get('exception_message') or error.get('message')}")


@app.command()
def validate(
    report: str = typer.Argument(..., help="Path to an enriched JSON report"),
) -> None:
    """Validate a report against the report schema."""
    data = _load(report)
    errors = validate_report(data)
    if errors:
        for error in errors:
            console.print(f"[red]Invalid:[/red] {error}")
        raise typer.Exit(code=1)
    console.print(f"Report is valid: {report}")


@app.command()
def html(
    report: str = typer.Argument(..., help="Path to an enriched JSON report"),
    out: str = typer.Option(..., "--out", help="Destination HTML file"),
) -> None:
    """Render a report as a standalone HTML page."""
    data = _load(report)
    try:
        path = write_html(Path(out), data)
    except Exception as exc:
        console.print(f"[red]Failed to write HTML:[/red] {exc}")
        raise typer.Exit(code=1)
    console.print(f"HTML report written to: {path}")


@app.command("init-config")
def init_config(
    path: str = typer.Option(DEFAULT_CONFIG_NAME, "--path", help="Config file to create"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
) -> None:
    """Write a default YAML config for the pytest plugin."""
    config_path = Path(path)
    if config_path.exists() and not force:
        console.print(f"[red]Target already exists:[/red] {config_path}")
        raise typer.Exit(code=1)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(yaml.safe_dump(default_config_data(), sort_keys=False), encoding="utf-8")
    console.print(f"Created config at: {config_path}")
    console.print("")
    console.print("Next steps:")
    console.print(f"  pytest --enriched-json-config {config_path}")
