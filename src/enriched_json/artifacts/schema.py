from __future__ import annotations

from typing import Any

import jsonschema

_DETAILS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["expected", "actual", "matcher_name", "negated"],
    "properties": {
        "matcher_name": {"type": "string"},
        "negated": {"type": "boolean"},
        "passed": {"type": ["boolean", "null"]},
        "diffable": {"type": "boolean"},
        "diff": {"type": "string"},
        "original_message": {"type": "string"},
    },
}

_METADATA_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["location", "absolute_file_path", "rerun_file_path"],
    "properties": {
        "location": {"type": "string"},
        "absolute_file_path": {"type": "string"},
        "rerun_file_path": {"type": "string"},
        "example_group": {"type": "string"},
        "example_group_hierarchy": {"type": "array", "items": {"type": "string"}},
        "described_class": {"type": "string"},
        "tags": {"type": "object"},
    },
}

_EXAMPLE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": [
        "id",
        "description",
        "full_description",
        "status",
        "file_path",
        "line_number",
        "run_time",
        "pending_message",
        "metadata",
    ],
    "properties": {
        "id": {"type": "string"},
        "description": {"type": "string"},
        "full_description": {"type": "string"},
        "status": {"enum": ["passed", "failed", "pending"]},
        "file_path": {"type": "string"},
        "line_number": {"type": ["integer", "null"]},
        "run_time": {"type": "number", "minimum": 0},
        "pending_message": {"type": ["string", "null"]},
        "metadata": _METADATA_SCHEMA,
        "exception": {
            "type": "object",
            "required": ["class", "message", "backtrace"],
            "properties": {
                "class": {"type": "string"},
                "message": {"type": "string"},
                "backtrace": {"type": "array", "items": {"type": "string"}},
            },
        },
        "details": _DETAILS_SCHEMA,
    },
}

_ERROR_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["message"],
    "properties": {
        "message": {"type": "string"},
        "path": {"type": "string"},
        "line_number": {"type": "integer"},
        "exception_class": {"type": "string"},
        "exception_message": {"type": "string"},
    },
}

REPORT_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "enriched-json report",
    "type": "object",
    "required": ["version", "examples", "summary", "summary_line", "errors"],
    "properties": {
        "version": {"type": "string"},
        "seed": {"type": "integer"},
        "examples": {"type": "array", "items": _EXAMPLE_SCHEMA},
        "summary": {
            "type": "object",
            "required": [
                "duration",
                "example_count",
                "failure_count",
                "pending_count",
                "errors_outside_of_examples_count",
            ],
            "properties": {
                "duration": {"type": "number", "minimum": 0},
                "example_count": {"type": "integer", "minimum": 0},
                "failure_count": {"type": "integer", "minimum": 0},
                "pending_count": {"type": "integer", "minimum": 0},
                "errors_outside_of_examples_count": {"type": "integer", "minimum": 0},
            },
        },
        "summary_line": {"type": "string"},
        "errors": {"type": "array", "items": _ERROR_SCHEMA},
    },
}


def validate_report(data: Any) -> list[str]:
    validator = jsonschema.Draft202012Validator(REPORT_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda err: [str(part) for part in err.path])
    messages = []
    for error in errors:
        path = "/".join(str(part) for part in error.path) or "<root>"
        messages.append(f"{path}: {error.message}")
    return messages
