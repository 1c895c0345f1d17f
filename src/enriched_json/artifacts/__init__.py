from .correlator import OutputCorrelator
from .html import render_html, write_html
from .messages import extract_error_info, strip_ansi, strip_diff
from .models import ExampleMetadata, ExampleResult
from .report import build_report, load_report, summary_line, write_report
from .schema import REPORT_SCHEMA, validate_report

__all__ = [
    "REPORT_SCHEMA",
    "ExampleMetadata",
    "ExampleResult",
    "OutputCorrelator",
    "build_report",
    "extract_error_info",
    "load_report",
    "render_html",
    "strip_ansi",
    "strip_diff",
    "summary_line",
    "validate_report",
    "write_html",
    "write_report",
]
