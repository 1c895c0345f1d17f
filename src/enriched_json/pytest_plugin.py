"""pytest integration: writes an enriched JSON report for a test session.

Enabled with ``--enriched-json=PATH`` (or a config file passed through
``--enriched-json-config``). Set ``ENRICHED_JSON_DEBUG=1`` to log capture
faults to stderr.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from pathlib import Path
from typing import Any

import pytest

from enriched_json.artifacts.correlator import OutputCorrelator
from enriched_json.artifacts.html import write_html
from enriched_json.artifacts.messages import extract_error_info
from enriched_json.artifacts.models import ExampleMetadata, ExampleResult
from enriched_json.artifacts.report import build_report, write_report
from enriched_json.capture.store import CaptureStore
from enriched_json.config.loader import load_config
from enriched_json.config.models import ReportConfig
from enriched_json.observer.hook import AssertionObserver, CurrentTest
from enriched_json.serialization.serializer import Serializer, class_name

logger = logging.getLogger(__name__)

DEBUG_ENV = "ENRICHED_JSON_DEBUG"
_TRUTHY = {"1", "true", "yes", "on"}
_BUILTIN_MARKS = {
    "parametrize",
    "usefixtures",
    "filterwarnings",
    "skip",
    "skipif",
    "xfail",
    "describes",
}

reporter_key = pytest.StashKey["EnrichedJsonReporter"]()


def _debug_enabled(settings: ReportConfig) -> bool:
    return settings.debug or os.getenv(DEBUG_ENV, "").lower() in _TRUTHY


def _resolve_output(path: str, base: Path) -> Path:
    resolved = Path(path)
    if not resolved.is_absolute():
        resolved = base / resolved
    return resolved


def _group_hierarchy(item: pytest.Item) -> list[str]:
    return [
        node.name
        for node in item.listchain()
        if isinstance(node, (pytest.Module, pytest.Class))
    ]


def _described_class(item: pytest.Item) -> str | None:
    marker = item.get_closest_marker("describes")
    if marker is None or not marker.args:
        return None
    target = marker.args[0]
    if isinstance(target, str):
        return target
    if isinstance(target, type):
        return f"{target.__module__}.{target.__qualname__}"
    return class_name(target)


def _backtrace(excinfo: pytest.ExceptionInfo[BaseException] | None) -> list[str]:
    if excinfo is None:
        return []
    try:
        return [f"{entry.path}:{entry.lineno + 1}:in {entry.name}" for entry in excinfo.traceback]
    except Exception:
        logger.debug("Formatting backtrace failed", exc_info=True)
        return []


def _pending_message(report: pytest.TestReport) -> str | None:
    wasxfail = getattr(report, "wasxfail", None)
    if wasxfail is not None:
        return f"xfail: {wasxfail}" if wasxfail else "xfail"
    longrepr = report.longrepr
    if isinstance(longrepr, tuple) and len(longrepr) == 3:
        reason = str(longrepr[2])
        return reason.removeprefix("Skipped: ")
    return None


class EnrichedJsonReporter:
    """Owns the capture store, observer and correlator for one session."""

    def __init__(self, settings: ReportConfig, output_path: Path, html_path: Path | None) -> None:
        self.settings = settings
        self.output_path = output_path
        self.html_path = html_path
        self.store = CaptureStore()
        self.serializer = Serializer(settings.limits)
        self.current_test = CurrentTest()
        self.observer = AssertionObserver(
            self.store,
            serializer=self.serializer,
            test_id_provider=self.current_test,
            capture_passing=settings.capture_passing,
        )
        self.correlator = OutputCorrelator(self.store)
        self.results: list[ExampleResult] = []
        self.errors: list[dict[str, Any]] = []
        self.written: Path | None = None
        self._started = time.perf_counter()
        self._log_handler: logging.Handler | None = None

    def start(self) -> None:
        if _debug_enabled(self.settings):
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(logging.Formatter("enriched-json: %(name)s: %(message)s"))
            package_logger = logging.getLogger("enriched_json")
            package_logger.addHandler(handler)
            package_logger.setLevel(logging.DEBUG)
            self._log_handler = handler
        self.observer.install()

    def stop(self) -> None:
        self.observer.uninstall()
        if self._log_handler is not None:
            package_logger = logging.getLogger("enriched_json")
            package_logger.removeHandler(self._log_handler)
            package_logger.setLevel(logging.NOTSET)
            self._log_handler = None

    def _tags(self, item: pytest.Item) -> dict[str, Any] | None:
        tags: dict[str, Any] = {}
        for marker in item.iter_markers():
            if marker.name in _BUILTIN_MARKS or marker.name in tags:
                continue
            if len(marker.args) == 1 and not marker.kwargs:
                tags[marker.name] = self.serializer.serialize(marker.args[0])
            else:
                tags[marker.name] = True
        return tags or None

    def _metadata(self, item: pytest.Item, file_path: str, line_number: int | None) -> ExampleMetadata:
        hierarchy = _group_hierarchy(item)
        location = file_path if line_number is None else f"{file_path}:{line_number}"
        return ExampleMetadata(
            location=location,
            absolute_file_path=str(Path(item.path).resolve()),
            rerun_file_path=item.nodeid,
            example_group=hierarchy[-1] if hierarchy else None,
            example_group_hierarchy=hierarchy,
            described_class=_described_class(item),
            tags=self._tags(item),
        )

    def _example_result(
        self,
        item: pytest.Item,
        call: pytest.CallInfo[None],
        report: pytest.TestReport,
    ) -> ExampleResult | None:
        setup_problem = report.when == "setup" and (report.failed or report.skipped)
        if report.when != "call" and not setup_problem:
            return None

        if report.skipped:
            status = "pending"
        elif report.failed:
            status = "failed"
        else:
            status = "passed"

        file_path, lineno, _ = item.location
        line_number = None if lineno is None else lineno + 1
        excinfo = call.excinfo if status == "failed" else None
        class_names = [node.name for node in item.listchain() if isinstance(node, pytest.Class)]
        return ExampleResult(
            id=item.nodeid,
            description=item.name,
            full_description=" ".join([*class_names, item.name]),
            status=status,
            file_path=file_path,
            line_number=line_number,
            run_time=report.duration,
            metadata=self._metadata(item, file_path, line_number),
            pending_message=_pending_message(report) if status == "pending" else None,
            exception=None if excinfo is None else excinfo.value,
            backtrace=_backtrace(excinfo),
        )

    @pytest.hookimpl(hookwrapper=True)
    def pytest_runtest_call(self, item: pytest.Item):
        with self.current_test.running(item.nodeid):
            yield

    @pytest.hookimpl(hookwrapper=True)
    def pytest_runtest_makereport(self, item: pytest.Item, call: pytest.CallInfo[None]):
        outcome = yield
        report = outcome.get_result()
        try:
            result = self._example_result(item, call, report)
        except Exception:
            logger.debug("Building result for %s failed", item.nodeid, exc_info=True)
            return
        if result is not None:
            self.results.append(result)

    def pytest_collectreport(self, report: pytest.CollectReport) -> None:
        if not report.failed:
            return
        info = extract_error_info(report.longreprtext)
        if info is not None:
            self.errors.append(info)

    def pytest_sessionfinish(self, session: pytest.Session) -> None:
        duration = time.perf_counter() - self._started
        examples = self.correlator.correlate(self.results)
        self.results = []
        seed = session.config.getoption("randomly_seed", None)
        report = build_report(
            examples,
            errors=self.errors,
            duration=duration,
            seed=seed if isinstance(seed, int) else None,
        )
        self.written = write_report(self.output_path, report)
        if self.html_path is not None:
            write_html(self.html_path, report)

    def pytest_terminal_summary(self, terminalreporter: Any) -> None:
        if self.written is not None:
            terminalreporter.write_sep("-", f"enriched json report: {self.written}")


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("enriched-json", "structured assertion diagnostics")
    group.addoption(
        "--enriched-json",
        action="store",
        dest="enriched_json",
        metavar="PATH",
        default=None,
        help="Write an enriched JSON report of the session to PATH.",
    )
    group.addoption(
        "--enriched-json-config",
        action="store",
        dest="enriched_json_config",
        metavar="PATH",
        default=None,
        help="Load enriched JSON report settings from a YAML file.",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "describes(target): record the class under test in the enriched JSON report",
    )
    output = config.getoption("enriched_json")
    config_path = config.getoption("enriched_json_config")
    if output is None and config_path is None:
        return

    if config_path is not None:
        try:
            settings = load_config(Path(config_path))
        except (FileNotFoundError, ValueError) as exc:
            raise pytest.UsageError(str(exc)) from exc
    else:
        settings = ReportConfig()
    if output is not None:
        settings = settings.model_copy(update={"output_path": output})
    if settings.output_path is None:
        raise pytest.UsageError("enriched-json: no report path configured (use --enriched-json=PATH)")

    base = Path(config.invocation_params.dir)
    html_path = _resolve_output(settings.html_path, base) if settings.html_path else None
    reporter = EnrichedJsonReporter(settings, _resolve_output(settings.output_path, base), html_path)
    reporter.start()
    config.stash[reporter_key] = reporter
    config.pluginmanager.register(reporter, "enriched-json-reporter")


def pytest_unconfigure(config: pytest.Config) -> None:
    reporter = config.stash.get(reporter_key, None)
    if reporter is None:
        return
    reporter.stop()
    del config.stash[reporter_key]
    config.pluginmanager.unregister(reporter)
