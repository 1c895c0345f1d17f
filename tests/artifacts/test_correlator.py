from __future__ import annotations

import pytest

from enriched_json.artifacts import ExampleMetadata, ExampleResult, OutputCorrelator
from enriched_json.capture import CapturedSnapshot, CaptureStore
from enriched_json.expectations import DIFF_MARKER, ExpectationNotMetError, Failed
from enriched_json.failures import DetailsPayload, EnrichedFailure


def _result(
    example_id: str,
    *,
    status: str = "passed",
    exception: BaseException | None = None,
) -> ExampleResult:
    return ExampleResult(
        id=example_id,
        description="works",
        full_description="Widget works",
        status=status,
        file_path="tests/test_widget.py",
        line_number=12,
        run_time=0.01,
        metadata=ExampleMetadata(
            location="tests/test_widget.py:12",
            absolute_file_path="/repo/tests/test_widget.py",
            rerun_file_path=example_id,
            example_group="TestWidget",
            example_group_hierarchy=["test_widget.py", "TestWidget"],
        ),
        exception=exception,
        backtrace=["tests/test_widget.py:12:in test_works"] if exception else [],
    )


def _snapshot(passed: bool | None = True) -> CapturedSnapshot:
    return CapturedSnapshot(expected=1, actual=1, matcher_name="Eq", passed=passed)


def _enriched_error(message: str) -> ExpectationNotMetError:
    failure = Failed(message=message)
    details = DetailsPayload(
        expected="a",
        actual="b",
        matcher_name="Match",
        negated=False,
        diffable=True,
        diff="--- expected\n+++ actual",
    )
    return ExpectationNotMetError(EnrichedFailure(failure=failure, details=details))


def test_passing_example_takes_details_from_store() -> None:
    store = CaptureStore()
    store.record("t1", _snapshot())

    record = OutputCorrelator(store).build_record(_result("t1"))

    assert record["details"] == {
        "expected": 1,
        "actual": 1,
        "matcher_name": "Eq",
        "negated": False,
        "passed": True,
    }
    assert "exception" not in record
    assert record["metadata"]["location"] == "tests/test_widget.py:12"
    assert "tags" not in record["metadata"]


def test_example_without_capture_has_no_details() -> None:
    record = OutputCorrelator(CaptureStore()).build_record(_result("t1"))
    assert "details" not in record
    assert record["pending_message"] is None


def test_enriched_failure_details_win_and_diff_is_stripped() -> None:
    store = CaptureStore()
    store.record("t1", _snapshot(passed=False))
    error = _enriched_error(f"expected 'b' to match 'a'\n{DIFF_MARKER}\n--- expected\n+++ actual")

    record = OutputCorrelator(store).build_record(_result("t1", status="failed", exception=error))

    assert record["details"]["matcher_name"] == "Match"
    assert record["details"]["diff"] == "--- expected\n+++ actual"
    assert record["exception"]["message"] == "expected 'b' to match 'a'"
    assert record["exception"]["class"].endswith("ExpectationNotMetError")
    assert record["exception"]["backtrace"] == ["tests/test_widget.py:12:in test_works"]


def test_plain_failure_falls_back_to_store_and_keeps_message() -> None:
    store = CaptureStore()
    store.record("t1", _snapshot(passed=True))
    error = AssertionError(f"boom{DIFF_MARKER}\nkept")

    record = OutputCorrelator(store).build_record(_result("t1", status="failed", exception=error))

    assert record["exception"]["class"] == "AssertionError"
    assert record["exception"]["message"] == f"boom{DIFF_MARKER}\nkept"
    assert record["details"]["passed"] is True


def test_correlate_clears_store() -> None:
    store = CaptureStore()
    store.record("t1", _snapshot())
    store.record("t2", _snapshot())

    records = OutputCorrelator(store).correlate([_result("t1"), _result("t2")])

    assert [record["id"] for record in records] == ["t1", "t2"]
    assert all("details" in record for record in records)
    assert len(store) == 0


def test_correlate_clears_store_when_building_fails() -> None:
    store = CaptureStore()
    store.record("t1", _snapshot())

    def results():
        yield _result("t1")
        raise RuntimeError("host failure")

    with pytest.raises(RuntimeError):
        OutputCorrelator(store).correlate(results())
    assert len(store) == 0
