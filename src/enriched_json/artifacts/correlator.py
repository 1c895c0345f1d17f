from __future__ import annotations

import logging
from typing import Any, Iterable

from enriched_json.capture.store import CaptureStore
from enriched_json.failures.models import EnrichedFailure
from enriched_json.serialization.serializer import class_name

from .messages import strip_diff
from .models import ExampleResult

logger = logging.getLogger(__name__)


def _carried_details(exception: BaseException | None) -> dict[str, Any] | None:
    failure = getattr(exception, "failure", None)
    if isinstance(failure, EnrichedFailure):
        return failure.details.to_dict()
    return None


class OutputCorrelator:
    """Builds per-example records from host results and captured values.

    Owns the end of the capture store's lifecycle: ``correlate`` empties the
    store once every record for the run has been built.
    """

    def __init__(self, store: CaptureStore) -> None:
        self.store = store

    def build_record(self, result: ExampleResult) -> dict[str, Any]:
        record: dict[str, Any] = {
            "id": result.id,
            "description": result.description,
            "full_description": result.full_description,
            "status": result.status,
            "file_path": result.file_path,
            "line_number": result.line_number,
            "run_time": result.run_time,
            "pending_message": result.pending_message,
            "metadata": result.metadata.to_dict(),
        }

        details: dict[str, Any] | None = None
        if result.exception is not None:
            exception = result.exception
            message = str(exception)
            details = _carried_details(exception)
            if details is not None and "expected" in details and "actual" in details:
                message = strip_diff(message)
            record["exception"] = {
                "class": class_name(exception),
                "message": message,
                "backtrace": list(result.backtrace),
            }

        if details is None:
            snapshot = self.store.get(result.id)
            if snapshot is not None:
                details = snapshot.to_dict()

        if details is not None:
            record["details"] = details
        return record

    def correlate(self, results: Iterable[ExampleResult]) -> list[dict[str, Any]]:
        try:
            return [self.build_record(result) for result in results]
        finally:
            logger.debug("Clearing %d captured snapshot(s)", len(self.store))
            self.store.clear_all()
