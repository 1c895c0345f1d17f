from __future__ import annotations

import functools
import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator

from enriched_json.capture.models import CapturedSnapshot
from enriched_json.capture.store import CaptureStore
from enriched_json.expectations import handler
from enriched_json.expectations.results import ExpectationResult, Failed
from enriched_json.failures.builder import (
    enrich_failure,
    extract_value,
    is_predicate_matcher,
    predicate_values,
)
from enriched_json.failures.extras import ExtrasRegistry
from enriched_json.serialization.serializer import Serializer, class_name

logger = logging.getLogger(__name__)

TestIdProvider = Callable[[], "str | None"]
HandleMatcher = Callable[..., ExpectationResult]


class CurrentTest:
    """Holds the identity of the test whose body is running, if any."""

    def __init__(self) -> None:
        self.test_id: str | None = None

    def __call__(self) -> str | None:
        return self.test_id

    @contextmanager
    def running(self, test_id: str) -> Iterator[None]:
        previous = self.test_id
        self.test_id = test_id
        try:
            yield
        finally:
            self.test_id = previous


class AssertionObserver:
    """Records assertion values around the host's matcher entry point.

    ``before`` stores a speculative snapshot keyed by the current test id,
    ``after`` amends it with the outcome, and failed outcomes are wrapped in
    an ``EnrichedFailure``. None of this ever changes whether an assertion
    passed.
    """

    def __init__(
        self,
        store: CaptureStore,
        *,
        serializer: Serializer | None = None,
        extras: ExtrasRegistry | None = None,
        test_id_provider: TestIdProvider | None = None,
        capture_passing: bool = True,
    ) -> None:
        self.store = store
        self.serializer = serializer or Serializer()
        self.extras = extras if extras is not None else ExtrasRegistry()
        self.test_id_provider = test_id_provider or (lambda: None)
        self.capture_passing = capture_passing
        self._original: HandleMatcher | None = None

    def _current_test_id(self) -> str | None:
        try:
            return self.test_id_provider()
        except Exception:
            logger.debug("Test id provider failed", exc_info=True)
            return None

    def before(self, actual: Any, matcher: Any, negated: bool) -> None:
        if not self.capture_passing:
            return
        test_id = self._current_test_id()
        if test_id is None:
            return
        try:
            if is_predicate_matcher(matcher):
                expected_raw, actual_raw = predicate_values(matcher, actual, negated)
            else:
                expected_raw, actual_raw = extract_value(matcher, "expected"), actual
            snapshot = CapturedSnapshot(
                expected=self.serializer.serialize(expected_raw),
                actual=self.serializer.serialize(actual_raw),
                matcher_name=class_name(matcher),
                negated=negated,
            )
            self.store.record(test_id, snapshot)
        except Exception:
            logger.debug("Capturing values for %s failed", test_id, exc_info=True)

    def after(self, matcher: Any, passed: bool) -> None:
        if not self.capture_passing:
            return
        test_id = self._current_test_id()
        if test_id is None:
            return
        try:
            snapshot = self.store.get(test_id)
            if snapshot is None:
                return
            extra = self.extras.collect(matcher, self.serializer)
            self.store.record(test_id, snapshot.with_outcome(passed, extra))
        except Exception:
            logger.debug("Recording outcome for %s failed", test_id, exc_info=True)

    def enrich(self, failure: Failed, actual: Any, matcher: Any, *, custom_message: bool) -> Any:
        try:
            return enrich_failure(
                failure,
                matcher,
                actual,
                custom_message=custom_message,
                serializer=self.serializer,
                extras=self.extras,
            )
        except Exception:
            logger.debug("Enriching failure from %s failed", class_name(matcher), exc_info=True)
            return failure

    def wrap(self, handle_matcher: HandleMatcher) -> HandleMatcher:
        @functools.wraps(handle_matcher)
        def observed(
            actual: Any,
            matcher: Any,
            message: Any = None,
            *,
            negated: bool = False,
        ) -> Any:
            self.before(actual, matcher, negated)
            result = handle_matcher(actual, matcher, message, negated=negated)
            if isinstance(result, Failed):
                self.after(matcher, False)
                return self.enrich(result, actual, matcher, custom_message=message is not None)
            self.after(matcher, True)
            return result

        return observed

    @property
    def installed(self) -> bool:
        return self._original is not None

    def install(self) -> None:
        if self._original is not None:
            raise RuntimeError("Assertion observer is already installed")
        self._original = handler.handle_matcher
        handler.handle_matcher = self.wrap(self._original)

    def uninstall(self) -> None:
        if self._original is None:
            return
        handler.handle_matcher = self._original
        self._original = None
