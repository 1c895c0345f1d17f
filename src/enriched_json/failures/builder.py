from __future__ import annotations

import inspect
import logging
from typing import Any

from enriched_json.diffing.engine import attachable_diff, matcher_diffability, values_diffable
from enriched_json.expectations.results import Failed
from enriched_json.serialization.serializer import Serializer, class_name

from .extras import ExtrasRegistry
from .models import DetailsPayload, EnrichedFailure

logger = logging.getLogger(__name__)


def extract_value(matcher: Any, name: str) -> Any:
    """Read ``name`` from a matcher; missing, failing or self-referential reads give None."""
    try:
        value = getattr(matcher, name, None)
        if inspect.ismethod(value):
            value = value()
    except Exception:
        logger.debug("Reading %s from %s failed", name, class_name(matcher), exc_info=True)
        return None
    if value is matcher:
        return None
    return value


def is_predicate_matcher(matcher: Any) -> bool:
    try:
        return bool(getattr(matcher, "is_predicate", False))
    except Exception:
        return False


def predicate_values(matcher: Any, actual: Any, negated: bool) -> tuple[bool, bool | None]:
    # the host evaluates the predicate again after this
    try:
        outcome: bool | None = bool(matcher.matches(actual))
    except Exception:
        logger.debug("Evaluating predicate %s failed", class_name(matcher), exc_info=True)
        outcome = None
    return (not negated), outcome


def default_failure_message(matcher: Any, negated: bool) -> str | None:
    name = "failure_message_when_negated" if negated else "failure_message"
    try:
        message = getattr(matcher, name)()
    except Exception:
        logger.debug("Reading %s from %s failed", name, class_name(matcher), exc_info=True)
        return None
    if not isinstance(message, str) or not message:
        return None
    return message


def build_details(
    matcher: Any,
    actual: Any,
    *,
    negated: bool,
    custom_message: bool,
    serializer: Serializer,
    extras: ExtrasRegistry | None = None,
) -> DetailsPayload:
    if is_predicate_matcher(matcher):
        expected_raw, actual_raw = predicate_values(matcher, actual, negated)
    else:
        expected_raw = extract_value(matcher, "expected")
        actual_raw = extract_value(matcher, "actual")

    diffable = values_diffable(expected_raw, actual_raw, matcher_diffability(matcher))
    return DetailsPayload(
        expected=serializer.serialize(expected_raw),
        actual=serializer.serialize(actual_raw),
        matcher_name=class_name(matcher),
        negated=negated,
        diffable=diffable,
        diff=attachable_diff(expected_raw, actual_raw, diffable, serializer.limits),
        original_message=default_failure_message(matcher, negated) if custom_message else None,
        extras=extras.collect(matcher, serializer) if extras is not None else {},
    )


def enrich_failure(
    failure: Failed,
    matcher: Any,
    actual: Any,
    *,
    custom_message: bool,
    serializer: Serializer,
    extras: ExtrasRegistry | None = None,
) -> EnrichedFailure:
    details = build_details(
        matcher,
        actual,
        negated=failure.negated,
        custom_message=custom_message,
        serializer=serializer,
        extras=extras,
    )
    return EnrichedFailure(failure=failure, details=details)
