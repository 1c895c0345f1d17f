from __future__ import annotations

import difflib
import logging
import pprint
from collections.abc import Mapping, Sequence
from typing import Any

from enriched_json.config.models import SerializationLimits
from enriched_json.serialization.serializer import Serializer

logger = logging.getLogger(__name__)

_CONTAINER_TYPES = (list, tuple, set, frozenset, Mapping)


def matcher_diffability(matcher: Any) -> bool | None:
    """Return the matcher's own diffability answer, or None when it has none."""
    try:
        declared = getattr(matcher, "diffable", None)
        if callable(declared):
            declared = declared()
    except Exception:
        logger.debug("Reading diffable from %r failed", type(matcher), exc_info=True)
        return None
    if declared is None:
        return None
    return bool(declared)


def _has_usable_str(value: Any) -> bool:
    try:
        return isinstance(str(value), str)
    except Exception:
        return False


def values_diffable(expected: Any, actual: Any, matcher_diffable: bool | None = None) -> bool:
    if matcher_diffable is not None:
        return bool(matcher_diffable)
    try:
        if expected is None or actual is None:
            return False
        if type(actual) is not type(expected):
            return False
        if isinstance(expected, (str, Sequence, Mapping)):
            return True
        return _has_usable_str(expected) and _has_usable_str(actual)
    except Exception:
        return False


def _text_form(value: Any, serializer: Serializer) -> str:
    # text is cut to the string cap so diff work stays bounded
    if isinstance(value, _CONTAINER_TYPES):
        value = pprint.pformat(serializer.serialize(value), width=80)
    elif not isinstance(value, str):
        value = str(value)
    return serializer.serialize(value)


def generate_diff(actual: Any, expected: Any, limits: SerializationLimits | None = None) -> str | None:
    serializer = Serializer(limits)
    try:
        expected_lines = _text_form(expected, serializer).splitlines()
        actual_lines = _text_form(actual, serializer).splitlines()
        lines = difflib.unified_diff(
            expected_lines,
            actual_lines,
            fromfile="expected",
            tofile="actual",
            lineterm="",
        )
        return "\n".join(lines)
    except Exception:
        logger.debug("Diff generation failed", exc_info=True)
        return None


def attachable_diff(
    expected: Any,
    actual: Any,
    diffable: bool,
    limits: SerializationLimits | None = None,
) -> str | None:
    """Diff text worth attaching to a failure's details, if any."""
    if not diffable or expected is None or actual is None:
        return None
    diff = generate_diff(actual, expected, limits)
    if diff is None or not diff.strip():
        return None
    return diff
