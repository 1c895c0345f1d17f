"""Matcher-invocation entry point of the expectation API.

``expect`` resolves ``handle_matcher`` through this module on every call, so
an observer can wrap it without touching call sites.
"""

from __future__ import annotations

from typing import Any, Callable, Union

from enriched_json.diffing.engine import generate_diff

from .results import ExpectationResult, Failed, Passed

DIFF_MARKER = "\nDiff:"

CustomMessage = Union[str, Callable[[], str], None]


def _resolve_message(message: CustomMessage) -> str | None:
    if message is None:
        return None
    if callable(message):
        message = message()
    return str(message)


def _default_message(matcher: Any, negated: bool) -> str:
    if negated:
        message = matcher.failure_message_when_negated()
    else:
        message = matcher.failure_message()
    if getattr(matcher, "diffable", None) is True:
        diff = generate_diff(getattr(matcher, "actual", None), getattr(matcher, "expected", None))
        if diff:
            message = f"{message}\n{DIFF_MARKER}\n{diff}"
    return message


def handle_matcher(
    actual: Any,
    matcher: Any,
    message: CustomMessage = None,
    *,
    negated: bool = False,
) -> ExpectationResult:
    if negated:
        does_not_match = getattr(matcher, "does_not_match", None)
        if callable(does_not_match):
            ok = bool(does_not_match(actual))
        else:
            ok = not matcher.matches(actual)
    else:
        ok = bool(matcher.matches(actual))

    if ok:
        return Passed(actual)

    custom = _resolve_message(message)
    if custom is not None:
        return Failed(message=custom, negated=negated)
    return Failed(message=_default_message(matcher, negated), negated=negated)
