from __future__ import annotations

from typing import Any

from . import handler
from .results import ExpectationNotMetError, Passed


class ExpectationTarget:
    def __init__(self, actual: Any) -> None:
        self.actual = actual

    def to(self, matcher: Any, message: handler.CustomMessage = None) -> Any:
        return self._handle(matcher, message, negated=False)

    def not_to(self, matcher: Any, message: handler.CustomMessage = None) -> Any:
        return self._handle(matcher, message, negated=True)

    to_not = not_to

    def _handle(self, matcher: Any, message: handler.CustomMessage, *, negated: bool) -> Any:
        result = handler.handle_matcher(self.actual, matcher, message, negated=negated)
        if isinstance(result, Passed):
            return result.value
        raise ExpectationNotMetError(result)


def expect(actual: Any) -> ExpectationTarget:
    return ExpectationTarget(actual)
