from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Passed:
    value: Any = None


@dataclass(frozen=True)
class Failed:
    message: str
    negated: bool = False


ExpectationResult = Union[Passed, Failed]


class ExpectationNotMetError(AssertionError):
    """Raised by ``expect`` when a matcher outcome is a failure.

    ``failure`` is the host ``Failed`` value, or a carrier wrapping it when an
    observer enriched the outcome.
    """

    def __init__(self, failure: Any) -> None:
        super().__init__(failure.message)
        self.failure = failure

    @property
    def details(self) -> Any:
        return getattr(self.failure, "details", None)
