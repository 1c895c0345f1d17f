"""Reference matchers for the expectation API.

Each matcher records the values it compared on itself (``expected``,
``actual`` and matcher-specific attributes such as ``missing_items``) so that
failures can be described after the fact.
"""

from __future__ import annotations

import operator as _operator
import re
from collections.abc import Mapping
from typing import Any, Callable

_UNSET: Any = object()

_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    ">": _operator.gt,
    ">=": _operator.ge,
    "<": _operator.lt,
    "<=": _operator.le,
}


def _describe_expected(value: Any) -> str:
    if isinstance(value, re.Pattern):
        return f"/{value.pattern}/"
    return repr(value)


class BaseMatcher:
    diffable: bool | None = None
    is_predicate = False

    def __init__(self, expected: Any = None) -> None:
        self.expected = expected
        self.actual: Any = None

    def matches(self, actual: Any) -> bool:
        self.actual = actual
        return self.match(self.expected, actual)

    def match(self, expected: Any, actual: Any) -> bool:
        raise NotImplementedError

    def describe(self) -> str:
        return f"{type(self).__name__.lower()} {_describe_expected(self.expected)}"

    def failure_message(self) -> str:
        return f"expected {self.actual!r} to {self.describe()}"

    def failure_message_when_negated(self) -> str:
        return f"expected {self.actual!r} not to {self.describe()}"


class Eq(BaseMatcher):
    diffable = True

    def match(self, expected: Any, actual: Any) -> bool:
        return actual == expected

    def describe(self) -> str:
        return f"eq {self.expected!r}"

    def failure_message(self) -> str:
        return f"expected: {self.expected!r}\n     got: {self.actual!r}\n\n(compared using ==)"

    def failure_message_when_negated(self) -> str:
        return f"expected: value != {self.expected!r}\n     got: {self.actual!r}\n\n(compared using ==)"


class BeCompared(BaseMatcher):
    def __init__(self, operator: str, expected: Any) -> None:
        if operator not in _OPERATORS:
            raise ValueError(f"Unsupported comparison operator: {operator}")
        super().__init__(expected)
        self.operator = operator

    def match(self, expected: Any, actual: Any) -> bool:
        return bool(_OPERATORS[self.operator](actual, expected))

    def describe(self) -> str:
        return f"be {self.operator} {self.expected!r}"

    def failure_message(self) -> str:
        padding = " " * len(self.operator)
        return f"expected: {self.operator} {self.expected!r}\n     got: {padding} {self.actual!r}"


def _contains(container: Any, item: Any) -> bool:
    if isinstance(container, str) and isinstance(item, re.Pattern):
        return item.search(container) is not None
    if isinstance(item, re.Pattern):
        return any(isinstance(entry, str) and item.search(entry) for entry in container)
    return item in container


class Include(BaseMatcher):
    def __init__(self, *expecteds: Any) -> None:
        super().__init__(expecteds[0] if len(expecteds) == 1 else list(expecteds))
        self.expecteds = list(expecteds)
        self.missing_items: list[Any] = []
        self.matched_items: list[Any] = []

    def matches(self, actual: Any) -> bool:
        self.actual = actual
        self.missing_items = [item for item in self.expecteds if not _contains(actual, item)]
        return not self.missing_items

    def does_not_match(self, actual: Any) -> bool:
        self.actual = actual
        self.matched_items = [item for item in self.expecteds if _contains(actual, item)]
        return not self.matched_items

    def describe(self) -> str:
        return "include " + ", ".join(_describe_expected(item) for item in self.expecteds)


class ContainExactly(BaseMatcher):
    def __init__(self, *items: Any) -> None:
        super().__init__(list(items))
        self.missing_items: list[Any] = []
        self.extra_items: list[Any] = []

    def match(self, expected: Any, actual: Any) -> bool:
        remaining = list(actual)
        missing = []
        for item in expected:
            for index, candidate in enumerate(remaining):
                if candidate == item:
                    del remaining[index]
                    break
            else:
                missing.append(item)
        self.missing_items = missing
        self.extra_items = remaining
        return not missing and not remaining

    def describe(self) -> str:
        return f"contain exactly {', '.join(repr(item) for item in self.expected)}"

    def failure_message(self) -> str:
        return (
            f"expected collection contained:  {self.expected!r}\n"
            f"actual collection contained:    {self.actual!r}\n"
            f"the missing elements were:      {self.missing_items!r}\n"
            f"the extra elements were:        {self.extra_items!r}"
        )


class Match(BaseMatcher):
    diffable = True

    def match(self, expected: Any, actual: Any) -> bool:
        if not isinstance(actual, str):
            return False
        return re.search(expected, actual) is not None

    def describe(self) -> str:
        return f"match {_describe_expected(self.expected)}"


class BeWithin(BaseMatcher):
    def __init__(self, delta: float) -> None:
        super().__init__(_UNSET)
        self.delta = delta
        self.tolerance = delta
        self.unit = ""

    def of(self, expected: Any) -> "BeWithin":
        self.expected = expected
        self.tolerance = self.delta
        return self

    def percent_of(self, expected: Any) -> "BeWithin":
        self.expected = expected
        self.tolerance = abs(expected) * self.delta / 100.0
        self.unit = "%"
        return self

    def match(self, expected: Any, actual: Any) -> bool:
        if expected is _UNSET:
            raise ValueError("be_within requires .of(expected) or .percent_of(expected)")
        return abs(actual - expected) <= self.tolerance

    def describe(self) -> str:
        return f"be within {self.delta}{self.unit} of {self.expected!r}"


class BePredicate(BaseMatcher):
    """Matches when ``predicate(actual)`` is truthy."""

    is_predicate = True

    def __init__(self, predicate: Callable[[Any], Any], description: str) -> None:
        super().__init__()
        self.predicate = predicate
        self._description = description

    def match(self, expected: Any, actual: Any) -> bool:
        return bool(self.predicate(actual))

    def describe(self) -> str:
        return self._description


class HaveKey(BePredicate):
    def __init__(self, key: Any) -> None:
        super().__init__(self._has_key, f"have key {key!r}")
        self.key = key

    def _has_key(self, actual: Any) -> bool:
        return isinstance(actual, Mapping) and self.key in actual


class Change(BaseMatcher):
    def __init__(self, getter: Callable[[], Any]) -> None:
        super().__init__()
        self.getter = getter
        self.actual_before: Any = None
        self.actual_after: Any = None
        self._by: Any = _UNSET
        self._from: Any = _UNSET
        self._to: Any = _UNSET

    def by(self, amount: Any) -> "Change":
        self._by = amount
        self.expected = amount
        return self

    def from_(self, value: Any) -> "Change":
        self._from = value
        self.expected_before = value
        return self

    def to(self, value: Any) -> "Change":
        self._to = value
        self.expected_after = value
        self.expected = value
        return self

    def _run(self, block: Any) -> None:
        if not callable(block):
            raise TypeError("change matcher expects a callable")
        self.actual_before = self.getter()
        block()
        self.actual_after = self.getter()

    def matches(self, actual: Any) -> bool:
        self._run(actual)
        if self._by is not _UNSET:
            self.actual = self.actual_after - self.actual_before
            return self.actual == self._by
        self.actual = self.actual_after
        ok = self.actual_before != self.actual_after
        if self._from is not _UNSET:
            ok = ok and self.actual_before == self._from
        if self._to is not _UNSET:
            ok = ok and self.actual_after == self._to
        return ok

    def does_not_match(self, actual: Any) -> bool:
        self._run(actual)
        self.actual = self.actual_after
        ok = self.actual_before == self.actual_after
        if self._from is not _UNSET:
            ok = ok and self.actual_before == self._from
        return ok

    def describe(self) -> str:
        if self._by is not _UNSET:
            return f"change by {self._by!r}"
        parts = ["change"]
        if self._from is not _UNSET:
            parts.append(f"from {self._from!r}")
        if self._to is not _UNSET:
            parts.append(f"to {self._to!r}")
        return " ".join(parts)

    def failure_message(self) -> str:
        return f"expected result to {self.describe()}, but was {self.actual_before!r} -> {self.actual_after!r}"

    def failure_message_when_negated(self) -> str:
        return f"expected result not to change, but was {self.actual_before!r} -> {self.actual_after!r}"


class RaiseError(BaseMatcher):
    def __init__(self, expected: type[BaseException] = Exception, pattern: str | None = None) -> None:
        super().__init__(expected)
        self.pattern = pattern

    def matches(self, actual: Any) -> bool:
        self.actual = None
        try:
            actual()
        except Exception as exc:
            self.actual = exc
            if not isinstance(exc, self.expected):
                return False
            return self.pattern is None or re.search(self.pattern, str(exc)) is not None
        return False

    def describe(self) -> str:
        return f"raise {self.expected.__name__}"

    def failure_message(self) -> str:
        got = "nothing was raised" if self.actual is None else f"got {self.actual!r}"
        return f"expected {self.expected.__name__} to be raised, {got}"

    def failure_message_when_negated(self) -> str:
        return f"expected no {self.expected.__name__} to be raised, got {self.actual!r}"


def eq(expected: Any) -> Eq:
    return Eq(expected)


def be_compared(operator: str, expected: Any) -> BeCompared:
    return BeCompared(operator, expected)


def be_gt(expected: Any) -> BeCompared:
    return BeCompared(">", expected)


def be_ge(expected: Any) -> BeCompared:
    return BeCompared(">=", expected)


def be_lt(expected: Any) -> BeCompared:
    return BeCompared("<", expected)


def be_le(expected: Any) -> BeCompared:
    return BeCompared("<=", expected)


def include(*expecteds: Any) -> Include:
    return Include(*expecteds)


def contain_exactly(*items: Any) -> ContainExactly:
    return ContainExactly(*items)


def match(pattern: str | re.Pattern[str]) -> Match:
    return Match(pattern)


def be_within(delta: float) -> BeWithin:
    return BeWithin(delta)


def be_empty() -> BePredicate:
    return BePredicate(lambda actual: len(actual) == 0, "be empty")


def have_key(key: Any) -> HaveKey:
    return HaveKey(key)


def satisfy(predicate: Callable[[Any], Any], description: str = "satisfy the predicate") -> BePredicate:
    return BePredicate(predicate, description)


def change(getter: Callable[[], Any]) -> Change:
    return Change(getter)


def raise_error(expected: type[BaseException] = Exception, pattern: str | None = None) -> RaiseError:
    return RaiseError(expected, pattern)
