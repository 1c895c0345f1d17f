from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

_CORE_KEYS = ("expected", "actual", "matcher_name", "negated", "passed")


@dataclass(frozen=True)
class CapturedSnapshot:
    expected: Any
    actual: Any
    matcher_name: str
    negated: bool = False
    passed: bool | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def with_outcome(self, passed: bool, extra: dict[str, Any] | None = None) -> "CapturedSnapshot":
        if extra is None:
            return replace(self, passed=passed)
        return replace(self, passed=passed, extra=dict(extra))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "expected": self.expected,
            "actual": self.actual,
            "matcher_name": self.matcher_name,
            "negated": self.negated,
            "passed": self.passed,
        }
        for key, value in self.extra.items():
            if key not in _CORE_KEYS:
                data[key] = value
        return data
