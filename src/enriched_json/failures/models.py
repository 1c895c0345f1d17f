from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from enriched_json.expectations.results import Failed

CORE_DETAIL_KEYS = frozenset(
    {"expected", "actual", "matcher_name", "negated", "diffable", "diff", "original_message"}
)


@dataclass(frozen=True)
class DetailsPayload:
    expected: Any
    actual: Any
    matcher_name: str
    negated: bool
    diffable: bool
    diff: str | None = None
    # only set when a custom message replaced the matcher's own message
    original_message: str | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "expected": self.expected,
            "actual": self.actual,
            "matcher_name": self.matcher_name,
            "negated": self.negated,
            "diffable": self.diffable,
        }
        if self.diff is not None:
            data["diff"] = self.diff
        if self.original_message:
            data["original_message"] = self.original_message
        for key, value in self.extras.items():
            if key not in CORE_DETAIL_KEYS:
                data[key] = value
        return data


@dataclass(frozen=True, eq=False)
class EnrichedFailure:
    """A host failure paired with its structured details."""

    failure: Failed
    details: DetailsPayload

    @property
    def message(self) -> str:
        return self.failure.message

    @property
    def negated(self) -> bool:
        return self.failure.negated

    def __eq__(self, other: object) -> bool:
        if isinstance(other, EnrichedFailure):
            return self.failure == other.failure
        return self.failure == other

    def __hash__(self) -> int:
        return hash(self.failure)

    def __str__(self) -> str:
        return self.failure.message
