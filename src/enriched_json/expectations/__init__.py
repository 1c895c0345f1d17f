from .handler import DIFF_MARKER
from .matchers import (
    be_compared,
    be_empty,
    be_ge,
    be_gt,
    be_le,
    be_lt,
    be_within,
    change,
    contain_exactly,
    eq,
    have_key,
    include,
    match,
    raise_error,
    satisfy,
)
from .results import ExpectationNotMetError, ExpectationResult, Failed, Passed
from .target import ExpectationTarget, expect

__all__ = [
    "DIFF_MARKER",
    "ExpectationNotMetError",
    "ExpectationResult",
    "ExpectationTarget",
    "Failed",
    "Passed",
    "be_compared",
    "be_empty",
    "be_ge",
    "be_gt",
    "be_le",
    "be_lt",
    "be_within",
    "change",
    "contain_exactly",
    "eq",
    "expect",
    "have_key",
    "include",
    "match",
    "raise_error",
    "satisfy",
]
