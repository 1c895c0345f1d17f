from __future__ import annotations

import logging
import numbers
import re
from collections.abc import Mapping
from typing import Any, Callable

from enriched_json.serialization.serializer import Serializer, is_error_descriptor

logger = logging.getLogger(__name__)

ExtraExtractor = Callable[[Any, Serializer], dict[str, Any]]

USEFUL_ATTRIBUTES = frozenset(
    {
        "missing_items",
        "extra_items",
        "expecteds",
        "actuals",
        "operator",
        "delta",
        "tolerance",
        "expected_before",
        "expected_after",
        "actual_before",
        "actual_after",
        "by",
        "from",
        "to",
        "minimum",
        "maximum",
        "count",
        "description",
    }
)
_USEFUL_PREFIX = re.compile(r"^(missing|extra|failed|unmatched|matched)_")
_SIMPLE_TYPES = (str, numbers.Number, list, tuple, set, frozenset, Mapping)


def _attribute_names(matcher: Any) -> list[str]:
    attrs = getattr(matcher, "__dict__", None)
    if isinstance(attrs, dict):
        return [name for name in attrs if isinstance(name, str)]
    return []


def _is_useful(name: str) -> bool:
    return name in USEFUL_ATTRIBUTES or bool(_USEFUL_PREFIX.match(name))


def allow_listed_attributes(matcher: Any, serializer: Serializer) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for attr in _attribute_names(matcher):
        key = attr.lstrip("_")
        if not _is_useful(key):
            continue
        try:
            value = getattr(matcher, attr)
            if value is None or value is matcher or callable(value):
                continue
            if not isinstance(value, _SIMPLE_TYPES):
                continue
            serialized = serializer.serialize(value)
        except Exception:
            logger.debug("Skipping matcher attribute %s", attr, exc_info=True)
            continue
        if is_error_descriptor(serialized):
            continue
        data[key] = serialized
    return data


class ExtrasRegistry:
    """Matcher category (a class) -> extractors producing extra detail fields.

    Extractors registered for more specific classes run later, so their keys
    win over those of generic ones.
    """

    def __init__(self, *, include_defaults: bool = True) -> None:
        self._extractors: dict[type, list[ExtraExtractor]] = {}
        if include_defaults:
            self.register(object, allow_listed_attributes)

    def register(self, category: type, extractor: ExtraExtractor) -> None:
        self._extractors.setdefault(category, []).append(extractor)

    def extractors_for(self, matcher: Any) -> list[ExtraExtractor]:
        extractors: list[ExtraExtractor] = []
        for cls in reversed(type(matcher).__mro__):
            extractors.extend(self._extractors.get(cls, []))
        return extractors

    def collect(self, matcher: Any, serializer: Serializer) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for extractor in self.extractors_for(matcher):
            try:
                data.update(extractor(matcher, serializer))
            except Exception:
                logger.debug("Extra field extractor %r failed", extractor, exc_info=True)
        return data
