"""Bounded conversion of arbitrary runtime values into JSON-safe structures.

The serializer never raises. Each cap (depth, sequence length, mapping size,
string length, field count) is enforced independently, and exceeding one
yields a short sentinel instead of partial content. Self-referential
containers are not detected; they are cut off by the depth cap. Descriptors
from an earlier pass are recognized, so serializing serialized output returns
it unchanged.
"""

from __future__ import annotations

import dataclasses
import logging
import math
import re
from collections import deque
from collections.abc import Mapping
from typing import Any, Callable

from enriched_json.config.models import SerializationLimits

logger = logging.getLogger(__name__)

TRUNCATION_SUFFIX = "... (truncated)"
MAX_DEPTH_SENTINEL = "[Max depth exceeded]"

_SEQUENCE_TYPES = (list, tuple, set, frozenset, deque)
_PATTERN_FLAGS = (
    (re.IGNORECASE, "i"),
    (re.MULTILINE, "m"),
    (re.DOTALL, "s"),
    (re.VERBOSE, "x"),
    (re.ASCII, "a"),
)
_UNESCAPED_SLASH = re.compile(r"(?<!\\)/")
_DESCRIPTOR_KEYS = frozenset({"class", "repr", "str", "fields", "serialization_error"})


def class_name(value: Any) -> str:
    try:
        cls = type(value)
        module = cls.__module__
        qualname = cls.__qualname__
    except Exception:
        return "<unknown>"
    if not module or module == "builtins":
        return qualname
    return f"{module}.{qualname}"


def pattern_literal(pattern: re.Pattern[Any]) -> str:
    """Render a compiled pattern as ``/source/flags``."""
    source = pattern.pattern
    if isinstance(source, bytes):
        source = source.decode("utf-8", errors="backslashreplace")
    flags = "".join(letter for flag, letter in _PATTERN_FLAGS if pattern.flags & flag)
    escaped = _UNESCAPED_SLASH.sub(r"\\/", source)
    return f"/{escaped}/{flags}"


def is_error_descriptor(value: Any) -> bool:
    return isinstance(value, dict) and "serialization_error" in value


def _is_descriptor(value: Any) -> bool:
    """True for the object and error descriptors this module produces."""
    if not isinstance(value, dict) or not isinstance(value.get("class"), str):
        return False
    if "repr" not in value and "serialization_error" not in value:
        return False
    return _DESCRIPTOR_KEYS.issuperset(value)


def _error_message(exc: BaseException) -> str:
    try:
        return str(exc) or type(exc).__name__
    except Exception:
        return type(exc).__name__


def _is_named_tuple(value: Any) -> bool:
    return isinstance(value, tuple) and isinstance(getattr(type(value), "_fields", None), tuple)


def _field_names(value: Any) -> list[str] | None:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return [field.name for field in dataclasses.fields(value)]
    if _is_named_tuple(value):
        return list(type(value)._fields)
    model_fields = getattr(type(value), "model_fields", None)
    if isinstance(model_fields, dict):
        return [name for name in model_fields if isinstance(name, str)]
    attrs = getattr(value, "__dict__", None)
    if isinstance(attrs, dict):
        return [name for name in attrs if isinstance(name, str)]
    return None


def _read_field(value: Any, name: str) -> Any:
    attrs = getattr(value, "__dict__", None)
    if isinstance(attrs, dict) and name in attrs:
        return attrs[name]
    return getattr(value, name)


class Serializer:
    def __init__(self, limits: SerializationLimits | None = None) -> None:
        self.limits = limits or SerializationLimits()

    def serialize(self, value: Any, depth: int = 0) -> Any:
        try:
            return self._serialize(value, depth)
        except Exception as exc:
            name = class_name(value)
            logger.debug("Serialization of %s failed", name, exc_info=True)
            return {
                "class": name,
                "serialization_error": _error_message(exc),
                "str": self._safe_text(str, value),
            }

    def _serialize(self, value: Any, depth: int) -> Any:
        if depth > self.limits.max_depth:
            return MAX_DEPTH_SENTINEL
        if value is None or isinstance(value, (bool, int)):
            return value
        if isinstance(value, float):
            if math.isfinite(value):
                return value
            if math.isnan(value):
                return "NaN"
            return "Infinity" if value > 0 else "-Infinity"
        if isinstance(value, str):
            return self._truncate(value)
        if isinstance(value, re.Pattern):
            return self._truncate(pattern_literal(value))
        if isinstance(value, _SEQUENCE_TYPES) and not _is_named_tuple(value):
            return self._serialize_sequence(value, depth)
        if _is_descriptor(value):
            return self._reserialize_descriptor(value, depth)
        if isinstance(value, Mapping):
            return self._serialize_mapping(value, depth)
        return self._describe(value, depth)

    def _truncate(self, text: str) -> str:
        limit = self.limits.max_string_length
        if len(text) <= limit:
            return text
        # already truncated by a previous pass
        if len(text) == limit + len(TRUNCATION_SUFFIX) and text.endswith(TRUNCATION_SUFFIX):
            return text
        return text[:limit] + TRUNCATION_SUFFIX

    def _serialize_sequence(self, value: Any, depth: int) -> Any:
        size = len(value)
        if size > self.limits.max_sequence_size:
            return f"[Large array: {size} items]"
        items = value
        if isinstance(value, (set, frozenset)):
            items = sorted(value, key=lambda item: self._safe_text(repr, item))
        return [self.serialize(item, depth + 1) for item in items]

    def _serialize_mapping(self, value: Mapping[Any, Any], depth: int) -> Any:
        size = len(value)
        if size > self.limits.max_mapping_size:
            return f"[Large hash: {size} keys]"
        serialized: dict[str, Any] = {}
        for key, item in value.items():
            text_key = key if isinstance(key, str) else self._safe_text(str, key)
            serialized[text_key] = self.serialize(item, depth + 1)
        return serialized

    def _describe(self, value: Any, depth: int) -> dict[str, Any]:
        descriptor: dict[str, Any] = {
            "class": class_name(value),
            "repr": self._safe_text(repr, value),
            "str": self._safe_text(str, value),
        }
        names = _field_names(value)
        if names and len(names) <= self.limits.max_fields:
            fields: dict[str, Any] = {}
            for name in names:
                try:
                    field_value = _read_field(value, name)
                except Exception:
                    logger.debug(
                        "Skipping unreadable field %s of %s", name, descriptor["class"], exc_info=True
                    )
                    continue
                fields[name] = self.serialize(field_value, depth + 1)
            descriptor["fields"] = fields
        return descriptor

    def _reserialize_descriptor(self, value: Mapping[str, Any], depth: int) -> dict[str, Any]:
        # fields sit at the described object's depth + 1, as in _describe
        serialized: dict[str, Any] = {}
        for key, item in value.items():
            if key == "fields" and isinstance(item, Mapping):
                serialized[key] = {
                    str(name): self.serialize(field, depth + 1) for name, field in item.items()
                }
            elif isinstance(item, str):
                serialized[key] = self._truncate(item)
            else:
                serialized[key] = self.serialize(item, depth + 1)
        return serialized

    def _safe_text(self, convert: Callable[[Any], str], value: Any) -> str:
        try:
            text = convert(value)
            if not isinstance(text, str):
                raise TypeError(f"{convert.__name__} returned {type(text).__name__}")
        except Exception:
            return f"[{convert.__name__} failed: {class_name(value)}]"
        return self._truncate(text)


_default_serializer = Serializer()


def serialize_value(value: Any, limits: SerializationLimits | None = None) -> Any:
    if limits is None:
        return _default_serializer.serialize(value)
    return Serializer(limits).serialize(value)
