from __future__ import annotations

import math
import re
from collections import namedtuple
from collections.abc import Mapping
from dataclasses import dataclass, field

from pydantic import BaseModel

from enriched_json.config.models import SerializationLimits
from enriched_json.serialization import (
    MAX_DEPTH_SENTINEL,
    TRUNCATION_SUFFIX,
    Serializer,
    class_name,
    is_error_descriptor,
    pattern_literal,
    serialize_value,
)


@dataclass
class Point:
    x: int
    y: int


@dataclass
class Address:
    city: str


@dataclass
class Customer:
    address: Address


@dataclass
class Invoice:
    customer: Customer


@dataclass
class Link:
    next: object


@dataclass
class Lazy:
    a: int
    b: int = field(init=False)


Pair = namedtuple("Pair", ["left", "right"])


class Order(BaseModel):
    id: int
    items: list[str]


class Widget:
    def __init__(self) -> None:
        self.name = "gear"
        self.size = 3


class BadRepr:
    def __repr__(self) -> str:
        raise RuntimeError("no repr")

    def __str__(self) -> str:
        raise RuntimeError("no str")


class ExplodingList(list):
    def __len__(self) -> int:
        raise RuntimeError("boom")


class ExplodingMapping(Mapping):
    def __getitem__(self, key: object) -> object:
        raise KeyError(key)

    def __iter__(self):
        raise RuntimeError("cannot iterate")

    def __len__(self) -> int:
        raise RuntimeError("cannot size")


def _nest(levels: int) -> object:
    value: object = 1
    for _ in range(levels):
        value = [value]
    return value


def test_scalars_pass_through() -> None:
    serializer = Serializer()
    assert serializer.serialize(None) is None
    assert serializer.serialize(True) is True
    assert serializer.serialize(42) == 42
    assert serializer.serialize(1.5) == 1.5
    assert serializer.serialize("text") == "text"


def test_non_finite_floats_become_strings() -> None:
    serializer = Serializer()
    assert serializer.serialize(math.nan) == "NaN"
    assert serializer.serialize(math.inf) == "Infinity"
    assert serializer.serialize(-math.inf) == "-Infinity"


def test_string_truncation_boundary() -> None:
    serializer = Serializer()
    assert serializer.serialize("a" * 1000) == "a" * 1000
    assert serializer.serialize("a" * 1001) == "a" * 1000 + TRUNCATION_SUFFIX


def test_truncation_is_idempotent() -> None:
    serializer = Serializer()
    once = serializer.serialize("x" * 5000)
    assert serializer.serialize(once) == once


def test_sequence_size_cap() -> None:
    serializer = Serializer()
    assert serializer.serialize(list(range(100))) == list(range(100))
    assert serializer.serialize(list(range(101))) == "[Large array: 101 items]"
    assert serializer.serialize(tuple(range(150))) == "[Large array: 150 items]"


def test_mapping_size_cap() -> None:
    serializer = Serializer()
    small = {f"k{i}": i for i in range(100)}
    assert serializer.serialize(small) == small
    assert serializer.serialize({i: i for i in range(101)}) == "[Large hash: 101 keys]"


def test_mapping_keys_become_strings() -> None:
    assert serialize_value({1: "one", ("a", "b"): 2}) == {"1": "one", "('a', 'b')": 2}


def test_depth_cap_replaces_deep_content_with_sentinel() -> None:
    result = serialize_value(_nest(7))
    levels = 0
    while isinstance(result, list):
        levels += 1
        result = result[0]
    assert levels == 6
    assert result == MAX_DEPTH_SENTINEL


def test_depth_within_cap_is_preserved() -> None:
    assert serialize_value(_nest(5)) == [[[[[1]]]]]


def test_self_referential_list_terminates() -> None:
    value: list[object] = []
    value.append(value)
    result = serialize_value(value)
    assert isinstance(result, list)
    assert MAX_DEPTH_SENTINEL in repr(result)


def test_sets_are_sorted_lists() -> None:
    assert serialize_value({3, 1, 2}) == [1, 2, 3]
    assert serialize_value(frozenset({"b", "a"})) == ["a", "b"]


def test_pattern_literal_keeps_source_and_flags() -> None:
    assert serialize_value(re.compile(r"foo/bar", re.IGNORECASE)) == "/foo\\/bar/i"
    assert serialize_value(re.compile(r"^a.b$", re.MULTILINE | re.DOTALL)) == "/^a.b$/ms"
    assert pattern_literal(re.compile(r"a\/b")) == "/a\\/b/"


def test_bytes_pattern_is_decoded() -> None:
    assert pattern_literal(re.compile(rb"\d+")) == "/\\d+/"


def test_dataclass_descriptor_has_fields() -> None:
    result = serialize_value(Point(1, 2))
    assert result["class"].endswith("Point")
    assert result["repr"] == "Point(x=1, y=2)"
    assert result["str"] == "Point(x=1, y=2)"
    assert result["fields"] == {"x": 1, "y": 2}


def test_named_tuple_is_described_not_listed() -> None:
    result = serialize_value(Pair("l", "r"))
    assert isinstance(result, dict)
    assert result["fields"] == {"left": "l", "right": "r"}


def test_pydantic_model_fields() -> None:
    result = serialize_value(Order(id=7, items=["a"]))
    assert result["fields"] == {"id": 7, "items": ["a"]}


def test_plain_object_uses_instance_attributes() -> None:
    result = serialize_value(Widget())
    assert result["fields"] == {"name": "gear", "size": 3}
    assert result["repr"].startswith("<")


def test_too_many_fields_are_omitted() -> None:
    widget = Widget()
    for index in range(20):
        setattr(widget, f"attr_{index}", index)
    result = serialize_value(widget)
    assert "fields" not in result
    assert result["class"].endswith("Widget")


def test_failing_repr_and_str_are_reported_inline() -> None:
    result = serialize_value(BadRepr())
    assert result["repr"].startswith("[repr failed:")
    assert result["str"].startswith("[str failed:")
    assert "fields" not in result


def test_internal_failure_yields_error_descriptor() -> None:
    result = serialize_value(ExplodingList())
    assert is_error_descriptor(result)
    assert result["serialization_error"] == "boom"
    assert result["class"].endswith("ExplodingList")
    assert result["str"] == "[]"


def test_failing_mapping_yields_error_descriptor() -> None:
    result = serialize_value(ExplodingMapping())
    assert is_error_descriptor(result)
    assert result["serialization_error"] == "cannot size"


def test_nested_failure_is_contained() -> None:
    result = serialize_value({"ok": 1, "bad": ExplodingList()})
    assert result["ok"] == 1
    assert is_error_descriptor(result["bad"])


def test_custom_limits() -> None:
    limits = SerializationLimits(max_depth=1, max_sequence_size=2, max_string_length=3)
    serializer = Serializer(limits)
    assert serializer.serialize("abcdef") == "abc" + TRUNCATION_SUFFIX
    assert serializer.serialize([1, 2, 3]) == "[Large array: 3 items]"
    assert serializer.serialize([[[1]]]) == [[MAX_DEPTH_SENTINEL]]


def test_caps_are_independent() -> None:
    limits = SerializationLimits(max_sequence_size=1000, max_string_length=2)
    result = Serializer(limits).serialize(["abc"] * 500)
    assert len(result) == 500
    assert result[0] == "ab" + TRUNCATION_SUFFIX


def test_class_name_for_builtins_and_user_types() -> None:
    assert class_name(1) == "int"
    assert class_name(Point(0, 0)).endswith(".Point")


def test_serialized_values_are_stable() -> None:
    value = {"point": Point(1, 2), "tags": {"b", "a"}, "pattern": re.compile("x+"), "text": "y" * 2000}
    once = serialize_value(value)
    assert serialize_value(once) == once


def test_nested_descriptors_are_stable() -> None:
    once = serialize_value(Invoice(Customer(Address("Oslo"))))

    assert once["fields"]["customer"]["fields"]["address"]["fields"] == {"city": "Oslo"}
    assert serialize_value(once) == once


def test_descriptors_at_the_depth_cap_are_stable() -> None:
    chain: object = None
    for _ in range(8):
        chain = Link(chain)

    once = serialize_value(chain)

    assert MAX_DEPTH_SENTINEL in repr(once)
    assert serialize_value(once) == once


def test_unreadable_field_is_omitted() -> None:
    result = serialize_value(Lazy(1))

    assert not is_error_descriptor(result)
    assert result["class"].endswith("Lazy")
    assert result["repr"].startswith("[repr failed:")
    assert result["fields"] == {"a": 1}
