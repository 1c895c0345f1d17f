from .serializer import (
    MAX_DEPTH_SENTINEL,
    TRUNCATION_SUFFIX,
    Serializer,
    class_name,
    is_error_descriptor,
    pattern_literal,
    serialize_value,
)

__all__ = [
    "MAX_DEPTH_SENTINEL",
    "TRUNCATION_SUFFIX",
    "Serializer",
    "class_name",
    "is_error_descriptor",
    "pattern_literal",
    "serialize_value",
]
