"""entitywire: entity, key and query codec for a hierarchical datastore wire protocol."""

__version__ = "0.1.0"

from entitywire.config import CodecConfig
from entitywire.entity import entity_to_proto, format_results, proto_to_entity
from entitywire.errors import (
    EntityWireError,
    InvalidCursorError,
    InvalidFilterError,
    MalformedKeyError,
    UnsupportedOperatorError,
    UnsupportedValueError,
)
from entitywire.keys import Key, build_key, is_complete, key_to_proto, proto_to_key
from entitywire.query import Filter, Order, Query, QueryDescription, compile_query
from entitywire.values import Double, Int, native_to_property, property_to_native

__all__ = [
    "__version__",
    "Key",
    "Int",
    "Double",
    "build_key",
    "key_to_proto",
    "proto_to_key",
    "is_complete",
    "native_to_property",
    "property_to_native",
    "entity_to_proto",
    "proto_to_entity",
    "format_results",
    "compile_query",
    "Query",
    "QueryDescription",
    "Filter",
    "Order",
    "CodecConfig",
    "EntityWireError",
    "MalformedKeyError",
    "UnsupportedValueError",
    "UnsupportedOperatorError",
    "InvalidFilterError",
    "InvalidCursorError",
]
