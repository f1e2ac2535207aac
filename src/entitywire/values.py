"""Value codec: native values <-> protocol property dicts.

Both directions pass through a closed set of ``Value`` variants. Encoding
classifies a native value into a variant, decoding reads the wire dict's
single present field into a variant, and each variant knows how to
render itself on either side.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from entitywire.config import CodecConfig, resolve_config
from entitywire.errors import UnsupportedValueError
from entitywire.keys import Key, key_to_proto, proto_to_key

if TYPE_CHECKING:
    from entitywire.entity import Record

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_US = timedelta(microseconds=1)


class Int:
    """Force a number to be stored as an integer. Non-integral floats are rejected."""

    __slots__ = ("value",)

    def __init__(self, value: int | float) -> None:
        if isinstance(value, float) and not value.is_integer():
            raise UnsupportedValueError(value)
        self.value = int(value)

    def get(self) -> int:
        return self.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Int):
            return NotImplemented
        return self.value == other.value

    def __hash__(self) -> int:
        return hash(("Int", self.value))

    def __repr__(self) -> str:
        return f"Int({self.value!r})"


class Double:
    """Force a number to be stored as a double, even when it is integral."""

    __slots__ = ("value",)

    def __init__(self, value: int | float) -> None:
        self.value = float(value)

    def get(self) -> float:
        return self.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Double):
            return NotImplemented
        return self.value == other.value

    def __hash__(self) -> int:
        return hash(("Double", self.value))

    def __repr__(self) -> str:
        return f"Double({self.value!r})"


def exists(value: Any) -> bool:
    """A wire field is present when it is set to anything other than None."""
    return value is not None


def _truncate_to_ms(micros: int) -> int:
    """Whole milliseconds in ``micros``, truncated toward zero."""
    ms = abs(micros) // 1000
    return -ms if micros < 0 else ms


def datetime_to_micros(value: datetime) -> int:
    """Whole milliseconds since the epoch, scaled to microseconds. Naive means UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return _truncate_to_ms((value - EPOCH) // _ONE_US) * 1000


def micros_to_datetime(micros: int) -> datetime:
    """UTC datetime at millisecond resolution, truncated toward zero."""
    return EPOCH + timedelta(milliseconds=_truncate_to_ms(micros))


# --- Value variants ---


class Value:
    """Base class for the closed set of supported value kinds."""

    def to_property(self, config: CodecConfig) -> dict[str, Any]:
        raise NotImplementedError

    def to_native(self) -> Any:
        raise NotImplementedError


@dataclass
class BooleanValue(Value):
    value: bool

    def to_property(self, config: CodecConfig) -> dict[str, Any]:
        return {"boolean_value": self.value}

    def to_native(self) -> bool:
        return self.value


@dataclass
class IntegerValue(Value):
    value: int

    def to_property(self, config: CodecConfig) -> dict[str, Any]:
        return {"integer_value": self.value}

    def to_native(self) -> int:
        return self.value


@dataclass
class DoubleValue(Value):
    value: float

    def to_property(self, config: CodecConfig) -> dict[str, Any]:
        return {"double_value": self.value}

    def to_native(self) -> float:
        return self.value


@dataclass
class StringValue(Value):
    value: str

    def to_property(self, config: CodecConfig) -> dict[str, Any]:
        return {"string_value": self.value}

    def to_native(self) -> str:
        return self.value


@dataclass
class BlobValue(Value):
    value: bytes

    def to_property(self, config: CodecConfig) -> dict[str, Any]:
        return {"blob_value": self.value}

    def to_native(self) -> bytes:
        return self.value


@dataclass
class TimestampValue(Value):
    """Timestamp held as integer microseconds since the epoch."""

    micros: int

    def to_property(self, config: CodecConfig) -> dict[str, Any]:
        return {"timestamp_microseconds_value": self.micros}

    def to_native(self) -> datetime:
        return micros_to_datetime(self.micros)


@dataclass
class KeyValue(Value):
    key: Key

    def to_property(self, config: CodecConfig) -> dict[str, Any]:
        return {"key_value": key_to_proto(self.key)}

    def to_native(self) -> Key:
        return self.key


@dataclass
class EntityValue(Value):
    """Nested entity: ordered (name, value) pairs."""

    properties: list[tuple[str, Value | None]] = field(default_factory=list)

    def to_property(self, config: CodecConfig) -> dict[str, Any]:
        return {
            "entity_value": {
                "property": [
                    {"name": name, "value": _render(value, config)}
                    for name, value in self.properties
                ],
                "indexed": config.nested_entity_indexed,
            }
        }

    def to_native(self) -> Record:
        record: dict[str, Any] = {}
        for name, value in self.properties:
            record[name] = value.to_native() if value is not None else None
        return record


@dataclass
class ListValue(Value):
    items: list[Value | None] = field(default_factory=list)

    def to_property(self, config: CodecConfig) -> dict[str, Any]:
        return {"list_value": [_render(item, config) for item in self.items]}

    def to_native(self) -> list[Any]:
        return [item.to_native() if item is not None else None for item in self.items]


def _render(value: Value | None, config: CodecConfig) -> dict[str, Any]:
    # Unset members decode to None and re-encode as an empty property.
    return value.to_property(config) if value is not None else {}


# --- Encode side ---


def classify(value: Any) -> Value:
    """Map a native value onto its variant, or raise UnsupportedValueError."""
    if isinstance(value, bool):
        return BooleanValue(value)
    if isinstance(value, Int):
        return IntegerValue(value.get())
    if isinstance(value, Double):
        return DoubleValue(value.get())
    if isinstance(value, int):
        return IntegerValue(value)
    if isinstance(value, float):
        # Integral floats are stored as integers; wrap in Double to keep them doubles.
        if value.is_integer():
            return IntegerValue(int(value))
        return DoubleValue(value)
    if isinstance(value, datetime):
        return TimestampValue(datetime_to_micros(value))
    if isinstance(value, str):
        return StringValue(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return BlobValue(bytes(value))
    if isinstance(value, (list, tuple)):
        return ListValue([classify(item) for item in value])
    if isinstance(value, Key):
        return KeyValue(value)
    if isinstance(value, Mapping) and len(value) > 0:
        return EntityValue([(str(name), classify(item)) for name, item in value.items()])
    raise UnsupportedValueError(value)


def native_to_property(value: Any, *, config: CodecConfig | None = None) -> dict[str, Any]:
    """Convert a native value to a protocol property dict."""
    return classify(value).to_property(resolve_config(config))


# --- Decode side ---


def decode_property(prop: Mapping[str, Any]) -> Value | None:
    """Read the first present wire field into a variant.

    Precedence: integer, double, string, blob, timestamp, key, entity,
    boolean, list. Returns None when no field is set.
    """
    if exists(prop.get("integer_value")):
        return IntegerValue(int(str(prop["integer_value"]), 10))
    if exists(prop.get("double_value")):
        return DoubleValue(float(prop["double_value"]))
    if exists(prop.get("string_value")):
        return StringValue(prop["string_value"])
    if exists(prop.get("blob_value")):
        return BlobValue(bytes(prop["blob_value"]))
    if exists(prop.get("timestamp_microseconds_value")):
        return TimestampValue(int(str(prop["timestamp_microseconds_value"]), 10))
    if exists(prop.get("key_value")):
        return KeyValue(proto_to_key(prop["key_value"]))
    if exists(prop.get("entity_value")):
        return decode_entity(prop["entity_value"])
    if exists(prop.get("boolean_value")):
        return BooleanValue(bool(prop["boolean_value"]))
    if exists(prop.get("list_value")):
        return ListValue([decode_property(item) for item in prop["list_value"]])
    logger.debug("Property has no value field set: %r", prop)
    return None


def decode_entity(proto: Mapping[str, Any]) -> EntityValue:
    """Read a protocol entity (top-level or nested) into an EntityValue."""
    properties = proto.get("property") or []
    return EntityValue(
        [(p["name"], decode_property(p.get("value") or {})) for p in properties]
    )


def property_to_native(prop: Mapping[str, Any]) -> Any:
    """Convert a protocol property dict to a native value; None when nothing is set."""
    value = decode_property(prop)
    if value is None:
        return None
    return value.to_native()
