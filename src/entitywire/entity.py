"""Entity codec: flat native records <-> protocol entity dicts."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from entitywire.config import CodecConfig, resolve_config
from entitywire.keys import Key, proto_to_key
from entitywire.values import classify, decode_entity

Record = dict[str, Any]


def entity_to_proto(
    record: Mapping[str, Any], *, config: CodecConfig | None = None
) -> dict[str, Any]:
    """Convert a record to a protocol entity.

    ``key`` is always None here; callers attach the key themselves.
    """
    cfg = resolve_config(config)
    return {
        "key": None,
        "property": [
            {"name": name, "value": classify(value).to_property(cfg)}
            for name, value in record.items()
        ],
    }


def proto_to_entity(proto: Mapping[str, Any]) -> Record:
    """Convert a protocol entity to a record keyed by property name (last write wins)."""
    return decode_entity(proto).to_native()


def format_results(results: Iterable[Mapping[str, Any]]) -> list[dict[str, Key | Record]]:
    """Convert query or lookup results (``[{"entity": ...}]``) to ``{"key", "data"}`` pairs."""
    formatted: list[dict[str, Key | Record]] = []
    for result in results:
        entity = result["entity"]
        formatted.append({"key": proto_to_key(entity["key"]), "data": proto_to_entity(entity)})
    return formatted
