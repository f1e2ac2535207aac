"""Query description, fluent Query builder, and the protocol query compiler."""

from __future__ import annotations

import base64
import binascii
import logging
import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from entitywire.config import CodecConfig, resolve_config
from entitywire.errors import (
    InvalidCursorError,
    InvalidFilterError,
    MalformedKeyError,
    UnsupportedOperatorError,
)
from entitywire.keys import Key, key_to_proto
from entitywire.values import native_to_property

logger = logging.getLogger(__name__)

OP_TO_OPERATOR: dict[str, str] = {
    "=": "EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    "HAS_ANCESTOR": "HAS_ANCESTOR",
}

SIGN_TO_ORDER: dict[str, str] = {
    "-": "DESCENDING",
    "+": "ASCENDING",
}

_FILTER_RE = re.compile(r"^\s*(?P<name>[^\s=<>]+)\s*(?P<op>=|<=|>=|<|>|HAS_ANCESTOR)?\s*$")


class Filter(BaseModel):
    """A single property predicate: ``name op val``."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: str
    op: str
    val: Any = None


class Order(BaseModel):
    """Sort on a property; sign is ``+`` (ascending) or ``-`` (descending)."""

    model_config = ConfigDict(frozen=True)

    name: str
    sign: str = "+"


class QueryDescription(BaseModel):
    """Declarative query, accepted with either camelCase or snake_case field names.

    Non-positive ``limit_val`` / ``offset_val`` (or None) mean "unset".
    """

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    namespace: str | None = None
    kinds: list[str] = Field(default_factory=list)
    filters: list[Filter] = Field(default_factory=list)
    orders: list[Order] = Field(default_factory=list)
    group_by_val: list[str] = Field(default_factory=list, alias="groupByVal")
    select_val: list[str] = Field(default_factory=list, alias="selectVal")
    start_val: str | None = Field(default=None, alias="startVal")
    end_val: str | None = Field(default=None, alias="endVal")
    limit_val: int | None = Field(default=-1, alias="limitVal")
    offset_val: int | None = Field(default=-1, alias="offsetVal")


class Query:
    """Fluent builder for a QueryDescription.

    Each method returns a new Query and leaves the receiver unchanged.

        q = Query("Company").filter("size >", 10).order("-created").limit(5)
        proto = q.compile()
    """

    def __init__(self, *kinds: str, namespace: str | None = None) -> None:
        self.description = QueryDescription(namespace=namespace, kinds=list(kinds))

    @classmethod
    def _from_description(cls, description: QueryDescription) -> Query:
        query = cls.__new__(cls)
        query.description = description
        return query

    def _replace(self, **changes: Any) -> Query:
        fields = {name: getattr(self.description, name) for name in QueryDescription.model_fields}
        return Query._from_description(QueryDescription.model_validate({**fields, **changes}))

    def filter(self, expression: str, *args: Any) -> Query:
        """Add a filter.

        Accepts ``filter("size >", 10)`` or ``filter("size", ">", 10)``.
        A bare property name means equality.
        """
        if len(args) == 1:
            match = _FILTER_RE.match(expression)
            if match is None:
                raise InvalidFilterError(expression)
            name, op, val = match.group("name"), match.group("op") or "=", args[0]
        elif len(args) == 2:
            name, op, val = expression, args[0], args[1]
        else:
            raise TypeError(f"filter() takes a value or an operator and a value, got {len(args)}")
        filters = [*self.description.filters, Filter(name=name, op=op, val=val)]
        return self._replace(filters=filters)

    def has_ancestor(self, key: Key, *, config: CodecConfig | None = None) -> Query:
        return self.filter(resolve_config(config).key_property, "HAS_ANCESTOR", key)

    def order(self, prop: str) -> Query:
        """Sort by ``prop``; a leading ``-`` sorts descending."""
        sign = "+"
        if prop[:1] in SIGN_TO_ORDER:
            sign, prop = prop[0], prop[1:]
        return self._replace(orders=[*self.description.orders, Order(name=prop, sign=sign)])

    def group_by(self, *names: str) -> Query:
        return self._replace(group_by_val=[*self.description.group_by_val, *names])

    def select(self, *names: str) -> Query:
        return self._replace(select_val=[*self.description.select_val, *names])

    def start(self, cursor: str | None) -> Query:
        return self._replace(start_val=cursor)

    def end(self, cursor: str | None) -> Query:
        return self._replace(end_val=cursor)

    def limit(self, n: int) -> Query:
        return self._replace(limit_val=n)

    def offset(self, n: int) -> Query:
        return self._replace(offset_val=n)

    def to_description(self) -> QueryDescription:
        return self.description

    def compile(self, *, config: CodecConfig | None = None) -> dict[str, Any]:
        return compile_query(self.description, config=config)

    def __repr__(self) -> str:
        return f"Query({self.description!r})"


def _coerce_description(query: QueryDescription | Query | Mapping[str, Any]) -> QueryDescription:
    if isinstance(query, Query):
        return query.description
    if isinstance(query, QueryDescription):
        return query
    return QueryDescription.model_validate(query)


def _compile_filter(f: Filter, config: CodecConfig) -> dict[str, Any]:
    operator = OP_TO_OPERATOR.get(f.op)
    if operator is None:
        raise UnsupportedOperatorError(f.op, list(OP_TO_OPERATOR))

    if f.name == config.key_property:
        if not isinstance(f.val, Key):
            raise MalformedKeyError(f"Filters on '{f.name}' require a Key value, got {f.val!r}")
        value: dict[str, Any] = {"key_value": key_to_proto(f.val)}
    else:
        value = native_to_property(f.val, config=config)

    return {
        "property_filter": {
            "property": {"name": f.name},
            "operator": operator,
            "value": value,
        }
    }


def _decode_cursor(cursor: str) -> bytes:
    """Decode a cursor, accepting the URL-safe alphabet and missing padding."""
    text = cursor.replace("-", "+").replace("_", "/").rstrip("=")
    text += "=" * (-len(text) % 4)
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as e:
        raise InvalidCursorError(cursor) from e


def _compile_order(o: Order) -> dict[str, Any]:
    direction = SIGN_TO_ORDER.get(o.sign)
    if direction is None:
        raise UnsupportedOperatorError(o.sign, list(SIGN_TO_ORDER))
    return {"property": {"name": o.name}, "direction": direction}


def compile_query(
    query: QueryDescription | Query | Mapping[str, Any],
    *,
    config: CodecConfig | None = None,
) -> dict[str, Any]:
    """Compile a query description into the protocol query dict.

    All filters are AND-combined into a single composite filter. Cursors are
    base64-decoded; offset and limit are emitted only when positive.
    """
    cfg = resolve_config(config)
    q = _coerce_description(query)

    proto: dict[str, Any] = {
        "projection": [{"property": {"name": name}} for name in q.select_val],
        "kind": [{"name": kind} for kind in q.kinds],
    }

    if q.filters:
        proto["filter"] = {
            "composite_filter": {
                "filter": [_compile_filter(f, cfg) for f in q.filters],
                "operator": "AND",
            }
        }

    proto["order"] = [_compile_order(o) for o in q.orders]
    proto["group_by"] = [{"name": name} for name in q.group_by_val]

    if q.start_val:
        proto["start_cursor"] = _decode_cursor(q.start_val)
    if q.end_val:
        proto["end_cursor"] = _decode_cursor(q.end_val)
    if q.offset_val is not None and q.offset_val > 0:
        proto["offset"] = q.offset_val
    if q.limit_val is not None and q.limit_val > 0:
        proto["limit"] = q.limit_val

    logger.debug(
        "Compiled query kinds=%s filters=%d orders=%d", q.kinds, len(q.filters), len(q.orders)
    )
    return proto
