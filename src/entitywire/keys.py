"""Hierarchical Key model and conversion to and from the protocol key."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from entitywire.config import CodecConfig, resolve_config
from entitywire.errors import MalformedKeyError

logger = logging.getLogger(__name__)

MISSING_KIND_ERROR = "A key should contain at least a kind."
ANCESTOR_ID_ERROR = "Invalid key. Ancestor keys require an id or name."

PathSegment = str | int | None


class Key:
    """A path through the store's hierarchy.

    Built from a flat path supplied innermost segment last:

        Key(["Company", "Google", "Branch", 1])

    An even-length path ends with an identifier (``int`` becomes ``id``,
    ``str`` becomes ``name``); an odd-length path ends with a bare kind
    and yields an incomplete key. Leading segments become the ``parent``
    chain, which inherits the namespace.

    The caller's sequence is copied and never mutated.
    """

    def __init__(self, path: Sequence[PathSegment], *, namespace: str | None = None) -> None:
        if isinstance(path, (str, bytes)):
            raise MalformedKeyError(f"Key path must be a sequence, got {type(path).__name__}")
        self._consume(list(path), namespace)

    def _consume(self, segments: list[Any], namespace: str | None) -> None:
        self.namespace = namespace
        self.id: int | None = None
        self.name: str | None = None
        self.parent: Key | None = None

        if segments and len(segments) % 2 == 0:
            identifier = segments.pop()
            if isinstance(identifier, bool):
                raise MalformedKeyError(f"Key identifier must be int or str, got {identifier!r}")
            if isinstance(identifier, int):
                self.id = identifier
            elif isinstance(identifier, str):
                self.name = identifier
            elif identifier is not None:
                raise MalformedKeyError(f"Key identifier must be int or str, got {identifier!r}")

        if not segments:
            raise MalformedKeyError(MISSING_KIND_ERROR)
        kind = segments.pop()
        if not isinstance(kind, str):
            raise MalformedKeyError(f"Key kind must be a string, got {kind!r}")
        self.kind = kind

        if segments:
            parent = Key.__new__(Key)
            parent._consume(segments, namespace)
            self.parent = parent

    @property
    def path(self) -> list[PathSegment]:
        """Flat path, recomputed on every access so later field changes show up."""
        prefix = self.parent.path if self.parent is not None else []
        return prefix + [self.kind, self.name or self.id]

    def is_complete(self) -> bool:
        return is_complete(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return self.namespace == other.namespace and self.path == other.path

    def __hash__(self) -> int:
        return hash((self.namespace, tuple(self.path)))

    def __repr__(self) -> str:
        if self.namespace:
            return f"Key({self.path!r}, namespace={self.namespace!r})"
        return f"Key({self.path!r})"


def build_key(
    path: Sequence[PathSegment] | Mapping[str, Any],
    namespace: str | None = None,
    *,
    config: CodecConfig | None = None,
) -> Key:
    """Build a Key from a flat path or an options mapping ``{"namespace", "path"}``."""
    if isinstance(path, Mapping):
        options = path
        if "path" not in options:
            raise MalformedKeyError(MISSING_KIND_ERROR)
        path = options["path"]
        namespace = options.get("namespace", namespace)
    if namespace is None:
        namespace = resolve_config(config).default_namespace
    return Key(path, namespace=namespace)


def key_to_proto(key: Key) -> dict[str, Any]:
    """Convert a Key to the protocol key dict."""
    key_path = key.path
    if not key_path or not isinstance(key_path[0], str):
        raise MalformedKeyError(MISSING_KIND_ERROR)

    elements: list[dict[str, Any]] = []
    for i in range(0, len(key_path), 2):
        kind = key_path[i]
        if not isinstance(kind, str):
            raise MalformedKeyError(f"Key kind must be a string, got {kind!r}")
        element: dict[str, Any] = {"kind": kind}
        identifier = key_path[i + 1] if i + 1 < len(key_path) else None
        if identifier:
            if isinstance(identifier, int):
                element["id"] = identifier
            else:
                element["name"] = identifier
        elif i < len(key_path) - 2:
            raise MalformedKeyError(ANCESTOR_ID_ERROR)
        elements.append(element)

    proto: dict[str, Any] = {"path_element": elements}
    if key.namespace:
        proto["partition_id"] = {"namespace": key.namespace}
    return proto


def _parse_id(raw: Any) -> int | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(str(raw), 10)
    except ValueError:
        return None


def proto_to_key(proto: Mapping[str, Any]) -> Key:
    """Convert a protocol key dict to a Key."""
    namespace: str | None = None
    partition = proto.get("partition_id")
    if partition and partition.get("namespace"):
        namespace = partition["namespace"]

    elements = proto.get("path_element") or []
    path: list[PathSegment] = []
    for index, element in enumerate(elements):
        identifier = _parse_id(element.get("id")) or element.get("name")
        path.append(element.get("kind"))
        if identifier:
            path.append(identifier)
        elif index < len(elements) - 1:
            raise MalformedKeyError(ANCESTOR_ID_ERROR)

    key = Key(path, namespace=namespace)
    logger.debug("Decoded protocol key %r", key)
    return key


def is_complete(key: Key) -> bool:
    """Return True if every path element has a kind and an id or name. Never raises."""
    try:
        proto = key_to_proto(key)
    except (MalformedKeyError, AttributeError, TypeError):
        return False

    for element in proto["path_element"]:
        if not element.get("kind"):
            return False
        if not element.get("id") and not element.get("name"):
            return False
    return True
