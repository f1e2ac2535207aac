"""Configuration for entitywire codecs."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CodecConfig:
    """Configuration shared by the key, value, entity and query codecs."""

    key_property: str = "__key__"
    nested_entity_indexed: bool = False
    default_namespace: str | None = None


DEFAULT_CONFIG = CodecConfig()


def resolve_config(config: CodecConfig | None) -> CodecConfig:
    return config if config is not None else DEFAULT_CONFIG
