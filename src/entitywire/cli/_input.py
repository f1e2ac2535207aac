"""Input loading for CLI commands: JSON or YAML documents from a file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

_YAML_SUFFIXES = {".yaml", ".yml"}


def load_document(path: str, fmt: str | None = None) -> Any:
    """Load a JSON or YAML document. Format defaults to the file extension."""
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    if fmt is None:
        fmt = "yaml" if file_path.suffix.lower() in _YAML_SUFFIXES else "json"
    if fmt not in ("json", "yaml"):
        raise ValueError(f"Unknown input format '{fmt}'. Valid formats: json, yaml")

    text = file_path.read_text()
    if fmt == "yaml":
        return yaml.safe_load(text)
    return json.loads(text)
