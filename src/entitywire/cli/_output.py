"""Output formatting helpers for the CLI."""

from __future__ import annotations

import base64
import json
import sys
from typing import Any

from entitywire.keys import Key


def to_jsonable(value: Any) -> Any:
    """Make protocol dicts printable: bytes become base64 text, Keys become paths."""
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, Key):
        return value.path
    return value


def print_json(data: Any) -> None:
    print(json.dumps(to_jsonable(data), indent=2, default=str))


def print_object(data: dict[str, Any], *, json_mode: bool = False) -> None:
    """Print a single object as JSON or key-value pairs."""
    if json_mode:
        print_json(data)
        return

    for k, v in data.items():
        print(f"{k}: {to_jsonable(v)}")


def print_error(msg: str) -> None:
    """Print an error message to stderr."""
    print(f"Error: {msg}", file=sys.stderr)
