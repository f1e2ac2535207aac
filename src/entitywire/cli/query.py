"""entitywire query: compile query descriptions into protocol queries."""

from __future__ import annotations

from typing import Any, Optional

import typer
from pydantic import ValidationError

from entitywire.cli import _exitcodes as ec
from entitywire.cli._input import load_document
from entitywire.cli._output import print_error, print_json
from entitywire.config import DEFAULT_CONFIG
from entitywire.errors import EntityWireError
from entitywire.keys import build_key
from entitywire.query import compile_query

app = typer.Typer(no_args_is_help=True)


def _resolve_key_filters(description: dict[str, Any]) -> dict[str, Any]:
    """Turn key-property filter values written as path lists into Keys."""
    key_property = DEFAULT_CONFIG.key_property
    filters = description.get("filters") or []
    resolved = []
    for f in filters:
        is_key_filter = isinstance(f, dict) and f.get("name") == key_property
        if is_key_filter and isinstance(f.get("val"), list):
            f = {**f, "val": build_key(f["val"], description.get("namespace"))}
        resolved.append(f)
    return {**description, "filters": resolved}


@app.command(name="compile")
def compile_query_cmd(
    input_path: str = typer.Argument(..., help="JSON or YAML query description file"),
    fmt: Optional[str] = typer.Option(
        None, "--format", help="Input format: json or yaml (default: by extension)"
    ),
) -> None:
    """Compile a query description into the protocol query."""
    try:
        description = load_document(input_path, fmt)
    except Exception as e:
        print_error(f"Failed to load query description: {e}")
        raise typer.Exit(ec.USAGE_ERROR)

    if not isinstance(description, dict):
        print_error("Query description must be a mapping")
        raise typer.Exit(ec.USAGE_ERROR)

    try:
        proto = compile_query(_resolve_key_filters(description))
    except ValidationError as e:
        print_error(f"Invalid query description: {e}")
        raise typer.Exit(ec.USAGE_ERROR)
    except EntityWireError as e:
        print_error(str(e))
        raise typer.Exit(ec.CODEC_ERROR)
    print_json(proto)
