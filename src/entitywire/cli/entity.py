"""entitywire entity: encode records into protocol entities."""

from __future__ import annotations

from typing import Optional

import typer

from entitywire.cli import _exitcodes as ec
from entitywire.cli._input import load_document
from entitywire.cli._output import print_error, print_json
from entitywire.entity import entity_to_proto
from entitywire.errors import EntityWireError

app = typer.Typer(no_args_is_help=True)


@app.command(name="encode")
def encode_entity_cmd(
    input_path: str = typer.Argument(..., help="JSON or YAML record file"),
    fmt: Optional[str] = typer.Option(
        None, "--format", help="Input format: json or yaml (default: by extension)"
    ),
) -> None:
    """Encode a flat record into the protocol entity."""
    try:
        record = load_document(input_path, fmt)
    except Exception as e:
        print_error(f"Failed to load record: {e}")
        raise typer.Exit(ec.USAGE_ERROR)

    if not isinstance(record, dict):
        print_error("Record must be a mapping")
        raise typer.Exit(ec.USAGE_ERROR)

    try:
        proto = entity_to_proto(record)
    except EntityWireError as e:
        print_error(str(e))
        raise typer.Exit(ec.CODEC_ERROR)
    print_json(proto)
