"""entitywire key: build, encode and decode hierarchical keys."""

from __future__ import annotations

import json
from typing import Optional

import typer

from entitywire.cli import _exitcodes as ec
from entitywire.cli._output import print_error, print_json, print_object
from entitywire.errors import EntityWireError
from entitywire.keys import build_key, is_complete, key_to_proto, proto_to_key

app = typer.Typer(no_args_is_help=True)


def _parse_token(token: str) -> str | int:
    """Path tokens made only of digits are numeric ids; everything else is a string."""
    return int(token) if token.isdecimal() else token


@app.command(name="encode")
def encode_key_cmd(
    path: list[str] = typer.Argument(..., help="Key path: KIND [ID_OR_NAME] [KIND ...]"),
    namespace: Optional[str] = typer.Option(None, "--namespace", "-n", help="Key namespace"),
) -> None:
    """Build a key from path tokens and print its protocol form."""
    try:
        key = build_key([_parse_token(t) for t in path], namespace)
        proto = key_to_proto(key)
    except EntityWireError as e:
        print_error(str(e))
        raise typer.Exit(ec.CODEC_ERROR)
    print_json(proto)


@app.command(name="decode")
def decode_key_cmd(
    document: str = typer.Argument(..., help="Protocol key as a JSON document"),
) -> None:
    """Decode a protocol key and show its namespace, path and completeness."""
    from entitywire.cli import state

    try:
        proto = json.loads(document)
    except json.JSONDecodeError as e:
        print_error(f"Invalid JSON: {e}")
        raise typer.Exit(ec.USAGE_ERROR)

    try:
        key = proto_to_key(proto)
    except EntityWireError as e:
        print_error(str(e))
        raise typer.Exit(ec.CODEC_ERROR)

    print_object(
        {"namespace": key.namespace, "path": key.path, "complete": is_complete(key)},
        json_mode=state.json_output,
    )
