"""entitywire CLI: inspect keys, entities and compiled queries."""

from __future__ import annotations

import logging

import typer

from entitywire.cli import entity, key, query

app = typer.Typer(
    name="entitywire",
    help="entitywire CLI: encode keys and entities, compile queries to their protocol form.",
    no_args_is_help=True,
)


class _State:
    """Global CLI state shared across subcommands."""

    json_output: bool = False
    verbose: bool = False


state = _State()


def _version_callback(value: bool) -> None:
    if value:
        try:
            from importlib.metadata import version

            v = version("entitywire")
        except Exception:
            v = "unknown"
        print(f"entitywire {v}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="JSON output when supported"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(
        False, "--version", help="Show version", is_eager=True, callback=_version_callback
    ),
) -> None:
    """Global options for all entitywire commands."""
    state.json_output = json_output
    state.verbose = verbose
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    if ctx.invoked_subcommand is None and not version:
        print(ctx.get_help())
        raise typer.Exit()


# Register subcommand groups
app.add_typer(key.app, name="key", help="Build, encode and decode keys")
app.add_typer(entity.app, name="entity", help="Encode records as protocol entities")
app.add_typer(query.app, name="query", help="Compile query descriptions")


def main() -> None:
    """Entry point for the entitywire CLI."""
    app()
