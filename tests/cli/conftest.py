"""Shared fixtures for CLI tests."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest
from typer.testing import CliRunner

from entitywire.cli import app, state

if TYPE_CHECKING:
    from click.testing import Result


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_state():
    yield
    state.json_output = False
    state.verbose = False


@pytest.fixture
def query_file(tmp_path):
    """A JSON query description with an ancestor filter written as a key path."""
    path = tmp_path / "query.json"
    path.write_text(
        json.dumps(
            {
                "kinds": ["Branch"],
                "filters": [
                    {"name": "__key__", "op": "HAS_ANCESTOR", "val": ["Company", "Google"]},
                    {"name": "size", "op": ">=", "val": 10},
                ],
                "orders": [{"name": "created", "sign": "-"}],
                "startVal": "c3RhcnQ=",
                "limitVal": 10,
            }
        )
    )
    return str(path)


def invoke(runner: CliRunner, args: list[str]) -> "Result":
    """Invoke the CLI without swallowing unexpected exceptions."""
    return runner.invoke(app, args, catch_exceptions=False)
