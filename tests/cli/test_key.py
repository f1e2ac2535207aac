"""Tests for entitywire key commands."""

import json

from entitywire.cli import _exitcodes as ec
from tests.cli.conftest import invoke


def test_encode_key(runner):
    result = invoke(runner, ["key", "encode", "Company", "Google", "Branch", "1"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "path_element": [
            {"kind": "Company", "name": "Google"},
            {"kind": "Branch", "id": 1},
        ]
    }


def test_encode_key_namespace(runner):
    result = invoke(runner, ["key", "encode", "--namespace", "ns", "Company", "7"])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["partition_id"] == {"namespace": "ns"}


def test_encode_incomplete_key(runner):
    result = invoke(runner, ["key", "encode", "Company"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"path_element": [{"kind": "Company"}]}


def test_encode_numeric_kind_fails(runner):
    result = invoke(runner, ["key", "encode", "1", "2"])
    assert result.exit_code == ec.CODEC_ERROR


def test_encode_superscript_digit_is_name(runner):
    result = invoke(runner, ["key", "encode", "Company", "\u00b2"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"path_element": [{"kind": "Company", "name": "\u00b2"}]}


def test_decode_key_json(runner):
    proto = {"path_element": [{"kind": "Company", "name": "Google"}, {"kind": "Branch"}]}
    result = invoke(runner, ["--json", "key", "decode", json.dumps(proto)])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "namespace": None,
        "path": ["Company", "Google", "Branch", None],
        "complete": False,
    }


def test_decode_key_text(runner):
    proto = {"path_element": [{"kind": "Company", "id": "12"}]}
    result = invoke(runner, ["key", "decode", json.dumps(proto)])
    assert result.exit_code == 0
    assert "complete: True" in result.stdout
    assert "path: ['Company', 12]" in result.stdout


def test_decode_invalid_json(runner):
    result = invoke(runner, ["key", "decode", "{not json"])
    assert result.exit_code == ec.USAGE_ERROR


def test_decode_malformed_key(runner):
    proto = {"path_element": [{"kind": "Company"}, {"kind": "Branch", "id": 1}]}
    result = invoke(runner, ["key", "decode", json.dumps(proto)])
    assert result.exit_code == ec.CODEC_ERROR
