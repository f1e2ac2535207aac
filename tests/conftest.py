"""Shared test fixtures for entitywire tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from entitywire import Key, build_key


@pytest.fixture
def company_key() -> Key:
    return build_key(["Company", "Google"])


@pytest.fixture
def branch_key() -> Key:
    return build_key(["Company", "Google", "Branch", 1])


@pytest.fixture
def incomplete_key() -> Key:
    return build_key(["Company"])


@pytest.fixture
def created_at() -> datetime:
    return datetime(2024, 3, 1, 12, 30, 15, 250000, tzinfo=timezone.utc)


def make_result(key_proto: dict, properties: list[dict]) -> dict:
    """Wrap a protocol key and property list the way query responses do."""
    return {"entity": {"key": key_proto, "property": properties}}
