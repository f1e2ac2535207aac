"""Tests for the hierarchical Key model and protocol key conversion."""

from __future__ import annotations

import pytest

from entitywire import CodecConfig, Key, build_key, is_complete, key_to_proto, proto_to_key
from entitywire.errors import MalformedKeyError


class TestBuildKey:
    def test_numeric_id(self):
        key = build_key(["Company", 123])
        assert key.kind == "Company"
        assert key.id == 123
        assert key.name is None
        assert key.parent is None
        assert key.path == ["Company", 123]

    def test_string_name(self):
        key = build_key(["Company", "Google"])
        assert key.name == "Google"
        assert key.id is None

    def test_ancestor_chain(self, branch_key):
        assert branch_key.path == ["Company", "Google", "Branch", 1]
        assert branch_key.kind == "Branch"
        assert branch_key.id == 1
        assert branch_key.parent is not None
        assert branch_key.parent.path == ["Company", "Google"]
        assert branch_key.parent.parent is None

    def test_incomplete_key(self, incomplete_key):
        assert incomplete_key.kind == "Company"
        assert incomplete_key.id is None
        assert incomplete_key.name is None
        assert incomplete_key.path == ["Company", None]

    def test_incomplete_key_with_ancestor(self):
        key = build_key(["Company", "Google", "Branch"])
        assert key.kind == "Branch"
        assert key.id is None
        assert key.parent.path == ["Company", "Google"]

    def test_options_mapping(self):
        key = build_key({"namespace": "ns", "path": ["Company", "Google", "Branch", 1]})
        assert key.namespace == "ns"
        assert key.parent.namespace == "ns"

    def test_namespace_argument(self):
        key = build_key(["Company", 1], "ns")
        assert key.namespace == "ns"

    def test_default_namespace_from_config(self):
        key = build_key(["Company", 1], config=CodecConfig(default_namespace="tenant"))
        assert key.namespace == "tenant"

    def test_caller_path_not_consumed(self):
        path = ["Company", "Google", "Branch", 1]
        build_key(path)
        assert path == ["Company", "Google", "Branch", 1]

    def test_tuple_path(self):
        assert Key(("Company", 5)).path == ["Company", 5]

    def test_empty_path_rejected(self):
        with pytest.raises(MalformedKeyError, match="at least a kind"):
            build_key([])

    def test_mapping_without_path_rejected(self):
        with pytest.raises(MalformedKeyError):
            build_key({"namespace": "ns"})

    def test_non_string_kind_rejected(self):
        with pytest.raises(MalformedKeyError, match="kind must be a string"):
            build_key([1, 2])

    def test_bool_identifier_rejected(self):
        with pytest.raises(MalformedKeyError, match="identifier"):
            build_key(["Company", True])

    def test_string_path_rejected(self):
        with pytest.raises(MalformedKeyError):
            Key("Company")

    def test_path_reflects_mutation(self):
        key = build_key(["Company", 1])
        key.kind = "Organization"
        key.id = None
        key.name = "Acme"
        assert key.path == ["Organization", "Acme"]

    def test_parent_mutation_visible_in_child_path(self, branch_key):
        branch_key.parent.name = "Alphabet"
        assert branch_key.path == ["Company", "Alphabet", "Branch", 1]


class TestKeyEquality:
    def test_equal_paths(self):
        assert build_key(["Company", 1]) == build_key(["Company", 1])

    def test_namespace_matters(self):
        assert build_key(["Company", 1], "a") != build_key(["Company", 1], "b")

    def test_hashable(self):
        keys = {build_key(["Company", 1]), build_key(["Company", 1])}
        assert len(keys) == 1

    def test_repr(self):
        assert repr(build_key(["Company", 1])) == "Key(['Company', 1])"
        assert "namespace='ns'" in repr(build_key(["Company", 1], "ns"))


class TestKeyToProto:
    def test_single_element(self):
        assert key_to_proto(build_key(["Company", 123])) == {
            "path_element": [{"kind": "Company", "id": 123}]
        }

    def test_ancestors(self, branch_key):
        assert key_to_proto(branch_key) == {
            "path_element": [
                {"kind": "Company", "name": "Google"},
                {"kind": "Branch", "id": 1},
            ]
        }

    def test_namespace(self):
        proto = key_to_proto(build_key(["Company", 1], "ns"))
        assert proto["partition_id"] == {"namespace": "ns"}

    def test_no_partition_without_namespace(self, company_key):
        assert "partition_id" not in key_to_proto(company_key)

    def test_incomplete_tail_allowed(self, incomplete_key):
        assert key_to_proto(incomplete_key) == {"path_element": [{"kind": "Company"}]}

    def test_ancestor_without_identifier_rejected(self, branch_key):
        branch_key.parent.name = None
        with pytest.raises(MalformedKeyError, match="Ancestor keys require an id or name"):
            key_to_proto(branch_key)

    def test_non_string_kind_rejected(self, company_key):
        company_key.kind = 42
        with pytest.raises(MalformedKeyError):
            key_to_proto(company_key)


class TestProtoToKey:
    def test_string_id_parsed(self):
        key = proto_to_key({"path_element": [{"kind": "Kind", "id": "4790047639339008"}]})
        assert key.id == 4790047639339008
        assert key.path == ["Kind", 4790047639339008]

    def test_name(self):
        key = proto_to_key({"path_element": [{"kind": "Kind", "name": "alpha"}]})
        assert key.name == "alpha"

    def test_namespace(self):
        key = proto_to_key(
            {
                "partition_id": {"namespace": "ns"},
                "path_element": [{"kind": "Kind", "id": 1}],
            }
        )
        assert key.namespace == "ns"

    def test_empty_namespace_ignored(self):
        key = proto_to_key({"partition_id": {"namespace": ""}, "path_element": [{"kind": "K"}]})
        assert key.namespace is None

    def test_ancestors(self):
        key = proto_to_key(
            {
                "path_element": [
                    {"kind": "Company", "name": "Google"},
                    {"kind": "Branch", "id": "1"},
                ]
            }
        )
        assert key.path == ["Company", "Google", "Branch", 1]
        assert key.parent.path == ["Company", "Google"]

    def test_incomplete_tail(self):
        key = proto_to_key({"path_element": [{"kind": "Company", "id": 1}, {"kind": "Branch"}]})
        assert key.kind == "Branch"
        assert key.id is None
        assert key.parent.id == 1

    def test_ancestor_without_identifier_rejected(self):
        with pytest.raises(MalformedKeyError, match="Ancestor keys require an id or name"):
            proto_to_key({"path_element": [{"kind": "Company"}, {"kind": "Branch", "id": 1}]})

    def test_missing_kind_rejected(self):
        with pytest.raises(MalformedKeyError):
            proto_to_key({"path_element": [{"id": 1}]})

    def test_round_trip(self, branch_key):
        assert proto_to_key(key_to_proto(branch_key)) == branch_key


class TestIsComplete:
    def test_complete(self, company_key):
        assert is_complete(company_key) is True

    def test_incomplete(self, incomplete_key):
        assert is_complete(incomplete_key) is False

    def test_method(self, branch_key, incomplete_key):
        assert branch_key.is_complete()
        assert not incomplete_key.is_complete()

    def test_malformed_is_incomplete_not_error(self, branch_key):
        branch_key.parent.name = None
        assert is_complete(branch_key) is False

    def test_non_string_kind_is_incomplete(self, company_key):
        company_key.kind = None
        assert is_complete(company_key) is False
