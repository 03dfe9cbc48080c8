"""Tests for reference resolution and loop detection."""

import pytest

from streamval import InvalidSchemaError, SchemaReader, Validator, read_schema
from streamval.schema import ReferenceSchema


class TestResolution:
    """Tests for resolving $ref."""

    def test_pointer_reference(self, check):
        schema = {"definitions": {"s": {"type": "string"}}, "items": {"$ref": "#/definitions/s"}}

        assert check(schema, '["a", "b"]') is True
        assert check(schema, '["a", 1]') is False

    def test_escaped_pointer(self, check):
        schema = {"definitions": {"a b": {"type": "string"}}, "items": {"$ref": "#/definitions/a%20b"}}

        assert check(schema, '["x"]') is True
        assert check(schema, "[1]") is False

    def test_relative_id(self, check):
        schema = {
            "definitions": {"item": {"$id": "item.json", "type": "integer"}},
            "items": {"$ref": "item.json"},
        }
        schema = read_schema(schema, base_uri="http://example.com/root.json")

        assert Validator(schema).validate("[1]") is True
        assert Validator(schema).validate('["a"]') is False

    def test_plain_name_fragment(self):
        schema = read_schema(
            {
                "properties": {"p": {"$ref": "#foo"}},
                "definitions": {"a": {"$id": "#foo", "type": "string"}},
            },
            base_uri="http://example.com/root.json",
        )

        assert Validator(schema).validate('{"p": "x"}') is True
        assert Validator(schema).validate('{"p": 1}') is False

    def test_resolver(self):
        common = read_schema(
            {"definitions": {"id": {"type": "integer"}}},
            base_uri="http://example.com/common.json",
        )
        requested = []

        def resolve(uri):
            requested.append(uri)
            return {"http://example.com/common.json": common}.get(uri)

        schema = read_schema(
            {"properties": {"id": {"$ref": "common.json#/definitions/id"}}},
            base_uri="http://example.com/root.json",
            resolvers=[resolve],
        )

        assert requested == ["http://example.com/common.json"]
        assert Validator(schema).validate('{"id": 1}') is True
        assert Validator(schema).validate('{"id": "x"}') is False

    def test_resolvers_consulted_in_order(self):
        first = read_schema({"type": "string"})
        second = read_schema({"type": "integer"})

        schema = read_schema(
            {"$ref": "http://example.com/other.json"},
            resolvers=[lambda uri: None, lambda uri: first, lambda uri: second],
        )

        assert Validator(schema).validate('"a"') is True

    def test_siblings_ignored(self, check):
        schema = {"$ref": "#/definitions/s", "type": "integer", "definitions": {"s": {"type": "string"}}}

        assert check(schema, '"a"') is True
        assert check(schema, "1") is False

    def test_reference_into_unknown_keyword(self, check):
        schema = {"x-defs": {"s": {"type": "string"}}, "items": {"$ref": "#/x-defs/s"}}

        assert check(schema, '["a"]') is True
        assert check(schema, "[1]") is False

    def test_recursion_through_items(self, check, tree_schema):
        read_schema(tree_schema)

        assert check(tree_schema, '{"value": 1, "children": [{"value": 2}]}') is True


class TestDanglingReferences:
    """Tests for references that cannot be resolved."""

    def test_reported_once(self):
        with pytest.raises(InvalidSchemaError) as exc_info:
            read_schema({"$ref": "#/definitions/missing"})

        (problem,) = exc_info.value.problems
        assert problem.message == "schema.problem.reference"
        assert problem.pointer == "/$ref"
        assert problem.text == (
            'The schema referenced by "#/definitions/missing" '
            '(resolved as "#/definitions/missing") was not found.'
        )

    def test_fails_even_negated(self):
        with pytest.raises(InvalidSchemaError) as exc_info:
            read_schema({"$ref": "#/definitions/missing"})
        schema = exc_info.value.schema

        assert Validator(schema).validate("1") is False
        assert Validator(schema, negate=True).validate("1") is False

    def test_instance_problem_not_resolvable(self):
        with pytest.raises(InvalidSchemaError) as exc_info:
            read_schema({"$ref": "#/definitions/missing"})
        validator = Validator(exc_info.value.schema)

        validator.validate("1")

        assert validator.problems[0].resolvable is False
        assert validator.problems[0].keyword == "$ref"

    def test_reported_in_document_order(self):
        reader = SchemaReader({"properties": {"b": {"$ref": "#/nope/b"}, "a": {"$ref": "#/nope/a"}}})

        reader.read()

        assert [p.pointer for p in reader.problems] == ["/properties/b/$ref", "/properties/a/$ref"]

    def test_lax_subtree_is_silent(self):
        reader = SchemaReader({"x-defs": {"s": {"$ref": "#/nope"}}})

        reader.read()

        assert reader.problems == []


class TestLoops:
    """Tests for reference loops."""

    @pytest.fixture
    def looping(self):
        return {
            "definitions": {
                "a": {"$ref": "#/definitions/b"},
                "b": {"$ref": "#/definitions/a"},
            },
            "properties": {"x": {"$ref": "#/definitions/a"}},
        }

    def test_cycle_members_flagged(self, looping):
        with pytest.raises(InvalidSchemaError) as exc_info:
            read_schema(looping)

        problems = exc_info.value.problems
        assert [p.message for p in problems] == ["schema.problem.reference.loop"] * 2
        assert [p.pointer for p in problems] == ["/definitions/a/$ref", "/definitions/b/$ref"]

    def test_entry_into_loop_fails(self, looping):
        with pytest.raises(InvalidSchemaError) as exc_info:
            read_schema(looping)
        schema = exc_info.value.schema

        assert Validator(schema).validate('{"x": 1}') is False
        assert Validator(schema).validate('{"y": 1}') is True

    @pytest.mark.parametrize(
        "schema, pointer",
        [
            ({"$ref": "#"}, "/$ref"),
            ({"allOf": [{"$ref": "#"}]}, "/allOf/0/$ref"),
            ({"not": {"$ref": "#"}}, "/not/$ref"),
            ({"dependencies": {"a": {"$ref": "#"}}}, "/dependencies/a/$ref"),
        ],
    )
    def test_in_place_loops(self, schema, pointer):
        with pytest.raises(InvalidSchemaError) as exc_info:
            read_schema(schema)

        (problem,) = exc_info.value.problems
        assert problem.pointer == pointer

    @pytest.mark.parametrize(
        "schema",
        [
            {"items": {"$ref": "#"}},
            {"properties": {"next": {"$ref": "#"}}},
            {"additionalProperties": {"$ref": "#"}},
            {"contains": {"$ref": "#"}},
        ],
    )
    def test_child_recursion_is_legal(self, schema):
        read_schema(schema)

    def test_loop_flag_on_graph(self, looping):
        reader = SchemaReader(looping)
        reader.read()

        flagged = [ref for ref in reader.graph.references if reader.graph.is_loop(ref)]

        assert [ref.ref for ref in flagged] == ["#/definitions/b", "#/definitions/a"]
        assert all(isinstance(ref, ReferenceSchema) for ref in flagged)
