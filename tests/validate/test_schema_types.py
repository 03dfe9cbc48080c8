"""Tests for the schema sources Validator accepts."""

import pytest

from streamval import InvalidSchemaError, Validator, read_schema

pydantic = pytest.importorskip("pydantic")


class User(pydantic.BaseModel):
    name: str
    age: int


class Team(pydantic.BaseModel):
    title: str
    members: list[User]


class TestSchemaSources:
    """Dicts, text, booleans and schemas read beforehand."""

    @pytest.mark.parametrize(
        "schema",
        [
            {"type": "integer"},
            '{"type": "integer"}',
            b'{"type": "integer"}',
            read_schema({"type": "integer"}),
        ],
    )
    def test_equivalent_sources(self, schema):
        validator = Validator(schema)

        assert validator.validate("1") is True
        assert validator.validate('"1"') is False

    def test_boolean_schemas(self):
        assert Validator(True).validate('{"anything": [1]}') is True
        assert Validator(False).validate("null") is False

    def test_invalid_schema(self):
        with pytest.raises(InvalidSchemaError):
            Validator({"type": "no-such-type"})


class TestPydanticModels:
    """Pydantic models contribute their JSON schema."""

    def test_flat_model(self):
        validator = Validator(User)

        assert validator.validate('{"name": "Alice", "age": 30}') is True
        assert validator.validate('{"name": 123, "age": 30}') is False
        assert validator.validate('{"name": "Alice"}') is False

    def test_streaming_model(self):
        validator = Validator(User)

        assert validator.feed('{"name":') is True
        assert validator.feed('"Alice",') is True
        assert validator.feed('"age":30}') is True
        assert validator.finish() is True

    def test_nested_model_references(self):
        """Nested models are linked through $defs references."""
        validator = Validator(Team)

        assert validator.validate('{"title": "core", "members": [{"name": "A", "age": 1}]}') is True
        assert validator.validate('{"title": "core", "members": [{"name": "A", "age": "x"}]}') is False
        assert validator.problems[0].pointer == "/members/0/age"
