"""Tests for inserting default values while parsing."""

from decimal import Decimal

import pytest

from streamval import Event, StreamingValidationError, Validator, read_schema
from streamval.parser import JsonEventParser
from streamval.validate.defaults import DefaultValues, replay


def read_with_defaults(schema, instance):
    return Validator(schema).read(instance, default_values=True)


class TestRead:
    """Tests for read(default_values=True)."""

    @pytest.mark.parametrize(
        "default, expected",
        [
            ("hello", "hello"),
            (365, 365),
            (3.14, Decimal("3.14")),
            (True, True),
            (False, False),
            (None, None),
            ([1, 2, 3], [1, 2, 3]),
            ({"greeting": "hello"}, {"greeting": "hello"}),
        ],
    )
    def test_default_of_every_type(self, default, expected):
        schema = {"properties": {"a": {"default": default}}}

        assert read_with_defaults(schema, "{}") == {"a": expected}

    def test_present_property_kept(self):
        schema = {"properties": {"a": {"default": 1}, "b": {"default": 2}}}

        assert read_with_defaults(schema, '{"a": 10}') == {"a": 10, "b": 2}

    def test_other_properties_kept(self):
        schema = {"properties": {"first": {"default": 1}}}

        value = read_with_defaults(schema, '{"second": 2, "third": 3}')

        assert value == {"second": 2, "third": 3, "first": 1}
        assert list(value) == ["second", "third", "first"]

    def test_off_by_default(self):
        schema = {"properties": {"a": {"default": 1}}}

        assert Validator(schema).read("{}") == {}

    def test_nested_objects(self):
        schema = {
            "properties": {
                "server": {
                    "properties": {"port": {"default": 8080}, "host": {"default": "localhost"}},
                },
            },
        }

        value = read_with_defaults(schema, '{"server": {"host": "example.com"}}')

        assert value == {"server": {"host": "example.com", "port": 8080}}

    def test_array_items(self):
        schema = {"items": {"properties": {"enabled": {"default": True}}}}

        value = read_with_defaults(schema, '[{}, {"enabled": false}]')

        assert value == [{"enabled": True}, {"enabled": False}]

    def test_tuple_items_and_additional_items(self):
        schema = {
            "items": [{"properties": {"k": {"default": "first"}}}],
            "additionalItems": {"properties": {"k": {"default": "rest"}}},
        }

        value = read_with_defaults(schema, "[{}, {}, {}]")

        assert value == [{"k": "first"}, {"k": "rest"}, {"k": "rest"}]

    def test_pattern_and_additional_properties(self):
        schema = {
            "patternProperties": {"^x-": {"properties": {"p": {"default": 1}}}},
            "additionalProperties": {"properties": {"a": {"default": 2}}},
        }

        value = read_with_defaults(schema, '{"x-one": {}, "other": {}}')

        assert value == {"x-one": {"p": 1}, "other": {"a": 2}}

    def test_through_reference_and_all_of(self):
        schema = {
            "definitions": {"named": {"properties": {"name": {"default": "anonymous"}}}},
            "allOf": [{"$ref": "#/definitions/named"}, {"properties": {"age": {"default": 0}}}],
        }

        assert read_with_defaults(schema, "{}") == {"name": "anonymous", "age": 0}

    def test_first_default_wins(self):
        schema = {
            "properties": {"a": {"default": 1}},
            "allOf": [{"properties": {"a": {"default": 2}}}],
        }

        assert read_with_defaults(schema, "{}") == {"a": 1}

    def test_alternatives_ignored(self):
        schema = {"anyOf": [{"properties": {"a": {"default": 1}}}, {"type": "object"}]}

        assert read_with_defaults(schema, "{}") == {}

    def test_recursive_schema(self):
        schema = {
            "properties": {
                "value": {"type": "integer"},
                "children": {"type": "array", "items": {"$ref": "#"}},
                "label": {"default": ""},
            },
        }

        value = read_with_defaults(schema, '{"value": 1, "children": [{"value": 2}]}')

        assert value == {"value": 1, "children": [{"value": 2, "label": ""}], "label": ""}

    def test_defaults_are_not_validated(self):
        schema = {"properties": {"a": {"type": "string", "default": 1}}}

        assert read_with_defaults(schema, "{}") == {"a": 1}

    def test_required_still_checked_against_input(self):
        schema = {"required": ["a"], "properties": {"a": {"default": 1}}}

        with pytest.raises(StreamingValidationError):
            read_with_defaults(schema, "{}")


class TestIterEvents:
    """Tests for iter_events(default_values=True)."""

    def test_inserted_before_end_object(self):
        validator = Validator({"properties": {"a": {"default": "hello"}}})
        seen = []

        for event in validator.iter_events("{}", default_values=True):
            if event is Event.KEY_NAME:
                seen.append((event, validator.parser.string))
            elif event is Event.VALUE_STRING:
                seen.append((event, validator.parser.value))
            else:
                seen.append(event)

        assert seen == [
            Event.START_OBJECT,
            (Event.KEY_NAME, "a"),
            (Event.VALUE_STRING, "hello"),
            Event.END_OBJECT,
        ]

    def test_number_default_reads_as_number(self):
        validator = Validator({"properties": {"pi": {"default": 3.14}}})
        numbers = [
            validator.parser.number
            for event in validator.iter_events("{}", default_values=True)
            if event is Event.VALUE_NUMBER
        ]

        assert numbers == [Decimal("3.14")]

    def test_structured_default_as_events(self):
        validator = Validator({"properties": {"a": {"default": [1, 2]}}})

        events = list(validator.iter_events("{}", default_values=True))

        assert events == [
            Event.START_OBJECT,
            Event.KEY_NAME,
            Event.START_ARRAY,
            Event.VALUE_NUMBER,
            Event.VALUE_NUMBER,
            Event.END_ARRAY,
            Event.END_OBJECT,
        ]

    def test_parser_restored_after_insertion(self):
        validator = Validator({"properties": {"a": {"default": 1}}})
        parsers = [validator.parser for _ in validator.iter_events("{}", default_values=True)]

        assert parsers[0] is parsers[-1]
        assert parsers[1] is not parsers[0]

    def test_invalid_instance_still_raises(self):
        validator = Validator({"properties": {"a": {"default": 1}, "b": {"type": "string"}}})

        with pytest.raises(StreamingValidationError):
            list(validator.iter_events('{"b": 2}', default_values=True))


class TestDefaultValues:
    """Tests for the DefaultValues tracker."""

    def test_missing_reported_at_end_object(self):
        defaults = DefaultValues(read_schema({"properties": {"a": {"default": 1}, "b": {"default": 2}}}))
        parser = JsonEventParser()
        parser.feed('{"b": 0}')
        parser.close()

        missing = [defaults.update(event, parser) for event in parser.events()]

        assert missing == [[], [], [], [("a", 1)]]

    def test_replay_member(self):
        replayed = [
            (event, parser.value if event is Event.VALUE_NUMBER else None) for event, parser in replay("n", 5)
        ]

        assert replayed == [(Event.KEY_NAME, None), (Event.VALUE_NUMBER, 5)]
