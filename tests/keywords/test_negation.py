"""
Tests for negated evaluation.

Validating against the negation of a schema must give the opposite verdict
of validating against the schema itself, and a failing verdict must always
come with at least one problem.
"""

import pytest

from streamval import Validator

CASES = [
    ({"type": "string"}, '"a"'),
    ({"type": "string"}, "1"),
    ({"type": ["integer", "null"]}, "1.5"),
    ({"enum": [1, "a"]}, "1.0"),
    ({"const": [1]}, "[1]"),
    ({"multipleOf": 3}, "9"),
    ({"maximum": 3}, "3"),
    ({"exclusiveMinimum": 3}, "3"),
    ({"maxLength": 3}, '"abcd"'),
    ({"minLength": 2}, '"a"'),
    ({"pattern": "^a"}, '"abc"'),
    ({"maxItems": 1}, "[1, 2]"),
    ({"minItems": 1}, "[]"),
    ({"uniqueItems": True}, "[1, 2, 1]"),
    ({"uniqueItems": True}, "[1, 2]"),
    ({"required": ["a"]}, '{"a": 1}'),
    ({"required": ["a", "b"]}, '{"a": 1}'),
    ({"maxProperties": 1}, '{"a": 1}'),
    ({"items": {"type": "integer"}}, '[1, "x"]'),
    ({"items": {"type": "integer"}}, "[]"),
    ({"items": [{"type": "integer"}, {"type": "string"}]}, '[1, "a"]'),
    ({"contains": {"type": "string"}}, "[1, 2]"),
    ({"contains": {"type": "string"}}, '[1, "a"]'),
    ({"contains": {"type": "number"}, "minContains": 2, "maxContains": 3}, "[1, 2]"),
    ({"contains": {"type": "number"}, "minContains": 2, "maxContains": 3}, "[1, 2, 3, 4]"),
    ({"contains": {}, "minContains": 0}, "[]"),
    ({"properties": {"a": {"type": "string"}}}, '{"a": 1}'),
    ({"properties": {"a": {"type": "string"}}}, "{}"),
    ({"additionalProperties": False}, '{"a": 1}'),
    ({"propertyNames": {"maxLength": 1}}, '{"ab": 1}'),
    ({"dependencies": {"a": ["b"]}}, '{"a": 1}'),
    ({"dependencies": {"a": {"required": ["b"]}}}, '{"a": 1, "b": 2}'),
    ({"allOf": [{"type": "integer"}, {"minimum": 2}]}, "1"),
    ({"anyOf": [{"type": "string"}, {"minimum": 2}]}, "1"),
    ({"oneOf": [{"type": "integer"}, {"minimum": 2}]}, "3"),
    ({"oneOf": [{"type": "integer"}, {"minimum": 2}]}, "1"),
    ({"not": {"type": "integer"}}, "1"),
    ({"if": {"type": "integer"}, "then": {"minimum": 0}, "else": {"type": "string"}}, "-1"),
    ({"if": {"type": "integer"}, "then": {"minimum": 0}}, '"a"'),
    (True, "1"),
    (False, "1"),
    ({}, "{}"),
]


def _verdict(schema, instance, negate):
    validator = Validator(schema, negate=negate)
    valid = validator.validate(instance)
    return valid, validator.problems


class TestNegation:
    """Negated validation mirrors affirmative validation."""

    @pytest.mark.parametrize("schema, instance", CASES)
    def test_opposite_verdict(self, schema, instance):
        valid, _ = _verdict(schema, instance, negate=False)
        negated, _ = _verdict(schema, instance, negate=True)

        assert negated is not valid

    @pytest.mark.parametrize("schema, instance", CASES)
    def test_failure_has_problems(self, schema, instance):
        for negate in (False, True):
            valid, problems = _verdict(schema, instance, negate)
            if not valid:
                assert problems, f"no problem reported (negate={negate})"

    def test_recursive_schema(self, tree_schema):
        document = '{"value": 1, "children": [{"value": 2}]}'

        assert _verdict(tree_schema, document, negate=False)[0] is True
        assert _verdict(tree_schema, document, negate=True)[0] is False

    def test_negated_max_length_reads_as_min_length(self):
        validator = Validator({"maxLength": 3}, negate=True)

        assert validator.validate('"abc"') is False
        assert validator.problems[0].keyword == "minLength"
        assert validator.problems[0].params["limit"] == 4

    def test_negated_maximum_reads_as_exclusive_minimum(self):
        validator = Validator({"maximum": 3}, negate=True)

        assert validator.validate("3") is False
        assert validator.problems[0].keyword == "exclusiveMinimum"
