"""
Message catalog.

Problems carry a message key and named parameters rather than finished
text, so callers can localize or re-render them. :func:`render` produces
the default English text.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any

__all__ = ["MESSAGES", "render", "format_param"]

MESSAGES: dict[str, str] = {
    # Instance problems
    "instance.problem.type": "The value must be of {expected} type, but actual type is {actual}.",
    "instance.problem.type.plural": "The value must be one of {expected} types, but actual type is {actual}.",
    "instance.problem.not.type": "The value must not be of {expected} type.",
    "instance.problem.not.type.plural": "The value must not be any of {expected} types.",
    "instance.problem.enum": "The value must be one of {expected}.",
    "instance.problem.not.enum": "The value must not be any of {expected}.",
    "instance.problem.const": "The value must be constant {expected}.",
    "instance.problem.not.const": "The value must not be constant {expected}.",
    "instance.problem.multipleOf": "The numeric value must be a multiple of {factor}, but actual value is {actual}.",
    "instance.problem.not.multipleOf": "The numeric value must not be a multiple of {factor}, but actual value is {actual}.",
    "instance.problem.maximum": "The numeric value must be less than or equal to {limit}, but actual value is {actual}.",
    "instance.problem.exclusiveMaximum": "The numeric value must be less than {limit}, but actual value is {actual}.",
    "instance.problem.minimum": "The numeric value must be greater than or equal to {limit}, but actual value is {actual}.",
    "instance.problem.exclusiveMinimum": "The numeric value must be greater than {limit}, but actual value is {actual}.",
    "instance.problem.maxLength": "The string must be at most {limit} characters long, but actual length is {actual}.",
    "instance.problem.minLength": "The string must be at least {limit} characters long, but actual length is {actual}.",
    "instance.problem.pattern": "The string must match the pattern {pattern}.",
    "instance.problem.not.pattern": "The string must not match the pattern {pattern}.",
    "instance.problem.format": "The string must be a valid {attribute}, but actual value is {actual}.",
    "instance.problem.not.format": "The string must not be a valid {attribute}, but actual value is {actual}.",
    "instance.problem.contentEncoding": "The string must be encoded in {encoding}.",
    "instance.problem.not.contentEncoding": "The string must not be encoded in {encoding}.",
    "instance.problem.contentMediaType": "The content must be of media type {mediaType}.",
    "instance.problem.not.contentMediaType": "The content must not be of media type {mediaType}.",
    "instance.problem.maxItems": "The array must have at most {limit} element(s), but actual number is {actual}.",
    "instance.problem.minItems": "The array must have at least {limit} element(s), but actual number is {actual}.",
    "instance.problem.uniqueItems": "The array must consist only of unique elements, but the element at {index} is a duplicate of the element at {firstIndex}.",
    "instance.problem.not.uniqueItems": "The array must have at least one duplicate element.",
    "instance.problem.maxProperties": "The object must have at most {limit} property(ies), but actual number is {actual}.",
    "instance.problem.minProperties": "The object must have at least {limit} property(ies), but actual number is {actual}.",
    "instance.problem.required": "The object must have properties {missing}.",
    "instance.problem.not.required": "The object must not have all of the properties {required}.",
    "instance.problem.not.property": "The object must not have the property {property}.",
    "instance.problem.not.dependencies": "The object must not satisfy the dependency of {property}.",
    "instance.problem.contains": "The array must contain at least one element valid against the subschema.",
    "instance.problem.not.contains": "The array must not contain any element valid against the subschema.",
    "instance.problem.minContains": "The array must contain at least {limit} element(s) valid against the subschema, but actual number is {actual}.",
    "instance.problem.maxContains": "The array must contain at most {limit} element(s) valid against the subschema, but actual number is {actual}.",
    "instance.problem.anyOf": "At least one of the following sets of problems must be resolved.",
    "instance.problem.oneOf.many": "The value must be valid against exactly one subschema, but valid against subschemas at {indices}.",
    "instance.problem.not.oneOf": "The value must not be valid against exactly one subschema, but valid against the subschema at {index}.",
    "instance.problem.empty": "There is nothing to satisfy in {keyword}.",
    "instance.problem.false": "The schema always fails.",
    "instance.problem.not": "The value must not be valid against the schema.",
    "instance.problem.not.keyword": "The value must not be valid against the keyword {keyword}.",
    # Schema problems
    "schema.problem.reference": "The schema referenced by {ref} (resolved as {targetId}) was not found.",
    "schema.problem.reference.loop": "The reference {ref} (resolved as {targetId}) leads back to itself.",
    "schema.problem.keyword.malformed": "The value of keyword {keyword} is malformed: {reason}.",
    "schema.problem.keyword.unknown": "The keyword {keyword} is unknown.",
    "schema.problem.schema.malformed": "A schema must be an object or a boolean, but actual type is {actual}.",
    "schema.problem.format.unknown": "The format attribute {attribute} is not supported.",
    "schema.problem.contentEncoding.unknown": "The content encoding {encoding} is not supported.",
    "schema.problem.contentMediaType.unknown": "The content media type {mediaType} is not supported.",
}


def format_param(value: Any) -> str:
    """Render a message parameter the way JSON would spell it."""
    if isinstance(value, str):
        return '"' + value + '"'
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (int, Decimal, float)):
        return str(value)
    if isinstance(value, Enum):
        return format_param(value.value)
    if isinstance(value, Mapping):
        items = ", ".join(f"{format_param(k)}: {format_param(v)}" for k, v in value.items())
        return "{" + items + "}"
    if isinstance(value, (list, tuple, set, frozenset)):
        return "[" + ", ".join(format_param(item) for item in value) + "]"
    return str(value)


def render(message: str, params: Mapping[str, Any]) -> str:
    """
    Render a message key with its parameters.

    Unknown keys render as the key itself followed by the parameters,
    so nothing is ever lost.
    """
    template = MESSAGES.get(message)
    rendered = _Params((name, format_param(value)) for name, value in params.items())
    if template is None:
        if not rendered:
            return message
        return message + " " + ", ".join(f"{k}={v}" for k, v in rendered.items())
    return template.format_map(rendered)


class _Params(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"
