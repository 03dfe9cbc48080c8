"""
Keyword vocabulary.

Maps every supported keyword name to a reader that validates the raw JSON
value and returns the matching variant. Readers raise
:class:`MalformedKeyword` for values of the wrong shape; the schema reader
turns that into a compile-time problem and keeps the keyword as unknown.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from decimal import Decimal
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol

from ..parser.events import InstanceType, is_integral
from . import formats
from .variants import (
    AdditionalItems,
    AdditionalProperties,
    AllOf,
    Annotation,
    AnyOf,
    Const,
    Contains,
    ContentEncoding,
    ContentMediaType,
    Definitions,
    Dependencies,
    Else,
    Enum,
    ExclusiveMaximum,
    ExclusiveMinimum,
    Format,
    Identifier,
    If,
    Items,
    Keyword,
    MaxContains,
    Maximum,
    MaxItems,
    MaxLength,
    MaxProperties,
    MinContains,
    Minimum,
    MinItems,
    MinLength,
    MinProperties,
    MultipleOf,
    Not,
    OneOf,
    Pattern,
    PatternProperties,
    Properties,
    PropertyNames,
    Reference,
    Required,
    Then,
    TupleItems,
    Type,
    UniqueItems,
)

if TYPE_CHECKING:
    from ..schema.schema import Schema

__all__ = ["MalformedKeyword", "SubschemaReader", "VOCABULARY", "read_keyword"]


class MalformedKeyword(ValueError):
    """The value of a known keyword has the wrong shape."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class SubschemaReader(Protocol):
    """Reads a nested schema at a path of pointer tokens below the keyword."""

    def __call__(self, value: Any, *tokens: str) -> Schema: ...


KeywordReader = Callable[[str, Any, SubschemaReader], Keyword]

# =============================================================================
# Value checks
# =============================================================================

_TYPE_NAMES = {t.value: t for t in InstanceType}


def _number(value: Any) -> int | Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, Decimal, float)):
        raise MalformedKeyword("must be a number")
    return value


def _non_negative_integer(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, Decimal, float)):
        raise MalformedKeyword("must be a non-negative integer")
    if isinstance(value, float):
        value = Decimal(repr(value))
    if not is_integral(value) or value < 0:
        raise MalformedKeyword("must be a non-negative integer")
    return int(value)


def _string(value: Any) -> str:
    if not isinstance(value, str):
        raise MalformedKeyword("must be a string")
    return value


def _unique_strings(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise MalformedKeyword("must be an array of strings")
    if len(set(value)) != len(value):
        raise MalformedKeyword("must not contain duplicate strings")
    return tuple(value)


def _regex(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise MalformedKeyword(f"invalid regular expression ({exc})") from exc


def _schema_array(value: Any, read: SubschemaReader) -> tuple[Schema, ...]:
    if not isinstance(value, list):
        raise MalformedKeyword("must be an array of schemas")
    return tuple(read(item, str(index)) for index, item in enumerate(value))


def _schema_map(value: Any, read: SubschemaReader) -> MappingProxyType:
    if not isinstance(value, dict):
        raise MalformedKeyword("must be an object of schemas")
    return MappingProxyType({name: read(item, name) for name, item in value.items()})


# =============================================================================
# Keyword readers
# =============================================================================


def _annotation(name: str, value: Any, read: SubschemaReader) -> Keyword:
    return Annotation(name, value)


def _string_annotation(name: str, value: Any, read: SubschemaReader) -> Keyword:
    return Annotation(name, _string(value))


def _boolean_annotation(name: str, value: Any, read: SubschemaReader) -> Keyword:
    if not isinstance(value, bool):
        raise MalformedKeyword("must be a boolean")
    return Annotation(name, value)


def _examples(name: str, value: Any, read: SubschemaReader) -> Keyword:
    if not isinstance(value, list):
        raise MalformedKeyword("must be an array")
    return Annotation(name, value)


def _identifier(name: str, value: Any, read: SubschemaReader) -> Keyword:
    return Identifier(_string(value))


def _reference(name: str, value: Any, read: SubschemaReader) -> Keyword:
    return Reference(_string(value))


def _definitions(name: str, value: Any, read: SubschemaReader) -> Keyword:
    return Definitions(name, _schema_map(value, read))


def _type(name: str, value: Any, read: SubschemaReader) -> Keyword:
    names = [value] if isinstance(value, str) else value
    if not isinstance(names, list) or not names:
        raise MalformedKeyword("must be a type name or a non-empty array of type names")
    expected = []
    for type_name in names:
        if type_name not in _TYPE_NAMES:
            raise MalformedKeyword(f"unknown type {type_name!r}")
        if _TYPE_NAMES[type_name] in expected:
            raise MalformedKeyword(f"duplicate type {type_name!r}")
        expected.append(_TYPE_NAMES[type_name])
    return Type(tuple(expected))


def _enum(name: str, value: Any, read: SubschemaReader) -> Keyword:
    if not isinstance(value, list):
        raise MalformedKeyword("must be an array")
    return Enum(tuple(value))


def _const(name: str, value: Any, read: SubschemaReader) -> Keyword:
    return Const(value)


def _multiple_of(name: str, value: Any, read: SubschemaReader) -> Keyword:
    factor = _number(value)
    if factor <= 0:
        raise MalformedKeyword("must be greater than 0")
    return MultipleOf(factor)


def _bound(variant: type) -> KeywordReader:
    def read_bound(name: str, value: Any, read: SubschemaReader) -> Keyword:
        return variant(_number(value))

    return read_bound


def _count(variant: type) -> KeywordReader:
    def read_count(name: str, value: Any, read: SubschemaReader) -> Keyword:
        return variant(_non_negative_integer(value))

    return read_count


def _pattern(name: str, value: Any, read: SubschemaReader) -> Keyword:
    pattern = _string(value)
    return Pattern(pattern, _regex(pattern))


def _format(name: str, value: Any, read: SubschemaReader) -> Keyword:
    attribute = _string(value)
    return Format(attribute, formats.is_format_supported(attribute))


def _content_encoding(name: str, value: Any, read: SubschemaReader) -> Keyword:
    encoding = _string(value)
    return ContentEncoding(encoding, formats.is_encoding_supported(encoding))


def _content_media_type(name: str, value: Any, read: SubschemaReader) -> Keyword:
    media_type = _string(value)
    return ContentMediaType(media_type, formats.is_media_type_supported(media_type))


def _unique_items(name: str, value: Any, read: SubschemaReader) -> Keyword:
    if not isinstance(value, bool):
        raise MalformedKeyword("must be a boolean")
    return UniqueItems(value)


def _required(name: str, value: Any, read: SubschemaReader) -> Keyword:
    return Required(_unique_strings(value))


def _schema_list(variant: type) -> KeywordReader:
    def read_schemas(name: str, value: Any, read: SubschemaReader) -> Keyword:
        return variant(_schema_array(value, read))

    return read_schemas


def _single_schema(variant: type) -> KeywordReader:
    def read_schema(name: str, value: Any, read: SubschemaReader) -> Keyword:
        return variant(read(value))

    return read_schema


def _items(name: str, value: Any, read: SubschemaReader) -> Keyword:
    if isinstance(value, list):
        return TupleItems(_schema_array(value, read))
    return Items(read(value))


def _properties(name: str, value: Any, read: SubschemaReader) -> Keyword:
    return Properties(_schema_map(value, read))


def _pattern_properties(name: str, value: Any, read: SubschemaReader) -> Keyword:
    schemas = _schema_map(value, read)
    return PatternProperties(schemas, tuple(_regex(pattern) for pattern in schemas))


def _dependencies(name: str, value: Any, read: SubschemaReader) -> Keyword:
    if not isinstance(value, dict):
        raise MalformedKeyword("must be an object")
    dependencies: dict[str, Schema | tuple[str, ...]] = {}
    for property_name, dependency in value.items():
        if isinstance(dependency, list):
            dependencies[property_name] = _unique_strings(dependency)
        else:
            dependencies[property_name] = read(dependency, property_name)
    return Dependencies(MappingProxyType(dependencies))


VOCABULARY: dict[str, KeywordReader] = {
    # Core
    "$schema": _string_annotation,
    "$id": _identifier,
    "$ref": _reference,
    "$comment": _string_annotation,
    "definitions": _definitions,
    "$defs": _definitions,
    # Metadata
    "title": _string_annotation,
    "description": _string_annotation,
    "default": _annotation,
    "examples": _examples,
    "readOnly": _boolean_annotation,
    "writeOnly": _boolean_annotation,
    # Any instance type
    "type": _type,
    "enum": _enum,
    "const": _const,
    # Numbers
    "multipleOf": _multiple_of,
    "maximum": _bound(Maximum),
    "exclusiveMaximum": _bound(ExclusiveMaximum),
    "minimum": _bound(Minimum),
    "exclusiveMinimum": _bound(ExclusiveMinimum),
    # Strings
    "maxLength": _count(MaxLength),
    "minLength": _count(MinLength),
    "pattern": _pattern,
    "format": _format,
    "contentEncoding": _content_encoding,
    "contentMediaType": _content_media_type,
    # Arrays
    "items": _items,
    "additionalItems": _single_schema(AdditionalItems),
    "maxItems": _count(MaxItems),
    "minItems": _count(MinItems),
    "uniqueItems": _unique_items,
    "contains": _single_schema(Contains),
    "maxContains": _count(MaxContains),
    "minContains": _count(MinContains),
    # Objects
    "maxProperties": _count(MaxProperties),
    "minProperties": _count(MinProperties),
    "required": _required,
    "properties": _properties,
    "patternProperties": _pattern_properties,
    "additionalProperties": _single_schema(AdditionalProperties),
    "dependencies": _dependencies,
    "propertyNames": _single_schema(PropertyNames),
    # Logic
    "allOf": _schema_list(AllOf),
    "anyOf": _schema_list(AnyOf),
    "oneOf": _schema_list(OneOf),
    "not": _single_schema(Not),
    "if": _single_schema(If),
    "then": _single_schema(Then),
    "else": _single_schema(Else),
}


def read_keyword(name: str, value: Any, read: SubschemaReader) -> Keyword | None:
    """
    Read a keyword value.

    Returns None for names outside the vocabulary.

    Raises
    ------
    MalformedKeyword
        If the value does not have the shape the keyword requires.
    """
    reader = VOCABULARY.get(name)
    if reader is None:
        return None
    return reader(name, value, read)
