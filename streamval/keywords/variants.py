"""
Keyword variants.

The supported vocabulary is a closed set of frozen dataclasses, one per
keyword, each carrying only its own validated value. Behavior is attached
by pattern matching in :mod:`streamval.schema.compiler`, not by methods on
the variants.

Class attributes:

- ``name``: the keyword as spelled in schemas.
- ``types``: instance types the keyword applies to (empty: all types).
- ``in_place``: whether its subschemas validate the same instance
  location, as opposed to children of the instance.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any, ClassVar

from ..parser.events import InstanceType

if TYPE_CHECKING:
    from ..schema.schema import Schema

__all__ = [
    "Keyword",
    # Core and metadata
    "Annotation",
    "Identifier",
    "Definitions",
    "Reference",
    "Unknown",
    # Assertions
    "Type",
    "Enum",
    "Const",
    "MultipleOf",
    "Maximum",
    "ExclusiveMaximum",
    "Minimum",
    "ExclusiveMinimum",
    "MaxLength",
    "MinLength",
    "Pattern",
    "Format",
    "ContentEncoding",
    "ContentMediaType",
    "MaxItems",
    "MinItems",
    "UniqueItems",
    "MaxProperties",
    "MinProperties",
    "Required",
    # Applicators
    "AllOf",
    "AnyOf",
    "OneOf",
    "Not",
    "If",
    "Then",
    "Else",
    "Items",
    "TupleItems",
    "AdditionalItems",
    "Contains",
    "MinContains",
    "MaxContains",
    "Properties",
    "PatternProperties",
    "AdditionalProperties",
    "PropertyNames",
    "Dependencies",
    # Navigation
    "subschemas",
    "in_place_subschemas",
    "child_subschema",
]

_ANY: frozenset[InstanceType] = frozenset()
_NUMBERS = frozenset({InstanceType.INTEGER, InstanceType.NUMBER})
_STRING = frozenset({InstanceType.STRING})
_ARRAY = frozenset({InstanceType.ARRAY})
_OBJECT = frozenset({InstanceType.OBJECT})

Number = int | Decimal


class Keyword:
    """Base of all keyword variants."""

    name: ClassVar[str] = ""
    types: ClassVar[frozenset[InstanceType]] = _ANY
    in_place: ClassVar[bool] = False

    @property
    def keyword(self) -> str:
        return self.name


# =============================================================================
# Core and metadata
# =============================================================================


@dataclass(frozen=True)
class Annotation(Keyword):
    """Keyword without validation behavior (title, default, $comment, ...)."""

    keyword_name: str
    value: Any

    @property
    def keyword(self) -> str:
        return self.keyword_name


@dataclass(frozen=True)
class Identifier(Keyword):
    name: ClassVar[str] = "$id"
    uri: str


@dataclass(frozen=True)
class Definitions(Keyword):
    keyword_name: str
    schemas: Mapping[str, Schema]

    @property
    def keyword(self) -> str:
        return self.keyword_name


@dataclass(frozen=True)
class Reference(Keyword):
    name: ClassVar[str] = "$ref"
    ref: str


@dataclass(frozen=True)
class Unknown(Keyword):
    """
    Unrecognized or malformed keyword, retained verbatim.

    Object and boolean values are also read as a schema so that JSON
    Pointers into them resolve.
    """

    keyword_name: str
    value: Any
    schema: Schema | None = None

    @property
    def keyword(self) -> str:
        return self.keyword_name


# =============================================================================
# Assertions
# =============================================================================


@dataclass(frozen=True)
class Type(Keyword):
    name: ClassVar[str] = "type"
    expected: tuple[InstanceType, ...]


@dataclass(frozen=True)
class Enum(Keyword):
    name: ClassVar[str] = "enum"
    values: tuple[Any, ...]


@dataclass(frozen=True)
class Const(Keyword):
    name: ClassVar[str] = "const"
    value: Any


@dataclass(frozen=True)
class MultipleOf(Keyword):
    name: ClassVar[str] = "multipleOf"
    types: ClassVar[frozenset[InstanceType]] = _NUMBERS
    factor: Number


@dataclass(frozen=True)
class Maximum(Keyword):
    name: ClassVar[str] = "maximum"
    types: ClassVar[frozenset[InstanceType]] = _NUMBERS
    limit: Number


@dataclass(frozen=True)
class ExclusiveMaximum(Keyword):
    name: ClassVar[str] = "exclusiveMaximum"
    types: ClassVar[frozenset[InstanceType]] = _NUMBERS
    limit: Number


@dataclass(frozen=True)
class Minimum(Keyword):
    name: ClassVar[str] = "minimum"
    types: ClassVar[frozenset[InstanceType]] = _NUMBERS
    limit: Number


@dataclass(frozen=True)
class ExclusiveMinimum(Keyword):
    name: ClassVar[str] = "exclusiveMinimum"
    types: ClassVar[frozenset[InstanceType]] = _NUMBERS
    limit: Number


@dataclass(frozen=True)
class MaxLength(Keyword):
    name: ClassVar[str] = "maxLength"
    types: ClassVar[frozenset[InstanceType]] = _STRING
    limit: int


@dataclass(frozen=True)
class MinLength(Keyword):
    name: ClassVar[str] = "minLength"
    types: ClassVar[frozenset[InstanceType]] = _STRING
    limit: int


@dataclass(frozen=True)
class Pattern(Keyword):
    name: ClassVar[str] = "pattern"
    types: ClassVar[frozenset[InstanceType]] = _STRING
    pattern: str
    regex: re.Pattern[str]


@dataclass(frozen=True)
class Format(Keyword):
    name: ClassVar[str] = "format"
    types: ClassVar[frozenset[InstanceType]] = _STRING
    attribute: str
    supported: bool = True


@dataclass(frozen=True)
class ContentEncoding(Keyword):
    name: ClassVar[str] = "contentEncoding"
    types: ClassVar[frozenset[InstanceType]] = _STRING
    encoding: str
    supported: bool = True


@dataclass(frozen=True)
class ContentMediaType(Keyword):
    name: ClassVar[str] = "contentMediaType"
    types: ClassVar[frozenset[InstanceType]] = _STRING
    media_type: str
    supported: bool = True


@dataclass(frozen=True)
class MaxItems(Keyword):
    name: ClassVar[str] = "maxItems"
    types: ClassVar[frozenset[InstanceType]] = _ARRAY
    limit: int


@dataclass(frozen=True)
class MinItems(Keyword):
    name: ClassVar[str] = "minItems"
    types: ClassVar[frozenset[InstanceType]] = _ARRAY
    limit: int


@dataclass(frozen=True)
class UniqueItems(Keyword):
    name: ClassVar[str] = "uniqueItems"
    types: ClassVar[frozenset[InstanceType]] = _ARRAY
    unique: bool


@dataclass(frozen=True)
class MaxProperties(Keyword):
    name: ClassVar[str] = "maxProperties"
    types: ClassVar[frozenset[InstanceType]] = _OBJECT
    limit: int


@dataclass(frozen=True)
class MinProperties(Keyword):
    name: ClassVar[str] = "minProperties"
    types: ClassVar[frozenset[InstanceType]] = _OBJECT
    limit: int


@dataclass(frozen=True)
class Required(Keyword):
    name: ClassVar[str] = "required"
    types: ClassVar[frozenset[InstanceType]] = _OBJECT
    names: tuple[str, ...]


# =============================================================================
# Applicators
# =============================================================================


@dataclass(frozen=True)
class AllOf(Keyword):
    name: ClassVar[str] = "allOf"
    in_place: ClassVar[bool] = True
    schemas: tuple[Schema, ...]


@dataclass(frozen=True)
class AnyOf(Keyword):
    name: ClassVar[str] = "anyOf"
    in_place: ClassVar[bool] = True
    schemas: tuple[Schema, ...]


@dataclass(frozen=True)
class OneOf(Keyword):
    name: ClassVar[str] = "oneOf"
    in_place: ClassVar[bool] = True
    schemas: tuple[Schema, ...]


@dataclass(frozen=True)
class Not(Keyword):
    name: ClassVar[str] = "not"
    in_place: ClassVar[bool] = True
    schema: Schema


@dataclass(frozen=True)
class If(Keyword):
    name: ClassVar[str] = "if"
    in_place: ClassVar[bool] = True
    schema: Schema


@dataclass(frozen=True)
class Then(Keyword):
    name: ClassVar[str] = "then"
    in_place: ClassVar[bool] = True
    schema: Schema


@dataclass(frozen=True)
class Else(Keyword):
    name: ClassVar[str] = "else"
    in_place: ClassVar[bool] = True
    schema: Schema


@dataclass(frozen=True)
class Items(Keyword):
    """``items`` holding one schema for every element."""

    name: ClassVar[str] = "items"
    types: ClassVar[frozenset[InstanceType]] = _ARRAY
    schema: Schema


@dataclass(frozen=True)
class TupleItems(Keyword):
    """``items`` holding one schema per position."""

    name: ClassVar[str] = "items"
    types: ClassVar[frozenset[InstanceType]] = _ARRAY
    schemas: tuple[Schema, ...]


@dataclass(frozen=True)
class AdditionalItems(Keyword):
    name: ClassVar[str] = "additionalItems"
    types: ClassVar[frozenset[InstanceType]] = _ARRAY
    schema: Schema


@dataclass(frozen=True)
class Contains(Keyword):
    name: ClassVar[str] = "contains"
    types: ClassVar[frozenset[InstanceType]] = _ARRAY
    schema: Schema


@dataclass(frozen=True)
class MinContains(Keyword):
    name: ClassVar[str] = "minContains"
    types: ClassVar[frozenset[InstanceType]] = _ARRAY
    limit: int


@dataclass(frozen=True)
class MaxContains(Keyword):
    name: ClassVar[str] = "maxContains"
    types: ClassVar[frozenset[InstanceType]] = _ARRAY
    limit: int


@dataclass(frozen=True)
class Properties(Keyword):
    name: ClassVar[str] = "properties"
    types: ClassVar[frozenset[InstanceType]] = _OBJECT
    schemas: Mapping[str, Schema]


@dataclass(frozen=True)
class PatternProperties(Keyword):
    name: ClassVar[str] = "patternProperties"
    types: ClassVar[frozenset[InstanceType]] = _OBJECT
    schemas: Mapping[str, Schema]
    regexes: tuple[re.Pattern[str], ...]

    def matching(self, key: str) -> list[Schema]:
        return [
            schema
            for regex, schema in zip(self.regexes, self.schemas.values())
            if regex.search(key)
        ]


@dataclass(frozen=True)
class AdditionalProperties(Keyword):
    name: ClassVar[str] = "additionalProperties"
    types: ClassVar[frozenset[InstanceType]] = _OBJECT
    schema: Schema


@dataclass(frozen=True)
class PropertyNames(Keyword):
    name: ClassVar[str] = "propertyNames"
    types: ClassVar[frozenset[InstanceType]] = _OBJECT
    schema: Schema


@dataclass(frozen=True)
class Dependencies(Keyword):
    """Each entry is a schema or a list of required property names."""

    name: ClassVar[str] = "dependencies"
    types: ClassVar[frozenset[InstanceType]] = _OBJECT
    in_place: ClassVar[bool] = True
    dependencies: Mapping[str, Schema | tuple[str, ...]]


# =============================================================================
# Navigation
# =============================================================================


def subschemas(keyword: Keyword) -> Iterator[tuple[str | None, Schema]]:
    """
    Direct subschemas of a keyword with their pointer token.

    The token is None for keywords holding a single schema, which the
    keyword's own pointer token addresses directly (``/not``).
    """
    match keyword:
        case AllOf(schemas=schemas) | AnyOf(schemas=schemas) | OneOf(schemas=schemas) | TupleItems(
            schemas=schemas
        ):
            for index, schema in enumerate(schemas):
                yield str(index), schema
        case (
            Not(schema=schema)
            | If(schema=schema)
            | Then(schema=schema)
            | Else(schema=schema)
            | Items(schema=schema)
            | AdditionalItems(schema=schema)
            | Contains(schema=schema)
            | AdditionalProperties(schema=schema)
            | PropertyNames(schema=schema)
        ):
            yield None, schema
        case Properties(schemas=schemas) | PatternProperties(schemas=schemas) | Definitions(
            schemas=schemas
        ):
            yield from schemas.items()
        case Dependencies(dependencies=dependencies):
            for name, dependency in dependencies.items():
                if not isinstance(dependency, tuple):
                    yield name, dependency
        case Unknown(schema=schema) if schema is not None:
            yield None, schema


def in_place_subschemas(keyword: Keyword) -> Iterator[Schema]:
    """Subschemas validating the same instance location as their parent."""
    if keyword.in_place:
        for _token, schema in subschemas(keyword):
            yield schema


def child_subschema(keyword: Keyword, token: str | None) -> Schema | None:
    """Subschema addressed by ``token`` below the keyword, if any."""
    for candidate, schema in subschemas(keyword):
        if candidate == token:
            return schema
    return None
