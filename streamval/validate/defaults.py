"""
Default values for missing object properties.

Follows the schemas that apply to each open object or array while events
stream past, and when an object closes, lists the ``default`` of every
``properties`` entry the object did not contain. The validating parser
replays those members just before ``END_OBJECT``.

Schemas apply to a value through ``$ref`` and ``allOf`` at the same
location, and through ``properties``, ``patternProperties``,
``additionalProperties``, ``items`` and ``additionalItems`` below it.
Alternatives (``anyOf``, ``oneOf``, ``if``/``then``/``else``, ``not``)
contribute nothing: which of them holds is only known once the object
has closed.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from ..keywords.variants import (
    AdditionalItems,
    AdditionalProperties,
    AllOf,
    Annotation,
    Items,
    PatternProperties,
    Properties,
    TupleItems,
)
from ..parser.events import END_EVENTS, Event, is_value_start
from ..parser.tokenizer import JsonEventParser
from ..schema.schema import BooleanSchema, ReferenceSchema, Schema

__all__ = ["DefaultValues", "replay"]


def _applicable(schemas: Iterable[Schema]) -> tuple[Schema, ...]:
    """Expand ``$ref`` and ``allOf``; drop boolean and unresolvable schemas."""
    found: list[Schema] = []
    seen: set[int] = set()
    pending = list(schemas)
    while pending:
        schema = pending.pop(0)
        if id(schema) in seen:
            continue
        seen.add(id(schema))
        if isinstance(schema, ReferenceSchema):
            graph = schema.graph
            target = None if graph.is_loop(schema) else graph.target_of(schema)
            if target is not None:
                pending.insert(0, target)
            continue
        if isinstance(schema, BooleanSchema):
            continue
        found.append(schema)
        all_of = schema.keywords.get("allOf")
        if isinstance(all_of, AllOf):
            pending[:0] = all_of.schemas
    return tuple(found)


def _property_schemas(schemas: tuple[Schema, ...], key: str) -> Iterator[Schema]:
    for schema in schemas:
        keywords = schema.keywords
        declared = False
        properties = keywords.get("properties")
        if isinstance(properties, Properties) and key in properties.schemas:
            declared = True
            yield properties.schemas[key]
        patterns = keywords.get("patternProperties")
        if isinstance(patterns, PatternProperties):
            matching = patterns.matching(key)
            declared = declared or bool(matching)
            yield from matching
        additional = keywords.get("additionalProperties")
        if not declared and isinstance(additional, AdditionalProperties):
            yield additional.schema


def _item_schemas(schemas: tuple[Schema, ...], index: int) -> Iterator[Schema]:
    for schema in schemas:
        items = schema.keywords.get("items")
        if isinstance(items, Items):
            yield items.schema
        elif isinstance(items, TupleItems):
            if index < len(items.schemas):
                yield items.schemas[index]
            else:
                additional = schema.keywords.get("additionalItems")
                if isinstance(additional, AdditionalItems):
                    yield additional.schema


@dataclass
class _Frame:
    """One open object or array."""

    schemas: tuple[Schema, ...]
    is_array: bool
    key: str | None = None
    index: int = -1
    seen: set[str] = field(default_factory=set)

    def child_schemas(self) -> tuple[Schema, ...]:
        if not self.schemas:
            return ()
        if self.is_array:
            return _applicable(_item_schemas(self.schemas, self.index))
        return _applicable(_property_schemas(self.schemas, self.key))

    def missing(self) -> list[tuple[str, Any]]:
        members: dict[str, Any] = {}
        for schema in self.schemas:
            properties = schema.keywords.get("properties")
            if not isinstance(properties, Properties):
                continue
            for name, subschema in properties.schemas.items():
                if name in self.seen or name in members:
                    continue
                default = subschema.keywords.get("default")
                if isinstance(default, Annotation):
                    members[name] = default.value
        return list(members.items())


class DefaultValues:
    """
    Tracks the default values owed to the objects of one document.

    Call :meth:`update` with every event in document order. On
    ``END_OBJECT`` it returns the ``(name, default)`` pairs of the
    properties the object lacks, in declaration order.

    Example
    -------
    >>> defaults = DefaultValues(read_schema({"properties": {"a": {"default": 1}}}))
    >>> parser = JsonEventParser()
    >>> parser.feed("{}"); parser.close()
    >>> [defaults.update(event, parser) for event in parser.events()]
    [[], [('a', 1)]]
    """

    def __init__(self, schema: Schema) -> None:
        self._root = _applicable([schema])
        self._frames: list[_Frame] = []

    def update(self, event: Event, parser: JsonEventParser) -> list[tuple[str, Any]]:
        frames = self._frames
        if event in END_EVENTS:
            frame = frames.pop()
            return frame.missing() if event is Event.END_OBJECT else []
        if event is Event.KEY_NAME:
            top = frames[-1]
            top.key = parser.string
            top.seen.add(top.key)
            return []
        if not is_value_start(event):
            return []
        if frames:
            top = frames[-1]
            if top.is_array:
                top.index += 1
            schemas = top.child_schemas()
        else:
            schemas = self._root
        if event is Event.START_OBJECT or event is Event.START_ARRAY:
            frames.append(_Frame(schemas, event is Event.START_ARRAY))
        return []


def _to_json(value: Any) -> str:
    """JSON text of a schema value; ``Decimal`` numbers keep their digits."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return "{" + ",".join(f"{json.dumps(k)}:{_to_json(v)}" for k, v in value.items()) + "}"
    if isinstance(value, list):
        return "[" + ",".join(_to_json(v) for v in value) + "]"
    return json.dumps(value)


def replay(name: str, value: Any) -> Iterator[tuple[Event, JsonEventParser]]:
    """
    Events of the object member ``name: value``.

    Yields each event with a parser positioned on it, so the member reads
    exactly like parsed input: ``KEY_NAME`` first, then the events of the
    value.
    """
    parser = JsonEventParser()
    parser.feed(_to_json({name: value}))
    parser.close()
    events = parser.events()
    next(events)  # START_OBJECT of the wrapper
    for event in events:
        if parser.depth == 0:
            break  # END_OBJECT of the wrapper
        yield event, parser
