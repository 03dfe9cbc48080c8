"""
Schema nodes.

A :class:`Schema` is an immutable keyword map with the evaluator sources
compiled from it. Schemas are built once by :class:`~streamval.schema.SchemaReader`
and then shared, read-only, by every validation run.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from ..evaluator.base import ALWAYS_TRUE, Evaluator, EvaluatorContext
from ..keywords.variants import Keyword, child_subschema, in_place_subschemas, subschemas
from ..pointer import parse_pointer

if TYPE_CHECKING:
    from ..parser.events import InstanceType
    from .compiler import EvaluatorSource
    from .graph import SchemaGraph

__all__ = [
    "Schema",
    "BooleanSchema",
    "ReferenceSchema",
    "TRUE_SCHEMA",
    "FALSE_SCHEMA",
    "EMPTY_SCHEMA",
]


class Schema:
    """
    Immutable schema object.

    Parameters
    ----------
    keywords : Mapping[str, Keyword]
        Keywords in document order.
    json : Any
        The JSON value the schema was read from.
    identifier : str, optional
        Absolute URI of the schema when it declares ``$id``.

    Example
    -------
    >>> schema = read_schema({"allOf": [{"type": "string"}, {"minLength": 2}]})
    >>> schema.get_subschema("/allOf/1").json
    {'minLength': 2}
    """

    def __init__(
        self,
        keywords: Mapping[str, Keyword] | None = None,
        json: Any = None,
        identifier: str | None = None,
    ) -> None:
        self._keywords = MappingProxyType(dict(keywords or {}))
        self._json = {} if json is None else json
        self._id = identifier
        self._sources: tuple[EvaluatorSource, ...] | None = None

    @property
    def id(self) -> str | None:
        return self._id

    @property
    def keywords(self) -> Mapping[str, Keyword]:
        return self._keywords

    @property
    def json(self) -> Any:
        return self._json

    def to_json(self) -> Any:
        """A copy of the source JSON value, unknown keywords included."""
        return copy.deepcopy(self._json)

    def compile(self) -> tuple[EvaluatorSource, ...]:
        """
        Compile the evaluator sources of this node.

        :class:`~streamval.schema.SchemaReader` compiles every node of a
        graph before sealing it. Idempotent.
        """
        if self._sources is None:
            from .compiler import compile_sources

            self._sources = compile_sources(self._keywords)
        return self._sources

    @property
    def sources(self) -> tuple[EvaluatorSource, ...]:
        """Evaluator sources; schemas built outside a reader compile here."""
        return self.compile()

    @property
    def is_trivially_true(self) -> bool:
        """Whether every instance is valid without evaluating anything."""
        return not self.sources

    @property
    def is_trivially_false(self) -> bool:
        return False

    # =========================================================================
    # Navigation
    # =========================================================================

    def subschemas(self) -> Iterator[Schema]:
        """Every directly nested schema."""
        for keyword in self._keywords.values():
            for _token, schema in subschemas(keyword):
                yield schema

    def in_place_subschemas(self) -> Iterator[Schema]:
        """Nested schemas that validate the same instance location."""
        for keyword in self._keywords.values():
            yield from in_place_subschemas(keyword)

    def get_subschema(self, pointer: str) -> Schema | None:
        """
        Schema at a JSON Pointer relative to this schema.

        Keywords holding a single schema are addressed by the keyword name
        alone (``/not``); arrays by index (``/allOf/2``); maps by name
        (``/properties/name``).

        Returns
        -------
        Schema or None
            The schema object itself, or None if nothing is there.
        """
        schema: Schema | None = self
        tokens = iter(parse_pointer(pointer))
        for token in tokens:
            if schema is None:
                return None
            keyword = schema.keywords.get(token)
            if keyword is None:
                return None
            schema = child_subschema(keyword, None)
            if schema is None:
                schema = child_subschema(keyword, next(tokens, None))
        return schema

    # =========================================================================
    # Evaluation
    # =========================================================================

    def create_evaluator(
        self,
        context: EvaluatorContext,
        instance_type: InstanceType,
        negated: bool = False,
    ) -> Evaluator:
        """New evaluator validating one instance value of ``instance_type``."""
        from .compiler import create_evaluator

        return create_evaluator(self, context, instance_type, negated)

    def __repr__(self) -> str:
        if self._id is not None:
            return f"Schema(id={self._id!r})"
        return f"Schema({list(self._keywords)!r})"


class BooleanSchema(Schema):
    """The ``true`` and ``false`` schemas."""

    def __init__(self, value: bool) -> None:
        super().__init__(json=value)
        self.value = value

    @property
    def is_trivially_true(self) -> bool:
        return self.value

    @property
    def is_trivially_false(self) -> bool:
        return not self.value

    def create_evaluator(
        self,
        context: EvaluatorContext,
        instance_type: InstanceType,
        negated: bool = False,
    ) -> Evaluator:
        if self.value != negated:
            return ALWAYS_TRUE
        return context.always_false(self, "instance.problem.false", resolvable=False)

    def __repr__(self) -> str:
        return "TRUE_SCHEMA" if self.value else "FALSE_SCHEMA"


TRUE_SCHEMA = BooleanSchema(True)
FALSE_SCHEMA = BooleanSchema(False)
EMPTY_SCHEMA = Schema()


class ReferenceSchema(Schema):
    """
    A schema holding ``$ref``.

    The target is looked up in the owning :class:`SchemaGraph`; sibling
    keywords are kept for navigation and serialization but never evaluated.

    Attributes
    ----------
    ref : str
        The reference as written.
    target_id : str
        The reference resolved against the base URI.
    """

    def __init__(
        self,
        ref: str,
        target_id: str,
        graph: SchemaGraph,
        keywords: Mapping[str, Keyword] | None = None,
        json: Any = None,
        identifier: str | None = None,
    ) -> None:
        super().__init__(keywords, json, identifier)
        self.ref = ref
        self.target_id = target_id
        self.graph = graph

    @property
    def target(self) -> Schema | None:
        """The resolved target, or None when the reference is dangling."""
        return self.graph.target_of(self)

    @property
    def sources(self) -> tuple[EvaluatorSource, ...]:
        return ()

    @property
    def is_trivially_true(self) -> bool:
        return False

    def in_place_subschemas(self) -> Iterator[Schema]:
        target = self.target
        if target is not None:
            yield target

    def create_evaluator(
        self,
        context: EvaluatorContext,
        instance_type: InstanceType,
        negated: bool = False,
    ) -> Evaluator:
        graph = self.graph
        if graph.is_loop(self):
            return context.always_false(
                self,
                "schema.problem.reference.loop",
                keyword="$ref",
                resolvable=False,
                ref=self.ref,
                targetId=self.target_id,
            )
        target = graph.target_of(self)
        if target is None:
            # Dangling: fails the same way whether negated or not
            return context.always_false(
                self,
                "schema.problem.reference",
                keyword="$ref",
                resolvable=False,
                ref=self.ref,
                targetId=self.target_id,
            )
        return target.create_evaluator(context, instance_type, negated)

    def __repr__(self) -> str:
        return f"ReferenceSchema({self.ref!r})"
