"""
Schema compilation.

Turns the keyword map of a schema into evaluator sources, one per keyword
with validation behavior, and builds the evaluator of a schema from them.
A source may depend on sibling keywords: ``contains`` reads
``minContains``/``maxContains``, ``additionalItems`` only applies next to a
positional ``items``, ``additionalProperties`` skips what ``properties``
and ``patternProperties`` declare, ``if`` carries ``then`` and ``else``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..evaluator.base import ALWAYS_TRUE, Evaluator, EvaluatorContext
from ..evaluator.logical import conjunctive, disjunctive
from ..keywords import applicators, assertions
from ..keywords.variants import (
    AdditionalItems,
    AdditionalProperties,
    AllOf,
    AnyOf,
    Const,
    Contains,
    ContentEncoding,
    ContentMediaType,
    Dependencies,
    Else,
    Enum,
    ExclusiveMaximum,
    ExclusiveMinimum,
    Format,
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
    Required,
    Then,
    TupleItems,
    Type,
    UniqueItems,
)
from ..parser.events import InstanceType

if TYPE_CHECKING:
    from .schema import Schema

__all__ = ["EvaluatorSource", "compile_sources", "create_evaluator"]

#: (context, instance type, owning schema, negated) -> evaluator
EvaluatorFactory = Callable[[EvaluatorContext, InstanceType, "Schema", bool], Evaluator]


@dataclass(frozen=True)
class EvaluatorSource:
    """
    Evaluation behavior of one keyword.

    Attributes
    ----------
    keyword : str
        Name of the keyword.
    types : frozenset[InstanceType]
        Instance types the keyword applies to; empty for all types.
    create : EvaluatorFactory
        Builds a fresh evaluator for one run.
    """

    keyword: str
    types: frozenset[InstanceType]
    create: EvaluatorFactory

    def supports(self, instance_type: InstanceType) -> bool:
        if not self.types:
            return True
        return instance_type in self.types or (
            instance_type is InstanceType.INTEGER and InstanceType.NUMBER in self.types
        )


def compile_sources(keywords: Mapping[str, Keyword]) -> tuple[EvaluatorSource, ...]:
    """Evaluator sources of a keyword map, in keyword order."""
    sources = []
    for keyword in keywords.values():
        factory = _factory(keyword, keywords)
        if factory is not None:
            sources.append(EvaluatorSource(keyword.keyword, keyword.types, factory))
    return tuple(sources)


def create_evaluator(
    schema: Schema,
    context: EvaluatorContext,
    instance_type: InstanceType,
    negated: bool = False,
) -> Evaluator:
    """
    Evaluator of a whole schema.

    The applicable sources are combined with AND. Negated, the negated
    sources are combined with OR, and a schema with nothing to negate
    always fails.
    """
    evaluators = [
        source.create(context, instance_type, schema, negated)
        for source in schema.sources
        if source.supports(instance_type)
    ]
    if negated:
        if any(evaluator is ALWAYS_TRUE for evaluator in evaluators):
            return ALWAYS_TRUE
        if not evaluators:
            return context.always_false(schema, "instance.problem.not")
        if len(evaluators) == 1:
            return evaluators[0]
        return disjunctive(context, instance_type, schema).extend(evaluators)

    evaluators = [evaluator for evaluator in evaluators if evaluator is not ALWAYS_TRUE]
    if not evaluators:
        return ALWAYS_TRUE
    if len(evaluators) == 1:
        return evaluators[0]
    return conjunctive(context, instance_type, schema).extend(evaluators)


def _sibling(siblings: Mapping[str, Keyword], name: str, variant: type) -> Keyword | None:
    keyword = siblings.get(name)
    return keyword if isinstance(keyword, variant) else None


def _factory(keyword: Keyword, siblings: Mapping[str, Keyword]) -> EvaluatorFactory | None:
    """
    Evaluator factory of a keyword, or None when the keyword has nothing
    to evaluate (annotations, keywords read by a sibling, bounds that
    always hold).
    """
    match keyword:
        # Any type
        case Type(expected=expected):
            return lambda ctx, t, schema, negated: assertions.type_evaluator(ctx, schema, expected, t, negated)
        case Enum(values=values):
            return lambda ctx, t, schema, negated: assertions.enum_evaluator(ctx, schema, values, negated)
        case Const(value=value):
            return lambda ctx, t, schema, negated: assertions.const_evaluator(ctx, schema, value, negated)

        # Numbers
        case MultipleOf(factor=factor):
            return lambda ctx, t, schema, negated: assertions.multiple_of_evaluator(ctx, schema, factor, negated)
        case Maximum(limit=limit) | ExclusiveMaximum(limit=limit) | Minimum(limit=limit) | ExclusiveMinimum(
            limit=limit
        ):
            name = keyword.name
            return lambda ctx, t, schema, negated: assertions.bound_evaluator(ctx, schema, name, limit, negated)

        # Strings
        case MinLength(limit=0):
            return None
        case MaxLength(limit=limit) | MinLength(limit=limit):
            name = keyword.name
            return lambda ctx, t, schema, negated: assertions.length_evaluator(ctx, schema, name, limit, negated)
        case Pattern(pattern=pattern, regex=regex):
            return lambda ctx, t, schema, negated: assertions.pattern_evaluator(ctx, schema, pattern, regex, negated)
        case Format(attribute=attribute, supported=True):
            return lambda ctx, t, schema, negated: assertions.format_evaluator(ctx, schema, attribute, negated)
        case ContentEncoding(encoding=encoding, supported=True):
            return lambda ctx, t, schema, negated: assertions.content_encoding_evaluator(
                ctx, schema, encoding, negated
            )
        case ContentMediaType(media_type=media_type, supported=True):
            sibling = _sibling(siblings, "contentEncoding", ContentEncoding)
            encoding = sibling.encoding if sibling is not None and sibling.supported else None
            return lambda ctx, t, schema, negated: assertions.content_media_type_evaluator(
                ctx, schema, media_type, encoding, negated
            )

        # Arrays
        case MinItems(limit=0):
            return None
        case MaxItems(limit=limit) | MinItems(limit=limit):
            name = keyword.name
            return lambda ctx, t, schema, negated: assertions.item_count_evaluator(ctx, schema, name, limit, negated)
        case UniqueItems(unique=True):
            return lambda ctx, t, schema, negated: assertions.unique_items_evaluator(ctx, schema, negated)
        case Items(schema=item_schema):
            return lambda ctx, t, schema, negated: applicators.items_evaluator(ctx, schema, item_schema, negated)
        case TupleItems(schemas=schemas):
            return lambda ctx, t, schema, negated: applicators.tuple_items_evaluator(ctx, schema, schemas, negated)
        case AdditionalItems(schema=additional):
            items = _sibling(siblings, "items", TupleItems)
            if items is None:
                return None
            positional = len(items.schemas)
            return lambda ctx, t, schema, negated: applicators.additional_items_evaluator(
                ctx, schema, additional, positional, negated
            )
        case Contains(schema=item_schema):
            lower = _sibling(siblings, "minContains", MinContains)
            upper = _sibling(siblings, "maxContains", MaxContains)
            min_contains = lower.limit if lower is not None else None
            max_contains = upper.limit if upper is not None else None
            if min_contains == 0 and max_contains is None:
                return None
            return lambda ctx, t, schema, negated: applicators.contains_evaluator(
                ctx, schema, item_schema, min_contains, max_contains, negated
            )

        # Objects
        case MinProperties(limit=0):
            return None
        case MaxProperties(limit=limit) | MinProperties(limit=limit):
            name = keyword.name
            return lambda ctx, t, schema, negated: assertions.property_count_evaluator(
                ctx, schema, name, limit, negated
            )
        case Required(names=names) if names:
            return lambda ctx, t, schema, negated: assertions.required_evaluator(ctx, schema, names, negated)
        case Properties(schemas=schemas):
            return lambda ctx, t, schema, negated: applicators.properties_evaluator(ctx, schema, schemas, negated)
        case PatternProperties():
            matching = keyword.matching
            return lambda ctx, t, schema, negated: applicators.pattern_properties_evaluator(
                ctx, schema, matching, negated
            )
        case AdditionalProperties(schema=additional):
            declared = _sibling(siblings, "properties", Properties)
            patterns = _sibling(siblings, "patternProperties", PatternProperties)

            def is_declared(key: str) -> bool:
                if declared is not None and key in declared.schemas:
                    return True
                return patterns is not None and bool(patterns.matching(key))

            return lambda ctx, t, schema, negated: applicators.additional_properties_evaluator(
                ctx, schema, additional, is_declared, negated
            )
        case PropertyNames(schema=name_schema):
            return lambda ctx, t, schema, negated: applicators.property_names_evaluator(
                ctx, schema, name_schema, negated
            )
        case Dependencies(dependencies=dependencies) if dependencies:
            return lambda ctx, t, schema, negated: applicators.dependencies_evaluator(
                ctx, schema, dependencies, negated
            )

        # Logic
        case AllOf(schemas=schemas):
            return lambda ctx, t, schema, negated: applicators.all_of_evaluator(ctx, schema, schemas, t, negated)
        case AnyOf(schemas=schemas):
            return lambda ctx, t, schema, negated: applicators.any_of_evaluator(ctx, schema, schemas, t, negated)
        case OneOf(schemas=schemas):
            return lambda ctx, t, schema, negated: applicators.one_of_evaluator(ctx, schema, schemas, t, negated)
        case Not(schema=subschema):
            return lambda ctx, t, schema, negated: applicators.not_evaluator(ctx, subschema, t, negated)
        case If(schema=condition):
            then = _sibling(siblings, "then", Then)
            otherwise = _sibling(siblings, "else", Else)
            if then is None and otherwise is None:
                return None
            then_schema = then.schema if then is not None else None
            else_schema = otherwise.schema if otherwise is not None else None
            return lambda ctx, t, schema, negated: applicators.conditional_evaluator(
                ctx, schema, condition, then_schema, else_schema, t, negated
            )

    return None
