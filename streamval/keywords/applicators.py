"""
Applicator evaluators.

Applicators validate an instance, or its items and properties, against
subschemas. Child evaluators are created lazily on the first event of each
item or property value, so recursive schemas only unfold as deep as the
instance does.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from ..evaluator.base import ALWAYS_TRUE, Evaluator, EvaluatorContext, KeywordEvaluator, Result
from ..evaluator.children import ChildrenEvaluator, children
from ..evaluator.logical import conjunctive, disjunctive, exclusive, not_exclusive, report_failures
from ..parser.events import END_EVENTS, Event, InstanceType
from ..problem.dispatcher import DeferredProblems, ProblemDispatcher
from ..problem.problem import ProblemBuilder

if TYPE_CHECKING:
    from ..schema.schema import Schema

__all__ = [
    "all_of_evaluator",
    "any_of_evaluator",
    "one_of_evaluator",
    "not_evaluator",
    "ConditionalEvaluator",
    "conditional_evaluator",
    "items_evaluator",
    "tuple_items_evaluator",
    "additional_items_evaluator",
    "properties_evaluator",
    "pattern_properties_evaluator",
    "additional_properties_evaluator",
    "PropertyNamesEvaluator",
    "property_names_evaluator",
    "ContainsEvaluator",
    "contains_evaluator",
    "SchemaDependencyEvaluator",
    "PropertyDependencyEvaluator",
    "dependencies_evaluator",
]


# =============================================================================
# Logic
# =============================================================================


def all_of_evaluator(
    context: EvaluatorContext,
    schema: Schema | None,
    schemas: Sequence[Schema],
    instance_type: InstanceType,
    negated: bool,
) -> Evaluator:
    """AND of the operands; negated, the OR of negated operands."""
    combine = disjunctive if negated else conjunctive
    combinator = combine(context, instance_type, schema, "allOf")
    for operand in schemas:
        combinator.append(operand.create_evaluator(context, instance_type, negated))
    return combinator


def any_of_evaluator(
    context: EvaluatorContext,
    schema: Schema | None,
    schemas: Sequence[Schema],
    instance_type: InstanceType,
    negated: bool,
) -> Evaluator:
    """OR of the operands; negated, the AND of negated operands."""
    combine = conjunctive if negated else disjunctive
    combinator = combine(context, instance_type, schema, "anyOf")
    for operand in schemas:
        combinator.append(operand.create_evaluator(context, instance_type, negated))
    return combinator


def one_of_evaluator(
    context: EvaluatorContext,
    schema: Schema | None,
    schemas: Sequence[Schema],
    instance_type: InstanceType,
    negated: bool,
) -> Evaluator:
    """Exactly one operand; negated, zero or at least two operands."""
    combine = not_exclusive if negated else exclusive
    combinator = combine(context, instance_type, schema, "oneOf")
    for operand in schemas:
        combinator.append(operand.create_evaluator(context, instance_type, False))
    return combinator


def not_evaluator(
    context: EvaluatorContext,
    subschema: Schema,
    instance_type: InstanceType,
    negated: bool,
) -> Evaluator:
    return subschema.create_evaluator(context, instance_type, not negated)


class ConditionalEvaluator(KeywordEvaluator):
    """
    ``if``/``then``/``else``.

    The condition runs silently next to both branches. Branch problems are
    buffered until the condition decides; the chosen branch's buffer is then
    flushed and the branch continues live, the other one is dropped.
    """

    def __init__(
        self,
        context: EvaluatorContext,
        schema: Schema | None,
        condition: Evaluator,
        then: Evaluator,
        otherwise: Evaluator,
    ) -> None:
        super().__init__(context, schema, "if")
        self._condition: Evaluator | None = condition
        self._discarded = DeferredProblems()
        self._branches: dict[bool, tuple[Evaluator, DeferredProblems]] = {
            True: (then, DeferredProblems()),
            False: (otherwise, DeferredProblems()),
        }
        self._verdicts: dict[bool, Result] = {}
        self._chosen: bool | None = None

    def evaluate(self, event: Event, depth: int, dispatcher: ProblemDispatcher) -> Result:
        if self._chosen is None:
            outcome = self._condition.evaluate(event, depth, self._discarded)
            for matched, (branch, problems) in self._branches.items():
                if matched not in self._verdicts:
                    result = branch.evaluate(event, depth, problems)
                    if result is not Result.PENDING:
                        self._verdicts[matched] = result
            if outcome is Result.PENDING:
                return Result.PENDING
            self._chosen = outcome is Result.TRUE
            self._condition = None
            self._branches[self._chosen][1].flush_to(dispatcher)
            return self._verdicts.get(self._chosen, Result.PENDING)

        branch, _problems = self._branches[self._chosen]
        return branch.evaluate(event, depth, dispatcher)


def conditional_evaluator(
    context: EvaluatorContext,
    schema: Schema | None,
    condition: Schema,
    then: Schema | None,
    otherwise: Schema | None,
    instance_type: InstanceType,
    negated: bool,
) -> Evaluator:
    """
    Negated, the branches are negated too: the instance fails when it
    satisfies the chosen branch. A missing branch always holds, so its
    negation always fails.
    """

    def branch(subschema: Schema | None, keyword: str) -> Evaluator:
        if subschema is None:
            if negated:
                return context.always_false(schema, "instance.problem.not.keyword", keyword=keyword)
            return ALWAYS_TRUE
        return subschema.create_evaluator(context, instance_type, negated)

    return ConditionalEvaluator(
        context,
        schema,
        condition.create_evaluator(context, instance_type, False),
        branch(then, "then"),
        branch(otherwise, "else"),
    )


# =============================================================================
# Arrays
# =============================================================================


def items_evaluator(
    context: EvaluatorContext, schema: Schema | None, item_schema: Schema, negated: bool
) -> Evaluator:
    """Every item against one schema; negated, some item fails it."""

    def factory(instance_type: InstanceType, index: int, key: str | None) -> Evaluator:
        return item_schema.create_evaluator(context, instance_type, negated)

    return children(context, schema, "items", factory, negated)


def tuple_items_evaluator(
    context: EvaluatorContext, schema: Schema | None, schemas: Sequence[Schema], negated: bool
) -> Evaluator:
    """Items against the schema at their position; extra items are ignored."""

    def factory(instance_type: InstanceType, index: int, key: str | None) -> Evaluator | None:
        if index >= len(schemas):
            return None
        return schemas[index].create_evaluator(context, instance_type, negated)

    return children(context, schema, "items", factory, negated)


def additional_items_evaluator(
    context: EvaluatorContext,
    schema: Schema | None,
    additional: Schema,
    positional: int,
    negated: bool,
) -> Evaluator:
    """Items past the ``positional`` tuple schemas."""

    def factory(instance_type: InstanceType, index: int, key: str | None) -> Evaluator | None:
        if index < positional:
            return None
        return additional.create_evaluator(context, instance_type, negated)

    return children(context, schema, "additionalItems", factory, negated)


class ContainsEvaluator(ChildrenEvaluator):
    """
    Counts items valid against the ``contains`` subschema and checks the
    count against ``[lower, upper]``; ``upper`` None means unbounded.

    An exceeded upper bound fails as soon as it happens and a reached lower
    bound without upper bound passes as soon as it happens. Negated, the
    count must fall outside the bounds.

    Item problems are never reported; problems point at the array.
    """

    def __init__(
        self,
        context: EvaluatorContext,
        schema: Schema | None,
        item_schema: Schema,
        lower: int,
        upper: int | None,
        negated: bool,
        *,
        explicit_lower: bool = False,
    ) -> None:
        super().__init__(context, schema, "contains", self._create_item)
        self._item_schema = item_schema
        self._lower = lower
        self._upper = upper
        self._negated = negated
        self._explicit_lower = explicit_lower
        self._count = 0
        self._pointer: str | None = None

    def _create_item(self, instance_type: InstanceType, index: int, key: str | None) -> Evaluator:
        return self._item_schema.create_evaluator(self.context, instance_type, False)

    def evaluate(self, event: Event, depth: int, dispatcher: ProblemDispatcher) -> Result:
        if depth == 0 and event not in END_EVENTS:
            self._pointer = self.context.pointer
        return super().evaluate(event, depth, dispatcher)

    def child_dispatcher(self, dispatcher: ProblemDispatcher) -> ProblemDispatcher:
        return DeferredProblems()

    @property
    def _plain(self) -> bool:
        return self._upper is None and not self._explicit_lower

    def child_finished(
        self, result: Result, child_dispatcher: ProblemDispatcher, dispatcher: ProblemDispatcher
    ) -> Result:
        if result is not Result.TRUE:
            return Result.PENDING
        self._count += 1
        count = self._count
        if self._upper is not None and count > self._upper:
            if self._negated:
                return Result.TRUE
            return self._report(dispatcher, self._bound_problem("maxContains", self._upper))
        if self._upper is None and count >= self._lower:
            if not self._negated:
                return Result.TRUE
            if self._plain:
                return self._report(dispatcher, self._builder("instance.problem.not.contains"))
            return self._report(dispatcher, self._bound_problem("maxContains", self._lower - 1))
        return Result.PENDING

    def conclude(self, dispatcher: ProblemDispatcher) -> Result:
        below = self._count < self._lower
        if not self._negated:
            if not below:
                return Result.TRUE
            if not self._explicit_lower:
                return self._report(dispatcher, self._builder("instance.problem.contains"))
            return self._report(dispatcher, self._bound_problem("minContains", self._lower))
        if below or self._upper is None:
            return Result.TRUE
        # Inside the bounds: explain both ways out
        escapes = []
        if self._lower > 0:
            escapes.append([self._bound_problem("maxContains", self._lower - 1).build()])
        escapes.append([self._bound_problem("minContains", self._upper + 1).build()])
        if len(escapes) == 1:
            dispatcher.dispatch(escapes[0][0])
            return Result.FALSE
        return self._report(dispatcher, self._builder("instance.problem.anyOf").with_branches(escapes))

    def _builder(self, message: str, **params: Any) -> ProblemBuilder:
        return self.problem(message, **params).with_pointer(self._pointer)

    def _bound_problem(self, keyword: str, limit: int) -> ProblemBuilder:
        return self._builder(f"instance.problem.{keyword}", limit=limit, actual=self._count).with_keyword(keyword)

    def _report(self, dispatcher: ProblemDispatcher, builder: ProblemBuilder) -> Result:
        dispatcher.dispatch(builder.build())
        return Result.FALSE


def contains_evaluator(
    context: EvaluatorContext,
    schema: Schema | None,
    item_schema: Schema,
    min_contains: int | None,
    max_contains: int | None,
    negated: bool,
) -> Evaluator:
    """
    ``contains`` together with its ``minContains``/``maxContains`` siblings.

    Without ``minContains`` the lower bound is one. A lower bound of zero
    without upper bound always holds.
    """
    lower = 1 if min_contains is None else min_contains
    if lower == 0 and max_contains is None:
        if negated:
            return context.always_false(schema, "instance.problem.not.keyword", keyword="minContains")
        return ALWAYS_TRUE
    return ContainsEvaluator(
        context,
        schema,
        item_schema,
        lower,
        max_contains,
        negated,
        explicit_lower=min_contains is not None,
    )


# =============================================================================
# Objects
# =============================================================================


def properties_evaluator(
    context: EvaluatorContext, schema: Schema | None, schemas: Mapping[str, Schema], negated: bool
) -> Evaluator:
    def factory(instance_type: InstanceType, index: int, key: str | None) -> Evaluator | None:
        subschema = schemas.get(key)
        if subschema is None:
            return None
        return subschema.create_evaluator(context, instance_type, negated)

    return children(context, schema, "properties", factory, negated)


def _all_of(
    context: EvaluatorContext,
    schemas: Sequence[Schema],
    instance_type: InstanceType,
    negated: bool,
) -> Evaluator | None:
    if not schemas:
        return None
    if len(schemas) == 1:
        return schemas[0].create_evaluator(context, instance_type, negated)
    combine = disjunctive if negated else conjunctive
    combinator = combine(context, instance_type)
    for subschema in schemas:
        combinator.append(subschema.create_evaluator(context, instance_type, negated))
    return combinator


def pattern_properties_evaluator(
    context: EvaluatorContext,
    schema: Schema | None,
    matching: Callable[[str], list[Schema]],
    negated: bool,
) -> Evaluator:
    """A property value must be valid against every schema whose pattern matches its name."""

    def factory(instance_type: InstanceType, index: int, key: str | None) -> Evaluator | None:
        return _all_of(context, matching(key), instance_type, negated)

    return children(context, schema, "patternProperties", factory, negated)


def additional_properties_evaluator(
    context: EvaluatorContext,
    schema: Schema | None,
    additional: Schema,
    is_declared: Callable[[str], bool],
    negated: bool,
) -> Evaluator:
    """Properties not declared by ``properties`` or ``patternProperties``."""

    def factory(instance_type: InstanceType, index: int, key: str | None) -> Evaluator | None:
        if is_declared(key):
            return None
        return additional.create_evaluator(context, instance_type, negated)

    return children(context, schema, "additionalProperties", factory, negated)


class PropertyNamesEvaluator(KeywordEvaluator):
    """
    Validates every property name as a string instance.

    Negated, passes at the first name failing the subschema.
    """

    def __init__(self, context: EvaluatorContext, schema: Schema | None, name_schema: Schema, negated: bool) -> None:
        super().__init__(context, schema, "propertyNames")
        self._name_schema = name_schema
        self._negated = negated
        self._failed = False
        self._failures: list[DeferredProblems] = []

    def evaluate(self, event: Event, depth: int, dispatcher: ProblemDispatcher) -> Result:
        if depth == 1 and event is Event.KEY_NAME:
            evaluator = self._name_schema.create_evaluator(self.context, InstanceType.STRING, self._negated)
            problems = DeferredProblems() if self._negated else dispatcher
            result = evaluator.evaluate(Event.VALUE_STRING, 0, problems)
            if result is Result.TRUE and self._negated:
                return Result.TRUE
            if result is Result.FALSE:
                self._failed = True
                if self._negated:
                    self._failures.append(problems)
        elif depth == 0 and event in END_EVENTS:
            if not self._negated:
                return Result.of(not self._failed)
            if not self._failures:
                return self.fail(dispatcher, "instance.problem.not.keyword", keyword=self.keyword)
            return report_failures(self, self._failures, dispatcher)
        return Result.PENDING


def property_names_evaluator(
    context: EvaluatorContext, schema: Schema | None, name_schema: Schema, negated: bool
) -> Evaluator:
    return PropertyNamesEvaluator(context, schema, name_schema, negated)


class SchemaDependencyEvaluator(KeywordEvaluator):
    """
    Validates the object against a subschema when ``property`` is present.

    The subschema runs from the start of the object since the trigger may
    come last. Its problems are buffered until the trigger key appears;
    then they are flushed and the subschema continues live. Without the
    trigger the dependency holds, or, negated, fails.
    """

    def __init__(
        self,
        context: EvaluatorContext,
        schema: Schema | None,
        property_name: str,
        evaluator: Evaluator,
        negated: bool,
    ) -> None:
        super().__init__(context, schema, "dependencies")
        self._property = property_name
        self._evaluator = evaluator
        self._negated = negated
        self._buffer = DeferredProblems()
        self._triggered = False
        self._result = Result.PENDING

    def evaluate(self, event: Event, depth: int, dispatcher: ProblemDispatcher) -> Result:
        if not self._triggered and depth == 1 and event is Event.KEY_NAME:
            if self.context.parser.string == self._property:
                self._triggered = True
                self._buffer.flush_to(dispatcher)
        if self._result is Result.PENDING:
            target = dispatcher if self._triggered else self._buffer
            self._result = self._evaluator.evaluate(event, depth, target)
        if self._triggered and self._result is not Result.PENDING:
            return self._result
        if depth == 0 and event in END_EVENTS:
            if not self._negated:
                return Result.TRUE
            return self.fail(dispatcher, "instance.problem.required", missing=[self._property])
        return Result.PENDING


class _ForbiddenPropertyEvaluator(KeywordEvaluator):
    """A ``false`` dependency: the trigger may not appear. Negated, it must."""

    def __init__(self, context: EvaluatorContext, schema: Schema | None, property_name: str, negated: bool) -> None:
        super().__init__(context, schema, "dependencies")
        self._property = property_name
        self._negated = negated

    def evaluate(self, event: Event, depth: int, dispatcher: ProblemDispatcher) -> Result:
        if depth == 1 and event is Event.KEY_NAME and self.context.parser.string == self._property:
            if self._negated:
                return Result.TRUE
            return self.fail(dispatcher, "instance.problem.not.property", property=self._property)
        if depth == 0 and event in END_EVENTS:
            if not self._negated:
                return Result.TRUE
            return self.fail(dispatcher, "instance.problem.required", missing=[self._property])
        return Result.PENDING


class PropertyDependencyEvaluator(KeywordEvaluator):
    """
    Property-list dependency: when ``property`` is present, so must be
    every listed name.

    Negated, fails when the trigger is absent or every listed name is
    present.
    """

    def __init__(
        self,
        context: EvaluatorContext,
        schema: Schema | None,
        property_name: str,
        names: tuple[str, ...],
        negated: bool,
    ) -> None:
        super().__init__(context, schema, "dependencies")
        self._property = property_name
        self._names = names
        self._negated = negated
        self._seen: set[str] = set()

    def evaluate(self, event: Event, depth: int, dispatcher: ProblemDispatcher) -> Result:
        if depth == 1 and event is Event.KEY_NAME:
            self._seen.add(self.context.parser.string)
            return Result.PENDING
        if not (depth == 0 and event in END_EVENTS):
            return Result.PENDING
        triggered = self._property in self._seen
        missing = [name for name in self._names if name not in self._seen]
        if not self._negated:
            if triggered and missing:
                return self.fail(dispatcher, "instance.problem.required", missing=missing)
            return Result.TRUE
        if not triggered:
            return self.fail(dispatcher, "instance.problem.required", missing=[self._property])
        if not missing:
            return self.fail(dispatcher, "instance.problem.not.required", required=list(self._names))
        return Result.TRUE


def _dependency(
    context: EvaluatorContext,
    schema: Schema | None,
    property_name: str,
    dependency: Schema | tuple[str, ...],
    negated: bool,
) -> Evaluator:
    if isinstance(dependency, tuple):
        if dependency:
            return PropertyDependencyEvaluator(context, schema, property_name, dependency, negated)
        trivial = True
    else:
        trivial = dependency.is_trivially_true
        if dependency.is_trivially_false:
            return _ForbiddenPropertyEvaluator(context, schema, property_name, negated)
    if trivial:
        if negated:
            return context.always_false(
                schema, "instance.problem.not.dependencies", keyword="dependencies", property=property_name
            )
        return ALWAYS_TRUE
    evaluator = dependency.create_evaluator(context, InstanceType.OBJECT, negated)
    return SchemaDependencyEvaluator(context, schema, property_name, evaluator, negated)


def dependencies_evaluator(
    context: EvaluatorContext,
    schema: Schema | None,
    dependencies: Mapping[str, Schema | tuple[str, ...]],
    negated: bool,
) -> Evaluator:
    """All dependencies must hold; negated, one of them must fail."""
    evaluators = [
        _dependency(context, schema, name, dependency, negated) for name, dependency in dependencies.items()
    ]
    if len(evaluators) == 1:
        return evaluators[0]
    combine = disjunctive if negated else conjunctive
    return combine(context, InstanceType.OBJECT, schema, "dependencies").extend(evaluators)
