"""
Combinators over array items and object properties.

These evaluators validate a structure by creating one child evaluator per
item or property value, on the child's first event, and feeding it the
child's events with the depth shifted by one. A child that reaches its
verdict early is dropped; its remaining events are skipped.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..parser.events import END_EVENTS, Event, InstanceType, instance_type_of, is_value_start
from ..problem.dispatcher import DeferredProblems, ProblemDispatcher
from .base import Evaluator, EvaluatorContext, KeywordEvaluator, Result
from .logical import report_failures

if TYPE_CHECKING:
    from ..schema.schema import Schema

__all__ = [
    "ChildFactory",
    "ChildrenEvaluator",
    "ConjunctiveChildrenEvaluator",
    "DisjunctiveChildrenEvaluator",
    "children",
]

#: Creates the evaluator of one child from its instance type, its position
#: and, for object properties, its name. Returns None to skip the child.
ChildFactory = Callable[[InstanceType, int, "str | None"], "Evaluator | None"]


class ChildrenEvaluator(KeywordEvaluator):
    """Base of evaluators driving one child evaluator per item or property."""

    def __init__(
        self,
        context: EvaluatorContext,
        schema: Schema | None,
        keyword: str | None,
        factory: ChildFactory,
    ) -> None:
        super().__init__(context, schema, keyword)
        self._factory = factory
        self._index = -1
        self._key: str | None = None
        self._child: Evaluator | None = None
        self._child_dispatcher: ProblemDispatcher | None = None

    def evaluate(self, event: Event, depth: int, dispatcher: ProblemDispatcher) -> Result:
        if depth == 0:
            if event in END_EVENTS:
                return self.conclude(dispatcher)
            return Result.PENDING

        if depth == 1:
            if event is Event.KEY_NAME:
                self._key = self.context.parser.string
                return Result.PENDING
            if is_value_start(event):
                self._index += 1
                instance_type = instance_type_of(event, self.context.parser)
                self._child = self._factory(instance_type, self._index, self._key)
                if self._child is not None:
                    self._child_dispatcher = self.child_dispatcher(dispatcher)

        child = self._child
        if child is None:
            return Result.PENDING
        result = child.evaluate(event, depth - 1, self._child_dispatcher)
        if result is Result.PENDING:
            return Result.PENDING
        self._child = None
        return self.child_finished(result, self._child_dispatcher, dispatcher)

    def child_dispatcher(self, dispatcher: ProblemDispatcher) -> ProblemDispatcher:
        """Dispatcher handed to a new child."""
        return dispatcher

    def child_finished(
        self, result: Result, child_dispatcher: ProblemDispatcher, dispatcher: ProblemDispatcher
    ) -> Result:
        """Called once per child verdict. May answer early."""
        return Result.PENDING

    @abstractmethod
    def conclude(self, dispatcher: ProblemDispatcher) -> Result:
        """Called at the closing event of the structure."""


class ConjunctiveChildrenEvaluator(ChildrenEvaluator):
    """Every child must pass. Children report straight to the caller."""

    def __init__(
        self,
        context: EvaluatorContext,
        schema: Schema | None,
        keyword: str | None,
        factory: ChildFactory,
    ) -> None:
        super().__init__(context, schema, keyword, factory)
        self._failed = False

    def child_finished(
        self, result: Result, child_dispatcher: ProblemDispatcher, dispatcher: ProblemDispatcher
    ) -> Result:
        if result is Result.FALSE:
            self._failed = True
        return Result.PENDING

    def conclude(self, dispatcher: ProblemDispatcher) -> Result:
        return Result.of(not self._failed)


class DisjunctiveChildrenEvaluator(ChildrenEvaluator):
    """
    At least one child must pass.

    Used for negated item and property keywords: the negation of "every
    item is valid" is "some item is invalid". Child problems are buffered
    and only reported when no child passes.
    """

    def __init__(
        self,
        context: EvaluatorContext,
        schema: Schema | None,
        keyword: str | None,
        factory: ChildFactory,
    ) -> None:
        super().__init__(context, schema, keyword, factory)
        self._failures: list[DeferredProblems] = []

    def child_dispatcher(self, dispatcher: ProblemDispatcher) -> ProblemDispatcher:
        return DeferredProblems()

    def child_finished(
        self, result: Result, child_dispatcher: ProblemDispatcher, dispatcher: ProblemDispatcher
    ) -> Result:
        if result is Result.TRUE:
            return Result.TRUE
        assert isinstance(child_dispatcher, DeferredProblems)
        self._failures.append(child_dispatcher)
        return Result.PENDING

    def conclude(self, dispatcher: ProblemDispatcher) -> Result:
        if not self._failures:
            return self.fail(dispatcher, "instance.problem.not.keyword", keyword=self.keyword)
        return report_failures(self, self._failures, dispatcher)


def children(
    context: EvaluatorContext,
    schema: Schema | None,
    keyword: str,
    factory: ChildFactory,
    negated: bool = False,
) -> ChildrenEvaluator:
    """Conjunctive children evaluator, or its disjunctive dual when negated."""
    if negated:
        return DisjunctiveChildrenEvaluator(context, schema, keyword, factory)
    return ConjunctiveChildrenEvaluator(context, schema, keyword, factory)
