"""
Logical combinators.

Combinators aggregate operand evaluators that all validate the same value:

- conjunctive (AND): every operand must pass. All operands are driven to
  their verdict so that every failure is reported.
- disjunctive (OR): one passing operand is enough. Operand problems are
  buffered and reported as branches of one composite problem only if
  every operand fails.
- exclusive (XOR, ``oneOf``): exactly one operand must pass.
- not-exclusive: the dual of exclusive, zero or at least two must pass.

Negation is compositional: NOT(AND) is the OR of negated operands, NOT(OR)
the AND of negated operands, NOT(XOR) is not-exclusive over the original
operands.

Each kind has a structural variant for objects and arrays, concluding at
the closing event of the value, and a simple variant for scalars,
concluding on the single event it receives.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..parser.events import END_EVENTS, Event, InstanceType
from ..problem.dispatcher import DeferredProblems, ProblemDispatcher
from .base import ALWAYS_TRUE, Evaluator, EvaluatorContext, KeywordEvaluator, Result

if TYPE_CHECKING:
    from ..schema.schema import Schema

__all__ = [
    "LogicalEvaluator",
    "ConjunctiveEvaluator",
    "DisjunctiveEvaluator",
    "ExclusiveEvaluator",
    "NotExclusiveEvaluator",
    "SimpleConjunctiveEvaluator",
    "SimpleDisjunctiveEvaluator",
    "SimpleExclusiveEvaluator",
    "SimpleNotExclusiveEvaluator",
    "conjunctive",
    "disjunctive",
    "exclusive",
    "not_exclusive",
    "report_failures",
]

_STRUCTURED = frozenset({InstanceType.OBJECT, InstanceType.ARRAY})


class _Operand:
    __slots__ = ("index", "evaluator", "problems")

    def __init__(self, index: int, evaluator: Evaluator) -> None:
        self.index = index
        self.evaluator = evaluator
        self.problems = DeferredProblems()


class LogicalEvaluator(KeywordEvaluator):
    """Base of all combinators."""

    def __init__(self, context: EvaluatorContext, schema: Schema | None = None, keyword: str | None = None) -> None:
        super().__init__(context, schema, keyword)
        self._operands: list[_Operand] = []
        self._appended = 0

    def append(self, evaluator: Evaluator) -> None:
        self._operands.append(_Operand(self._appended, evaluator))
        self._appended += 1

    def extend(self, evaluators: list[Evaluator]) -> LogicalEvaluator:
        for evaluator in evaluators:
            self.append(evaluator)
        return self

    def _concludes(self, event: Event, depth: int) -> bool:
        return depth == 0 and event in END_EVENTS

    def _drive(self, event: Event, depth: int, dispatcher: ProblemDispatcher | None) -> list[tuple[_Operand, Result]]:
        """Feed pending operands; return those that reached a verdict."""
        remaining: list[_Operand] = []
        finished: list[tuple[_Operand, Result]] = []
        for operand in self._operands:
            target = dispatcher if dispatcher is not None else operand.problems
            result = operand.evaluator.evaluate(event, depth, target)
            if result is Result.PENDING:
                remaining.append(operand)
            else:
                finished.append((operand, result))
        self._operands = remaining
        return finished

    def _done(self, event: Event, depth: int) -> bool:
        return not self._operands or self._concludes(event, depth)


# =============================================================================
# Conjunction
# =============================================================================


class ConjunctiveEvaluator(LogicalEvaluator):
    """AND over operands. Operands dispatch straight to the caller."""

    def __init__(self, context: EvaluatorContext, schema: Schema | None = None, keyword: str | None = None) -> None:
        super().__init__(context, schema, keyword)
        self._failed = False

    def append(self, evaluator: Evaluator) -> None:
        if evaluator is ALWAYS_TRUE:
            return
        super().append(evaluator)

    def evaluate(self, event: Event, depth: int, dispatcher: ProblemDispatcher) -> Result:
        for _operand, result in self._drive(event, depth, dispatcher):
            if result is Result.FALSE:
                self._failed = True
        if not self._done(event, depth):
            return Result.PENDING
        return Result.of(not self._failed)


class SimpleConjunctiveEvaluator(ConjunctiveEvaluator):
    """AND over operands validating a scalar."""

    def _concludes(self, event: Event, depth: int) -> bool:
        return True


# =============================================================================
# Disjunction
# =============================================================================


class DisjunctiveEvaluator(LogicalEvaluator):
    """OR over operands. Problems surface only if every operand fails."""

    def __init__(self, context: EvaluatorContext, schema: Schema | None = None, keyword: str | None = None) -> None:
        super().__init__(context, schema, keyword)
        self._failures: list[_Operand] = []

    def evaluate(self, event: Event, depth: int, dispatcher: ProblemDispatcher) -> Result:
        if self._appended == 0:
            return _nothing_to_satisfy(self, dispatcher)
        for operand, result in self._drive(event, depth, None):
            if result is Result.TRUE:
                return Result.TRUE
            self._failures.append(operand)
        if not self._done(event, depth):
            return Result.PENDING
        return report_failures(self, _in_order(self._failures), dispatcher)


class SimpleDisjunctiveEvaluator(DisjunctiveEvaluator):
    """OR over operands validating a scalar."""

    def _concludes(self, event: Event, depth: int) -> bool:
        return True


def report_failures(
    owner: KeywordEvaluator,
    buffers: list[DeferredProblems],
    dispatcher: ProblemDispatcher,
) -> Result:
    """
    Report failed alternatives.

    A single failed alternative is replayed as is; several become the
    branches of one composite problem, in operand order.
    """
    if len(buffers) == 1:
        buffers[0].flush_to(dispatcher)
    else:
        problem = (
            owner.problem("instance.problem.anyOf")
            .with_branches(buffer.problems for buffer in buffers)
            .build()
        )
        dispatcher.dispatch(problem)
    return Result.FALSE


def _in_order(failures: list[_Operand]) -> list[DeferredProblems]:
    return [operand.problems for operand in sorted(failures, key=lambda operand: operand.index)]


def _nothing_to_satisfy(owner: KeywordEvaluator, dispatcher: ProblemDispatcher) -> Result:
    problem = (
        owner.problem("instance.problem.empty", keyword=owner.keyword)
        .with_resolvability(False)
        .build()
    )
    dispatcher.dispatch(problem)
    return Result.FALSE


# =============================================================================
# Exclusive disjunction
# =============================================================================


class ExclusiveEvaluator(LogicalEvaluator):
    """Exactly one operand must pass."""

    def __init__(self, context: EvaluatorContext, schema: Schema | None = None, keyword: str | None = None) -> None:
        super().__init__(context, schema, keyword)
        self._failures: list[_Operand] = []
        self._matches: list[int] = []

    def evaluate(self, event: Event, depth: int, dispatcher: ProblemDispatcher) -> Result:
        if self._appended == 0:
            return _nothing_to_satisfy(self, dispatcher)
        for operand, result in self._drive(event, depth, None):
            if result is Result.TRUE:
                self._matches.append(operand.index)
            else:
                self._failures.append(operand)
        if not self._done(event, depth):
            return Result.PENDING
        if len(self._matches) == 1:
            return Result.TRUE
        if not self._matches:
            return report_failures(self, _in_order(self._failures), dispatcher)
        return self.fail(dispatcher, "instance.problem.oneOf.many", indices=sorted(self._matches))


class SimpleExclusiveEvaluator(ExclusiveEvaluator):
    """Exactly one operand must pass, validating a scalar."""

    def _concludes(self, event: Event, depth: int) -> bool:
        return True


class NotExclusiveEvaluator(LogicalEvaluator):
    """Zero, or at least two, operands must pass."""

    def __init__(self, context: EvaluatorContext, schema: Schema | None = None, keyword: str | None = None) -> None:
        super().__init__(context, schema, keyword)
        self._matches: list[int] = []

    def evaluate(self, event: Event, depth: int, dispatcher: ProblemDispatcher) -> Result:
        for operand, result in self._drive(event, depth, None):
            if result is Result.TRUE:
                self._matches.append(operand.index)
        if len(self._matches) >= 2:
            return Result.TRUE
        if not self._done(event, depth):
            return Result.PENDING
        if not self._matches:
            return Result.TRUE
        return self.fail(dispatcher, "instance.problem.not.oneOf", index=self._matches[0])


class SimpleNotExclusiveEvaluator(NotExclusiveEvaluator):
    """Zero, or at least two, operands must pass, validating a scalar."""

    def _concludes(self, event: Event, depth: int) -> bool:
        return True


# =============================================================================
# Factories
# =============================================================================


def conjunctive(
    context: EvaluatorContext,
    instance_type: InstanceType,
    schema: Schema | None = None,
    keyword: str | None = None,
) -> ConjunctiveEvaluator:
    if instance_type in _STRUCTURED:
        return ConjunctiveEvaluator(context, schema, keyword)
    return SimpleConjunctiveEvaluator(context, schema, keyword)


def disjunctive(
    context: EvaluatorContext,
    instance_type: InstanceType,
    schema: Schema | None = None,
    keyword: str | None = None,
) -> DisjunctiveEvaluator:
    if instance_type in _STRUCTURED:
        return DisjunctiveEvaluator(context, schema, keyword)
    return SimpleDisjunctiveEvaluator(context, schema, keyword)


def exclusive(
    context: EvaluatorContext,
    instance_type: InstanceType,
    schema: Schema | None = None,
    keyword: str | None = None,
) -> ExclusiveEvaluator:
    if instance_type in _STRUCTURED:
        return ExclusiveEvaluator(context, schema, keyword)
    return SimpleExclusiveEvaluator(context, schema, keyword)


def not_exclusive(
    context: EvaluatorContext,
    instance_type: InstanceType,
    schema: Schema | None = None,
    keyword: str | None = None,
) -> NotExclusiveEvaluator:
    if instance_type in _STRUCTURED:
        return NotExclusiveEvaluator(context, schema, keyword)
    return SimpleNotExclusiveEvaluator(context, schema, keyword)
