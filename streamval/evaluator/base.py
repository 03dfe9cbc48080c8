"""
Evaluator core.

Every keyword is validated by a short-lived state machine, an
:class:`Evaluator`, fed one parse event at a time::

    evaluate(event, depth, dispatcher) -> Result

``depth`` is relative to the evaluator's own value: the value's opening
and closing events arrive at depth 0, events of its direct children at
depth 1, and so on. A scalar value is a single event at depth 0.

An evaluator answers ``PENDING`` until it knows its verdict, and may answer
``TRUE`` or ``FALSE`` before its value closes. It is not called again after
that; combinators keep forwarding events to the remaining siblings.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..parser.events import Event, InstanceType, Location
from ..pointer import PointerTracker
from ..problem.dispatcher import ProblemDispatcher
from ..problem.problem import Problem, ProblemBuilder

if TYPE_CHECKING:
    from ..parser.tokenizer import JsonEventParser
    from ..schema.schema import Schema

__all__ = [
    "Result",
    "InstanceType",
    "Evaluator",
    "ALWAYS_TRUE",
    "AlwaysFalseEvaluator",
    "EvaluatorContext",
    "KeywordEvaluator",
]


class Result(Enum):
    """Verdict of an evaluator after an event."""

    PENDING = "pending"
    TRUE = "true"
    FALSE = "false"

    @classmethod
    def of(cls, passed: bool) -> Result:
        return cls.TRUE if passed else cls.FALSE


class Evaluator(ABC):
    """A single-use state machine validating one value."""

    @abstractmethod
    def evaluate(self, event: Event, depth: int, dispatcher: ProblemDispatcher) -> Result:
        """Consume one event and report the verdict so far."""


class _AlwaysTrueEvaluator(Evaluator):
    def evaluate(self, event: Event, depth: int, dispatcher: ProblemDispatcher) -> Result:
        return Result.TRUE

    def __repr__(self) -> str:
        return "ALWAYS_TRUE"


# Shared, stateless: skipped when appended to combinators
ALWAYS_TRUE: Evaluator = _AlwaysTrueEvaluator()


class EvaluatorContext:
    """
    State shared by every evaluator of one validation run.

    Parameters
    ----------
    parser : JsonEventParser
        Source of the current event's value and location.
    pointer : PointerTracker, optional
        Tracks the JSON Pointer of the current instance value.
    """

    def __init__(self, parser: JsonEventParser, pointer: PointerTracker | None = None) -> None:
        self.parser = parser
        self.tracker = pointer if pointer is not None else PointerTracker()

    @property
    def location(self) -> Location | None:
        return self.parser.location

    @property
    def pointer(self) -> str:
        return self.tracker.pointer

    def builder(self) -> ProblemBuilder:
        """Problem builder positioned at the current event."""
        return ProblemBuilder(self.location, self.pointer)

    def always_true(self) -> Evaluator:
        return ALWAYS_TRUE

    def always_false(
        self,
        schema: Schema | None,
        message: str = "instance.problem.not",
        *,
        keyword: str | None = None,
        resolvable: bool = True,
        **params: Any,
    ) -> Evaluator:
        """Evaluator failing on its first event with a fixed problem."""
        return AlwaysFalseEvaluator(
            self, schema, message, keyword=keyword, resolvable=resolvable, **params
        )


class KeywordEvaluator(Evaluator):
    """Base of evaluators belonging to one keyword of one schema."""

    def __init__(self, context: EvaluatorContext, schema: Schema | None, keyword: str | None) -> None:
        self.context = context
        self.schema = schema
        self.keyword = keyword

    def problem(self, message: str, **params: Any) -> ProblemBuilder:
        return (
            self.context.builder()
            .with_schema(self.schema)
            .with_keyword(self.keyword)
            .with_message(message, **params)
        )

    def fail(self, dispatcher: ProblemDispatcher, message: str, **params: Any) -> Result:
        dispatcher.dispatch(self.problem(message, **params).build())
        return Result.FALSE


class AlwaysFalseEvaluator(KeywordEvaluator):
    """Fails on the first event it receives."""

    def __init__(
        self,
        context: EvaluatorContext,
        schema: Schema | None,
        message: str,
        *,
        keyword: str | None = None,
        resolvable: bool = True,
        **params: Any,
    ) -> None:
        super().__init__(context, schema, keyword)
        self._message = message
        self._resolvable = resolvable
        self._params = params

    def evaluate(self, event: Event, depth: int, dispatcher: ProblemDispatcher) -> Result:
        problem: Problem = (
            self.problem(self._message, **self._params)
            .with_resolvability(self._resolvable)
            .build()
        )
        dispatcher.dispatch(problem)
        return Result.FALSE
