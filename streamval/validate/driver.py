"""Event loop feeding one instance through a schema's evaluator tree."""

from __future__ import annotations

from ..evaluator.base import Evaluator, EvaluatorContext, Result
from ..parser.events import END_EVENTS, START_EVENTS, Event, instance_type_of
from ..parser.tokenizer import JsonEventParser
from ..problem.dispatcher import ProblemDispatcher
from ..schema.schema import Schema

__all__ = ["ValidationRun"]


class ValidationRun:
    """
    A single validation run.

    The root evaluator is created on the first event, once the instance
    type is known. Every event then updates the instance pointer and is
    evaluated at its depth below the root: opening events at the depth of
    the structure they open, closing events likewise. After the verdict
    further events are ignored.
    """

    def __init__(
        self,
        schema: Schema,
        parser: JsonEventParser,
        dispatcher: ProblemDispatcher,
        negated: bool = False,
    ) -> None:
        self._schema = schema
        self._dispatcher = dispatcher
        self._negated = negated
        self.context = EvaluatorContext(parser)
        self._evaluator: Evaluator | None = None
        self._depth = 0
        self.result = Result.PENDING

    @property
    def done(self) -> bool:
        return self.result is not Result.PENDING

    def step(self, event: Event) -> Result:
        """Evaluate one event; return the verdict so far."""
        if self.done:
            return self.result
        context = self.context
        context.tracker.update(event, context.parser)
        if self._evaluator is None:
            instance_type = instance_type_of(event, context.parser)
            self._evaluator = self._schema.create_evaluator(context, instance_type, self._negated)
        if event in END_EVENTS:
            self._depth -= 1
        self.result = self._evaluator.evaluate(event, self._depth, self._dispatcher)
        if event in START_EVENTS:
            self._depth += 1
        return self.result
