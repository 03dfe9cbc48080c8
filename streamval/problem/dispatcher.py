"""
Problem dispatch.

Evaluators never raise instance problems; they hand them to a dispatcher.
Two shapes exist: live dispatchers that forward every problem immediately,
and :class:`DeferredProblems`, an append-only buffer for a subtree whose
relevance is not known yet (an ``anyOf`` branch still in the running, a
``dependencies`` subschema whose trigger property has not appeared).
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Protocol, runtime_checkable

from ..exceptions import StateError
from .problem import Problem

__all__ = [
    "ProblemDispatcher",
    "CallbackDispatcher",
    "CollectingDispatcher",
    "DeferredProblems",
]


@runtime_checkable
class ProblemDispatcher(Protocol):
    """Anything that accepts problems."""

    def dispatch(self, problem: Problem) -> None: ...


class CallbackDispatcher:
    """Live dispatcher forwarding each problem to a callback."""

    def __init__(self, callback: Callable[[Problem], None]) -> None:
        self._callback = callback

    def dispatch(self, problem: Problem) -> None:
        self._callback(problem)


class CollectingDispatcher:
    """Live dispatcher keeping problems in a list, optionally forwarding them."""

    def __init__(
        self,
        forward: Callable[[Problem], None] | None = None,
        limit: int | None = None,
    ) -> None:
        self.problems: list[Problem] = []
        self._forward = forward
        self._limit = limit

    def dispatch(self, problem: Problem) -> None:
        if self._limit is None or len(self.problems) < self._limit:
            self.problems.append(problem)
        if self._forward is not None:
            self._forward(problem)


class DeferredProblems:
    """
    Append-only problem buffer with a single-use flush.

    Problems keep their insertion order. The buffer is either replayed in
    full to a live dispatcher exactly once with :meth:`flush_to`, or simply
    dropped. Once flushed it accepts no further problems.
    """

    __slots__ = ("_problems", "_flushed")

    def __init__(self) -> None:
        self._problems: list[Problem] = []
        self._flushed = False

    def dispatch(self, problem: Problem) -> None:
        if self._flushed:
            raise StateError(
                "Cannot add problems to a flushed buffer",
                code="ALREADY_FLUSHED",
            )
        self._problems.append(problem)

    def flush_to(self, dispatcher: ProblemDispatcher) -> None:
        """Replay every buffered problem to ``dispatcher``, in order."""
        if self._flushed:
            raise StateError(
                "Deferred problems were already flushed",
                code="ALREADY_FLUSHED",
            )
        self._flushed = True
        for problem in self._problems:
            dispatcher.dispatch(problem)

    @property
    def problems(self) -> tuple[Problem, ...]:
        return tuple(self._problems)

    @property
    def flushed(self) -> bool:
        return self._flushed

    def __len__(self) -> int:
        return len(self._problems)

    def __iter__(self) -> Iterator[Problem]:
        return iter(self._problems)
