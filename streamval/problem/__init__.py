"""
Problem model.

Problems are immutable diagnostic records with optional nested branches.
They are produced by the schema reader (compile-time problems) and by
evaluators during validation (instance problems), and rendered by
:class:`ProblemPrinter`.
"""

from .dispatcher import (
    CallbackDispatcher,
    CollectingDispatcher,
    DeferredProblems,
    ProblemDispatcher,
)
from .messages import MESSAGES, render
from .printer import ProblemPrinter, format_problems
from .problem import Problem, ProblemBuilder

__all__ = [
    "Problem",
    "ProblemBuilder",
    "ProblemDispatcher",
    "CallbackDispatcher",
    "CollectingDispatcher",
    "DeferredProblems",
    "ProblemPrinter",
    "format_problems",
    "MESSAGES",
    "render",
]
