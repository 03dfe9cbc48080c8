"""
Streaming evaluation engine.

Evaluators are per-run state machines consuming parse events; combinators
aggregate them under AND/OR/XOR/NOT semantics.
"""

from .base import (
    ALWAYS_TRUE,
    AlwaysFalseEvaluator,
    Evaluator,
    EvaluatorContext,
    InstanceType,
    KeywordEvaluator,
    Result,
)
from .children import (
    ChildFactory,
    ChildrenEvaluator,
    ConjunctiveChildrenEvaluator,
    DisjunctiveChildrenEvaluator,
    children,
)
from .logical import (
    ConjunctiveEvaluator,
    DisjunctiveEvaluator,
    ExclusiveEvaluator,
    LogicalEvaluator,
    NotExclusiveEvaluator,
    SimpleConjunctiveEvaluator,
    SimpleDisjunctiveEvaluator,
    SimpleExclusiveEvaluator,
    SimpleNotExclusiveEvaluator,
    conjunctive,
    disjunctive,
    exclusive,
    not_exclusive,
    report_failures,
)

__all__ = [
    # Core
    "Result",
    "InstanceType",
    "Evaluator",
    "EvaluatorContext",
    "KeywordEvaluator",
    "ALWAYS_TRUE",
    "AlwaysFalseEvaluator",
    # Combinators
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
    # Children
    "ChildFactory",
    "ChildrenEvaluator",
    "ConjunctiveChildrenEvaluator",
    "DisjunctiveChildrenEvaluator",
    "children",
]
