"""
Assertion evaluators.

Each factory returns the evaluator of one assertion keyword, or of its
negation. Negations are expressed through the dual assertion wherever one
exists: negated ``maximum: L`` is ``exclusiveMinimum: L``, negated
``maxItems: N`` is ``minItems: N+1``, and so on.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Sequence
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from ..evaluator.base import ALWAYS_TRUE, Evaluator, EvaluatorContext, KeywordEvaluator, Result
from ..parser.assembler import ValueAssembler
from ..parser.events import END_EVENTS, Event, InstanceType, is_value_start
from ..problem.dispatcher import ProblemDispatcher
from . import formats

if TYPE_CHECKING:
    from ..schema.schema import Schema

__all__ = [
    "json_equal",
    "type_evaluator",
    "enum_evaluator",
    "const_evaluator",
    "is_multiple",
    "multiple_of_evaluator",
    "bound_evaluator",
    "length_evaluator",
    "pattern_evaluator",
    "format_evaluator",
    "content_encoding_evaluator",
    "content_media_type_evaluator",
    "item_count_evaluator",
    "property_count_evaluator",
    "unique_items_evaluator",
    "required_evaluator",
]


def json_equal(left: Any, right: Any) -> bool:
    """
    JSON equality.

    Numbers compare by value regardless of spelling (``1 == 1.0``), but
    booleans never equal numbers.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, Decimal, float)) and isinstance(right, (int, Decimal, float)):
        return left == right
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(json_equal(a, b) for a, b in zip(left, right))
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(json_equal(left[k], right[k]) for k in left)
    if type(left) is not type(right):
        return False
    return left == right


# =============================================================================
# Scalar assertions
# =============================================================================


class _ScalarAssertion(KeywordEvaluator):
    """Decides on the single event of a scalar value."""

    def __init__(
        self,
        context: EvaluatorContext,
        schema: Schema | None,
        keyword: str,
        test: Callable[[Any], bool],
        message: str,
        read: Callable[[], Any],
        **params: Any,
    ) -> None:
        super().__init__(context, schema, keyword)
        self._test = test
        self._message = message
        self._read = read
        self._params = params

    def evaluate(self, event: Event, depth: int, dispatcher: ProblemDispatcher) -> Result:
        value = self._read()
        if self._test(value):
            return Result.TRUE
        return self.fail(dispatcher, self._message, actual=value, **self._params)


def type_evaluator(
    context: EvaluatorContext,
    schema: Schema | None,
    expected: tuple[InstanceType, ...],
    instance_type: InstanceType,
    negated: bool,
) -> Evaluator:
    """The instance type is known on creation, so the verdict is too."""
    matches = instance_type in expected or (
        instance_type is InstanceType.INTEGER and InstanceType.NUMBER in expected
    )
    if matches != negated:
        return ALWAYS_TRUE
    plural = len(expected) > 1
    names: str | list[str] = [t.value for t in expected] if plural else expected[0].value
    if negated:
        message = "instance.problem.not.type.plural" if plural else "instance.problem.not.type"
    else:
        message = "instance.problem.type.plural" if plural else "instance.problem.type"
    return context.always_false(
        schema, message, keyword="type", expected=names, actual=instance_type.value
    )


class _ValueEvaluator(KeywordEvaluator):
    """Assembles the whole value, then tests it."""

    def __init__(
        self,
        context: EvaluatorContext,
        schema: Schema | None,
        keyword: str,
        test: Callable[[Any], bool],
        message: str,
        **params: Any,
    ) -> None:
        super().__init__(context, schema, keyword)
        self._assembler = ValueAssembler()
        self._test = test
        self._message = message
        self._params = params

    def evaluate(self, event: Event, depth: int, dispatcher: ProblemDispatcher) -> Result:
        if not self._assembler.append(event, self.context.parser):
            return Result.PENDING
        if self._test(self._assembler.value):
            return Result.TRUE
        return self.fail(dispatcher, self._message, **self._params)


def enum_evaluator(
    context: EvaluatorContext, schema: Schema | None, values: Sequence[Any], negated: bool
) -> Evaluator:
    def test(value: Any) -> bool:
        return any(json_equal(value, candidate) for candidate in values) != negated

    message = "instance.problem.not.enum" if negated else "instance.problem.enum"
    return _ValueEvaluator(context, schema, "enum", test, message, expected=list(values))


def const_evaluator(context: EvaluatorContext, schema: Schema | None, expected: Any, negated: bool) -> Evaluator:
    def test(value: Any) -> bool:
        return json_equal(value, expected) != negated

    message = "instance.problem.not.const" if negated else "instance.problem.const"
    return _ValueEvaluator(context, schema, "const", test, message, expected=expected)


def _scaled(number: int | Decimal) -> tuple[int, int]:
    """Split a number into ``(mantissa, exponent)`` with ``number == mantissa * 10**exponent``."""
    if isinstance(number, int):
        return number, 0
    sign, digits, exponent = number.as_tuple()
    mantissa = int(Decimal((0, digits, 0)))
    return (-mantissa if sign else mantissa), exponent


def is_multiple(value: int | Decimal, factor: int | Decimal) -> bool:
    """
    Exact ``multipleOf`` test.

    Works on mantissas and exponents so the cost depends on the number of
    digits, never on the magnitude of an exponent (``1e100000000`` is cheap).
    """
    a, ea = _scaled(value)
    b, eb = _scaled(factor)
    if a == 0:
        return True
    b = abs(b)
    shift = ea - eb
    if shift >= 0:
        # a * 10**shift divisible by b
        return a * pow(10, shift, b) % b == 0
    # a divisible by b * 10**-shift, impossible once the divisor outgrows a
    if -shift * 3 >= abs(a).bit_length():
        return False
    return a % (b * 10**-shift) == 0


def multiple_of_evaluator(
    context: EvaluatorContext, schema: Schema | None, factor: int | Decimal, negated: bool
) -> Evaluator:
    def test(value: int | Decimal) -> bool:
        return is_multiple(value, factor) != negated

    message = "instance.problem.not.multipleOf" if negated else "instance.problem.multipleOf"
    return _ScalarAssertion(
        context, schema, "multipleOf", test, message, lambda: context.parser.number, factor=factor
    )


# keyword -> (comparison that must hold, keyword of the negation)
_BOUNDS: dict[str, tuple[Callable[[Any, Any], bool], str]] = {
    "maximum": (operator.le, "exclusiveMinimum"),
    "exclusiveMaximum": (operator.lt, "minimum"),
    "minimum": (operator.ge, "exclusiveMaximum"),
    "exclusiveMinimum": (operator.gt, "maximum"),
}


def bound_evaluator(
    context: EvaluatorContext,
    schema: Schema | None,
    keyword: str,
    limit: int | Decimal,
    negated: bool,
) -> Evaluator:
    """Numeric range check; a negated bound becomes the opposite bound."""
    if negated:
        keyword = _BOUNDS[keyword][1]
    compare = _BOUNDS[keyword][0]
    return _ScalarAssertion(
        context,
        schema,
        keyword,
        lambda value: compare(value, limit),
        f"instance.problem.{keyword}",
        lambda: context.parser.number,
        limit=limit,
    )


def length_evaluator(
    context: EvaluatorContext,
    schema: Schema | None,
    keyword: str,
    limit: int,
    negated: bool,
) -> Evaluator:
    """``maxLength``/``minLength`` counted in code points."""
    if negated:
        keyword, limit = ("minLength", limit + 1) if keyword == "maxLength" else ("maxLength", limit - 1)
        if limit < 0:
            return context.always_false(schema, "instance.problem.not.keyword", keyword="minLength")
    compare = operator.le if keyword == "maxLength" else operator.ge
    return _ScalarAssertion(
        context,
        schema,
        keyword,
        lambda length: compare(length, limit),
        f"instance.problem.{keyword}",
        lambda: len(context.parser.string),
        limit=limit,
    )


def pattern_evaluator(
    context: EvaluatorContext, schema: Schema | None, pattern: str, regex: Any, negated: bool
) -> Evaluator:
    def test(value: str) -> bool:
        return (regex.search(value) is not None) != negated

    message = "instance.problem.not.pattern" if negated else "instance.problem.pattern"
    return _ScalarAssertion(
        context, schema, "pattern", test, message, lambda: context.parser.string, pattern=pattern
    )


def format_evaluator(
    context: EvaluatorContext, schema: Schema | None, attribute: str, negated: bool
) -> Evaluator:
    def test(value: str) -> bool:
        return formats.conforms(value, attribute) != negated

    message = "instance.problem.not.format" if negated else "instance.problem.format"
    return _ScalarAssertion(
        context, schema, "format", test, message, lambda: context.parser.string, attribute=attribute
    )


def content_encoding_evaluator(
    context: EvaluatorContext, schema: Schema | None, encoding: str, negated: bool
) -> Evaluator:
    def test(value: str) -> bool:
        return (formats.decode_content(value, encoding) is not None) != negated

    message = "instance.problem.not.contentEncoding" if negated else "instance.problem.contentEncoding"
    return _ScalarAssertion(
        context, schema, "contentEncoding", test, message, lambda: context.parser.string, encoding=encoding
    )


def content_media_type_evaluator(
    context: EvaluatorContext,
    schema: Schema | None,
    media_type: str,
    encoding: str | None,
    negated: bool,
) -> Evaluator:
    """Content is decoded with the sibling ``contentEncoding`` first, if any."""

    def test(value: str) -> bool:
        content: str | bytes | None = value
        if encoding is not None:
            content = formats.decode_content(value, encoding)
            if content is None:
                # Undecodable content is reported by contentEncoding
                return not negated
        return formats.is_media_type(content, media_type) != negated

    message = "instance.problem.not.contentMediaType" if negated else "instance.problem.contentMediaType"
    return _ScalarAssertion(
        context,
        schema,
        "contentMediaType",
        test,
        message,
        lambda: context.parser.string,
        mediaType=media_type,
    )


# =============================================================================
# Counting assertions
# =============================================================================


class _CountEvaluator(KeywordEvaluator):
    """
    Counts direct children of an array or object against an upper or
    lower limit. An exceeded upper limit fails at once, a reached lower
    limit passes at once; everything else is decided at the closing event.
    Problems point at the structure itself.
    """

    def __init__(
        self,
        context: EvaluatorContext,
        schema: Schema | None,
        keyword: str,
        limit: int,
        upper: bool,
        counts: Callable[[Event], bool],
    ) -> None:
        super().__init__(context, schema, keyword)
        self._limit = limit
        self._upper = upper
        self._counts = counts
        self._count = 0
        self._pointer: str | None = None

    def evaluate(self, event: Event, depth: int, dispatcher: ProblemDispatcher) -> Result:
        if depth == 0:
            if event in END_EVENTS:
                if self._upper or self._count >= self._limit:
                    return Result.TRUE
                return self._fail(dispatcher)
            self._pointer = self.context.pointer
            if not self._upper and self._limit == 0:
                return Result.TRUE
            return Result.PENDING
        if depth == 1 and self._counts(event):
            self._count += 1
            if self._upper and self._count > self._limit:
                return self._fail(dispatcher)
            if not self._upper and self._count >= self._limit:
                return Result.TRUE
        return Result.PENDING

    def _fail(self, dispatcher: ProblemDispatcher) -> Result:
        problem = self.problem(f"instance.problem.{self.keyword}", limit=self._limit, actual=self._count)
        dispatcher.dispatch(problem.with_pointer(self._pointer).build())
        return Result.FALSE


def _counted(
    context: EvaluatorContext,
    schema: Schema | None,
    names: tuple[str, str],
    keyword: str,
    limit: int,
    negated: bool,
    counts: Callable[[Event], bool],
) -> Evaluator:
    upper_name, lower_name = names
    upper = keyword == upper_name
    if negated:
        upper, limit = (False, limit + 1) if upper else (True, limit - 1)
        if limit < 0:
            return context.always_false(schema, "instance.problem.not.keyword", keyword=keyword)
    return _CountEvaluator(context, schema, upper_name if upper else lower_name, limit, upper, counts)


def item_count_evaluator(
    context: EvaluatorContext, schema: Schema | None, keyword: str, limit: int, negated: bool
) -> Evaluator:
    """``maxItems``/``minItems``."""
    return _counted(context, schema, ("maxItems", "minItems"), keyword, limit, negated, is_value_start)


def property_count_evaluator(
    context: EvaluatorContext, schema: Schema | None, keyword: str, limit: int, negated: bool
) -> Evaluator:
    """``maxProperties``/``minProperties``."""
    return _counted(
        context,
        schema,
        ("maxProperties", "minProperties"),
        keyword,
        limit,
        negated,
        lambda event: event is Event.KEY_NAME,
    )


class _UniqueItemsEvaluator(KeywordEvaluator):
    """Assembles each item and compares it with the items seen before."""

    def __init__(self, context: EvaluatorContext, schema: Schema | None, negated: bool) -> None:
        super().__init__(context, schema, "uniqueItems")
        self._negated = negated
        self._items: list[Any] = []
        self._assembler: ValueAssembler | None = None

    def evaluate(self, event: Event, depth: int, dispatcher: ProblemDispatcher) -> Result:
        if depth == 0:
            if event in END_EVENTS:
                if self._negated:
                    return self.fail(dispatcher, "instance.problem.not.uniqueItems")
                return Result.TRUE
            return Result.PENDING
        if depth == 1 and is_value_start(event):
            self._assembler = ValueAssembler()
        if self._assembler is None or not self._assembler.append(event, self.context.parser):
            return Result.PENDING
        item = self._assembler.value
        self._assembler = None
        for index, seen in enumerate(self._items):
            if json_equal(item, seen):
                if self._negated:
                    return Result.TRUE
                return self.fail(
                    dispatcher,
                    "instance.problem.uniqueItems",
                    index=len(self._items),
                    firstIndex=index,
                )
        self._items.append(item)
        return Result.PENDING


def unique_items_evaluator(context: EvaluatorContext, schema: Schema | None, negated: bool) -> Evaluator:
    return _UniqueItemsEvaluator(context, schema, negated)


class _RequiredEvaluator(KeywordEvaluator):
    """
    Watches property names at depth 1. Passes as soon as every name was
    seen; negated, fails at that moment instead.
    """

    def __init__(self, context: EvaluatorContext, schema: Schema | None, names: tuple[str, ...], negated: bool) -> None:
        super().__init__(context, schema, "required")
        self._names = names
        self._missing = set(names)
        self._negated = negated

    def evaluate(self, event: Event, depth: int, dispatcher: ProblemDispatcher) -> Result:
        if depth == 1 and event is Event.KEY_NAME:
            self._missing.discard(self.context.parser.string)
            if not self._missing:
                if self._negated:
                    return self.fail(dispatcher, "instance.problem.not.required", required=list(self._names))
                return Result.TRUE
        elif depth == 0 and event in END_EVENTS:
            if self._negated:
                return Result.TRUE
            missing = [name for name in self._names if name in self._missing]
            return self.fail(dispatcher, "instance.problem.required", missing=missing)
        return Result.PENDING


def required_evaluator(
    context: EvaluatorContext, schema: Schema | None, names: tuple[str, ...], negated: bool
) -> Evaluator:
    return _RequiredEvaluator(context, schema, names, negated)
