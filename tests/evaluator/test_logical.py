"""Tests for logical combinators."""

from streamval.evaluator import (
    ALWAYS_TRUE,
    ConjunctiveEvaluator,
    Result,
    SimpleConjunctiveEvaluator,
    conjunctive,
    disjunctive,
    exclusive,
    not_exclusive,
)
from streamval.parser import InstanceType

from .scripted import Scripted, drive

# "[1, 2]" is four events: START_ARRAY, 1, 2, END_ARRAY
ARRAY = "[1, 2]"
LAST = 4


def combine(factory, *operands, instance_type=InstanceType.ARRAY, keyword=None):
    def make(context):
        combinator = factory(context, instance_type, None, keyword)
        for operand in operands:
            combinator.append(operand)
        return combinator

    return make


# =============================================================================
# Conjunction
# =============================================================================


class TestConjunctive:
    """Tests for AND."""

    def test_all_pass(self):
        """Passes at the closing event when every operand passed."""
        result, problems, consumed = drive(
            combine(conjunctive, Scripted(Result.TRUE, 2), Scripted(Result.TRUE, LAST)), ARRAY
        )

        assert result is Result.TRUE
        assert problems == []
        assert consumed == LAST

    def test_failure_keeps_feeding_siblings(self):
        """An early failure does not stop the other operands."""
        sibling = Scripted(Result.FALSE, LAST, pointer="/late")

        result, problems, consumed = drive(
            combine(conjunctive, Scripted(Result.FALSE, 2, pointer="/early"), sibling), ARRAY
        )

        assert result is Result.FALSE
        assert consumed == LAST
        assert [p.pointer for p in problems] == ["/early", "/late"]

    def test_finishes_when_operands_finish(self):
        """The verdict is known as soon as no operand is pending."""
        result, _, consumed = drive(
            combine(conjunctive, Scripted(Result.FALSE, 2), Scripted(Result.TRUE, 3)), ARRAY
        )

        assert result is Result.FALSE
        assert consumed == 3

    def test_always_true_operands_are_skipped(self):
        """Appending ALWAYS_TRUE leaves nothing to evaluate."""
        result, _, consumed = drive(combine(conjunctive, ALWAYS_TRUE, ALWAYS_TRUE), ARRAY)

        assert result is Result.TRUE
        assert consumed == 1

    def test_scalar_variant(self):
        """Scalars get the variant concluding on the single event."""

        def make(context):
            combinator = conjunctive(context, InstanceType.INTEGER)
            combinator.append(Scripted(Result.TRUE))
            return combinator

        result, _, consumed = drive(make, "7")

        assert result is Result.TRUE
        assert consumed == 1

    def test_factory_picks_variant(self):
        """Structures get the structural variant, scalars the simple one."""
        from streamval.evaluator import EvaluatorContext
        from streamval.parser import JsonEventParser

        context = EvaluatorContext(JsonEventParser())

        assert type(conjunctive(context, InstanceType.OBJECT)) is ConjunctiveEvaluator
        assert type(conjunctive(context, InstanceType.STRING)) is SimpleConjunctiveEvaluator


# =============================================================================
# Disjunction
# =============================================================================


class TestDisjunctive:
    """Tests for OR."""

    def test_first_pass_wins(self):
        """One passing operand is enough; buffered failures are dropped."""
        result, problems, consumed = drive(
            combine(disjunctive, Scripted(Result.FALSE, 1), Scripted(Result.TRUE, 2)), ARRAY
        )

        assert result is Result.TRUE
        assert problems == []
        assert consumed == 2

    def test_all_fail_makes_composite(self):
        """All failures become one composite problem, in operand order."""
        result, problems, _ = drive(
            combine(
                disjunctive,
                Scripted(Result.FALSE, 3, pointer="/first"),
                Scripted(Result.FALSE, 2, pointer="/second"),
                keyword="anyOf",
            ),
            ARRAY,
        )

        assert result is Result.FALSE
        assert len(problems) == 1
        composite = problems[0]
        assert composite.message == "instance.problem.anyOf"
        assert composite.keyword == "anyOf"
        assert [branch[0].pointer for branch in composite.branches] == ["/first", "/second"]

    def test_single_failure_is_replayed(self):
        """A single failed operand is reported as is."""
        result, problems, _ = drive(combine(disjunctive, Scripted(Result.FALSE, 1, pointer="/x")), ARRAY)

        assert result is Result.FALSE
        assert [p.pointer for p in problems] == ["/x"]

    def test_empty_is_contradiction(self):
        """No operands means nothing can be satisfied."""
        result, problems, _ = drive(combine(disjunctive, keyword="anyOf"), ARRAY)

        assert result is Result.FALSE
        assert problems[0].message == "instance.problem.empty"
        assert problems[0].resolvable is False
        assert problems[0].text == 'There is nothing to satisfy in "anyOf".'


# =============================================================================
# Exclusive disjunction
# =============================================================================


class TestExclusive:
    """Tests for XOR (oneOf)."""

    def test_exactly_one(self):
        """Exactly one pass is decided once every operand has finished."""
        result, problems, consumed = drive(
            combine(exclusive, Scripted(Result.TRUE, 1), Scripted(Result.FALSE, 2)), ARRAY
        )

        assert result is Result.TRUE
        assert problems == []
        assert consumed == 2

    def test_two_pass(self):
        """Two passes name the matching operands."""
        result, problems, _ = drive(
            combine(
                exclusive,
                Scripted(Result.TRUE, 3),
                Scripted(Result.FALSE, 1),
                Scripted(Result.TRUE, 2),
                keyword="oneOf",
            ),
            ARRAY,
        )

        assert result is Result.FALSE
        assert problems[0].message == "instance.problem.oneOf.many"
        assert list(problems[0].params["indices"]) == [0, 2]

    def test_none_pass(self):
        """No pass reports every failure as a branch."""
        result, problems, _ = drive(
            combine(exclusive, Scripted(Result.FALSE, 1), Scripted(Result.FALSE, 2)), ARRAY
        )

        assert result is Result.FALSE
        assert len(problems[0].branches) == 2

    def test_empty_is_contradiction(self):
        result, problems, _ = drive(combine(exclusive, keyword="oneOf"), ARRAY)

        assert result is Result.FALSE
        assert problems[0].message == "instance.problem.empty"


class TestNotExclusive:
    """Tests for the dual of XOR: zero or at least two."""

    def test_zero_pass(self):
        result, problems, _ = drive(
            combine(not_exclusive, Scripted(Result.FALSE, 1), Scripted(Result.FALSE, 2)), ARRAY
        )

        assert result is Result.TRUE
        assert problems == []

    def test_two_pass_early(self):
        """The second pass decides without waiting for the close."""
        result, _, consumed = drive(
            combine(not_exclusive, Scripted(Result.TRUE, 1), Scripted(Result.TRUE, 2), Scripted(Result.FALSE, LAST)),
            ARRAY,
        )

        assert result is Result.TRUE
        assert consumed == 2

    def test_exactly_one_fails(self):
        result, problems, _ = drive(
            combine(not_exclusive, Scripted(Result.FALSE, 1), Scripted(Result.TRUE, 2)), ARRAY
        )

        assert result is Result.FALSE
        assert problems[0].message == "instance.problem.not.oneOf"
        assert problems[0].params["index"] == 1
