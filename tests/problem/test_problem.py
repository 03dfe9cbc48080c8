"""Tests for Problem, ProblemBuilder and the message catalog."""

from decimal import Decimal

import pytest

from streamval.parser import InstanceType, Location
from streamval.problem import MESSAGES, Problem, ProblemBuilder, render
from streamval.problem.messages import format_param


# =============================================================================
# Problem
# =============================================================================


class TestProblem:
    """Tests for Problem records."""

    def test_str(self):
        """Problems render as [line,col][pointer] message."""
        problem = Problem(
            "instance.problem.type",
            {"expected": "integer", "actual": "string"},
            Location(1, 9, 8),
            "/age",
        )

        assert str(problem) == '[1,9][/age] The value must be of "integer" type, but actual type is "string".'

    def test_str_without_location(self):
        """Segments that are unknown are left out."""
        problem = Problem("instance.problem.false")

        assert str(problem) == "The schema always fails."

    def test_params_are_read_only(self):
        """Problems are immutable, parameters included."""
        problem = Problem("instance.problem.false", {"a": 1})

        with pytest.raises(TypeError):
            problem.params["a"] = 2

    def test_walk(self):
        """walk() visits a composite problem and its branches depth first."""
        first = Problem("instance.problem.false", pointer="/a")
        second = Problem("instance.problem.not", pointer="/b")
        composite = Problem("instance.problem.anyOf", branches=[[first], [second]])

        assert list(composite.walk()) == [composite, first, second]
        assert composite.is_composite is True
        assert first.is_composite is False

    def test_defaults(self):
        """Problems are resolvable and flat unless stated otherwise."""
        problem = Problem("instance.problem.false")

        assert problem.resolvable is True
        assert problem.branches == ()
        assert problem.schema is None


class TestProblemBuilder:
    """Tests for ProblemBuilder."""

    def test_build(self):
        """Every builder call lands in the record."""
        location = Location(2, 3, 10)
        branch = [Problem("instance.problem.false")]

        problem = (
            ProblemBuilder(location, "/items/0")
            .with_keyword("maxItems")
            .with_message("instance.problem.maxItems", limit=3)
            .with_param("actual", 4)
            .with_branch(branch)
            .with_resolvability(False)
            .build()
        )

        assert problem.location == location
        assert problem.pointer == "/items/0"
        assert problem.keyword == "maxItems"
        assert dict(problem.params) == {"limit": 3, "actual": 4}
        assert problem.branches == (tuple(branch),)
        assert problem.resolvable is False

    def test_with_pointer_overrides(self):
        """with_pointer() replaces the pointer given on construction."""
        problem = ProblemBuilder(None, "/a/0").with_pointer("/a").with_message("x").build()

        assert problem.pointer == "/a"


# =============================================================================
# Messages
# =============================================================================


class TestMessages:
    """Tests for the message catalog and rendering."""

    def test_every_message_is_a_format_string(self):
        """Every template renders with its own placeholders left in place."""
        for key in MESSAGES:
            assert isinstance(render(key, {}), str)

    def test_missing_parameter_stays_visible(self):
        """Missing parameters are rendered as their placeholder."""
        assert "{expected}" in render("instance.problem.type", {"actual": "string"})

    def test_unknown_message(self):
        """Unknown keys render as the key followed by the parameters."""
        assert render("custom.problem", {}) == "custom.problem"
        assert render("custom.problem", {"a": 1}) == "custom.problem a=1"

    def test_required_list(self):
        """Lists render the way JSON spells them."""
        assert render("instance.problem.required", {"missing": ["a", "b"]}) == (
            'The object must have properties ["a", "b"].'
        )

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("x", '"x"'),
            (True, "true"),
            (False, "false"),
            (None, "null"),
            (3, "3"),
            (Decimal("1.50"), "1.50"),
            ([1, "a"], '[1, "a"]'),
            ({"k": None}, '{"k": null}'),
            (InstanceType.STRING, '"string"'),
        ],
    )
    def test_format_param(self, value, expected):
        """Parameters are rendered as JSON literals."""
        assert format_param(value) == expected
