"""Tests for ProblemPrinter and format_problems."""

import pytest

from streamval.parser import Location
from streamval.problem import Problem, ProblemBuilder, ProblemPrinter, format_problems


@pytest.fixture
def composite():
    """anyOf problem with two branches, the second holding two problems."""
    first = Problem("instance.problem.false", pointer="/a")
    second = Problem("instance.problem.false", pointer="/b")
    third = Problem("instance.problem.not", pointer="/c")
    return (
        ProblemBuilder(Location(1, 1, 0), "")
        .with_message("instance.problem.anyOf")
        .with_branch([first])
        .with_branch([second, third])
        .build()
    )


class TestProblemPrinter:
    """Tests for line-oriented rendering."""

    def test_flat_problem(self):
        """A flat problem is a single line."""
        lines = []
        problem = Problem("instance.problem.minimum", {"limit": 1, "actual": 0}, Location(3, 7, 20), "/n")

        ProblemPrinter(lines.append).handle_problems([problem])

        assert lines == [
            "[3,7][/n] The numeric value must be greater than or equal to 1, but actual value is 0."
        ]

    def test_branches_are_numbered_and_indented(self, composite):
        """Branches are numbered; continuation lines align under the first."""
        lines = []

        ProblemPrinter(lines.append).handle_problems([composite])

        assert lines == [
            "[1,1][] At least one of the following sets of problems must be resolved.",
            "  1) [/a] The schema always fails.",
            "  2) [/b] The schema always fails.",
            "     [/c] The value must not be valid against the schema.",
        ]

    def test_nested_composites(self, composite):
        """Composite problems inside branches indent further."""
        outer = Problem("instance.problem.anyOf", branches=[[composite], [Problem("instance.problem.false")]])
        lines = []

        ProblemPrinter(lines.append, location=False).handle_problems([outer])

        assert lines[0] == "At least one of the following sets of problems must be resolved."
        assert lines[1] == "  1) [] At least one of the following sets of problems must be resolved."
        assert lines[2] == "       1) [/a] The schema always fails."
        assert lines[-1] == "  2) The schema always fails."

    def test_options(self):
        """Location and pointer segments can be switched off."""
        problem = Problem("instance.problem.false", location=Location(1, 2, 1), pointer="/x")

        assert ProblemPrinter(print, location=False).render(problem) == "[/x] The schema always fails."
        assert ProblemPrinter(print, pointer=False).render(problem) == "[1,2] The schema always fails."
        assert ProblemPrinter(print, location=False, pointer=False).render(problem) == "The schema always fails."

    def test_format_problems(self, composite):
        """format_problems joins the rendered lines."""
        text = format_problems([composite], location=False)

        assert text.splitlines()[0] == "[] At least one of the following sets of problems must be resolved."
        assert len(text.splitlines()) == 4
