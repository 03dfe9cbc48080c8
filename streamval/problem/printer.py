"""
Problem rendering.

Renders each problem as ``[line,col][pointer] message``, one line per
problem. Composite problems list their branches below, numbered and
indented, recursively.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from .problem import Problem

__all__ = ["ProblemPrinter", "format_problems"]


class ProblemPrinter:
    """
    Line-oriented problem printer.

    Parameters
    ----------
    line_consumer : Callable[[str], None]
        Receives each rendered line, e.g. ``print`` or ``list.append``.
    location : bool, default True
        Include the ``[line,col]`` segment.
    pointer : bool, default True
        Include the ``[pointer]`` segment.
    indent : str, default "  "
        Indentation added per nesting level of branches.

    Examples
    --------
    >>> lines = []
    >>> ProblemPrinter(lines.append, location=False).handle_problems(validator.problems)
    >>> lines
    ['[/age] The value must be of "integer" type, but actual type is "string".']
    """

    def __init__(
        self,
        line_consumer: Callable[[str], None],
        *,
        location: bool = True,
        pointer: bool = True,
        indent: str = "  ",
    ) -> None:
        self._consumer = line_consumer
        self._location = location
        self._pointer = pointer
        self._indent = indent

    def handle_problems(self, problems: Iterable[Problem]) -> None:
        """Render a list of problems."""
        for problem in problems:
            self._print(problem, "", "")

    def render(self, problem: Problem) -> str:
        """Render a single problem line, without its branches."""
        prefix = ""
        if self._location and problem.location is not None:
            prefix += f"[{problem.location.line},{problem.location.column}]"
        if self._pointer and problem.pointer is not None:
            prefix += f"[{problem.pointer}]"
        text = problem.text
        return f"{prefix} {text}" if prefix else text

    def _print(self, problem: Problem, margin: str, bullet: str) -> None:
        self._consumer(margin + bullet + self.render(problem))
        if not problem.branches:
            return
        nested = margin + " " * len(bullet) + self._indent
        for number, branch in enumerate(problem.branches, start=1):
            label = f"{number}) "
            for position, child in enumerate(branch):
                self._print(child, nested, label if position == 0 else " " * len(label))


def format_problems(problems: Iterable[Problem], **options: bool | str) -> str:
    """Render problems into a single newline-separated string."""
    lines: list[str] = []
    ProblemPrinter(lines.append, **options).handle_problems(problems)
    return "\n".join(lines)
