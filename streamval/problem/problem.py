"""Immutable diagnostic records."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from .messages import render

if TYPE_CHECKING:
    from ..parser.events import Location
    from ..schema.schema import Schema

__all__ = ["Problem", "ProblemBuilder"]


@dataclass(frozen=True, eq=False)
class Problem:
    """
    A validation or schema problem.

    Attributes
    ----------
    message : str
        Message key, e.g. ``"instance.problem.type"``.
    params : Mapping[str, Any]
        Named parameters of the message.
    location : Location | None
        Where in the source text the problem was found.
    pointer : str | None
        JSON Pointer to the instance value (or, for schema problems, the
        schema location) the problem is about.
    schema : Schema | None
        The schema holding the failing keyword.
    keyword : str | None
        The failing keyword.
    resolvable : bool
        False when no instance could ever satisfy the schema at this point
        (a ``false`` schema, an unresolved reference).
    branches : tuple[tuple[Problem, ...], ...]
        Alternative explanations of a composite problem, one ordered list
        per failing alternative.
    """

    message: str
    params: Mapping[str, Any] = field(default_factory=dict)
    location: Location | None = None
    pointer: str | None = None
    schema: Schema | None = None
    keyword: str | None = None
    resolvable: bool = True
    branches: tuple[tuple[Problem, ...], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))
        object.__setattr__(self, "branches", tuple(tuple(b) for b in self.branches))

    @property
    def is_composite(self) -> bool:
        return bool(self.branches)

    @property
    def text(self) -> str:
        """Rendered message without location or pointer."""
        return render(self.message, self.params)

    def walk(self) -> Iterable[Problem]:
        """This problem and every problem in its branches, depth first."""
        yield self
        for branch in self.branches:
            for problem in branch:
                yield from problem.walk()

    def __str__(self) -> str:
        prefix = ""
        if self.location is not None:
            prefix += f"[{self.location.line},{self.location.column}]"
        if self.pointer is not None:
            prefix += f"[{self.pointer}]"
        return f"{prefix} {self.text}" if prefix else self.text

    def __repr__(self) -> str:
        return f"Problem({self.message!r}, pointer={self.pointer!r}, keyword={self.keyword!r})"


class ProblemBuilder:
    """
    Fluent construction of :class:`Problem` records.

    Example
    -------
    >>> problem = (
    ...     ProblemBuilder(location, "/items/0")
    ...     .with_keyword("maxItems")
    ...     .with_message("instance.problem.maxItems", limit=3, actual=4)
    ...     .build()
    ... )
    """

    def __init__(self, location: Location | None = None, pointer: str | None = None) -> None:
        self._location = location
        self._pointer = pointer
        self._schema: Schema | None = None
        self._keyword: str | None = None
        self._message = ""
        self._params: dict[str, Any] = {}
        self._resolvable = True
        self._branches: list[tuple[Problem, ...]] = []

    def with_pointer(self, pointer: str | None) -> ProblemBuilder:
        self._pointer = pointer
        return self

    def with_schema(self, schema: Schema | None) -> ProblemBuilder:
        self._schema = schema
        return self

    def with_keyword(self, keyword: str | None) -> ProblemBuilder:
        self._keyword = keyword
        return self

    def with_message(self, message: str, **params: Any) -> ProblemBuilder:
        self._message = message
        self._params.update(params)
        return self

    def with_param(self, name: str, value: Any) -> ProblemBuilder:
        self._params[name] = value
        return self

    def with_branch(self, problems: Iterable[Problem]) -> ProblemBuilder:
        self._branches.append(tuple(problems))
        return self

    def with_branches(self, branches: Iterable[Iterable[Problem]]) -> ProblemBuilder:
        for branch in branches:
            self.with_branch(branch)
        return self

    def with_resolvability(self, resolvable: bool) -> ProblemBuilder:
        self._resolvable = resolvable
        return self

    def build(self) -> Problem:
        return Problem(
            message=self._message,
            params=self._params,
            location=self._location,
            pointer=self._pointer,
            schema=self._schema,
            keyword=self._keyword,
            resolvable=self._resolvable,
            branches=tuple(self._branches),
        )
