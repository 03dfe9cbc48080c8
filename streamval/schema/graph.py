"""
Schema graph.

Schema nodes live in an arena addressed by stable indices. ``$ref`` links
are not stored in the nodes: a separate resolution table maps the index
of each :class:`ReferenceSchema` to the index of its target. The table is
filled once, by the resolve phase of the reader, and the graph is sealed
afterwards.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from ..exceptions import StateError

if TYPE_CHECKING:
    from .schema import ReferenceSchema, Schema

__all__ = ["SchemaGraph"]


class SchemaGraph:
    """
    Arena of schema nodes with the reference resolution table.

    References whose target can be reached again from the target through
    in-place subschemas only (``allOf``, ``anyOf``, ``oneOf``, ``not``,
    ``if``/``then``/``else``, ``dependencies`` and further references)
    are loops: evaluating them would unfold forever without consuming
    input. References reached through ``properties``, ``items`` and other
    child applicators are ordinary recursion.
    """

    def __init__(self) -> None:
        self._nodes: list[Schema] = []
        self._indices: dict[int, int] = {}
        self._references: list[int] = []
        self._targets: dict[int, int] = {}
        self._loops: set[int] = set()
        self._sealed = False

    # =========================================================================
    # Arena
    # =========================================================================

    def add(self, schema: Schema) -> int:
        """Add a node read from this graph's document; return its index."""
        from .schema import ReferenceSchema

        index = self.adopt(schema)
        if isinstance(schema, ReferenceSchema) and schema.graph is self and index not in self._references:
            self._references.append(index)
        return index

    def adopt(self, schema: Schema) -> int:
        """Add a node owned elsewhere, such as a resolver's result."""
        self._check_open()
        index = self._indices.get(id(schema))
        if index is None:
            index = len(self._nodes)
            self._nodes.append(schema)
            self._indices[id(schema)] = index
        return index

    def index_of(self, schema: Schema) -> int | None:
        return self._indices.get(id(schema))

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Schema]:
        return iter(self._nodes)

    def __contains__(self, schema: object) -> bool:
        return id(schema) in self._indices

    @property
    def references(self) -> list[ReferenceSchema]:
        """References read from this graph's document, in document order."""
        return [self._nodes[index] for index in self._references]  # type: ignore[misc]

    @property
    def sealed(self) -> bool:
        return self._sealed

    # =========================================================================
    # Resolution table
    # =========================================================================

    def bind(self, reference: ReferenceSchema, target: Schema) -> None:
        """
        Assign the target of a reference.

        Raises
        ------
        StateError
            If the graph is sealed (``GRAPH_SEALED``) or the reference is
            already bound (``REFERENCE_ALREADY_BOUND``).
        """
        self._check_open()
        index = self.add(reference)
        if index in self._targets:
            raise StateError(
                f"Reference {reference.ref!r} is already bound",
                code="REFERENCE_ALREADY_BOUND",
                details={"ref": reference.ref, "target_id": reference.target_id},
            )
        self._targets[index] = self.adopt(target)

    def target_of(self, reference: ReferenceSchema) -> Schema | None:
        """The bound target, or None for a dangling reference."""
        index = self._indices.get(id(reference))
        if index is None or index not in self._targets:
            return None
        return self._nodes[self._targets[index]]

    def is_loop(self, reference: ReferenceSchema) -> bool:
        index = self._indices.get(id(reference))
        return index is not None and index in self._loops

    def detect_loops(self) -> list[ReferenceSchema]:
        """
        Flag every reference that can reach itself through in-place
        subschemas and return the flagged references in document order.

        Each reference is checked with an iterative depth-first walk over a
        visited set, so the walk terminates on graphs of any shape.
        """
        self._check_open()
        flagged = []
        for reference in self.references:
            if self._reaches_itself(reference):
                self._loops.add(self._indices[id(reference)])
                flagged.append(reference)
        return flagged

    def _reaches_itself(self, reference: ReferenceSchema) -> bool:
        start = self.target_of(reference)
        if start is None:
            return False
        stack = [start]
        visited: set[int] = set()
        while stack:
            node = stack.pop()
            if node is reference:
                return True
            if id(node) in visited:
                continue
            visited.add(id(node))
            stack.extend(node.in_place_subschemas())
        return False

    def seal(self) -> None:
        """End the build; the graph is read-only from here on."""
        self._sealed = True

    def _check_open(self) -> None:
        if self._sealed:
            raise StateError("The schema graph is sealed", code="GRAPH_SEALED")
