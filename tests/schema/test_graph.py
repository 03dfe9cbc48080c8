"""Tests for SchemaGraph."""

import pytest

from streamval import StateError
from streamval.keywords.variants import AllOf, Items
from streamval.schema import ReferenceSchema, Schema, SchemaGraph


@pytest.fixture
def graph():
    return SchemaGraph()


def reference(graph, ref="#"):
    node = ReferenceSchema(ref, ref, graph)
    graph.add(node)
    return node


class TestArena:
    """Tests for adding nodes."""

    def test_indices_are_stable(self, graph):
        first, second = Schema(), Schema()

        assert graph.add(first) == 0
        assert graph.add(second) == 1
        assert graph.add(first) == 0
        assert len(graph) == 2
        assert graph.index_of(second) == 1
        assert first in graph

    def test_references_in_order(self, graph):
        b = reference(graph, "#/b")
        a = reference(graph, "#/a")
        graph.add(Schema())

        assert graph.references == [b, a]

    def test_adopted_nodes_are_not_references(self, graph):
        foreign = ReferenceSchema("#", "#", SchemaGraph())

        graph.adopt(foreign)

        assert graph.references == []


class TestBinding:
    """Tests for the resolution table."""

    def test_bind(self, graph):
        ref = reference(graph)
        target = Schema()

        graph.bind(ref, target)

        assert graph.target_of(ref) is target
        assert ref.target is target
        assert target in graph

    def test_unbound(self, graph):
        assert graph.target_of(reference(graph)) is None

    def test_bind_twice(self, graph):
        ref = reference(graph)
        graph.bind(ref, Schema())

        with pytest.raises(StateError) as exc_info:
            graph.bind(ref, Schema())

        assert exc_info.value.code == "REFERENCE_ALREADY_BOUND"

    def test_sealed(self, graph):
        graph.seal()

        assert graph.sealed
        with pytest.raises(StateError) as exc_info:
            graph.add(Schema())
        assert exc_info.value.code == "GRAPH_SEALED"


class TestLoops:
    """Tests for detect_loops()."""

    def test_in_place_cycle(self, graph):
        ref = reference(graph)
        graph.bind(ref, Schema({"allOf": AllOf((ref,))}))

        assert graph.detect_loops() == [ref]
        assert graph.is_loop(ref)

    def test_child_cycle(self, graph):
        ref = reference(graph)
        graph.bind(ref, Schema({"items": Items(ref)}))

        assert graph.detect_loops() == []
        assert not graph.is_loop(ref)

    def test_dangling_is_not_a_loop(self, graph):
        reference(graph)

        assert graph.detect_loops() == []

    def test_chain_into_cycle(self, graph):
        """Only references on the cycle are flagged."""
        a = reference(graph, "#/a")
        b = reference(graph, "#/b")
        entry = reference(graph, "#/entry")
        graph.bind(a, b)
        graph.bind(b, a)
        graph.bind(entry, a)

        assert graph.detect_loops() == [a, b]
