"""Shared pytest fixtures."""

import pytest

from dagkit.graph.digraph import DirectedGraph

# 1 <------ 4 ---------> 5 ------> 7
# |  ^      ^            |       ^ |
# v    \    |            v     /   v
# 2 ----> 3              6 <------ 8
#
# 9 ----> 10
# |        ^
# v        |
# 11 ---> 12
REFERENCE_EDGES = [
    ("1", "2"),
    ("2", "3"),
    ("3", "1"),
    ("3", "4"),
    ("4", "1"),
    ("4", "5"),
    ("5", "6"),
    ("5", "7"),
    ("6", "7"),
    ("7", "8"),
    ("8", "6"),
    ("9", "10"),
    ("9", "11"),
    ("11", "12"),
    ("12", "10"),
]


@pytest.fixture
def reference_graph() -> DirectedGraph:
    """Fixture providing the twelve-vertex, fifteen-edge reference graph."""
    return DirectedGraph.from_edges(REFERENCE_EDGES)


@pytest.fixture
def chain_graph() -> DirectedGraph:
    """Fixture providing a simple a -> b -> c -> d chain."""
    return DirectedGraph.from_edges([("a", "b"), ("b", "c"), ("c", "d")])
