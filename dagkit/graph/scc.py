"""Strongly connected components using Tarjan's algorithm.

Each vertex moves through three states during one decomposition run:
unvisited, on the stack, and resolved into a component. The depth-first walk
is driven by an explicit work stack of ``(vertex, successor iterator)``
frames, so arbitrarily deep graphs never hit the interpreter's recursion
limit.
"""

from collections.abc import Iterator
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from dagkit.graph.digraph import DirectedGraph

logger = structlog.get_logger(__name__)


class TarjanSCC:
    """Partition a graph into strongly connected components.

    The decomposer only reads the graph. Its working state (discovery
    counter, ``dfn``/``low`` tables, visited set, vertex stack and in-stack
    set) is reset at the start of every :meth:`components` call.

    Example:
        >>> from dagkit.graph import DirectedGraph
        >>> graph = DirectedGraph.from_edges([("a", "b"), ("b", "a"), ("b", "c")])
        >>> sorted(sorted(c) for c in TarjanSCC(graph).components())
        [['a', 'b'], ['c']]
    """

    def __init__(self, graph: "DirectedGraph", sort_vertices: bool = False):
        self.graph = graph
        self.sort_vertices = sort_vertices
        self.count = 0

        self._time = 0
        self._dfn: dict[str, int] = {}
        self._low: dict[str, int] = {}
        self._visited: set[str] = set()
        self._stack: list[str] = []
        self._in_stack: set[str] = set()

    def components(self) -> list[frozenset[str]]:
        """Run the decomposition.

        Returns:
            The components in the order they were resolved. Every vertex is in
            exactly one component; the report order carries no meaning.
        """
        self._reset()

        vertices = self.graph.vertices()
        if self.sort_vertices:
            vertices.sort()

        components: list[frozenset[str]] = []
        for vertex in vertices:
            if vertex not in self._visited:
                components.extend(self._strong_connect(vertex))

        self.count = len(components)

        logger.debug(
            "scc_decomposition_complete",
            vertex_count=self.graph.vertex_count,
            component_count=self.count,
        )

        return components

    def _reset(self) -> None:
        self.count = 0
        self._time = 0
        self._dfn = {}
        self._low = {}
        self._visited = set()
        self._stack = []
        self._in_stack = set()

    def _discover(self, vertex: str) -> Iterator[str]:
        self._stack.append(vertex)
        self._in_stack.add(vertex)
        self._visited.add(vertex)
        self._dfn[vertex] = self._low[vertex] = self._time
        self._time += 1
        return iter(self.graph.successors(vertex))

    def _strong_connect(self, root: str) -> list[frozenset[str]]:
        found: list[frozenset[str]] = []
        work = [(root, self._discover(root))]

        while work:
            vertex, successors = work[-1]

            for successor in successors:
                if successor not in self._visited:
                    work.append((successor, self._discover(successor)))
                    break
                if successor in self._in_stack:
                    self._low[vertex] = min(self._low[vertex], self._dfn[successor])
                # otherwise the successor already belongs to a resolved component
            else:
                work.pop()
                if work:
                    parent = work[-1][0]
                    self._low[parent] = min(self._low[parent], self._low[vertex])

                if self._low[vertex] == self._dfn[vertex]:
                    found.append(self._pop_component(vertex))

        return found

    def _pop_component(self, root: str) -> frozenset[str]:
        members = set()
        while True:
            vertex = self._stack.pop()
            self._in_stack.discard(vertex)
            members.add(vertex)
            if vertex == root:
                return frozenset(members)


def strongly_connected_components(
    graph: "DirectedGraph",
    sort_vertices: bool = False,
) -> list[frozenset[str]]:
    """Return the strongly connected components of ``graph``."""
    return TarjanSCC(graph, sort_vertices=sort_vertices).components()


def cyclic_components(
    graph: "DirectedGraph",
    sort_vertices: bool = False,
) -> list[frozenset[str]]:
    """Return only the components that contain a directed cycle.

    A component is cyclic when it has more than one member or when its single
    member has a self-loop.
    """
    return [
        component
        for component in strongly_connected_components(graph, sort_vertices=sort_vertices)
        if len(component) > 1 or _has_self_loop(graph, component)
    ]


def _has_self_loop(graph: "DirectedGraph", component: frozenset[str]) -> bool:
    (vertex,) = component
    return graph.has_edge(vertex, vertex)
