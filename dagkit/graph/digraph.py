"""Mutable directed graph with automatic vertex lifecycle management.

This module provides the DirectedGraph class, the only component in dagkit
that mutates graph state. Vertices are plain string names: a vertex comes into
existence the first time it is an endpoint of an inserted edge and disappears,
with all of its bookkeeping, when its last edge is deleted.
"""

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

import structlog

from dagkit.graph.scc import strongly_connected_components
from dagkit.graph.topological import acyclic

if TYPE_CHECKING:
    from dagkit.graph.topological import TopologicalResult

logger = structlog.get_logger(__name__)


def _check_vertex(name: object) -> None:
    if not isinstance(name, str) or not name:
        msg = f"Vertex names must be non-empty strings, got {name!r}"
        raise ValueError(msg)


class DirectedGraph:
    """Directed graph keyed by vertex name with live degree counters.

    The graph keeps an adjacency list per vertex together with indegree and
    outdegree tables and cached vertex/edge counts. Every mutation keeps
    these structures consistent:

    - a vertex is tracked iff at least one recorded edge touches it,
    - ``indegree(v)``/``outdegree(v)`` equal the number of recorded edges
      ending/starting at ``v``,
    - inserting an ordered pair that is already recorded is a no-op, and so is
      deleting a pair that is not.

    Self-loops are allowed and count towards both degrees of their vertex.

    Thread-safety:
        This class is NOT thread-safe. Concurrent ``insert_edge`` /
        ``delete_edge`` calls corrupt the degree counters, and the analyzers
        read the live adjacency lists, so they must not run while another
        thread mutates the same graph. Callers needing concurrent access must
        serialize every call externally (e.g., with a threading.Lock).

    Example:
        >>> graph = DirectedGraph()
        >>> graph.insert_edge("build", "test")
        >>> graph.insert_edge("test", "deploy")
        >>> graph.acyclic()
        TopologicalResult(order=['build', 'test', 'deploy'], is_acyclic=True)
        >>> graph.delete_edge("test", "deploy")
        >>> "deploy" in graph
        False
    """

    def __init__(self):
        """Initialize an empty graph."""
        self._edges: dict[str, list[str]] = {}
        self._vertices: set[str] = set()
        self._indegree: dict[str, int] = {}
        self._outdegree: dict[str, int] = {}
        self._vertex_count = 0
        self._edge_count = 0

    @classmethod
    def from_edges(cls, edges: Iterable[tuple[str, str]]) -> "DirectedGraph":
        """Build a graph from ``(source, target)`` pairs.

        Example:
            >>> graph = DirectedGraph.from_edges([("a", "b"), ("b", "c")])
            >>> graph.edge_count
            2
        """
        graph = cls()
        for source, target in edges:
            graph.insert_edge(source, target)
        return graph

    def insert_edge(self, source: str, target: str) -> None:
        """Record the edge ``source -> target``.

        Inserting an edge that is already recorded leaves the graph unchanged.
        Endpoints seen for the first time are registered, with a zero entry
        for the degree counter on the side they do not yet touch.

        Args:
            source: Name of the vertex the edge starts from
            target: Name of the vertex the edge ends at

        Raises:
            ValueError: If either name is not a non-empty string
        """
        _check_vertex(source)
        _check_vertex(target)

        neighbors = self._edges.get(source)
        if neighbors is not None and target in neighbors:
            logger.debug("duplicate_edge_ignored", source=source, target=target)
            return

        self._edge_count += 1

        for vertex in (source, target):
            if vertex not in self._vertices:
                self._vertices.add(vertex)
                self._vertex_count += 1

        self._edges.setdefault(source, []).append(target)

        self._outdegree[source] = self._outdegree.get(source, 0) + 1
        self._indegree.setdefault(source, 0)
        self._indegree[target] = self._indegree.get(target, 0) + 1
        self._outdegree.setdefault(target, 0)

        logger.debug(
            "edge_inserted",
            source=source,
            target=target,
            edge_count=self._edge_count,
            vertex_count=self._vertex_count,
        )

    def delete_edge(self, source: str, target: str) -> None:
        """Remove the edge ``source -> target`` if it is recorded.

        Deleting an edge that does not exist is a no-op. After the counters
        are decremented, ``source`` and ``target`` are each dropped from the
        graph if neither edge direction touches them any more.

        Args:
            source: Name of the vertex the edge starts from
            target: Name of the vertex the edge ends at
        """
        neighbors = self._edges.get(source)
        if neighbors is None or target not in neighbors:
            logger.debug("missing_edge_ignored", source=source, target=target)
            return

        neighbors.remove(target)
        if not neighbors:
            del self._edges[source]

        self._edge_count -= 1
        self._outdegree[source] -= 1
        self._indegree[target] -= 1

        self._prune(source)
        if target != source:
            self._prune(target)

        logger.debug(
            "edge_deleted",
            source=source,
            target=target,
            edge_count=self._edge_count,
            vertex_count=self._vertex_count,
        )

    def _prune(self, vertex: str) -> None:
        if self._indegree[vertex] == 0 and self._outdegree[vertex] == 0:
            self._vertices.discard(vertex)
            del self._indegree[vertex]
            del self._outdegree[vertex]
            self._vertex_count -= 1
            logger.debug("vertex_pruned", vertex=vertex)

    @property
    def vertex_count(self) -> int:
        """Number of vertices touching at least one edge."""
        return self._vertex_count

    @property
    def edge_count(self) -> int:
        """Number of distinct recorded edges."""
        return self._edge_count

    def indegree(self, vertex: str) -> int:
        """Number of edges ending at ``vertex`` (0 if the vertex is absent)."""
        return self._indegree.get(vertex, 0)

    def outdegree(self, vertex: str) -> int:
        """Number of edges starting at ``vertex`` (0 if the vertex is absent)."""
        return self._outdegree.get(vertex, 0)

    def indegrees(self) -> dict[str, int]:
        """Return a copy of the indegree table, in vertex registration order."""
        return dict(self._indegree)

    def vertices(self) -> list[str]:
        """Return every vertex currently in the graph, in registration order."""
        return list(self._indegree)

    def successors(self, vertex: str) -> tuple[str, ...]:
        """Return the destinations of ``vertex``'s outgoing edges in insertion order."""
        return tuple(self._edges.get(vertex, ()))

    def edges(self) -> Iterator[tuple[str, str]]:
        """Iterate over every recorded ``(source, target)`` pair."""
        for source, neighbors in self._edges.items():
            for target in neighbors:
                yield source, target

    def has_vertex(self, vertex: str) -> bool:
        return vertex in self._vertices

    def has_edge(self, source: str, target: str) -> bool:
        return target in self._edges.get(source, ())

    def __contains__(self, vertex: object) -> bool:
        return vertex in self._vertices

    def __len__(self) -> int:
        return self._vertex_count

    def __repr__(self) -> str:
        return f"DirectedGraph(vertices={self._vertex_count}, edges={self._edge_count})"

    def acyclic(self, sort_vertices: bool = False) -> "TopologicalResult":
        """Run Kahn's algorithm; see :func:`dagkit.graph.topological.acyclic`."""
        return acyclic(self, sort_vertices=sort_vertices)

    def strongly_connected_components(self, sort_vertices: bool = False) -> list[frozenset[str]]:
        """Run Tarjan's algorithm; see :class:`dagkit.graph.scc.TarjanSCC`."""
        return strongly_connected_components(self, sort_vertices=sort_vertices)

    def copy(self) -> "DirectedGraph":
        """Create an independent deep copy of the graph.

        Example:
            >>> graph = DirectedGraph.from_edges([("a", "b")])
            >>> clone = graph.copy()
            >>> clone.delete_edge("a", "b")
            >>> graph.edge_count, clone.edge_count
            (1, 0)
        """
        new_graph = DirectedGraph()
        new_graph._edges = {source: list(neighbors) for source, neighbors in self._edges.items()}
        new_graph._vertices = set(self._vertices)
        new_graph._indegree = dict(self._indegree)
        new_graph._outdegree = dict(self._outdegree)
        new_graph._vertex_count = self._vertex_count
        new_graph._edge_count = self._edge_count

        logger.debug("graph_copied", vertex_count=self._vertex_count, edge_count=self._edge_count)

        return new_graph

    def get_stats(self) -> dict[str, int]:
        """Get statistics about the current graph state.

        Returns:
            Dictionary with graph statistics including:
                - vertex_count: Number of tracked vertices
                - edge_count: Number of recorded edges
                - source_count: Vertices with no incoming edges
                - sink_count: Vertices with no outgoing edges
                - self_loop_count: Edges whose endpoints coincide
        """
        stats = {
            "vertex_count": self._vertex_count,
            "edge_count": self._edge_count,
            "source_count": sum(1 for d in self._indegree.values() if d == 0),
            "sink_count": sum(1 for d in self._outdegree.values() if d == 0),
            "self_loop_count": sum(1 for v, ns in self._edges.items() if v in ns),
        }

        logger.debug("graph_stats_retrieved", **stats)

        return stats

    def format_edges(self) -> str:
        """Render one ``source -> target`` line per edge."""
        return "\n".join(f"{source} -> {target}" for source, target in self.edges())
