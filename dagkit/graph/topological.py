"""Topological ordering and cycle detection using Kahn's algorithm.

The analyzer never mutates the graph it is given: it works on a private copy
of the indegree table and reads the adjacency lists as they are.
"""

from collections import deque
from typing import TYPE_CHECKING, NamedTuple

import structlog

if TYPE_CHECKING:
    from dagkit.graph.digraph import DirectedGraph

logger = structlog.get_logger(__name__)


class CycleDetectedError(Exception):
    """Exception raised when a topological order is required but the graph has a cycle.

    Attributes:
        message: Description of the failure
        remaining: Vertices that could not be ordered (members of a cycle or
            reachable only through one)
    """

    def __init__(self, message: str, remaining: set[str] | None = None):
        """Initialize the exception with a descriptive message.

        Args:
            message: Description of the cycle detection error
            remaining: Vertices left unordered by Kahn's algorithm
        """
        super().__init__(message)
        self.message = message
        self.remaining = remaining if remaining is not None else set()


class TopologicalResult(NamedTuple):
    """Outcome of :func:`acyclic`.

    ``order`` is a valid topological order when ``is_acyclic`` is True.
    Otherwise it holds only the vertices that are neither on a cycle nor
    downstream of one.
    """

    order: list[str]
    is_acyclic: bool


def acyclic(graph: "DirectedGraph", sort_vertices: bool = False) -> TopologicalResult:
    """Order the vertices of ``graph`` with Kahn's algorithm.

    A cyclic graph is not an error: it is reported through
    ``TopologicalResult.is_acyclic``.

    Args:
        graph: The graph to analyse
        sort_vertices: Seed the queue with zero-indegree vertices in name
            order instead of registration order

    Returns:
        TopologicalResult with the emitted order and the acyclicity verdict

    Example:
        >>> from dagkit.graph import DirectedGraph
        >>> graph = DirectedGraph.from_edges([("a", "b"), ("b", "c"), ("c", "a")])
        >>> acyclic(graph)
        TopologicalResult(order=[], is_acyclic=False)
    """
    indegree = graph.indegrees()

    sources = [v for v, degree in indegree.items() if degree == 0]
    if sort_vertices:
        sources.sort()
    queue = deque(sources)

    order: list[str] = []
    while queue:
        vertex = queue.popleft()
        order.append(vertex)

        for successor in graph.successors(vertex):
            indegree[successor] -= 1
            if indegree[successor] == 0:
                queue.append(successor)

    is_acyclic = len(order) == graph.vertex_count

    logger.debug(
        "topological_analysis_complete",
        vertex_count=graph.vertex_count,
        ordered_count=len(order),
        is_acyclic=is_acyclic,
    )

    return TopologicalResult(order, is_acyclic)


def topological_order(graph: "DirectedGraph", sort_vertices: bool = False) -> list[str]:
    """Return a topological order of ``graph`` or raise if it has a cycle.

    Args:
        graph: The graph to order
        sort_vertices: Passed through to :func:`acyclic`

    Returns:
        Every vertex, each one before all of its successors

    Raises:
        CycleDetectedError: If the graph contains at least one directed cycle
    """
    order, is_acyclic = acyclic(graph, sort_vertices=sort_vertices)
    if is_acyclic:
        return order

    remaining = set(graph.vertices()) - set(order)
    logger.error(
        "cycle_detected_in_graph",
        unordered_count=len(remaining),
        vertex_count=graph.vertex_count,
    )
    msg = f"Cycle detected involving: {', '.join(sorted(remaining))}"
    raise CycleDetectedError(msg, remaining)
