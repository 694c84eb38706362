"""Graph module: mutable directed graph, topological ordering and SCC decomposition.

This module provides the DirectedGraph store together with Kahn's algorithm
for topological ordering and Tarjan's algorithm for strongly connected
components.
"""

from dagkit.graph.digraph import DirectedGraph
from dagkit.graph.scc import TarjanSCC, cyclic_components, strongly_connected_components
from dagkit.graph.topological import (
    CycleDetectedError,
    TopologicalResult,
    acyclic,
    topological_order,
)
from dagkit.graph.validator import GraphValidator, ValidationReport

__all__ = [
    "CycleDetectedError",
    "DirectedGraph",
    "GraphValidator",
    "TarjanSCC",
    "TopologicalResult",
    "ValidationReport",
    "acyclic",
    "cyclic_components",
    "strongly_connected_components",
    "topological_order",
]
