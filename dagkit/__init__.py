"""dagkit: a mutable directed-graph engine.

Incremental edge insertion and deletion with automatic vertex lifecycle,
topological ordering with cycle detection, and strongly connected component
decomposition.
"""

from dagkit.config import DagkitConfig, get_config, load_config
from dagkit.graph import (
    CycleDetectedError,
    DirectedGraph,
    GraphValidator,
    TarjanSCC,
    TopologicalResult,
    ValidationReport,
    acyclic,
    cyclic_components,
    strongly_connected_components,
    topological_order,
)

__version__ = "0.1.0"

__all__ = [
    "CycleDetectedError",
    "DagkitConfig",
    "DirectedGraph",
    "GraphValidator",
    "TarjanSCC",
    "TopologicalResult",
    "ValidationReport",
    "acyclic",
    "cyclic_components",
    "get_config",
    "load_config",
    "strongly_connected_components",
    "topological_order",
]
