"""Graph validation with cycle reporting and visualization.

This module combines the topological analyzer and the SCC decomposer into a
single report: which parts of a graph are cyclic, a concrete cycle path for
each of them, and which vertices are blocked because they sit downstream of a
cycle.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from dagkit.config import SUPPORTED_VISUALIZATION_FORMATS, AnalysisConfig
from dagkit.graph.scc import cyclic_components
from dagkit.graph.topological import acyclic

if TYPE_CHECKING:
    from dagkit.graph.digraph import DirectedGraph

logger = structlog.get_logger(__name__)


@dataclass
class ValidationReport:
    """Report containing validation results for a directed graph.

    Attributes:
        is_valid: Whether the graph is acyclic
        errors: List of error messages (one per cyclic component)
        warnings: List of warning messages (potential issues)
        cycles: One representative cycle path per cyclic component, with the
            first vertex repeated at the end
        cyclic_components: Members of every cyclic component, sorted by name
        blocked_vertices: Vertices outside any cycle that cannot be ordered
            because a cycle precedes them
        order: Topological order when the graph is acyclic, else empty
    """

    is_valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    cycles: list[list[str]] = field(default_factory=list)
    cyclic_components: list[list[str]] = field(default_factory=list)
    blocked_vertices: set[str] = field(default_factory=set)
    order: list[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message and mark validation as failed."""
        self.errors.append(message)
        self.is_valid = False
        logger.error("validation_error", message=message)

    def add_warning(self, message: str) -> None:
        """Add a warning message without failing validation."""
        self.warnings.append(message)
        logger.warning("validation_warning", message=message)

    def summary(self) -> str:
        """Generate a human-readable summary of the validation report."""
        lines = []
        lines.append(f"Validation Status: {'PASS' if self.is_valid else 'FAIL'}")
        lines.append(f"Errors: {len(self.errors)}")
        lines.append(f"Warnings: {len(self.warnings)}")
        lines.append(f"Cycles: {len(self.cycles)}")
        lines.append(f"Blocked Vertices: {len(self.blocked_vertices)}")

        if self.errors:
            lines.append("\nErrors:")
            lines.extend(f"  - {error}" for error in self.errors)

        if self.warnings:
            lines.append("\nWarnings:")
            lines.extend(f"  - {warning}" for warning in self.warnings)

        if self.cycles:
            lines.append("\nCycles Detected:")
            for i, cycle in enumerate(self.cycles, 1):
                lines.append(f"  {i}. {' -> '.join(cycle)}")

        if self.blocked_vertices:
            lines.append(f"\nBlocked Vertices: {', '.join(sorted(self.blocked_vertices))}")

        if self.order:
            lines.append(f"\nOrder: {' -> '.join(self.order)}")

        return "\n".join(lines)


class GraphValidator:
    """Validator for directed graphs with detailed error reporting.

    This class provides:
    - Cycle detection with a concrete path per strongly connected component
    - Detection of vertices blocked behind a cycle
    - Graph visualization generation (Mermaid or Graphviz DOT)
    """

    def __init__(self, config: AnalysisConfig | None = None):
        """Initialize the graph validator.

        Args:
            config: Analyzer settings; defaults are used when omitted
        """
        self.config = config if config is not None else AnalysisConfig()

    def validate(self, graph: "DirectedGraph") -> ValidationReport:
        """Validate a graph and generate a detailed report.

        Args:
            graph: The DirectedGraph to validate

        Returns:
            ValidationReport containing all validation results
        """
        logger.info(
            "starting_graph_validation",
            vertex_count=graph.vertex_count,
            edge_count=graph.edge_count,
        )

        report = ValidationReport()
        sort_vertices = self.config.sort_vertices

        order, is_acyclic = acyclic(graph, sort_vertices=sort_vertices)
        if is_acyclic:
            report.order = order
        else:
            in_cycles: set[str] = set()
            for component in cyclic_components(graph, sort_vertices=sort_vertices):
                members = sorted(component)
                cycle = self._find_cycle_path(graph, component)
                in_cycles.update(component)
                report.cyclic_components.append(members)
                report.cycles.append(cycle)
                report.add_error(f"Cycle detected: {' -> '.join(cycle)}")

            blocked = set(graph.vertices()) - set(order) - in_cycles
            if blocked:
                report.blocked_vertices = blocked
                report.add_warning(
                    f"Vertices blocked behind a cycle: {', '.join(sorted(blocked))}",
                )

        logger.info(
            "graph_validation_complete",
            is_valid=report.is_valid,
            error_count=len(report.errors),
            warning_count=len(report.warnings),
        )

        return report

    def _find_cycle_path(self, graph: "DirectedGraph", component: frozenset[str]) -> list[str]:
        """Find a cycle through the smallest-named vertex of a cyclic component.

        A breadth-first search restricted to the component finds the shortest
        path from the start vertex back to itself.

        Args:
            graph: The graph the component was taken from
            component: A strongly connected component containing a cycle

        Returns:
            The cycle as a list of vertices, starting and ending with the same one
        """
        start = min(component)
        parents: dict[str, str] = {}
        queue = deque([start])

        while queue:
            current = queue.popleft()
            for successor in graph.successors(current):
                if successor == start:
                    path = [current]
                    while path[-1] != start:
                        path.append(parents[path[-1]])
                    path.reverse()
                    return [*path, start]
                if successor in component and successor not in parents:
                    parents[successor] = current
                    queue.append(successor)

        # unreachable for a strongly connected component with a cycle
        return [start, start]

    def generate_visualization(
        self,
        graph: "DirectedGraph",
        output_format: str | None = None,
    ) -> str:
        """Generate a visual representation of the graph.

        Args:
            graph: The DirectedGraph to visualize
            output_format: 'mermaid' or 'dot'; the configured default when omitted

        Returns:
            String representation of the graph in the requested format

        Raises:
            ValueError: If an unsupported format is requested
        """
        if output_format is None:
            output_format = self.config.visualization_format
        output_format = output_format.lower().strip()

        if output_format == "mermaid":
            return self._generate_mermaid(graph)
        if output_format == "dot":
            return self._generate_graphviz(graph)
        error_msg = (
            f"Unsupported format: {output_format}. "
            f"Use one of {', '.join(repr(f) for f in SUPPORTED_VISUALIZATION_FORMATS)}."
        )
        raise ValueError(error_msg)

    def _generate_mermaid(self, graph: "DirectedGraph") -> str:
        """Generate a Mermaid flowchart representation."""

        def escape_label(name: str) -> str:
            return name.replace('"', "#quot;")

        lines = ["graph TD"]

        if not graph.vertex_count:
            lines.append("    Empty[Empty Graph]")
            return "\n".join(lines)

        # node ids come from the sorted position; names only appear in labels
        ids = {v: f"v{i}" for i, v in enumerate(sorted(graph.vertices()))}
        lines.extend(f'    {node_id}["{escape_label(v)}"]' for v, node_id in ids.items())
        lines.extend(
            f"    {ids[source]} --> {ids[target]}"
            for source, target in sorted(graph.edges())
        )

        return "\n".join(lines)

    def _generate_graphviz(self, graph: "DirectedGraph") -> str:
        """Generate a Graphviz DOT representation."""

        def escape_dot_string(s: str) -> str:
            return s.replace("\\", "\\\\").replace('"', '\\"')

        lines = ["digraph DirectedGraph {"]
        lines.append("    rankdir=LR;")
        lines.append("    node [shape=box, style=rounded];")

        if not graph.vertex_count:
            lines.append('    Empty [label="Empty Graph"];')
        else:
            lines.extend(f'    "{escape_dot_string(v)}";' for v in sorted(graph.vertices()))
            lines.extend(
                f'    "{escape_dot_string(source)}" -> "{escape_dot_string(target)}";'
                for source, target in sorted(graph.edges())
            )

        lines.append("}")
        return "\n".join(lines)
