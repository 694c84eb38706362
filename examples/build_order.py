"""Compute a deployment order for a set of services.

This example builds a dependency graph incrementally, reports cycles with the
validator, breaks the cycle and prints the resulting order.

Run from the repository root:
    python examples/build_order.py
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dagkit.config import get_config
from dagkit.graph import DirectedGraph, GraphValidator, topological_order
from dagkit.log_config import bind_context, configure_logging, get_logger


def main() -> None:
    config = get_config()
    configure_logging(
        level=config.logging.level,
        json_logs=config.logging.json_logs,
        graph_level=config.logging.graph_level,
    )
    logger = get_logger(__name__)
    bind_context(graph="deployment")

    graph = DirectedGraph.from_edges(
        [
            ("database", "api"),
            ("cache", "api"),
            ("api", "frontend"),
            ("api", "worker"),
            ("worker", "api"),
            ("frontend", "cdn"),
        ],
    )

    validator = GraphValidator(config.analysis)
    report = validator.validate(graph)
    print(report.summary())

    if not report.is_valid:
        logger.info("breaking_cycle", source="worker", target="api")
        graph.delete_edge("worker", "api")

    order = topological_order(graph, sort_vertices=config.analysis.sort_vertices)
    logger.info("deployment_order_computed", order=order)

    print()
    print(validator.generate_visualization(graph))


if __name__ == "__main__":
    main()
