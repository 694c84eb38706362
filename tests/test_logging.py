"""Unit tests for the logging configuration module.

This test module validates the structured logging configuration and context
binding helpers.
"""

import json
import logging

import pytest
import structlog

from dagkit.graph.digraph import DirectedGraph
from dagkit.log_config import (
    PACKAGE_LOGGER,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)


@pytest.fixture(autouse=True)
def restore_structlog():
    """Reset structlog and the context after each test."""
    yield
    clear_context()
    structlog.reset_defaults()
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.NOTSET)


class TestLoggingConfiguration:
    """Test cases for logging configuration."""

    def test_configure_logging_info_level(self):
        """Test logging configuration with INFO level."""
        configure_logging(level="INFO", json_logs=True)
        logger = get_logger("test")
        assert logger is not None

    def test_configure_logging_lowercase_level(self):
        """Test levels are case-insensitive."""
        configure_logging(level="debug", json_logs=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_logging_invalid_level(self):
        """Test logging configuration with invalid level."""
        with pytest.raises(ValueError, match="Invalid log level"):
            configure_logging(level="INVALID", json_logs=True)

    def test_configure_logging_console_renderer(self):
        """Test logging configuration with console renderer."""
        configure_logging(level="INFO", json_logs=False)
        logger = get_logger("test")
        assert logger is not None

    def test_get_logger_without_name(self):
        """Test getting a logger without a name."""
        configure_logging(level="INFO", json_logs=True)
        assert get_logger() is not None

    def test_graph_level_applies_to_package_logger(self):
        """Test the dagkit logger can be quieter than the root logger."""
        configure_logging(level="DEBUG", json_logs=True, graph_level="warning")

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.WARNING
        assert not logging.getLogger("dagkit.graph.digraph").isEnabledFor(logging.DEBUG)

    def test_graph_level_defaults_to_root(self):
        """Test the dagkit logger inherits the root level when not set."""
        configure_logging(level="DEBUG", json_logs=True, graph_level="ERROR")
        configure_logging(level="INFO", json_logs=True)

        assert logging.getLogger(PACKAGE_LOGGER).level == logging.NOTSET
        assert logging.getLogger("dagkit.graph.digraph").getEffectiveLevel() == logging.INFO

    def test_invalid_graph_level(self):
        """Test an unknown package level is rejected."""
        with pytest.raises(ValueError, match="Invalid log level: LOUD"):
            configure_logging(level="INFO", graph_level="LOUD")


class TestContextBinding:
    """Test cases for context binding functionality."""

    def setup_method(self):
        """Set up test environment before each test."""
        configure_logging(level="DEBUG", json_logs=True)
        clear_context()

    def test_bind_context(self, caplog):
        """Test bound context appears in log entries."""
        caplog.set_level(logging.INFO)
        logger = get_logger("test_bind_context")

        bind_context(graph="deploy-order")
        logger.info("order_computed", vertex_count=3)

        entry = json.loads(caplog.records[-1].getMessage())
        assert entry["event"] == "order_computed"
        assert entry["graph"] == "deploy-order"
        assert entry["vertex_count"] == 3

    def test_unbind_context(self, caplog):
        """Test unbound keys disappear from later entries."""
        caplog.set_level(logging.INFO)
        logger = get_logger("test_unbind_context")

        bind_context(graph="deploy-order", run=1)
        unbind_context("graph")
        logger.info("order_computed")

        entry = json.loads(caplog.records[-1].getMessage())
        assert "graph" not in entry
        assert entry["run"] == 1

    def test_graph_mutations_are_logged(self, caplog):
        """Test edge mutations emit debug events."""
        caplog.set_level(logging.DEBUG)

        graph = DirectedGraph()
        graph.insert_edge("a", "b")
        graph.insert_edge("a", "b")
        graph.delete_edge("a", "b")

        events = [json.loads(record.getMessage())["event"] for record in caplog.records]
        assert "edge_inserted" in events
        assert "duplicate_edge_ignored" in events
        assert "vertex_pruned" in events
        assert "edge_deleted" in events
