"""Configuration management with Pydantic.

This module implements configuration models using Pydantic for parsing and
validation of YAML configuration files with environment variable overrides.
"""

import os
import threading
from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, Field, field_validator

logger = structlog.get_logger(__name__)

SUPPORTED_VISUALIZATION_FORMATS = ("mermaid", "dot")
DEFAULT_CONFIG_FILES = ("dagkit.yaml", "dagkit.yml", "config.yaml", "config.yml")


class AnalysisConfig(BaseModel):
    """Settings shared by the graph analyzers.

    Attributes:
        sort_vertices: Walk vertices in name order so that topological orders
            and component report order are reproducible
        visualization_format: Default output format of the graph validator
    """

    sort_vertices: bool = Field(
        default=False,
        description="Traverse vertices in sorted name order",
    )
    visualization_format: str = Field(
        default="mermaid",
        description="Default visualization format ('mermaid' or 'dot')",
    )

    @field_validator("visualization_format")
    @classmethod
    def validate_visualization_format(cls, v: str) -> str:
        """Normalize and validate the visualization format.

        Raises:
            ValueError: If the format is not supported
        """
        normalized = v.lower().strip()
        if normalized not in SUPPORTED_VISUALIZATION_FORMATS:
            msg = (
                f"Unsupported visualization format: {v}. "
                f"Use one of {', '.join(SUPPORTED_VISUALIZATION_FORMATS)}"
            )
            raise ValueError(msg)
        return normalized


class LoggingConfig(BaseModel):
    """Logging settings.

    Attributes:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render JSON lines instead of colored console output
        graph_level: Separate level for the dagkit loggers; None inherits ``level``
    """

    level: str = Field(
        default="INFO",
        description="Logging level",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    json_logs: bool = Field(
        default=True,
        description="Render logs as JSON",
    )
    graph_level: str | None = Field(
        default=None,
        description="Logging level of the dagkit package loggers",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )

    @field_validator("level", "graph_level", mode="before")
    @classmethod
    def uppercase_level(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper()
        return v


class DagkitConfig(BaseModel):
    """Top-level dagkit configuration.

    Attributes:
        analysis: Analyzer settings
        logging: Logging settings
    """

    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "DagkitConfig":
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML configuration file

        Returns:
            Parsed and validated DagkitConfig instance

        Raises:
            FileNotFoundError: If configuration file doesn't exist
            ValueError: If the file is empty or not valid YAML
            pydantic.ValidationError: If a value is invalid
        """
        config_path = Path(path)

        if not config_path.exists():
            msg = f"Configuration file not found: {config_path}"
            raise FileNotFoundError(msg)

        logger.info("loading_configuration", path=str(config_path))

        try:
            with config_path.open() as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.exception("yaml_parse_error", error=str(e), path=str(config_path))
            msg = f"Invalid YAML in configuration file: {e}"
            raise ValueError(msg) from e

        if not config_data:
            msg = "Configuration file is empty"
            raise ValueError(msg)

        if not isinstance(config_data, dict):
            msg = "Configuration file must contain a mapping at the top level"
            raise ValueError(msg)

        config_data = cls._apply_env_overrides(config_data)
        config = cls(**config_data)

        logger.info(
            "configuration_loaded",
            sort_vertices=config.analysis.sort_vertices,
            logging_level=config.logging.level,
        )

        return config

    @classmethod
    def _apply_env_overrides(cls, config_data: dict) -> dict:
        """Apply environment variable overrides to configuration.

        Environment variables follow the pattern ``DAGKIT_<KEY>``, for example
        ``DAGKIT_LOGGING_LEVEL=DEBUG`` or ``DAGKIT_SORT_VERTICES=true``.

        Args:
            config_data: Base configuration dictionary from file

        Returns:
            Configuration dictionary with environment overrides applied
        """
        env_overrides = {
            ("analysis", "sort_vertices"): "DAGKIT_SORT_VERTICES",
            ("analysis", "visualization_format"): "DAGKIT_VISUALIZATION_FORMAT",
            ("logging", "level"): "DAGKIT_LOGGING_LEVEL",
            ("logging", "json_logs"): "DAGKIT_JSON_LOGS",
            ("logging", "graph_level"): "DAGKIT_GRAPH_LOGGING_LEVEL",
        }
        boolean_vars = {"DAGKIT_SORT_VERTICES", "DAGKIT_JSON_LOGS"}

        for path, env_var in env_overrides.items():
            value = os.environ.get(env_var)
            if value is None:
                continue

            current = config_data
            for key in path[:-1]:
                if not isinstance(current.get(key), dict):
                    current[key] = {}
                current = current[key]

            if env_var in boolean_vars:
                current[path[-1]] = value.lower() in ("true", "1", "yes")
            else:
                current[path[-1]] = value

            logger.debug(
                "env_override_applied",
                env_var=env_var,
                config_path=".".join(path),
            )

        return config_data

    def validate_config(self) -> list[str]:
        """Validate configuration and return list of warnings.

        Returns:
            List of validation warning messages (empty if no warnings)
        """
        warnings = []

        graph_level = self.logging.graph_level or self.logging.level
        if graph_level == "DEBUG":
            warnings.append(
                "DEBUG logging records every edge mutation - expect verbose output "
                "on large graphs",
            )

        if self.logging.level == "DEBUG" and self.logging.json_logs is False:
            warnings.append("Console rendering with DEBUG level is intended for development only")

        return warnings


class ConfigManager:
    """Configuration manager using singleton pattern."""

    _instance: DagkitConfig | None = None
    _init_lock: threading.Lock = threading.Lock()

    @classmethod
    def load_config(cls, config_path: str | Path | None = None) -> DagkitConfig:
        """Load configuration from file.

        Args:
            config_path: Path to configuration file. If None, looks for one of
                the default file names in the current directory and falls back
                to built-in defaults when none exists.

        Returns:
            Loaded DagkitConfig instance

        Raises:
            FileNotFoundError: If an explicit config file does not exist
            ValueError: If config file is invalid
        """
        if config_path is None:
            for default_name in DEFAULT_CONFIG_FILES:
                default_path = Path(default_name)
                if default_path.exists():
                    config_path = default_path
                    break
            else:
                logger.debug("no_configuration_file_found", candidates=list(DEFAULT_CONFIG_FILES))
                return DagkitConfig(**DagkitConfig._apply_env_overrides({}))

        return DagkitConfig.from_yaml(config_path)

    @classmethod
    def get_config(
        cls,
        config_path: str | Path | None = None,
        reload: bool = False,
    ) -> DagkitConfig:
        """Get configuration instance (singleton pattern).

        Uses double-checked locking so that concurrent first calls load the
        file only once.

        Args:
            config_path: Path to configuration file. Only used on first call or when reload=True.
            reload: If True, force reload configuration from file.

        Returns:
            DagkitConfig instance
        """
        if cls._instance is not None and not reload:
            return cls._instance

        with cls._init_lock:
            if cls._instance is None or reload:
                cls._instance = cls.load_config(config_path)

            return cls._instance

    @classmethod
    def reset_config(cls) -> None:
        """Reset the configuration instance."""
        cls._instance = None


def load_config(config_path: str | Path | None = None) -> DagkitConfig:
    """Load configuration from file."""
    return ConfigManager.load_config(config_path)


def get_config(config_path: str | Path | None = None, reload: bool = False) -> DagkitConfig:
    """Get configuration instance (singleton pattern)."""
    return ConfigManager.get_config(config_path, reload)


def reset_config() -> None:
    """Reset the configuration instance."""
    ConfigManager.reset_config()


__all__ = [
    "AnalysisConfig",
    "ConfigManager",
    "DagkitConfig",
    "LoggingConfig",
    "get_config",
    "load_config",
    "reset_config",
]
