"""
Structured logging for applications embedding the chunk store.

Library modules only ever call ``structlog.get_logger()``; the embedding
application decides rendering and level once through ``setup_logging``.
"""

import logging
import sys
from typing import TYPE_CHECKING, Any, List

import structlog

from chunkstore.utils.errors import ConfigurationError

if TYPE_CHECKING:
    from chunkstore.framework.config import ObservabilityConfig


RENDERERS = {
    "json": structlog.processors.JSONRenderer,
    "console": structlog.dev.ConsoleRenderer,
}


def build_processors(format_type: str) -> List[Any]:
    """Processor chain ending in the renderer for ``format_type``."""
    if format_type not in RENDERERS:
        raise ConfigurationError(
            f"Unknown log format: {format_type}",
            config_key="log_format",
            config_value=format_type,
        )
    
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        RENDERERS[format_type](),
    ]


def setup_logging(app_name: str, log_level: str = "info", format_type: str = "json") -> None:
    """
    Route structlog through stdlib logging on stdout.
    
    Args:
        app_name: Bound to every event as ``app``
        log_level: Logging level (debug, info, warning, error)
        format_type: Output format (json, console)
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ConfigurationError(
            f"Unknown log level: {log_level}",
            config_key="log_level",
            config_value=log_level,
        )
    
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    structlog.configure(
        processors=build_processors(format_type),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(app=app_name)


def configure_logging(app_name: str, config: "ObservabilityConfig") -> None:
    """Apply an ``ObservabilityConfig``."""
    setup_logging(app_name, config.log_level, config.log_format)


def bind_query(logger: Any, query: Any) -> Any:
    """Bind the store query to a logger."""
    return logger.bind(query=str(query))
