# ============================================================================
# MODULE CONTEXT - LOGGING
# ============================================================================
# STATUS: Shared - JSON structured logging for CSAPI client applications
# PURPOSE: Component-specific loggers emitting one JSON object per record
# EXPORTS: ComponentType, LogLevel, JSONFormatter, LoggerFactory, enable_json_logging
# INTERFACES: logging.Formatter, logging.Filter, factory
# DEPENDENCIES: enum, datetime, logging, json, sys (stdlib only)
# PATTERNS: JSON-only output, factory pattern
# ENTRY_POINTS: enable_json_logging(), LoggerFactory.create_logger()
# ============================================================================

"""
Structured Logger Factory

Library modules log through ``logging.getLogger(__name__)`` and never install
handlers. Applications that want JSON output for the ``ogc_csapi`` loggers
create a component logger here:

    logger = LoggerFactory.create_logger(ComponentType.SERVICE, "ogc_csapi")
    logger.info("Building queries")

or call ``enable_json_logging()``, which does the same for the whole tree.

Every record carries ``customDimensions`` with the component type and name.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from .config import get_csapi_config


# ============================================================================
# COMPONENT TYPES
# ============================================================================

class ComponentType(Enum):
    """Component types of the CSAPI client."""
    SERVICE = "service"        # Query building
    ADAPTER = "adapter"        # HTTP metadata client
    VALIDATOR = "validator"    # Parameter encoders and validators
    SCHEMA = "schema"          # Pydantic models


class LogLevel(Enum):
    """Standard Python log levels as enum for type safety."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def to_python_level(self) -> int:
        """Convert to Python logging level constant."""
        return getattr(logging, self.value)

    @classmethod
    def from_string(cls, level: str) -> 'LogLevel':
        """Create from string, case-insensitive."""
        return cls[level.upper()]


# ============================================================================
# JSON FORMATTER
# ============================================================================

class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name,
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if hasattr(record, 'custom_dimensions'):
            log_obj['customDimensions'] = record.custom_dimensions

        if record.exc_info:
            log_obj['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': self.formatException(record.exc_info)
            }

        return json.dumps(log_obj, default=str)


class _ComponentFilter(logging.Filter):
    """Attach component type/name to every record as custom dimensions."""

    def __init__(self, component_type: ComponentType, name: str):
        super().__init__()
        self.component_type = component_type
        self.component_name = name

    def filter(self, record: logging.LogRecord) -> bool:
        dims = {
            'component_type': self.component_type.value,
            'component_name': self.component_name
        }
        dims.update(getattr(record, 'custom_dimensions', None) or {})
        record.custom_dimensions = dims
        return True


# ============================================================================
# LOGGER FACTORY
# ============================================================================

class LoggerFactory:
    """
    Factory for component-specific JSON loggers.

    Example:
        logger = LoggerFactory.create_logger(ComponentType.ADAPTER, "CollectionMetadataClient")
        logger.info("Fetching collection")
    """

    @staticmethod
    def default_level() -> LogLevel:
        """DEBUG when CSAPI_DEBUG_LOGGING is set, INFO otherwise."""
        return LogLevel.DEBUG if get_csapi_config().debug_logging else LogLevel.INFO

    @classmethod
    def create_logger(
        cls,
        component_type: ComponentType,
        name: str,
        level: Optional[LogLevel] = None
    ) -> logging.Logger:
        """
        Create a logger for a specific component.

        Args:
            component_type: Type of component
            name: Logger name (a module path such as "ogc_csapi" covers its children)
            level: Optional explicit level (defaults from configuration)

        Returns:
            Configured Python logger writing JSON to stdout
        """
        log_level = (level or cls.default_level()).to_python_level()

        logger = logging.getLogger(name)
        logger.setLevel(log_level)

        # Remove existing handlers to avoid duplicates
        logger.handlers.clear()

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(log_level)
        handler.setFormatter(JSONFormatter())
        handler.addFilter(_ComponentFilter(component_type, name))
        logger.addHandler(handler)

        return logger


def enable_json_logging(level: Optional[LogLevel] = None) -> logging.Logger:
    """Emit JSON records for every ``ogc_csapi`` logger (builder, encoders, client)."""
    return LoggerFactory.create_logger(ComponentType.SERVICE, "ogc_csapi", level=level)
