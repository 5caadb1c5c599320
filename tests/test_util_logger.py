"""
Tests for the JSON structured logger factory.
"""
import json
import logging
import sys

import pytest

from ogc_csapi import CSAPIQueryBuilder, UnknownParameterError
from ogc_csapi.util_logger import ComponentType, JSONFormatter, LoggerFactory, LogLevel, enable_json_logging


def test_logger_emits_json_with_component_dimensions(capsys):
    logger = LoggerFactory.create_logger(ComponentType.SERVICE, "ogc_csapi.tests.json")
    logger.info("Built query URL")

    record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])

    assert record["level"] == "INFO"
    assert record["message"] == "Built query URL"
    assert record["logger"] == "ogc_csapi.tests.json"
    assert record["customDimensions"] == {
        "component_type": "service",
        "component_name": "ogc_csapi.tests.json"
    }


def test_child_loggers_are_formatted(capsys):
    LoggerFactory.create_logger(ComponentType.ADAPTER, "ogc_csapi.tests.parent")
    logging.getLogger("ogc_csapi.tests.parent.child").warning("Collection not found")

    record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])

    assert record["level"] == "WARNING"
    assert record["customDimensions"]["component_type"] == "adapter"


def test_debug_level_follows_configuration(monkeypatch):
    from ogc_csapi.config import get_csapi_config

    monkeypatch.setenv("CSAPI_DEBUG_LOGGING", "true")
    get_csapi_config.cache_clear()

    logger = LoggerFactory.create_logger(ComponentType.VALIDATOR, "ogc_csapi.tests.debug")
    assert logger.level == logging.DEBUG


def test_explicit_level_and_no_duplicate_handlers():
    name = "ogc_csapi.tests.level"
    LoggerFactory.create_logger(ComponentType.SCHEMA, name)
    logger = LoggerFactory.create_logger(ComponentType.SCHEMA, name, level=LogLevel.WARNING)

    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1


def test_formatter_includes_exception_details():
    try:
        raise ValueError("bad bbox")
    except ValueError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, exc_info=sys.exc_info())

    payload = json.loads(JSONFormatter().format(record))
    assert payload["exception"]["type"] == "ValueError"
    assert payload["exception"]["message"] == "bad bbox"


def test_log_level_from_string():
    assert LogLevel.from_string("debug") is LogLevel.DEBUG
    assert LogLevel.ERROR.to_python_level() == logging.ERROR


def test_enable_json_logging_covers_package_loggers(capsys, weather_collection):
    package_logger = enable_json_logging(level=LogLevel.WARNING)
    try:
        builder = CSAPIQueryBuilder(weather_collection)
        with pytest.raises(UnknownParameterError):
            builder.build_feature_download_url("POINT(1 2)", {"parameter_name": ["salinity"]})

        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    finally:
        package_logger.handlers.clear()
        package_logger.setLevel(logging.NOTSET)

    assert record["logger"] == "ogc_csapi.query_builder"
    assert record["level"] == "WARNING"
    assert "salinity" in record["message"]
    assert record["customDimensions"]["component_name"] == "ogc_csapi"
