# ============================================================================
# MODULE CONTEXT - OGC API CONNECTED SYSTEMS CLIENT
# ============================================================================
# STATUS: Standalone Module - CSAPI query client
# PURPOSE: Validated query-URL construction for OGC API - Connected Systems
# EXPORTS: CSAPIQueryBuilder, models, encoders, errors, CollectionMetadataClient
# DEPENDENCIES: pydantic, pydantic-settings, httpx
# SCOPE: Parts 1 (feature resources) and 2 (dynamic data)
# ENTRY_POINTS: from ogc_csapi import CSAPIQueryBuilder
# ============================================================================

"""
OGC API - Connected Systems Client

Builds validated, encoded query URLs for CSAPI collections:
- Feature queries (Part 1) and dynamic data queries (Part 2)
- Parameter validation against the collection's declared parameter names
- CRS negotiation against the collection's declared CRS list
- Structured z (vertical level) and datetime parameter encoding

Architecture:
    ogc_csapi/
    ├── config.py          # Environment-based configuration
    ├── exceptions.py      # Error taxonomy
    ├── models.py          # Pydantic models (collection metadata, parameters)
    ├── encoders.py        # z / datetime / bbox encoders, CRS validator
    ├── query_builder.py   # CSAPIQueryBuilder
    ├── urls.py            # Canonical resource paths
    ├── util_logger.py     # JSON structured logging factory
    └── services/
        └── collection_client.py  # Collection metadata over HTTP

Usage:
    from ogc_csapi import CollectionMetadataClient, enable_json_logging

    enable_json_logging()  # optional: JSON records on stdout

    with CollectionMetadataClient("https://example.csapi.server") as client:
        builder = client.get_query_builder("weather-stations")
        url = builder.build_dynamic_download_url(
            "POINT(1 2)",
            {"datetime": {"start": "2025-01-01T00:00:00Z"}, "f": "json"}
        )
"""

from .config import CSAPIConfig, get_csapi_config
from .encoders import (
    bbox_to_string,
    datetime_parameter_to_string,
    extract_parameters,
    validate_crs,
    z_parameter_to_string,
)
from .exceptions import (
    ConfigurationError,
    CSAPIError,
    MalformedParameterError,
    UnknownParameterError,
    UnsupportedCrsError,
    UnsupportedQueryTypeError,
)
from .models import (
    CSAPICollection,
    CSAPIParameter,
    DateTimeInterval,
    DynamicQueryParams,
    FeatureQueryParams,
    QueryType,
    ZInterval,
    ZList,
    ZRepeating,
    ZSingle,
)
from .query_builder import CSAPIQueryBuilder
from .services import CollectionClientResponse, CollectionMetadataClient
from .util_logger import ComponentType, LoggerFactory, LogLevel, enable_json_logging

__version__ = "1.0.0"
__all__ = [
    "CSAPIConfig",
    "get_csapi_config",
    "bbox_to_string",
    "datetime_parameter_to_string",
    "extract_parameters",
    "validate_crs",
    "z_parameter_to_string",
    "CSAPIError",
    "ConfigurationError",
    "MalformedParameterError",
    "UnknownParameterError",
    "UnsupportedCrsError",
    "UnsupportedQueryTypeError",
    "CSAPICollection",
    "CSAPIParameter",
    "DateTimeInterval",
    "DynamicQueryParams",
    "FeatureQueryParams",
    "QueryType",
    "ZInterval",
    "ZList",
    "ZRepeating",
    "ZSingle",
    "CSAPIQueryBuilder",
    "CollectionClientResponse",
    "CollectionMetadataClient",
    "ComponentType",
    "LoggerFactory",
    "LogLevel",
    "enable_json_logging",
]
