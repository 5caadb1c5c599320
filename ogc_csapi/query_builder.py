# ============================================================================
# MODULE CONTEXT - CSAPI QUERY BUILDER
# ============================================================================
# STATUS: Core - Query URL construction and validation
# PURPOSE: Build validated CSAPI feature / dynamic / instances query URLs
# EXPORTS: CSAPIQueryBuilder
# INTERFACES: None (pure computation over a collection descriptor)
# PYDANTIC_MODELS: CSAPICollection, FeatureQueryParams, DynamicQueryParams
# DEPENDENCIES: pydantic, logging, urllib.parse, types
# SOURCE: Collection description (data_queries, parameter_names, crs, links)
# SCOPE: Query-string assembly, capability validation, CRS negotiation
# VALIDATION: Fail-fast per parameter, no partial URLs
# PATTERNS: Builder, immutable state captured at construction
# ENTRY_POINTS: builder = CSAPIQueryBuilder(collection); builder.build_feature_download_url(...)
# ============================================================================

"""
CSAPI Query Builder

Builds query URLs according to the OGC API - Connected Systems standard:
- Part 1: Feature Resources - https://docs.ogc.org/is/23-001/23-001.html
- Part 2: Dynamic Data - https://docs.ogc.org/is/23-002/23-002.html

The builder captures everything it needs from the collection description at
construction time (defensive copies, read-only afterwards). Build calls never
mutate builder state, so one builder can be shared freely across threads.

Validation order for feature and dynamic queries:
    1. query type supported by the collection
    2. z            (encoded)
    3. datetime     (encoded, empty interval rejected)
    4. parameter-name (every name declared by the collection)
    5. crs          (declared by the collection)
    6. f            (passed through)

The first failing step raises; nothing is returned in that case.

Usage:
    builder = CSAPIQueryBuilder(collection)
    url = builder.build_feature_download_url(
        "POINT(1 2)",
        {"crs": "EPSG:4326", "f": "json"}
    )
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple, Type, Union
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from pydantic import ValidationError

from .encoders import datetime_parameter_to_string, z_parameter_to_string
from .exceptions import (
    ConfigurationError,
    MalformedParameterError,
    UnknownParameterError,
    UnsupportedCrsError,
    UnsupportedQueryTypeError,
)
from .models import (
    CSAPICollection,
    CSAPILink,
    CSAPIParameter,
    DynamicQueryParams,
    FeatureQueryParams,
    QueryType,
    CSAPIQueryParams,
)

logger = logging.getLogger(__name__)

QueryParamsInput = Optional[Union[CSAPIQueryParams, Mapping[str, Any]]]


class CSAPIQueryBuilder:
    """
    Query URL builder for one CSAPI collection.

    Attributes:
        collection_id: Collection identifier (for error messages)
        supported_parameters: Read-only mapping of declared parameter names
        supported_crs: Frozen set of declared CRS codes
        links: Collection links, carried through unchanged
    """

    def __init__(self, collection: Union[CSAPICollection, Mapping[str, Any]]):
        """
        Capture query capabilities from a collection description.

        Args:
            collection: CSAPICollection model or raw collection JSON mapping

        Raises:
            ConfigurationError: If the collection declares no data_queries
        """
        if not isinstance(collection, CSAPICollection):
            try:
                collection = CSAPICollection.model_validate(collection)
            except ValidationError as e:
                raise ConfigurationError(f"Invalid collection description: {e}") from e

        self.collection_id = collection.id

        if collection.data_queries is None:
            raise ConfigurationError(
                f"Collection '{self.collection_id or 'unknown'}' has no data queries; "
                f"cannot issue CSAPI queries.",
                collection_id=self.collection_id
            )

        self._data_queries = MappingProxyType(
            {key: value.model_copy(deep=True) if value is not None else None
             for key, value in collection.data_queries.items()}
        )
        self._supported_query_types: Dict[QueryType, bool] = {
            query_type: query_type.value in self._data_queries for query_type in QueryType
        }

        self.supported_parameters: Mapping[str, CSAPIParameter] = MappingProxyType(
            dict(collection.parameter_names)
        )
        self.supported_crs: FrozenSet[str] = frozenset(collection.crs)
        self.links: Tuple[CSAPILink, ...] = tuple(collection.links)

        logger.info(
            f"CSAPIQueryBuilder ready for '{self.collection_id}': "
            f"queries={sorted(q.value for q in self.supported_queries())}, "
            f"{len(self.supported_parameters)} parameters, {len(self.supported_crs)} CRS"
        )

    # ========================================================================
    # CAPABILITIES
    # ========================================================================

    def supported_queries(self) -> FrozenSet[QueryType]:
        """Return the query types declared by this collection."""
        return frozenset(
            query_type for query_type, supported in self._supported_query_types.items() if supported
        )

    # ========================================================================
    # URL BUILDERS
    # ========================================================================

    def build_feature_download_url(
        self,
        coords: str,
        optional_params: QueryParamsInput = None
    ) -> str:
        """
        Build a feature query URL (CSAPI Part 1).

        Args:
            coords: Well-Known-Text geometry, passed through verbatim
            optional_params: FeatureQueryParams or mapping with any of
                parameter_name, z, datetime, crs, f

        Returns:
            Fully assembled query URL

        Raises:
            UnsupportedQueryTypeError: Collection has no feature query
            UnknownParameterError: A parameter name is not declared
            UnsupportedCrsError: The CRS is not declared
            MalformedParameterError: Invalid datetime or unrecognised option
        """
        return self._build_query_url(QueryType.FEATURE, FeatureQueryParams, coords, optional_params)

    def build_dynamic_download_url(
        self,
        coords: str,
        optional_params: QueryParamsInput = None
    ) -> str:
        """
        Build a dynamic data query URL (CSAPI Part 2).

        Same options and errors as build_feature_download_url, targeting the
        collection's dynamic query link.
        """
        return self._build_query_url(QueryType.DYNAMIC, DynamicQueryParams, coords, optional_params)

    def build_instances_download_url(self) -> str:
        """
        Return the instances listing URL of this collection.

        Raises:
            UnsupportedQueryTypeError: Collection has no instances query
        """
        return self._link_href(QueryType.INSTANCES)

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _build_query_url(
        self,
        query_type: QueryType,
        params_model: Type[CSAPIQueryParams],
        coords: str,
        optional_params: QueryParamsInput
    ) -> str:
        base_url = self._link_href(query_type)
        params = self._coerce_params(params_model, optional_params)

        query: List[Tuple[str, str]] = [("coords", coords)]

        if params.z is not None:
            query.append(("z", z_parameter_to_string(params.z)))

        if params.datetime is not None:
            query.append(("datetime", datetime_parameter_to_string(params.datetime)))

        if params.parameter_name is not None:
            for name in params.parameter_name:
                if name not in self.supported_parameters:
                    logger.warning(
                        f"Rejected {query_type.value} query on '{self.collection_id}': "
                        f"unknown parameter '{name}'"
                    )
                    raise UnknownParameterError(self.collection_id, name)
            query.append(("parameter-name", ",".join(params.parameter_name)))

        if params.crs is not None:
            if params.crs not in self.supported_crs:
                logger.warning(
                    f"Rejected {query_type.value} query on '{self.collection_id}': "
                    f"unsupported CRS '{params.crs}'"
                )
                raise UnsupportedCrsError(
                    params.crs,
                    collection_id=self.collection_id,
                    supported=sorted(self.supported_crs)
                )
            query.append(("crs", params.crs))

        if params.f is not None:
            query.append(("f", params.f))

        url = _merge_query(base_url, query)
        logger.debug(f"Built {query_type.value} query URL for '{self.collection_id}': {url}")
        return url

    def _link_href(self, query_type: QueryType) -> str:
        """Resolve the link template of a supported query type."""
        if not self._supported_query_types[query_type]:
            raise UnsupportedQueryTypeError(self.collection_id, query_type.value)

        data_query = self._data_queries[query_type.value]
        if data_query is None:
            raise ConfigurationError(
                f"Collection '{self.collection_id}' declares {query_type.value} queries "
                f"without a link template.",
                collection_id=self.collection_id
            )
        return data_query.link.href

    def _coerce_params(
        self,
        params_model: Type[CSAPIQueryParams],
        optional_params: QueryParamsInput
    ) -> CSAPIQueryParams:
        if optional_params is None:
            return params_model()
        if isinstance(optional_params, CSAPIQueryParams):
            return optional_params
        try:
            return params_model.model_validate(dict(optional_params))
        except ValidationError as e:
            raise MalformedParameterError(
                f"Invalid query options for collection '{self.collection_id}': {e}",
                collection_id=self.collection_id
            ) from e


def _set_query_param(query: List[Tuple[str, str]], key: str, value: str) -> None:
    """Set ``key`` in an ordered query list, replacing an earlier value in place."""
    for index, (existing, _) in enumerate(query):
        if existing == key:
            query[index] = (key, value)
            query[index + 1:] = [item for item in query[index + 1:] if item[0] != key]
            return
    query.append((key, value))


def _merge_query(base_url: str, query: List[Tuple[str, str]]) -> str:
    """Apply query parameters on top of the link template's own query string."""
    parts = urlsplit(base_url)
    merged = parse_qsl(parts.query, keep_blank_values=True)
    for key, value in query:
        _set_query_param(merged, key, value)
    return urlunsplit(parts._replace(query=urlencode(merged)))
