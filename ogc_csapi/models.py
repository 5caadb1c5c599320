# ============================================================================
# MODULE CONTEXT - CSAPI MODELS
# ============================================================================
# STATUS: Core - Pydantic models for CSAPI collection metadata and queries
# PURPOSE: Typed collection descriptors, tagged query parameters, query options
# EXPORTS: CSAPILink, CSAPIDataQuery, CSAPIParameter, CSAPICollection,
#          CSAPICollectionList, QueryType, ZSingle, ZInterval, ZList, ZRepeating,
#          ZParameter, DateTimeInterval, DateTimeParameter,
#          FeatureQueryParams, DynamicQueryParams
# INTERFACES: Pydantic BaseModel
# DEPENDENCIES: pydantic, typing, datetime, enum
# SOURCE: OGC API - Connected Systems Part 1 (23-001) and Part 2 (23-002)
# VALIDATION: Pydantic v2 validation, discriminated unions
# PATTERNS: Data Transfer Objects (DTOs), tagged unions
# ============================================================================

"""
OGC API - Connected Systems Pydantic Models

Collection metadata as published by a CSAPI server, plus the structured
query parameters the query builder encodes into URLs.

References:
- OGC API - Connected Systems Part 1: https://docs.ogc.org/is/23-001/23-001.html
- OGC API - Connected Systems Part 2: https://docs.ogc.org/is/23-002/23-002.html
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt

Number = Union[StrictInt, StrictFloat]


# ============================================================================
# COLLECTION METADATA
# ============================================================================

class QueryType(str, Enum):
    """Query families a collection may declare in ``data_queries``."""
    FEATURE = "feature"
    DYNAMIC = "dynamic"
    INSTANCES = "instances"


class CSAPILink(BaseModel):
    """
    OGC API Link object (RFC 8288 Web Linking).

    Unknown members are kept so links round-trip unchanged.
    """
    model_config = ConfigDict(extra="allow")

    href: str = Field(
        description="URL of the linked resource"
    )
    rel: Optional[str] = Field(
        default=None,
        description="Link relation type (self, alternate, items, etc.)"
    )
    type: Optional[str] = Field(
        default=None,
        description="Media type of the linked resource"
    )
    title: Optional[str] = Field(
        default=None,
        description="Human-readable title for the link"
    )


class CSAPIDataQueryLink(BaseModel):
    """Link template for one query family."""
    href: str = Field(
        description="Base URL the query parameters are appended to"
    )
    rel: Optional[str] = Field(
        default=None,
        description="Link relation type"
    )
    variables: Optional[Any] = Field(
        default=None,
        description="Template variable descriptions (opaque)"
    )


class CSAPIDataQuery(BaseModel):
    """Entry of a collection's ``data_queries`` mapping."""
    link: CSAPIDataQueryLink


class CSAPIParameter(BaseModel):
    """
    Observable parameter declared by a collection (``parameter_names``).

    The query builder only checks that a parameter name exists, so every
    member is optional and extra members are kept.
    """
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    name: Optional[str] = None
    observedProperty: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Observed property label block"
    )
    unit: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Unit label and symbol block"
    )


class CSAPICollection(BaseModel):
    """
    CSAPI collection description.

    ``data_queries`` maps a query-type tag to its link template. Presence of
    a key, not its value, marks the query family as supported. A collection
    with no ``data_queries`` at all cannot be queried.
    """
    id: Optional[str] = Field(
        default=None,
        description="Collection identifier (used in error messages)"
    )
    title: Optional[str] = None
    description: Optional[str] = None
    extent: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Spatial and temporal extent"
    )
    data_queries: Optional[Dict[str, Optional[CSAPIDataQuery]]] = Field(
        default=None,
        description="Query-type tag -> link template"
    )
    parameter_names: Dict[str, CSAPIParameter] = Field(
        default_factory=dict,
        description="Parameter name -> parameter descriptor"
    )
    crs: List[str] = Field(
        default_factory=list,
        description="Supported coordinate reference systems"
    )
    links: List[CSAPILink] = Field(
        default_factory=list,
        description="Links to related resources"
    )


class CSAPICollectionList(BaseModel):
    """Response of ``GET /collections``."""
    collections: List[CSAPICollection] = Field(default_factory=list)
    links: List[CSAPILink] = Field(default_factory=list)


# ============================================================================
# VERTICAL LEVEL (z) PARAMETER
# ============================================================================

class ZSingle(BaseModel):
    """Single vertical level, e.g. ``850``."""
    type: Literal["single"] = "single"
    level: Number


class ZInterval(BaseModel):
    """Closed vertical interval, e.g. ``100/550``. Bounds are not reordered."""
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["interval"] = "interval"
    min_level: Number = Field(alias="minLevel")
    max_level: Number = Field(alias="maxLevel")


class ZList(BaseModel):
    """Explicit list of vertical levels, e.g. ``10,80,200``."""
    type: Literal["list"] = "list"
    levels: List[Number]


class ZRepeating(BaseModel):
    """Repeating levels: ``repeat`` steps of ``step`` starting at ``min_level``."""
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["repeating"] = "repeating"
    repeat: Number
    min_level: Number = Field(alias="minLevel")
    step: Number


ZParameter = Annotated[
    Union[ZSingle, ZInterval, ZList, ZRepeating],
    Field(discriminator="type")
]


# ============================================================================
# DATETIME PARAMETER
# ============================================================================

class DateTimeInterval(BaseModel):
    """
    Half- or fully-bounded time interval.

    At least one of ``start``/``end`` must be set when encoded; the empty
    interval is rejected by the encoder.
    """
    start: Optional[datetime] = None
    end: Optional[datetime] = None


DateTimeParameter = Union[datetime, DateTimeInterval]


# ============================================================================
# QUERY OPTIONS
# ============================================================================

class CSAPIQueryParams(BaseModel):
    """
    Optional query options shared by feature and dynamic queries.

    Unrecognised options are rejected rather than ignored.
    """
    model_config = ConfigDict(extra="forbid")

    parameter_name: Optional[List[str]] = Field(
        default=None,
        description="Parameter names to return (encoded as 'parameter-name')"
    )
    z: Optional[ZParameter] = Field(
        default=None,
        description="Vertical level selection"
    )
    datetime: Optional[DateTimeParameter] = Field(
        default=None,
        description="Instant or interval"
    )
    crs: Optional[str] = Field(
        default=None,
        description="Output CRS (must be declared by the collection)"
    )
    f: Optional[str] = Field(
        default=None,
        description="Response format, passed through verbatim"
    )


class FeatureQueryParams(CSAPIQueryParams):
    """Options for a Part 1 feature query."""


class DynamicQueryParams(CSAPIQueryParams):
    """Options for a Part 2 dynamic data query."""
