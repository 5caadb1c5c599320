# ============================================================================
# MODULE CONTEXT - CSAPI ERRORS
# ============================================================================
# STATUS: Core - Error taxonomy for query construction
# PURPOSE: Typed exceptions raised by the query builder and encoders
# EXPORTS: CSAPIError, ConfigurationError, UnsupportedQueryTypeError,
#          UnknownParameterError, UnsupportedCrsError, MalformedParameterError
# DEPENDENCIES: typing
# PATTERNS: Exception hierarchy rooted at ValueError
# ============================================================================

"""
CSAPI Error Taxonomy

Every error is raised synchronously at the validation step that detects it
and propagates straight to the caller. All of them subclass ``ValueError`` so
callers that only care about "bad input" can catch that.
"""

from typing import Iterable, Optional


class CSAPIError(ValueError):
    """Base class for all CSAPI query errors."""

    def __init__(self, message: str, collection_id: Optional[str] = None):
        super().__init__(message)
        self.collection_id = collection_id


class ConfigurationError(CSAPIError):
    """Collection descriptor is missing a mandatory query-capability declaration."""


class UnsupportedQueryTypeError(CSAPIError):
    """Requested query family is not declared by the collection."""

    def __init__(self, collection_id: Optional[str], query_type: str):
        super().__init__(
            f"Collection '{collection_id}' does not support {query_type} queries.",
            collection_id=collection_id
        )
        self.query_type = query_type


class UnknownParameterError(CSAPIError):
    """Requested parameter name is not in the collection's parameter set."""

    def __init__(self, collection_id: Optional[str], parameter: str):
        super().__init__(
            f"Parameter '{parameter}' is not supported by collection '{collection_id}'.",
            collection_id=collection_id
        )
        self.parameter = parameter


class UnsupportedCrsError(CSAPIError):
    """Requested CRS is not in the supported CRS set."""

    def __init__(
        self,
        crs: str,
        collection_id: Optional[str] = None,
        supported: Optional[Iterable[str]] = None
    ):
        self.crs = crs
        self.supported = list(supported) if supported is not None else None

        if collection_id is not None:
            message = f"CRS '{crs}' is not supported by collection '{collection_id}'."
        else:
            message = f"Unsupported CRS: '{crs}'. Supported CRS are: {', '.join(self.supported or [])}"

        super().__init__(message, collection_id=collection_id)


class MalformedParameterError(CSAPIError):
    """Structurally invalid datetime, bounding box or query option value."""
