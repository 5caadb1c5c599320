# ============================================================================
# MODULE CONTEXT - CSAPI COLLECTION METADATA CLIENT
# ============================================================================
# STATUS: Service Layer - Collection metadata provider for the query builder
# PURPOSE: Fetch CSAPI collection descriptions and hand them to CSAPIQueryBuilder
# EXPORTS: CollectionMetadataClient, CollectionClientResponse, TTLCache
# DEPENDENCIES: httpx (sync), pydantic
# SOURCE: GET {api_root}/collections, GET {api_root}/collections/{id}
# ============================================================================
"""
CSAPI Collection Metadata Client (SYNC).

Reads collection descriptions (``data_queries``, ``parameter_names``, ``crs``,
``links``) from a CSAPI server so the query builder can be constructed from
them. Transport outcomes are reported in a CollectionClientResponse rather
than raised; there is no retry.

Usage:
    with CollectionMetadataClient("https://example.csapi.server") as client:
        response = client.get_collection("weather-stations")
        if response.success:
            builder = CSAPIQueryBuilder(response.collection)

        # Or directly
        builder = client.get_query_builder("weather-stations")
"""

import httpx
import logging
import time
from dataclasses import dataclass
from threading import Lock
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from ..config import get_csapi_config
from ..models import CSAPICollection, CSAPICollectionList
from ..query_builder import CSAPIQueryBuilder
from ..urls import get_collection_url, get_collections_url

logger = logging.getLogger(__name__)


# ============================================================================
# TTL CACHE FOR COLLECTION DESCRIPTIONS
# ============================================================================

class TTLCache:
    """
    Thread-safe TTL cache.

    Entries expire after ttl_seconds and are dropped on access.
    """

    def __init__(self, ttl_seconds: int = 3600, max_size: int = 100):
        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self._cache: Dict[str, Tuple[Any, float]] = {}
        self._lock = Lock()

    def get(self, key: str) -> Optional[Any]:
        """Get entry if present and not expired."""
        with self._lock:
            if key not in self._cache:
                return None

            value, expiry = self._cache[key]
            if time.monotonic() > expiry:
                del self._cache[key]
                return None

            return value

    def set(self, key: str, value: Any) -> None:
        """Store entry with TTL, evicting the oldest 10% when full."""
        with self._lock:
            if len(self._cache) >= self.max_size and key not in self._cache:
                sorted_keys = sorted(self._cache, key=lambda k: self._cache[k][1])
                for old_key in sorted_keys[:max(1, len(sorted_keys) // 10)]:
                    del self._cache[old_key]

            self._cache[key] = (value, time.monotonic() + self.ttl_seconds)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)


@dataclass
class CollectionClientResponse:
    """Response wrapper for collection metadata calls."""
    success: bool
    status_code: int
    collection: Optional[CSAPICollection] = None
    collections: Optional[List[CSAPICollection]] = None
    error: Optional[str] = None


class CollectionMetadataClient:
    """
    CSAPI collection metadata client (SYNC).

    Args:
        api_root: CSAPI API root. Falls back to CSAPI_API_ROOT configuration.
        timeout: Request timeout in seconds. Falls back to configuration.
        cache_ttl: Collection cache TTL in seconds (0 disables caching).
        transport: Optional httpx transport (used to inject mock transports).
    """

    def __init__(
        self,
        api_root: Optional[str] = None,
        timeout: Optional[float] = None,
        cache_ttl: Optional[int] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        config = get_csapi_config()
        cache_ttl = cache_ttl if cache_ttl is not None else config.collection_cache_ttl

        self.api_root = (api_root or config.get_base_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else config.request_timeout
        self._transport = transport
        self._cache = TTLCache(ttl_seconds=cache_ttl, max_size=config.collection_cache_size) if cache_ttl > 0 else None
        self._client: Optional[httpx.Client] = None

    def __enter__(self) -> "CollectionMetadataClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get_client(self) -> httpx.Client:
        """Get or create sync HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                headers={"Accept": "application/json"},
                transport=self._transport
            )
        return self._client

    def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            self._client.close()

    def clear_cache(self) -> None:
        if self._cache is not None:
            self._cache.clear()
            logger.info("Collection metadata cache cleared")

    # ========================================================================
    # COLLECTIONS
    # ========================================================================

    def get_collection(self, collection_id: str, use_cache: bool = True) -> CollectionClientResponse:
        """
        Get a collection description.

        Args:
            collection_id: Collection identifier
            use_cache: Whether to use the cache (default True)

        Returns:
            CollectionClientResponse with collection or error
        """
        if use_cache and self._cache is not None:
            cached = self._cache.get(collection_id)
            if cached is not None:
                logger.debug(f"Collection cache hit: {collection_id}")
                return CollectionClientResponse(success=True, status_code=200, collection=cached)

        url = get_collection_url(self.api_root, collection_id)
        data, error = self._get_json(url, not_found=f"Collection not found: {collection_id}")
        if error is not None:
            return error

        try:
            collection = CSAPICollection.model_validate(data)
        except ValidationError as e:
            return CollectionClientResponse(
                success=False,
                status_code=502,
                error=f"Invalid collection description for '{collection_id}': {e}"
            )

        if use_cache and self._cache is not None:
            self._cache.set(collection_id, collection)
            logger.debug(f"Collection cache store: {collection_id}")

        logger.info(f"Fetched collection description '{collection_id}'")
        return CollectionClientResponse(success=True, status_code=200, collection=collection)

    def list_collections(self) -> CollectionClientResponse:
        """
        List collection descriptions published by the server.

        Returns:
            CollectionClientResponse with collections or error
        """
        data, error = self._get_json(get_collections_url(self.api_root), not_found="Collections endpoint not found")
        if error is not None:
            return error

        try:
            listing = CSAPICollectionList.model_validate(data)
        except ValidationError as e:
            return CollectionClientResponse(
                success=False,
                status_code=502,
                error=f"Invalid collections listing: {e}"
            )

        logger.info(f"Listed {len(listing.collections)} collections from {self.api_root}")
        return CollectionClientResponse(
            success=True,
            status_code=200,
            collections=listing.collections
        )

    def get_query_builder(self, collection_id: str, use_cache: bool = True) -> CSAPIQueryBuilder:
        """
        Fetch a collection description and build its query builder.

        Raises:
            ValueError: If the collection cannot be fetched
            ConfigurationError: If the collection declares no data_queries
        """
        response = self.get_collection(collection_id, use_cache=use_cache)
        if not response.success:
            raise ValueError(response.error)
        return CSAPIQueryBuilder(response.collection)

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _get_json(self, url: str, not_found: str) -> Tuple[Optional[Any], Optional[CollectionClientResponse]]:
        """GET a JSON document. Returns (body, None) on success, (None, error response) otherwise."""
        client = self._get_client()

        try:
            response = client.get(url)

            if response.status_code == 404:
                return None, CollectionClientResponse(success=False, status_code=404, error=not_found)

            if response.status_code >= 400:
                return None, CollectionClientResponse(
                    success=False,
                    status_code=response.status_code,
                    error=f"CSAPI error: {response.text[:200]}"
                )

            return response.json(), None

        except httpx.TimeoutException:
            return None, CollectionClientResponse(
                success=False,
                status_code=504,
                error=f"CSAPI timeout after {self.timeout}s"
            )
        except httpx.RequestError as e:
            return None, CollectionClientResponse(
                success=False,
                status_code=500,
                error=f"CSAPI request error: {str(e)}"
            )
        except ValueError as e:
            return None, CollectionClientResponse(
                success=False,
                status_code=502,
                error=f"CSAPI returned invalid JSON: {str(e)}"
            )
