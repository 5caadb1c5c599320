"""
CSAPI service layer - collection metadata provider.
"""

from .collection_client import CollectionClientResponse, CollectionMetadataClient, TTLCache

__all__ = [
    "CollectionClientResponse",
    "CollectionMetadataClient",
    "TTLCache"
]
