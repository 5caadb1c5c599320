# ============================================================================
# MODULE CONTEXT - CSAPI CANONICAL URLS
# ============================================================================
# STATUS: Support - Canonical resource paths for CSAPI Parts 1 and 2
# PURPOSE: Build resource collection URLs from an API root
# EXPORTS: get_*_url path builders, get_resource_url
# DEPENDENCIES: urllib.parse
# ============================================================================

"""
Canonical CSAPI resource URLs.

Part 1 (feature resources): systems, deployments, procedures,
samplingFeatures, properties. Part 2 (dynamic data): datastreams,
observations, controlStreams, commands, feasibility, systemEvents.
"""

from typing import Optional
from urllib.parse import quote


def _root(api_root: str) -> str:
    return api_root.rstrip("/")


def _segment(identifier: str) -> str:
    return quote(str(identifier), safe="")


# Part 1 - Feature Resources

def get_systems_url(api_root: str) -> str:
    return f"{_root(api_root)}/systems"


def get_deployments_url(api_root: str) -> str:
    return f"{_root(api_root)}/deployments"


def get_procedures_url(api_root: str) -> str:
    return f"{_root(api_root)}/procedures"


def get_sampling_features_url(api_root: str) -> str:
    return f"{_root(api_root)}/samplingFeatures"


def get_properties_url(api_root: str) -> str:
    return f"{_root(api_root)}/properties"


# Part 2 - Dynamic Data

def get_datastreams_url(api_root: str) -> str:
    return f"{_root(api_root)}/datastreams"


def get_observations_url(api_root: str) -> str:
    return f"{_root(api_root)}/observations"


def get_control_streams_url(api_root: str) -> str:
    return f"{_root(api_root)}/controlStreams"


def get_commands_url(api_root: str) -> str:
    return f"{_root(api_root)}/commands"


def get_feasibility_url(api_root: str) -> str:
    return f"{_root(api_root)}/feasibility"


def get_system_events_url(api_root: str, system_id: Optional[str] = None) -> str:
    """Events of all systems, or of one system when ``system_id`` is given."""
    if system_id is None:
        return f"{_root(api_root)}/systemEvents"
    return f"{get_systems_url(api_root)}/{_segment(system_id)}/events"


# Nested resources

def get_system_datastreams_url(api_root: str, system_id: str) -> str:
    return f"{get_systems_url(api_root)}/{_segment(system_id)}/datastreams"


def get_datastream_observations_url(api_root: str, datastream_id: str) -> str:
    return f"{get_datastreams_url(api_root)}/{_segment(datastream_id)}/observations"


# Collections (OGC API - Common)

def get_collections_url(api_root: str) -> str:
    return f"{_root(api_root)}/collections"


def get_collection_url(api_root: str, collection_id: str) -> str:
    return f"{get_collections_url(api_root)}/{_segment(collection_id)}"


def get_resource_url(collection_url: str, resource_id: str) -> str:
    """
    URL of a single resource inside a collection URL.

    Example:
        get_resource_url(get_systems_url(root), "sys-001") -> ".../systems/sys-001"
    """
    return f"{collection_url.rstrip('/')}/{_segment(resource_id)}"
