"""
Test Configuration and Fixtures

Shared collection descriptions and environment setup for the CSAPI test suite.
"""
import copy

import pytest

from ogc_csapi.config import get_csapi_config

API_ROOT = "https://example.csapi.server"

# Test environment configuration
TEST_ENV = {
    "CSAPI_API_ROOT": API_ROOT,
    "CSAPI_REQUEST_TIMEOUT": "5",
    "CSAPI_COLLECTION_CACHE_TTL": "60",
}

WEATHER_COLLECTION = {
    "id": "weather-stations",
    "title": "Weather Stations",
    "data_queries": {
        "feature": {
            "link": {
                "href": f"{API_ROOT}/collections/weather-stations/feature",
                "rel": "data"
            }
        },
        "dynamic": {
            "link": {
                "href": f"{API_ROOT}/collections/weather-stations/dynamic",
                "rel": "data"
            }
        },
        "instances": {
            "link": {
                "href": f"{API_ROOT}/collections/weather-stations/instances",
                "rel": "data"
            }
        }
    },
    "parameter_names": {
        "temperature": {
            "id": "temperature",
            "name": "Air temperature",
            "observedProperty": {"label": {"id": "temp", "en": "Temperature"}},
            "unit": {"label": {"en": "Celsius"}, "symbol": {"value": "C", "type": "text"}}
        },
        "humidity": {
            "id": "humidity",
            "name": "Relative humidity"
        }
    },
    "crs": ["EPSG:4326", "EPSG:3857"],
    "links": [
        {"href": f"{API_ROOT}/collections/weather-stations", "rel": "self", "type": "application/json"}
    ]
}


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Configure the CSAPI environment and reset the cached configuration."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    get_csapi_config.cache_clear()
    yield
    get_csapi_config.cache_clear()


@pytest.fixture
def api_root():
    return API_ROOT


@pytest.fixture
def weather_collection():
    """Full collection description supporting feature, dynamic and instances queries."""
    return copy.deepcopy(WEATHER_COLLECTION)


@pytest.fixture
def dynamic_only_collection(weather_collection):
    """Collection that declares dynamic queries only."""
    weather_collection["data_queries"] = {
        "dynamic": weather_collection["data_queries"]["dynamic"]
    }
    return weather_collection
