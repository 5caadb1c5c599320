"""
Tests for CollectionMetadataClient using httpx.MockTransport.
"""
import httpx
import pytest

from ogc_csapi.exceptions import ConfigurationError
from ogc_csapi.models import QueryType
from ogc_csapi.services.collection_client import CollectionMetadataClient, TTLCache


class RecordingTransport(httpx.MockTransport):
    """MockTransport that records requested paths."""

    def __init__(self, routes):
        self.routes = routes
        self.requests = []
        super().__init__(self.handle)

    def handle(self, request):
        self.requests.append(request.url.path)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"code": "NotFound"})
        if callable(route):
            return route(request)
        return httpx.Response(200, json=route)


@pytest.fixture
def transport(weather_collection):
    return RecordingTransport({
        "/collections/weather-stations": weather_collection,
        "/collections": {"collections": [weather_collection], "links": []},
    })


@pytest.fixture
def client(transport):
    client = CollectionMetadataClient(transport=transport)
    yield client
    client.close()


def test_uses_configured_api_root(client):
    assert client.api_root == "https://example.csapi.server"
    assert client.timeout == 5.0


def test_get_collection(client):
    response = client.get_collection("weather-stations")

    assert response.success
    assert response.status_code == 200
    assert response.collection.id == "weather-stations"
    assert response.collection.crs == ["EPSG:4326", "EPSG:3857"]


def test_collection_is_cached(client, transport):
    client.get_collection("weather-stations")
    client.get_collection("weather-stations")
    client.get_collection("weather-stations", use_cache=False)

    assert transport.requests == ["/collections/weather-stations"] * 2


def test_clear_cache_forces_refetch(client, transport):
    client.get_collection("weather-stations")
    client.clear_cache()
    client.get_collection("weather-stations")

    assert len(transport.requests) == 2


def test_cache_disabled_with_zero_ttl(transport):
    with CollectionMetadataClient(cache_ttl=0, transport=transport) as client:
        client.get_collection("weather-stations")
        client.get_collection("weather-stations")

    assert len(transport.requests) == 2


def test_missing_collection(client):
    response = client.get_collection("unknown")

    assert not response.success
    assert response.status_code == 404
    assert "unknown" in response.error


def test_server_error(weather_collection):
    transport = RecordingTransport({
        "/collections/weather-stations": lambda request: httpx.Response(503, text="maintenance")
    })
    with CollectionMetadataClient(transport=transport) as client:
        response = client.get_collection("weather-stations")

    assert response.status_code == 503
    assert "maintenance" in response.error


def test_timeout_is_reported_as_504():
    def raise_timeout(request):
        raise httpx.ReadTimeout("timed out", request=request)

    transport = RecordingTransport({"/collections/weather-stations": raise_timeout})
    with CollectionMetadataClient(transport=transport) as client:
        response = client.get_collection("weather-stations")

    assert response.status_code == 504
    assert "timeout" in response.error


def test_connection_error_is_reported_as_500():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    transport = RecordingTransport({"/collections/weather-stations": refuse})
    with CollectionMetadataClient(transport=transport) as client:
        response = client.get_collection("weather-stations")

    assert response.status_code == 500
    assert "connection refused" in response.error


def test_invalid_json_body():
    transport = RecordingTransport({
        "/collections/weather-stations": lambda request: httpx.Response(200, text="<html>")
    })
    with CollectionMetadataClient(transport=transport) as client:
        response = client.get_collection("weather-stations")

    assert response.status_code == 502
    assert not response.success


def test_invalid_collection_description(weather_collection):
    weather_collection["crs"] = "EPSG:4326"
    transport = RecordingTransport({"/collections/weather-stations": weather_collection})
    with CollectionMetadataClient(transport=transport) as client:
        response = client.get_collection("weather-stations")

    assert not response.success
    assert response.status_code == 502
    assert "weather-stations" in response.error


def test_invalid_collections_listing():
    transport = RecordingTransport({"/collections": {"collections": [{"id": "bad", "crs": "EPSG:4326"}]}})
    with CollectionMetadataClient(transport=transport) as client:
        response = client.list_collections()

    assert not response.success
    assert response.status_code == 502
    assert response.collections is None


def test_get_query_builder_for_invalid_description(weather_collection):
    weather_collection["crs"] = "EPSG:4326"
    transport = RecordingTransport({"/collections/weather-stations": weather_collection})
    with CollectionMetadataClient(transport=transport) as client:
        with pytest.raises(ValueError, match="Invalid collection description"):
            client.get_query_builder("weather-stations")


def test_list_collections(client):
    response = client.list_collections()

    assert response.success
    assert [c.id for c in response.collections] == ["weather-stations"]


def test_get_query_builder(client):
    builder = client.get_query_builder("weather-stations")

    assert builder.supported_queries() == {QueryType.FEATURE, QueryType.DYNAMIC, QueryType.INSTANCES}
    assert builder.build_instances_download_url().endswith("/collections/weather-stations/instances")


def test_get_query_builder_for_missing_collection(client):
    with pytest.raises(ValueError, match="Collection not found"):
        client.get_query_builder("unknown")


def test_get_query_builder_without_data_queries(weather_collection):
    del weather_collection["data_queries"]
    transport = RecordingTransport({"/collections/weather-stations": weather_collection})
    with CollectionMetadataClient(transport=transport) as client:
        with pytest.raises(ConfigurationError):
            client.get_query_builder("weather-stations")


class TestTTLCache:

    def test_expired_entries_are_dropped(self, monkeypatch):
        now = [1000.0]
        monkeypatch.setattr("ogc_csapi.services.collection_client.time.monotonic", lambda: now[0])

        cache = TTLCache(ttl_seconds=10)
        cache.set("a", 1)
        assert cache.get("a") == 1

        now[0] += 11
        assert cache.get("a") is None
        assert len(cache) == 0

    def test_oldest_entries_evicted_when_full(self):
        cache = TTLCache(ttl_seconds=60, max_size=3)
        for key in ("a", "b", "c", "d"):
            cache.set(key, key)

        assert len(cache) == 3
        assert cache.get("a") is None
        assert cache.get("d") == "d"
