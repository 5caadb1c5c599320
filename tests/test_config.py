"""
Tests for environment-based CSAPI configuration.
"""
import pytest
from pydantic import ValidationError

from ogc_csapi.config import CSAPIConfig, get_csapi_config


def test_reads_environment():
    config = get_csapi_config()

    assert config.api_root == "https://example.csapi.server"
    assert config.request_timeout == 5.0
    assert config.collection_cache_ttl == 60
    assert config.debug_logging is False


def test_defaults(monkeypatch):
    for key in ("CSAPI_API_ROOT", "CSAPI_REQUEST_TIMEOUT", "CSAPI_COLLECTION_CACHE_TTL"):
        monkeypatch.delenv(key, raising=False)

    config = CSAPIConfig(_env_file=None)

    assert config.api_root == "http://localhost:8080"
    assert config.request_timeout == 10.0
    assert config.collection_cache_ttl == 3600
    assert config.collection_cache_size == 100


def test_config_is_cached():
    assert get_csapi_config() is get_csapi_config()


def test_base_url_strips_trailing_slash(monkeypatch):
    monkeypatch.setenv("CSAPI_API_ROOT", "https://example.csapi.server/api/")
    assert CSAPIConfig(_env_file=None).get_base_url() == "https://example.csapi.server/api"


def test_rejects_non_http_api_root(monkeypatch):
    monkeypatch.setenv("CSAPI_API_ROOT", "ftp://example.csapi.server")
    with pytest.raises(ValidationError, match="CSAPI_API_ROOT"):
        CSAPIConfig(_env_file=None)


def test_rejects_out_of_range_timeout(monkeypatch):
    monkeypatch.setenv("CSAPI_REQUEST_TIMEOUT", "0")
    with pytest.raises(ValidationError):
        CSAPIConfig(_env_file=None)
