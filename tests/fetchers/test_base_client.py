"""Tests for the shared provider client and error mapping."""

import httpx
import pytest

from marketpulse.fetchers.base import MalformedResponse, NetworkError, NotFound, ProviderClient
from tests.helpers import json_response, mock_transport, provider_config


def _client(handler) -> ProviderClient:
    return ProviderClient(provider_config("https://api.example.test/v1"), transport=mock_transport(handler))


class TestGetJson:
    def test_decodes_json(self):
        client = _client(lambda request: json_response({"ok": True}))
        assert client.get_json("/ping") == {"ok": True}

    def test_sends_params(self):
        seen = {}

        def handler(request):
            seen["url"] = request.url
            return json_response([])

        _client(handler).get_json("/things", {"page": 2})
        assert seen["url"].params["page"] == "2"
        assert seen["url"].path == "/v1/things"

    def test_404_is_not_found(self):
        client = _client(lambda request: json_response({"error": "coin not found"}, 404))
        with pytest.raises(NotFound):
            client.get_json("/coins/nope")

    def test_500_is_network_error(self):
        client = _client(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(NetworkError) as exc_info:
            client.get_json("/ping")
        assert exc_info.value.status_code == 500
        assert str(exc_info.value) == "API error: 500"
        assert exc_info.value.response_text == "boom"

    def test_429_is_network_error(self):
        client = _client(lambda request: httpx.Response(429))
        with pytest.raises(NetworkError):
            client.get_json("/ping")

    def test_transport_failure_is_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NetworkError):
            _client(handler).get_json("/ping")

    def test_invalid_json_is_malformed(self):
        client = _client(lambda request: httpx.Response(200, text="<html>nope</html>"))
        with pytest.raises(MalformedResponse):
            client.get_json("/ping")

    def test_retries_transient_errors(self, monkeypatch):
        monkeypatch.setattr("time.sleep", lambda seconds: None)
        calls = {"n": 0}

        def handler(request):
            calls["n"] += 1
            if calls["n"] < 3:
                raise httpx.ReadTimeout("slow", request=request)
            return json_response({"ok": True})

        config = provider_config("https://api.example.test/v1")
        config.retry.max_attempts = 3
        client = ProviderClient(config, transport=mock_transport(handler))
        assert client.get_json("/ping") == {"ok": True}
        assert calls["n"] == 3


class TestLifecycle:
    def test_context_manager_closes_client(self):
        client = _client(lambda request: json_response({}))
        with client:
            client.get_json("/ping")
            assert client._client is not None
        assert client._client is None

    def test_api_key_masked_in_logs(self):
        masked = ProviderClient._loggable({"apikey": "secret", "x_cg_demo_api_key": "s2", "page": 1})
        assert masked == {"apikey": "***", "x_cg_demo_api_key": "***", "page": 1}
