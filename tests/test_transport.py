"""Tests for transport module."""

import pytest
import requests
import responses

from lastfm_mcp import transport
from lastfm_mcp.constants import API_ROOT
from lastfm_mcp.exceptions import TransportError


class TestRequestsTransport:
    """Tests for RequestsTransport.send."""

    @responses.activate
    def test_returns_body_text(self):
        responses.add(responses.GET, API_ROOT, body='{"user": {}}', status=200)

        body = transport.RequestsTransport().send({"method": "user.getInfo", "user": "rj"})

        assert body == '{"user": {}}'

    @responses.activate
    def test_sends_query_as_params(self):
        responses.add(responses.GET, API_ROOT, json={}, status=200)

        transport.RequestsTransport().send({"method": "user.getTopTracks", "limit": 5, "page": 2})

        url = responses.calls[0].request.url
        assert "method=user.getTopTracks" in url
        assert "limit=5" in url
        assert "page=2" in url

    @responses.activate
    def test_custom_base_url(self):
        responses.add(responses.GET, "https://example.test/2.0/", json={}, status=200)

        transport.RequestsTransport(base_url="https://example.test/2.0/").send({})

        assert len(responses.calls) == 1

    @responses.activate
    def test_http_error_raises_transport_error(self):
        responses.add(
            responses.GET, API_ROOT,
            json={"error": 10, "message": "Invalid API key"}, status=403,
        )

        with pytest.raises(TransportError) as exc_info:
            transport.RequestsTransport().send({"method": "user.getInfo"})

        assert exc_info.value.status_code == 403
        assert "Invalid API key" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, requests.exceptions.HTTPError)

    @responses.activate
    def test_connection_error_raises_transport_error(self):
        responses.add(
            responses.GET, API_ROOT,
            body=requests.exceptions.ConnectionError("no route to host"),
        )

        with pytest.raises(TransportError) as exc_info:
            transport.RequestsTransport().send({"method": "user.getInfo"})

        assert exc_info.value.status_code is None

    @responses.activate
    def test_non_json_error_body(self):
        responses.add(responses.GET, API_ROOT, body="Bad Gateway", status=502)

        with pytest.raises(TransportError) as exc_info:
            transport.RequestsTransport().send({})

        assert exc_info.value.status_code == 502
