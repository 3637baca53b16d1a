"""
Tests for the dashboard HTTP Client Facade (http_json).
Uses httpx.MockTransport so no network is involved.
"""
import json

import httpx
import pytest

from contacts_service.dashboard.http_client import HttpJsonClient, http_json
from contacts_service.errors import RequestError


def make_client(status_code, content=b"", headers=None, calls=None):
    def handler(request):
        if calls is not None:
            calls.append(request)
        return httpx.Response(status_code, content=content, headers=headers)

    return httpx.Client(transport=httpx.MockTransport(handler), base_url="http://testserver")


class TestHttpJsonErrors:
    def test_vendor_error_field(self):
        """{"error": ...} wins as the message."""
        client = make_client(404, b'{"error":"not found"}', {"Content-Type": "application/json"})

        with pytest.raises(RequestError) as exc:
            http_json(client, "GET", "/api/contacts/x")

        assert exc.value.status == 404
        assert exc.value.message == "not found"
        assert str(exc.value) == "not found"

    def test_error_preferred_over_message(self):
        client = make_client(400, b'{"error":"name is required","message":"other"}')

        with pytest.raises(RequestError) as exc:
            http_json(client, "POST", "/api/contacts", {})

        assert exc.value.message == "name is required"

    def test_message_field(self):
        client = make_client(502, b'{"message":"bad gateway upstream"}')

        with pytest.raises(RequestError) as exc:
            http_json(client, "GET", "/api/contacts")

        assert exc.value.message == "bad gateway upstream"

    def test_raw_text_body(self):
        """Non-JSON bodies are surfaced as raw text."""
        client = make_client(503, b"Service Unavailable: maintenance")

        with pytest.raises(RequestError) as exc:
            http_json(client, "GET", "/api/contacts")

        assert exc.value.message == "Service Unavailable: maintenance"

    def test_json_without_error_fields_falls_back_to_raw(self):
        client = make_client(422, b'{"detail":"nope"}')

        with pytest.raises(RequestError) as exc:
            http_json(client, "GET", "/api/contacts")

        assert exc.value.message == '{"detail":"nope"}'

    def test_empty_body_uses_status_text(self):
        client = make_client(500)

        with pytest.raises(RequestError) as exc:
            http_json(client, "DELETE", "/api/contacts/x")

        assert exc.value.status == 500
        assert exc.value.message == "500 Internal Server Error"


class TestHttpJsonSuccess:
    def test_parsed_json(self):
        client = make_client(200, b'{"items": [{"id": "c1"}]}')
        assert http_json(client, "GET", "/api/contacts") == {"items": [{"id": "c1"}]}

    def test_empty_body_returns_empty_dict(self):
        client = make_client(204)
        assert http_json(client, "DELETE", "/api/contacts/c1") == {}

    def test_one_request_per_call(self):
        calls = []
        http = HttpJsonClient(make_client(200, b"{}", calls=calls))

        http.patch("/api/contacts/c1", {"name": "Jane"})

        assert len(calls) == 1
        assert calls[0].method == "PATCH"
        assert calls[0].url.path == "/api/contacts/c1"
        assert json.loads(calls[0].content) == {"name": "Jane"}

    def test_transport_errors_propagate(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://testserver")

        with pytest.raises(httpx.ConnectError):
            http_json(client, "GET", "/api/contacts")
