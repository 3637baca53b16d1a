"""
HTTP Client Facade for the dashboard.
Every call to the Contacts REST API goes through http_json so all four
endpoints share one error contract.
"""
import json
import logging
from typing import Any, Optional

import httpx

from ..errors import RequestError

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response, raw: str, data: Any) -> str:
    if isinstance(data, dict):
        reason = data.get("error") or data.get("message")
        if reason:
            return str(reason)
    if raw:
        return raw
    return f"{response.status_code} {response.reason_phrase}"


def http_json(client: httpx.Client, method: str, url: str, json_body: Optional[dict] = None) -> Any:
    """
    Make one HTTP call and return its JSON body.

    The body is read once as text and parsed if it is JSON, otherwise the raw
    text is kept for the error message.

    Raises:
        RequestError on any non-2xx status.
        httpx.HTTPError on transport failures.
    """
    response = client.request(method, url, json=json_body)
    raw = response.text

    data = None
    if raw:
        try:
            data = json.loads(raw)
        except ValueError:
            pass

    if not response.is_success:
        message = _error_message(response, raw, data)
        logger.warning(f"⚠️ {method} {url} -> {response.status_code}: {message}")
        raise RequestError(response.status_code, message)

    return data if data is not None else {}


class HttpJsonClient:
    """Binds an httpx.Client (or FastAPI TestClient) to http_json."""

    def __init__(self, client: httpx.Client):
        self.client = client

    def get(self, url: str) -> Any:
        return http_json(self.client, "GET", url)

    def post(self, url: str, body: dict) -> Any:
        return http_json(self.client, "POST", url, body)

    def patch(self, url: str, body: dict) -> Any:
        return http_json(self.client, "PATCH", url, body)

    def delete(self, url: str) -> Any:
        return http_json(self.client, "DELETE", url)
