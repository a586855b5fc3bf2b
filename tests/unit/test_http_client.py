import asyncio

import httpx
import pytest

from clients.ipgeo_sdk.config import SDKConfig
from clients.ipgeo_sdk.errors import ApiError
from clients.ipgeo_sdk.http_client import HttpClient

BASE_URL = "http://backend.example.org/api/"


def _client(handler) -> HttpClient:
    transport = httpx.MockTransport(handler)
    return HttpClient(base_url=BASE_URL, client=httpx.AsyncClient(base_url=BASE_URL, transport=transport))


def test_request_joins_path_under_base_url() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json={"history": []})

    payload = asyncio.run(_client(handler).request("GET", "/history"))

    assert seen == ["/api/history"]
    assert payload == {"history": []}


def test_session_cookie_is_sent_on_later_calls() -> None:
    cookies: list[str | None] = []

    def handler(request: httpx.Request) -> httpx.Response:
        cookies.append(request.headers.get("cookie"))
        if request.url.path.endswith("/auth/login"):
            return httpx.Response(200, json={"message": "ok"}, headers={"Set-Cookie": "token=abc123; Path=/"})
        return httpx.Response(200, json={"user": None})

    async def scenario() -> None:
        client = _client(handler)
        await client.request("POST", "/auth/login", json_body={"email": "a@b.com", "password": "secret123"})
        await client.request("GET", "/auth/me")
        await client.aclose()

    asyncio.run(scenario())

    assert cookies[0] is None
    assert cookies[1] == "token=abc123"


def test_error_status_raises_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"message": "Server error"})

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(_client(handler).request("GET", "/history"))

    assert exc_info.value.status_code == 500
    assert exc_info.value.server_message == "Server error"


def test_timeout_maps_to_timeout_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(_client(handler).request("GET", "/auth/me"))

    assert exc_info.value.code == "TIMEOUT_ERROR"
    assert exc_info.value.is_timeout
    assert exc_info.value.status_code is None


def test_transport_failure_maps_to_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(_client(handler).request("GET", "/auth/me"))

    assert exc_info.value.code == "NETWORK_ERROR"


def test_empty_and_list_bodies_are_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/empty"):
            return httpx.Response(204)
        return httpx.Response(200, json=[1, 2])

    async def scenario() -> tuple[dict, dict]:
        client = _client(handler)
        return await client.request("GET", "empty"), await client.request("GET", "list")

    empty, listing = asyncio.run(scenario())

    assert empty == {}
    assert listing == {"data": [1, 2]}


def test_factories_bind_configured_base_urls() -> None:
    config = SDKConfig(api_base_url=BASE_URL, lookup_base_url="https://ipinfo.example.org/")

    backend = HttpClient.for_backend(config)
    lookup = HttpClient.for_lookup(config)

    assert backend.base_url == BASE_URL
    assert backend.service_name == "backend"
    assert lookup.base_url == "https://ipinfo.example.org/"
    assert lookup.service_name == "lookup"
    asyncio.run(backend.aclose())
    asyncio.run(lookup.aclose())
