from __future__ import annotations

import json

import httpx

from clients.ipgeo_sdk.config import SDKConfig

from ipgeo_tracker.app.main import AppServices

API_BASE_URL = "http://backend.example.org/api/"
LOOKUP_BASE_URL = "https://ipinfo.example.org/"
SESSION_COOKIE = "token=session-1"
PASSWORDS = {"secret123", "  padded secret  "}

USER_PAYLOAD = {"id": 1, "username": "a", "email": "a@b.com", "role": "user", "createdAt": "2024-01-01T00:00:00Z"}

LOOKUPS = {
    "/json": {"ip": "203.0.113.9", "city": "Lima", "region": "Lima", "country": "PE", "loc": "-12.0432,-77.0282"},
    "/8.8.8.8/json": {
        "ip": "8.8.8.8",
        "city": "Mountain View",
        "region": "California",
        "country": "US",
        "loc": "37.386,-122.0838",
        "org": "AS15169 Google LLC",
        "timezone": "America/Los_Angeles",
    },
    "/1.1.1.1/json": {"ip": "1.1.1.1", "city": "Sydney", "region": "New South Wales", "country": "AU", "loc": "-33.8688,151.2093"},
}


class FakeBackend:
    """Cookie-session backend with an in-memory history table."""

    def __init__(self) -> None:
        self.requests: list[tuple[str, str]] = []
        self.bodies: list[dict] = []
        self.history: list[dict] = []
        self._next_id = 1

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api")
        body = json.loads(request.content) if request.content else {}
        self.requests.append((request.method, path))
        self.bodies.append(body)

        if path == "/auth/login":
            if body.get("password") not in PASSWORDS:
                return httpx.Response(401, json={"message": "Invalid email or password"})
            return httpx.Response(
                200,
                json={"message": "Login successful", "user": USER_PAYLOAD},
                headers={"Set-Cookie": f"{SESSION_COOKIE}; Path=/"},
            )
        if path == "/auth/signup":
            if body.get("email") == "taken@b.com":
                return httpx.Response(400, json={"message": "User already exists"})
            return httpx.Response(201, json={"message": "User registered successfully", "user": USER_PAYLOAD})

        if SESSION_COOKIE not in request.headers.get("cookie", ""):
            return httpx.Response(401, json={"message": "Not authenticated"})

        if path == "/auth/me":
            return httpx.Response(200, json={"user": USER_PAYLOAD})
        if path == "/auth/logout":
            return httpx.Response(200, json={"message": "Logged out"}, headers={"Set-Cookie": "token=; Max-Age=0; Path=/"})
        if path == "/history" and request.method == "GET":
            return httpx.Response(200, json={"history": list(reversed(self.history))})
        if path == "/history" and request.method == "POST":
            row = {"id": self._next_id, "searched_at": f"2024-05-01T10:{self._next_id:02d}:00Z", **body}
            self._next_id += 1
            self.history.append(row)
            return httpx.Response(201, json={"message": "Saved", "history": row})
        if path == "/history/bulk-delete":
            ids = set(body.get("ids", []))
            self.history = [row for row in self.history if row["id"] not in ids]
            return httpx.Response(200, json={"message": "Deleted"})
        return httpx.Response(404, json={"message": "Not found"})

    def paths(self) -> list[tuple[str, str]]:
        return list(self.requests)


def lookup_handler(request: httpx.Request) -> httpx.Response:
    payload = LOOKUPS.get(request.url.path)
    if payload is None:
        return httpx.Response(404, json={"status": 404, "error": {"title": "Wrong ip", "message": "Please provide a valid IP address"}})
    return httpx.Response(200, json=payload)


def build_services(backend: FakeBackend) -> AppServices:
    config = SDKConfig(api_base_url=API_BASE_URL, lookup_base_url=LOOKUP_BASE_URL)
    return AppServices.build(
        config,
        backend_client=httpx.AsyncClient(base_url=API_BASE_URL, transport=httpx.MockTransport(backend)),
        lookup_client=httpx.AsyncClient(base_url=LOOKUP_BASE_URL, transport=httpx.MockTransport(lookup_handler)),
    )
