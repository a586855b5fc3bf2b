from __future__ import annotations

from clients.ipgeo_sdk.errors import ApiError
from clients.ipgeo_sdk.http_client import HttpClient
from clients.ipgeo_sdk.models import GeoLookupResponse


class LookupClient:
    """Third-party IP geolocation lookup (ipinfo-compatible)."""

    def __init__(self, http_client: HttpClient, token: str | None = None) -> None:
        self.http_client = http_client
        self.token = token

    async def lookup(self, address: str | None = None) -> GeoLookupResponse:
        path = f"/{address}/json" if address else "/json"
        params = {"token": self.token} if self.token else None
        try:
            payload = await self.http_client.request("GET", path, params=params)
        except ApiError as error:
            # the service answers unknown/invalid addresses with 400/404 and an error body
            if error.status_code in {400, 404}:
                return GeoLookupResponse(ip=address or "", error=error.message)
            raise
        return GeoLookupResponse.model_validate(payload)
