from __future__ import annotations

from typing import Any

import httpx

from clients.ipgeo_sdk.config import SDKConfig
from clients.ipgeo_sdk.errors import ApiError


class HttpClient:
    """Async JSON transport bound to one base URL.

    Cookies set by the server (the session cookie) live in the underlying
    client's jar and are sent back on every later call.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 15.0,
        verify_ssl: bool = True,
        client: httpx.AsyncClient | None = None,
        service_name: str = "API",
    ) -> None:
        self.base_url = base_url
        self.service_name = service_name
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            verify=verify_ssl,
        )

    @classmethod
    def for_backend(cls, config: SDKConfig, client: httpx.AsyncClient | None = None) -> "HttpClient":
        return cls(
            base_url=config.api_base_url,
            timeout_seconds=config.timeout_seconds,
            verify_ssl=config.verify_ssl,
            client=client,
            service_name="backend",
        )

    @classmethod
    def for_lookup(cls, config: SDKConfig, client: httpx.AsyncClient | None = None) -> "HttpClient":
        return cls(
            base_url=config.lookup_base_url,
            timeout_seconds=config.timeout_seconds,
            verify_ssl=config.verify_ssl,
            client=client,
            service_name="lookup",
        )

    async def request(
        self,
        method: str,
        path: str,
        json_body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        request_headers = {"Accept": "application/json", **(headers or {})}
        normalized_path = path if path.startswith("/") else f"/{path}"

        try:
            response = await self._client.request(
                method=method.upper(),
                url=normalized_path,
                json=json_body,
                headers=request_headers,
                params=params,
            )
        except httpx.TimeoutException as exc:
            raise ApiError(
                code="TIMEOUT_ERROR",
                message=f"Timed out waiting for the {self.service_name} service",
                details=str(exc),
                status_code=None,
            ) from exc
        except httpx.TransportError as exc:
            raise ApiError(
                code="NETWORK_ERROR",
                message=f"Network error while calling the {self.service_name} service",
                details=str(exc),
                status_code=None,
            ) from exc

        if response.status_code >= 400:
            raise ApiError.from_http_response(response)
        return self._safe_json(response)

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _safe_json(response: httpx.Response) -> dict[str, Any]:
        if not response.content:
            return {}
        try:
            payload = response.json()
        except ValueError:
            return {}
        return payload if isinstance(payload, dict) else {"data": payload}
