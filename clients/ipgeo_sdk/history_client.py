from __future__ import annotations

from typing import Any, Iterable

from clients.ipgeo_sdk.http_client import HttpClient
from clients.ipgeo_sdk.models import HistoryCreate, HistoryEntry, HistoryListResponse


class HistoryClient:
    def __init__(self, http_client: HttpClient) -> None:
        self.http_client = http_client

    async def list(self) -> list[HistoryEntry]:
        response = await self.http_client.request("GET", "/history")
        return HistoryListResponse.model_validate({"history": response.get("history") or []}).history

    async def create(self, entry: HistoryCreate) -> dict[str, Any]:
        return await self.http_client.request("POST", "/history", json_body=entry.to_payload())

    async def bulk_delete(self, ids: Iterable[int]) -> None:
        await self.http_client.request("POST", "/history/bulk-delete", json_body={"ids": sorted(ids)})
