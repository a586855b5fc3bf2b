from __future__ import annotations

from typing import Any

from clients.ipgeo_sdk.http_client import HttpClient
from clients.ipgeo_sdk.models import LoginData, SignupData, User


class AuthClient:
    def __init__(self, http_client: HttpClient) -> None:
        self.http_client = http_client

    async def me(self) -> User:
        response = await self.http_client.request("GET", "/auth/me")
        return User.model_validate(response.get("user"))

    async def signup(self, data: SignupData) -> dict[str, Any]:
        payload = data.model_dump(exclude_none=True)
        response = await self.http_client.request("POST", "/auth/signup", json_body=payload)
        return _auth_envelope(response)

    async def login(self, data: LoginData) -> dict[str, Any]:
        response = await self.http_client.request("POST", "/auth/login", json_body=data.model_dump())
        return _auth_envelope(response)

    async def logout(self) -> None:
        await self.http_client.request("POST", "/auth/logout", json_body={})


def _auth_envelope(response: dict[str, Any]) -> dict[str, Any]:
    return {
        "message": str(response.get("message") or ""),
        "user": User.model_validate(response.get("user")),
    }
