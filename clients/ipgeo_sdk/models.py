from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class User(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    username: str
    email: str
    role: str = "user"
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")


class LoginData(BaseModel):
    email: str
    password: str


class SignupData(BaseModel):
    username: str
    email: str
    password: str
    # backend field name, spelled as the API expects it
    confimpassword: str
    role: str | None = None


class AuthResponse(BaseModel):
    success: bool
    message: str
    user: Optional[User] = None


class LogoutResult(BaseModel):
    success: bool


class GeoLookupResponse(BaseModel):
    """Raw payload of the third-party lookup service."""

    model_config = ConfigDict(extra="ignore")

    ip: str = ""
    city: str | None = None
    region: str | None = None
    country: str | None = None
    loc: str | None = None
    org: str | None = None
    timezone: str | None = None
    bogon: bool = False
    error: str | None = None

    @field_validator("error", mode="before")
    @classmethod
    def _flatten_error(cls, value):
        if isinstance(value, dict):
            return str(value.get("message") or value.get("title") or "lookup error")
        return value

    @property
    def is_miss(self) -> bool:
        return self.bogon or bool(self.error)


def parse_coordinates(loc: str | None) -> Tuple[Decimal, Decimal] | None:
    if not loc or "," not in loc:
        return None
    raw_lat, raw_lng = loc.split(",", 1)
    try:
        return Decimal(raw_lat.strip()), Decimal(raw_lng.strip())
    except InvalidOperation:
        return None


class GeoRecord(BaseModel):
    """The location currently on display. Never persisted directly."""

    model_config = ConfigDict(frozen=True)

    address: str
    city: str | None = None
    region: str | None = None
    country: str | None = None
    coordinates: Tuple[Decimal, Decimal] | None = None
    organization: str | None = None
    timezone: str | None = None

    @property
    def loc(self) -> str | None:
        if self.coordinates is None:
            return None
        latitude, longitude = self.coordinates
        return f"{latitude},{longitude}"

    @classmethod
    def from_lookup(cls, payload: GeoLookupResponse) -> "GeoRecord":
        return cls(
            address=payload.ip,
            city=payload.city,
            region=payload.region,
            country=payload.country,
            coordinates=parse_coordinates(payload.loc),
            organization=payload.org,
            timezone=payload.timezone,
        )

    @classmethod
    def from_history(cls, entry: "HistoryEntry") -> "GeoRecord":
        coordinates = None
        if entry.latitude is not None and entry.longitude is not None:
            coordinates = (entry.latitude, entry.longitude)
        return cls(
            address=entry.address,
            city=entry.city,
            region=entry.region,
            country=entry.country,
            coordinates=coordinates,
            timezone=entry.timezone,
        )


class HistoryEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int
    address: str = Field(alias="ip_address")
    city: str | None = None
    region: str | None = None
    country: str | None = None
    latitude: Decimal | None = None
    longitude: Decimal | None = None
    timezone: str | None = None
    searched_at: datetime

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _blank_coordinate(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class HistoryCreate(BaseModel):
    ip_address: str
    city: str | None = None
    region: str | None = None
    country: str | None = None
    latitude: Decimal | None = None
    longitude: Decimal | None = None
    timezone: str | None = None

    @classmethod
    def from_record(cls, record: GeoRecord) -> "HistoryCreate":
        latitude, longitude = record.coordinates if record.coordinates else (None, None)
        return cls(
            ip_address=record.address,
            city=record.city,
            region=record.region,
            country=record.country,
            latitude=latitude,
            longitude=longitude,
            timezone=record.timezone,
        )

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


class HistoryListResponse(BaseModel):
    history: List[HistoryEntry] = Field(default_factory=list)
