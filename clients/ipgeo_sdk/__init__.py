from clients.ipgeo_sdk.auth_client import AuthClient
from clients.ipgeo_sdk.config import ConfigError, SDKConfig
from clients.ipgeo_sdk.errors import ApiError
from clients.ipgeo_sdk.history_client import HistoryClient
from clients.ipgeo_sdk.http_client import HttpClient
from clients.ipgeo_sdk.lookup_client import LookupClient
from clients.ipgeo_sdk.models import (
    AuthResponse,
    GeoLookupResponse,
    GeoRecord,
    HistoryCreate,
    HistoryEntry,
    LoginData,
    LogoutResult,
    SignupData,
    User,
)

__all__ = [
    "SDKConfig",
    "ConfigError",
    "ApiError",
    "HttpClient",
    "AuthClient",
    "HistoryClient",
    "LookupClient",
    "AuthResponse",
    "GeoLookupResponse",
    "GeoRecord",
    "HistoryCreate",
    "HistoryEntry",
    "LoginData",
    "LogoutResult",
    "SignupData",
    "User",
]
