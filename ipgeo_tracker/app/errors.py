from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from clients.ipgeo_sdk.errors import ApiError


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    UNAUTHENTICATED = "unauthenticated"
    REMOTE_FAILURE = "remote_failure"
    LOOKUP_MISS = "lookup_miss"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class AppError:
    """User-facing error state kept by a component instead of raising."""

    kind: ErrorKind
    message: str
    trace_id: str | None = None
    status_code: int | None = None

    @classmethod
    def validation(cls, message: str) -> "AppError":
        return cls(kind=ErrorKind.VALIDATION, message=message)

    @classmethod
    def lookup_miss(cls, message: str) -> "AppError":
        return cls(kind=ErrorKind.LOOKUP_MISS, message=message)

    @classmethod
    def remote_failure(cls, message: str, trace_id: str | None = None, status_code: int | None = None) -> "AppError":
        return cls(kind=ErrorKind.REMOTE_FAILURE, message=message, trace_id=trace_id, status_code=status_code)

    @property
    def is_banner(self) -> bool:
        return self.kind != ErrorKind.UNAUTHENTICATED


def from_api_error(error: Exception, fallback: str, *, session_call: bool = False) -> AppError:
    """Map a client failure to the user-facing taxonomy.

    Only a 401 from a call that rides the backend session means "signed out";
    a 401 from any other service is an ordinary remote failure.
    """
    if not isinstance(error, ApiError):
        return AppError(kind=ErrorKind.REMOTE_FAILURE, message=fallback)
    if session_call and error.is_unauthorized:
        return AppError(
            kind=ErrorKind.UNAUTHENTICATED,
            message=error.message or fallback,
            trace_id=error.trace_id,
            status_code=401,
        )
    if error.is_timeout:
        return AppError(kind=ErrorKind.TIMED_OUT, message=f"{fallback} (request timed out)", trace_id=error.trace_id)
    return AppError.remote_failure(
        error.server_message or fallback,
        trace_id=error.trace_id,
        status_code=error.status_code,
    )
