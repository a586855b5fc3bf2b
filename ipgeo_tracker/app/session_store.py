from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from pydantic import ValidationError as PydanticValidationError

from clients.ipgeo_sdk.auth_client import AuthClient
from clients.ipgeo_sdk.errors import ApiError
from clients.ipgeo_sdk.models import AuthResponse, LoginData, LogoutResult, SignupData, User

from ipgeo_tracker.app.infrastructure.logging.logger import log_action
from ipgeo_tracker.app.state import SessionState

logger = logging.getLogger(__name__)

LOGIN_FAILED = "Login failed"
SIGNUP_FAILED = "Signup failed"


class SessionStore:
    """Owns the authenticated identity for the whole process.

    Build one instance in the composition root and hand it to every consumer
    (route guard, views). ``loading`` is true while any session call is in
    flight; it is a flag for the UI, not a lock, so overlapping calls race and
    the last response to arrive wins.
    """

    def __init__(self, auth_client: AuthClient, state: SessionState | None = None) -> None:
        self.auth_client = auth_client
        self.state = state or SessionState()

    @property
    def user(self) -> User | None:
        return self.state.user

    @property
    def loading(self) -> bool:
        return self.state.loading

    @asynccontextmanager
    async def _session_call(self) -> AsyncIterator[None]:
        self.state.begin_call()
        try:
            yield
        finally:
            self.state.end_call()

    async def check_session(self) -> None:
        async with self._session_call():
            try:
                user = await self.auth_client.me()
            except ApiError as error:
                self.state.clear()
                if error.is_unauthorized:
                    logger.debug("session_probe_unauthenticated")
                    return
                logger.warning(
                    "session_probe_failed",
                    extra={"code": error.code, "status_code": error.status_code, "trace_id": error.trace_id},
                )
                log_action(logger, "auth", "check_session", None, "error", trace_id=error.trace_id, level=logging.WARNING)
                return
            except Exception:  # noqa: BLE001
                self.state.clear()
                logger.exception("session_probe_failed")
                return
            self.state.apply_user(user)
            log_action(logger, "auth", "check_session", user.id, "authenticated")

    async def login(self, credentials: LoginData) -> AuthResponse:
        logger.info("login_attempt", extra={"email": credentials.email})
        async with self._session_call():
            try:
                result = await self.auth_client.login(credentials)
            except (ApiError, PydanticValidationError) as error:
                return self._auth_failure("login", error, LOGIN_FAILED)
            user: User = result["user"]
            self.state.apply_user(user)
        log_action(logger, "auth", "login", user.id, "success")
        return AuthResponse(success=True, message=result["message"], user=user)

    async def signup(self, profile: SignupData) -> AuthResponse:
        logger.info("signup_attempt", extra={"email": profile.email, "username": profile.username})
        async with self._session_call():
            try:
                result = await self.auth_client.signup(profile)
            except (ApiError, PydanticValidationError) as error:
                return self._auth_failure("signup", error, SIGNUP_FAILED)
            user: User = result["user"]
            self.state.apply_user(user)
        log_action(logger, "auth", "signup", user.id, "success")
        return AuthResponse(success=True, message=result["message"], user=user)

    async def logout(self) -> LogoutResult:
        user_id = self.user.id if self.user else None
        async with self._session_call():
            try:
                await self.auth_client.logout()
            except ApiError as error:
                logger.warning("logout_failure", extra={"code": error.code, "trace_id": error.trace_id})
                log_action(logger, "auth", "logout", user_id, "error", trace_id=error.trace_id, level=logging.WARNING)
                return LogoutResult(success=False)
            self.state.clear()
        log_action(logger, "auth", "logout", user_id, "success")
        return LogoutResult(success=True)

    def _auth_failure(self, action: str, error: Exception, fallback: str) -> AuthResponse:
        # a failed attempt never touches an existing session
        message = fallback
        trace_id = None
        if isinstance(error, ApiError):
            message = error.server_message or fallback
            trace_id = error.trace_id
        logger.warning(f"{action}_failure", extra={"trace_id": trace_id, "reason": message})
        user_id = self.user.id if self.user else None
        log_action(logger, "auth", action, user_id, "error", trace_id=trace_id, level=logging.WARNING)
        return AuthResponse(success=False, message=message)
