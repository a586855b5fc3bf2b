from __future__ import annotations

from clients.ipgeo_sdk.models import AuthResponse, SignupData

from ipgeo_tracker.app.navigation_shell import Navigator
from ipgeo_tracker.app.route_guard import LOGIN_PATH
from ipgeo_tracker.app.session_store import SessionStore
from ipgeo_tracker.app.ui.forms import validate_signup_form


class SignupView:
    def __init__(self, session_store: SessionStore, navigator: Navigator) -> None:
        self.session_store = session_store
        self.navigator = navigator
        self.message: str | None = None

    def prompt_profile(self) -> tuple[str, str, str, str]:
        username = input("username: ").strip()
        email = input("email: ")
        password = input("password: ")
        confirm_password = input("confirm password: ")
        return username, email, password, confirm_password

    async def submit(
        self,
        username: str | None,
        email: str | None,
        password: str | None,
        confirm_password: str | None,
    ) -> AuthResponse:
        """Validate locally, then register. Nothing is sent when validation fails."""
        self.message = None
        form = validate_signup_form(username, email, password, confirm_password)
        if not form.is_valid:
            self.message = form.first_message
            return AuthResponse(success=False, message=form.first_message or "")

        result = await self.session_store.signup(SignupData(**form.values))
        if result.success:
            await self.navigator.push(LOGIN_PATH)
        else:
            self.message = result.message
        return result
