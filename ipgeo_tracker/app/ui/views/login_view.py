from __future__ import annotations

from clients.ipgeo_sdk.models import AuthResponse, LoginData

from ipgeo_tracker.app.navigation_shell import HOME_PATH, Navigator
from ipgeo_tracker.app.session_store import SessionStore
from ipgeo_tracker.app.ui.forms import validate_login_form


class LoginView:
    def __init__(self, session_store: SessionStore, navigator: Navigator) -> None:
        self.session_store = session_store
        self.navigator = navigator
        self.message: str | None = None

    def prompt_credentials(self) -> tuple[str, str]:
        email = input("email: ")
        password = input("password: ")
        return email, password

    async def submit(self, email: str | None, password: str | None) -> AuthResponse:
        self.message = None
        form = validate_login_form(email, password)
        if not form.is_valid:
            self.message = form.first_message
            return AuthResponse(success=False, message=form.first_message or "")

        result = await self.session_store.login(LoginData(**form.values))
        if result.success:
            await self.navigator.push(HOME_PATH)
        else:
            self.message = result.message
        return result
