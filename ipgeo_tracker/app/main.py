from __future__ import annotations

import argparse
import asyncio
import logging
from dataclasses import dataclass

import httpx

from clients.ipgeo_sdk.auth_client import AuthClient
from clients.ipgeo_sdk.config import ConfigError, SDKConfig
from clients.ipgeo_sdk.history_client import HistoryClient
from clients.ipgeo_sdk.http_client import HttpClient
from clients.ipgeo_sdk.lookup_client import LookupClient

from ipgeo_tracker.app.geolocation_manager import GeolocationSessionManager
from ipgeo_tracker.app.infrastructure.logging.logger import configure_logging
from ipgeo_tracker.app.navigation_shell import HOME_PATH, ROOT_PATH, SIGNUP_PATH, Navigator
from ipgeo_tracker.app.session_store import SessionStore
from ipgeo_tracker.app.ui.components.error_banner import ErrorBanner
from ipgeo_tracker.app.ui.views.home_view import HomeView
from ipgeo_tracker.app.ui.views.login_view import LoginView
from ipgeo_tracker.app.ui.views.signup_view import SignupView

logger = logging.getLogger(__name__)


@dataclass
class AppServices:
    """Everything that lives for the whole process, built once."""

    backend_http: HttpClient
    lookup_http: HttpClient
    session_store: SessionStore
    navigator: Navigator
    lookup_client: LookupClient
    history_client: HistoryClient

    @classmethod
    def build(
        cls,
        config: SDKConfig,
        backend_client: httpx.AsyncClient | None = None,
        lookup_client: httpx.AsyncClient | None = None,
    ) -> "AppServices":
        backend_http = HttpClient.for_backend(config, client=backend_client)
        lookup_http = HttpClient.for_lookup(config, client=lookup_client)
        session_store = SessionStore(AuthClient(backend_http))
        return cls(
            backend_http=backend_http,
            lookup_http=lookup_http,
            session_store=session_store,
            navigator=Navigator(session_store),
            lookup_client=LookupClient(lookup_http, token=config.lookup_token),
            history_client=HistoryClient(backend_http),
        )

    def build_manager(self) -> GeolocationSessionManager:
        user = self.session_store.user
        return GeolocationSessionManager(
            self.lookup_client,
            self.history_client,
            user_id=user.id if user else None,
        )

    async def aclose(self) -> None:
        await self.backend_http.aclose()
        await self.lookup_http.aclose()


async def _ask(label: str) -> str:
    answer = await asyncio.to_thread(input, label)
    return answer.strip().lower()


async def _login_screen(services: AppServices, view: LoginView) -> bool:
    print("\n=== Login ===")
    choice = await _ask("[l]ogin, [s]ign up, [q]uit: ")
    if choice == "q":
        return False
    if choice == "s":
        await services.navigator.push(SIGNUP_PATH)
        return True
    if choice != "l":
        return True

    email, password = await asyncio.to_thread(view.prompt_credentials)
    result = await view.submit(email, password)
    if not result.success:
        ErrorBanner.show(view.message)
    return True


async def _signup_screen(services: AppServices, view: SignupView) -> bool:
    print("\n=== Sign up ===")
    choice = await _ask("[r]egister, [b]ack, [q]uit: ")
    if choice == "q":
        return False
    if choice == "b":
        await services.navigator.back()
        return True
    if choice != "r":
        return True

    username, email, password, confirm_password = await asyncio.to_thread(view.prompt_profile)
    result = await view.submit(username, email, password, confirm_password)
    if result.success:
        print(result.message or "Account created. Please log in.")
    else:
        ErrorBanner.show(view.message)
    return True


async def run_app(services: AppServices) -> None:
    navigator = services.navigator
    login_view = LoginView(services.session_store, navigator)
    signup_view = SignupView(services.session_store, navigator)
    home_view: HomeView | None = None

    await navigator.push(ROOT_PATH)
    running = True
    while running:
        navigator.render()
        if navigator.current == HOME_PATH:
            if home_view is None:
                home_view = HomeView(services.build_manager(), services.session_store, navigator)
                await home_view.manager.open()
            home_view.show()
            running = await home_view.handle_command(await asyncio.to_thread(input, "cmd: "))
            if navigator.current != HOME_PATH:
                home_view = None
        elif navigator.current == SIGNUP_PATH:
            running = await _signup_screen(services, signup_view)
        else:
            running = await _login_screen(services, login_view)


async def _main(config: SDKConfig) -> None:
    services = AppServices.build(config)
    try:
        await run_app(services)
    finally:
        await services.aclose()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="IP geolocation tracker console")
    parser.add_argument("--env-file", default=".env", help="dotenv file read before the environment")
    parser.add_argument("--log-level", default=None, help="overrides IPGEO_LOG_LEVEL")
    return parser


def run_cli(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    try:
        config = SDKConfig.from_env(args.env_file)
    except ConfigError as error:
        print(f"[CONFIG] {error}")
        raise SystemExit(2) from error

    configure_logging(args.log_level or config.log_level)
    logger.info("startup", extra={"api_base_url": config.api_base_url, "lookup_base_url": config.lookup_base_url})
    try:
        asyncio.run(_main(config))
    except (KeyboardInterrupt, EOFError):
        print()


if __name__ == "__main__":
    run_cli()
