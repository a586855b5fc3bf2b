from __future__ import annotations

import logging
from dataclasses import dataclass

from ipgeo_tracker.app.route_guard import LOGIN_PATH, RENDER, GuardDecision, GuardOutcome, RouteGuard
from ipgeo_tracker.app.session_store import SessionStore

logger = logging.getLogger(__name__)

SIGNUP_PATH = "/auth/signup"
HOME_PATH = "/home"
ROOT_PATH = "/"


@dataclass(frozen=True)
class NavRoute:
    path: str
    label: str
    protected: bool = False


ROUTES: list[NavRoute] = [
    NavRoute(LOGIN_PATH, "Login"),
    NavRoute(SIGNUP_PATH, "Sign up"),
    NavRoute(HOME_PATH, "Home", protected=True),
]

# path -> (target, replace)
REDIRECTS: dict[str, tuple[str, bool]] = {ROOT_PATH: (HOME_PATH, True)}


class UnknownRouteError(ValueError):
    pass


def find_route(path: str) -> NavRoute:
    route = next((item for item in ROUTES if item.path == path), None)
    if route is None:
        raise UnknownRouteError(f"No route for path {path!r}")
    return route


class Navigator:
    """History stack of visited paths.

    Entering a protected route starts a fresh guard activation; a redirect
    from the guard replaces the current entry so ``back`` never returns to
    the screen that was refused.
    """

    def __init__(self, session_store: SessionStore, initial_path: str = LOGIN_PATH) -> None:
        self.session_store = session_store
        self.stack: list[str] = [find_route(initial_path).path]
        self.guard: RouteGuard | None = None

    @property
    def current(self) -> str:
        return self.stack[-1]

    async def push(self, path: str) -> GuardDecision:
        return await self._go(path, replace=False)

    async def replace(self, path: str) -> GuardDecision:
        return await self._go(path, replace=True)

    async def back(self) -> GuardDecision:
        if len(self.stack) > 1:
            self.stack.pop()
        return await self._enter(self.current)

    def render(self) -> GuardDecision:
        if self.guard is None:
            return RENDER
        decision = self.guard.render()
        if decision.outcome == GuardOutcome.REDIRECT and decision.redirect_to:
            self._record(decision.redirect_to, replace=decision.replace)
            self.guard = None
        return decision

    async def _go(self, path: str, *, replace: bool) -> GuardDecision:
        if path in REDIRECTS:
            target, redirect_replace = REDIRECTS[path]
            logger.debug("navigation_redirect", extra={"from_path": path, "to_path": target})
            path, replace = target, redirect_replace
        route = find_route(path)
        self._record(route.path, replace=replace)
        return await self._enter(route.path)

    async def _enter(self, path: str) -> GuardDecision:
        route = find_route(path)
        if not route.protected:
            self.guard = None
            return RENDER
        self.guard = RouteGuard(self.session_store)
        await self.guard.activate()
        return self.render()

    def _record(self, path: str, *, replace: bool) -> None:
        if replace:
            self.stack[-1] = path
        else:
            self.stack.append(path)
        logger.debug("navigation", extra={"path": path, "replace": replace})
