from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ipgeo_tracker.app.session_store import SessionStore

logger = logging.getLogger(__name__)

LOGIN_PATH = "/auth/login"


class GuardPhase(str, Enum):
    UNCHECKED = "unchecked"
    CHECKING = "checking"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class GuardOutcome(str, Enum):
    LOADING = "loading"
    RENDER = "render"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class GuardDecision:
    outcome: GuardOutcome
    redirect_to: str | None = None
    replace: bool = False


LOADING = GuardDecision(outcome=GuardOutcome.LOADING)
RENDER = GuardDecision(outcome=GuardOutcome.RENDER)


class RouteGuard:
    """Gate for one activation of a protected screen.

    ``activate`` probes the session at most once per instance; ``render`` is
    pure and may be called on every repaint. Create a new guard for each new
    activation of the protected screen.
    """

    def __init__(self, session_store: SessionStore, login_path: str = LOGIN_PATH) -> None:
        self.session_store = session_store
        self.login_path = login_path
        self.phase = GuardPhase.UNCHECKED
        self.probe_count = 0

    async def activate(self) -> GuardDecision:
        if self.phase != GuardPhase.UNCHECKED:
            return self.render()

        if self.session_store.user is not None:
            self._transition(GuardPhase.AUTHENTICATED)
            return self.render()

        # leave UNCHECKED before suspending so a concurrent activate cannot probe again
        self._transition(GuardPhase.CHECKING)
        self.probe_count += 1
        await self.session_store.check_session()
        if self.session_store.user is not None:
            self._transition(GuardPhase.AUTHENTICATED)
        else:
            self._transition(GuardPhase.UNAUTHENTICATED)
        return self.render()

    def render(self) -> GuardDecision:
        if self.phase in {GuardPhase.UNCHECKED, GuardPhase.CHECKING} or self.session_store.loading:
            return LOADING
        if self.phase == GuardPhase.AUTHENTICATED and self.session_store.user is None:
            self._transition(GuardPhase.UNAUTHENTICATED)
        if self.phase == GuardPhase.UNAUTHENTICATED:
            return GuardDecision(outcome=GuardOutcome.REDIRECT, redirect_to=self.login_path, replace=True)
        return RENDER

    def _transition(self, phase: GuardPhase) -> None:
        logger.debug("route_guard_transition", extra={"from_phase": self.phase.value, "to_phase": phase.value})
        self.phase = phase
