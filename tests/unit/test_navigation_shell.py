import asyncio

import pytest

from ipgeo_tracker.app.navigation_shell import HOME_PATH, SIGNUP_PATH, Navigator, UnknownRouteError, find_route
from ipgeo_tracker.app.route_guard import LOGIN_PATH, GuardOutcome
from ipgeo_tracker.app.session_store import SessionStore
from ipgeo_tracker.app.state import SessionState
from tests.fakes import USER, FakeAuthClient


def test_root_redirects_to_home_with_replace() -> None:
    navigator = Navigator(SessionStore(FakeAuthClient(), state=SessionState(user=USER)))

    decision = asyncio.run(navigator.push("/"))

    assert decision.outcome == GuardOutcome.RENDER
    assert navigator.stack == [HOME_PATH]


def test_unauthenticated_home_replaces_entry_with_login() -> None:
    auth = FakeAuthClient()
    navigator = Navigator(SessionStore(auth))

    async def scenario():
        await navigator.push(SIGNUP_PATH)
        return await navigator.push(HOME_PATH)

    decision = asyncio.run(scenario())

    assert decision.outcome == GuardOutcome.REDIRECT
    assert navigator.stack == [LOGIN_PATH, SIGNUP_PATH, LOGIN_PATH]
    assert auth.calls == ["me"]


def test_back_pops_history() -> None:
    navigator = Navigator(SessionStore(FakeAuthClient(), state=SessionState(user=USER)))

    async def scenario():
        await navigator.push(SIGNUP_PATH)
        await navigator.push(HOME_PATH)
        return await navigator.back()

    decision = asyncio.run(scenario())

    assert decision.outcome == GuardOutcome.RENDER
    assert navigator.current == SIGNUP_PATH
    assert navigator.guard is None


def test_each_home_entry_is_a_new_guard_activation() -> None:
    auth = FakeAuthClient(me=USER)
    navigator = Navigator(SessionStore(auth))

    async def scenario():
        await navigator.push(HOME_PATH)
        first_guard = navigator.guard
        await navigator.push(SIGNUP_PATH)
        await navigator.push(HOME_PATH)
        return first_guard

    first_guard = asyncio.run(scenario())

    assert navigator.guard is not first_guard
    # the second entry finds the user already loaded
    assert auth.calls == ["me"]


def test_logout_then_render_redirects() -> None:
    store = SessionStore(FakeAuthClient(me=USER))
    navigator = Navigator(store)

    asyncio.run(navigator.push(HOME_PATH))
    asyncio.run(store.logout())
    decision = navigator.render()

    assert decision.outcome == GuardOutcome.REDIRECT
    assert navigator.current == LOGIN_PATH
    assert navigator.render().outcome == GuardOutcome.RENDER


def test_unknown_route_raises() -> None:
    with pytest.raises(UnknownRouteError):
        find_route("/admin")
    assert find_route(HOME_PATH).protected
