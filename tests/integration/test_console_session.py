import asyncio

import pytest

from ipgeo_tracker.app.main import run_app, run_cli
from tests.integration.backend_double import FakeBackend, build_services


def _scripted_input(monkeypatch, answers: list[str]) -> list[str]:
    prompts: list[str] = []
    remaining = iter(answers)

    def fake_input(prompt: str = "") -> str:
        prompts.append(prompt)
        return next(remaining)

    monkeypatch.setattr("builtins.input", fake_input)
    return prompts


def test_console_login_search_and_quit(monkeypatch, capsys) -> None:
    backend = FakeBackend()
    services = build_services(backend)
    prompts = _scripted_input(monkeypatch, ["l", "a@b.com", "secret123", "s 8.8.8.8", "q"])

    async def scenario() -> None:
        await run_app(services)
        await services.aclose()

    asyncio.run(scenario())

    output = capsys.readouterr().out
    assert prompts == ["[l]ogin, [s]ign up, [q]uit: ", "email: ", "password: ", "cmd: ", "cmd: "]
    assert "=== Login ===" in output
    assert "IP: 8.8.8.8" in output
    assert ("POST", "/history") in backend.requests


def test_console_signup_then_back(monkeypatch, capsys) -> None:
    backend = FakeBackend()
    services = build_services(backend)
    _scripted_input(monkeypatch, ["s", "r", "a", "a@b.com", "short", "short", "b", "q"])

    async def scenario() -> None:
        await run_app(services)
        await services.aclose()

    asyncio.run(scenario())

    output = capsys.readouterr().out
    assert "=== Sign up ===" in output
    assert "message=Password must be at least 8 characters long" in output
    assert ("POST", "/auth/signup") not in backend.requests


def test_run_cli_rejects_invalid_config(monkeypatch, capsys) -> None:
    monkeypatch.setenv("IPGEO_TIMEOUT_SECONDS", "-1")

    with pytest.raises(SystemExit) as exc_info:
        run_cli(["--env-file", ".missing-env"])

    assert exc_info.value.code == 2
    assert "IPGEO_TIMEOUT_SECONDS" in capsys.readouterr().out
