"""
Tests unitaires: superviseur du serveur de dev.

Contraintes:
    - Pas d'exécution réelle de npx/wrangler (mock uniquement)
"""
import asyncio

import pytest

from posthog_mcp_bridge import supervisor


@pytest.mark.unit
def test_default_command_and_env(monkeypatch):
    monkeypatch.delenv("MCP_DEV_SERVER_COMMAND", raising=False)
    monkeypatch.delenv("POSTHOG_PERSONAL_API_KEY", raising=False)

    assert supervisor.build_dev_server_command() == ["npx", "wrangler", "dev"]
    assert supervisor.build_dev_server_env()["POSTHOG_PERSONAL_API_KEY"] == ""


@pytest.mark.unit
def test_command_override(monkeypatch):
    monkeypatch.setenv("MCP_DEV_SERVER_COMMAND", "pnpm exec wrangler dev --port 57024")
    assert supervisor.build_dev_server_command() == ["pnpm", "exec", "wrangler", "dev", "--port", "57024"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_spawn_failure_returns_1(monkeypatch):
    async def _raise(*_a, **_kw):
        raise FileNotFoundError("npx")

    monkeypatch.setattr(asyncio, "create_subprocess_exec", _raise)
    assert await supervisor.run_dev_server(["npx", "wrangler", "dev"]) == 1


@pytest.mark.asyncio
@pytest.mark.unit
@pytest.mark.parametrize("child_code,expected", [(0, 0), (3, 3), (-15, 143)])
async def test_exit_code_follows_child(monkeypatch, child_code, expected):
    class _FakeProc:
        async def wait(self) -> int:
            return child_code

        def send_signal(self, sig) -> None:
            pass

    async def _spawn(*_a, **_kw):
        return _FakeProc()

    monkeypatch.setattr(asyncio, "create_subprocess_exec", _spawn)
    assert await supervisor.run_dev_server(["npx", "wrangler", "dev"]) == expected
