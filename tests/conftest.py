"""
Configuration des tests pytest.
"""
import asyncio
import os
import sys

import httpx
import pytest

# Ajoute src au path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from posthog_mcp_bridge.config.settings import BridgeSettings  # noqa: E402


def pytest_configure(config):
    """Enregistre les markers utilisés par la suite."""
    config.addinivalue_line("markers", "unit: test unitaire sans réseau")
    config.addinivalue_line("markers", "asyncio: marque un test comme asynchrone")


class FakeReader:
    """StreamReader duck-typé: rend les lignes puis b"" (EOF)."""

    def __init__(self, lines: list) -> None:
        self._lines = list(lines)

    async def readline(self) -> bytes:
        return self._lines.pop(0) if self._lines else b""


class BlockingReader:
    """Reader qui ne rend jamais de ligne (stdin resté ouvert)."""

    async def readline(self) -> bytes:
        await asyncio.Event().wait()
        return b""


def sse_response(chunks, status_code: int = 200) -> httpx.Response:
    """Réponse text/event-stream dont le corps est livré chunk par chunk."""

    async def _body():
        for chunk in chunks:
            yield chunk

    return httpx.Response(
        status_code,
        headers={"content-type": "text/event-stream"},
        content=_body(),
    )


@pytest.fixture
def official_settings():
    return BridgeSettings(api_token="phx_test", base_url="https://mcp.example.com")


@pytest.fixture
def dev_settings():
    return BridgeSettings(
        api_token="phx_test",
        variant="dev",
        base_url="http://localhost:57024",
        exit_on_stream_end=False,
    )
