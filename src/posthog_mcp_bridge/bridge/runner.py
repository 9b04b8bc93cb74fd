"""
Orchestration du bridge: handshake, boucles concurrentes et code de sortie.

Issues possibles:
- handshake refusé ou injoignable: code 1
- erreur de lecture du stream: code 1
- fin du stream, exit_on_stream_end: code 0 immédiatement
- fin du stream sinon: le bridge continue de servir stdin jusqu'à EOF, code 0
- EOF sur stdin: le stream continue d'être consommé jusqu'à sa fin
"""
import asyncio
import logging
import sys
from contextlib import AsyncExitStack
from typing import Optional, TextIO

import httpx

from ..config.settings import BridgeSettings
from ..core.constants import EXIT_FAILURE, EXIT_OK
from ..core.exceptions import StreamConnectionError
from .input import InputBridge, LineReader, connect_stdin_reader
from .output import OutputForwarder
from .sender import OutboundSender
from .state import ConnectionState
from .stream import StreamClient

logger = logging.getLogger(__name__)


async def _cancel_and_wait(task: asyncio.Task) -> None:
    if task.done():
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


async def _run_loops(
    stream_task: asyncio.Task,
    input_task: asyncio.Task,
    exit_on_stream_end: bool,
) -> int:
    try:
        done, _pending = await asyncio.wait(
            {stream_task, input_task},
            return_when=asyncio.FIRST_COMPLETED,
        )

        if input_task in done and input_task.exception() is not None:
            logger.error("Lecture stdin interrompue: %s", input_task.exception())

        if stream_task not in done:
            # stdin fermé: seul le stream peut encore produire des réponses.
            logger.debug("stdin fermé, attente de la fin du stream")
            await asyncio.wait({stream_task})

        exc = stream_task.exception()
        if exc is not None:
            logger.error("SSE error: %s", exc)
            return EXIT_FAILURE

        if exit_on_stream_end:
            logger.info("Stream terminé par le serveur, fin de session")
            return EXIT_OK

        if not input_task.done():
            logger.info("Stream terminé, stdin reste servi jusqu'à EOF")
            await input_task
        return EXIT_OK
    finally:
        await _cancel_and_wait(input_task)
        await _cancel_and_wait(stream_task)


async def run_bridge(
    settings: BridgeSettings,
    *,
    stdin_reader: Optional[LineReader] = None,
    output: Optional[TextIO] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> int:
    """
    Exécute le bridge jusqu'à sa fin et retourne le code de sortie.

    Args:
        settings: Configuration validée
        stdin_reader: Source de lignes (défaut: stdin du process)
        output: Flux de sortie des messages (défaut: sys.stdout)
        http_client: Client HTTP injecté (tests); sinon créé et fermé ici
    """
    state = ConnectionState(settings.api_token)
    forwarder = OutputForwarder(output if output is not None else sys.stdout)

    async with AsyncExitStack() as stack:
        if http_client is None:
            http_client = await stack.enter_async_context(httpx.AsyncClient())

        stream_client = StreamClient(
            http_client,
            settings.base_url,
            state,
            forwarder,
            connect_timeout=settings.connect_timeout,
        )
        try:
            response = await stack.enter_async_context(stream_client.open())
        except StreamConnectionError as e:
            logger.error("Failed to start MCP client: %s", e.message)
            return EXIT_FAILURE

        if stdin_reader is None:
            stdin_reader, transport = await connect_stdin_reader(settings.stdin_limit)
            stack.callback(transport.close)

        sender = OutboundSender(http_client, state, timeout=settings.send_timeout)
        input_bridge = InputBridge(stdin_reader, sender)

        stream_task = asyncio.create_task(stream_client.consume(response))
        input_task = asyncio.create_task(input_bridge.run())
        return await _run_loops(stream_task, input_task, settings.exit_on_stream_end)
