"""
Pont d'entrée: JSON délimité par lignes sur stdin vers l'OutboundSender.

Chaque ligne est traitée dans sa propre tâche: un POST lent ne bloque ni la
lecture de stdin ni la consommation du stream SSE. L'ordre de complétion des
envois n'est donc pas garanti.
"""
import asyncio
import json
import logging
import sys
from typing import Protocol, Set, Tuple

from ..core.exceptions import BridgeError
from .sender import OutboundSender

logger = logging.getLogger(__name__)


class LineReader(Protocol):
    async def readline(self) -> bytes: ...


async def connect_stdin_reader(limit: int) -> Tuple[asyncio.StreamReader, asyncio.ReadTransport]:
    """
    Connecte un StreamReader non-bloquant à stdin (binaire).

    Returns:
        (reader, transport): l'appelant ferme le transport en fin de session
    """
    loop = asyncio.get_running_loop()
    # La limite par défaut (64KiB) peut faire échouer readline()
    # sur des requêtes JSON-RPC volumineuses.
    reader = asyncio.StreamReader(limit=limit)
    protocol = asyncio.StreamReaderProtocol(reader)
    transport, _ = await loop.connect_read_pipe(lambda: protocol, sys.stdin.buffer)
    return reader, transport


class InputBridge:
    """Lit stdin ligne par ligne, parse le JSON et délègue l'envoi."""

    def __init__(self, reader: LineReader, sender: OutboundSender):
        self._reader = reader
        self._sender = sender
        self._pending: Set[asyncio.Task] = set()
        self.lines_total = 0
        self.errors_total = 0

    async def run(self) -> None:
        """Traite stdin jusqu'à EOF puis attend les envois en vol."""
        try:
            await self._read_loop()
        except asyncio.CancelledError:
            pending = list(self._pending)
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            raise
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def _read_loop(self) -> None:
        while True:
            try:
                raw = await self._reader.readline()
            except ValueError as e:
                # Typiquement: "Separator is not found, and chunk exceed the limit"
                logger.error(
                    "Ligne stdin trop volumineuse, lecture interrompue: %s "
                    "(hint: increase MCP_BRIDGE_STDIO_STREAM_LIMIT)", e
                )
                return
            if not raw:
                logger.debug("EOF sur stdin")
                return

            task = asyncio.create_task(self.handle_line(raw))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    async def handle_line(self, raw: bytes) -> bool:
        """
        Parse une ligne et l'envoie.

        Returns:
            True si le message a été envoyé, False s'il a été abandonné
        """
        line = raw.decode("utf-8", errors="replace").strip()
        if not line:
            return False
        self.lines_total += 1

        try:
            message = json.loads(line)
        except (ValueError, RecursionError) as e:
            # JSONDecodeError est une ValueError; imbrication trop profonde: RecursionError
            self.errors_total += 1
            logger.error("Error processing message: %s", e)
            return False

        try:
            await self._sender.send(message)
        except BridgeError as e:
            self.errors_total += 1
            logger.error("Error processing message: %s", e.message)
            return False
        return True
