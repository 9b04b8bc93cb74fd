"""
Client du stream SSE: handshake, lecture et dispatch des frames.

Pourquoi une boucle itérative plutôt qu'une relecture récursive:
- le stream vit aussi longtemps que le process
- la pile ne doit pas croître avec le nombre de chunks reçus
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from ..core.constants import EVENT_ENDPOINT, EVENT_MESSAGE, SSE_PATH
from ..core.exceptions import StreamConnectionError, StreamReadError
from ..core.models import Frame
from .decoder import SSEFrameDecoder
from .output import OutputForwarder
from .state import ConnectionState

logger = logging.getLogger(__name__)


class StreamClient:
    """
    Ouvre le GET SSE et route les frames décodées.

    - endpoint: lie ConnectionState à base_url + data (la première valeur gagne)
    - message: data transmis sans modification à l'OutputForwarder
    - autre type (y compris vide): ignoré
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        state: ConnectionState,
        forwarder: OutputForwarder,
        *,
        connect_timeout: Optional[float] = None
    ):
        self._client = http_client
        self.base_url = base_url.rstrip("/")
        self._state = state
        self._forwarder = forwarder
        # Pas de timeout de lecture: le stream reste ouvert indéfiniment.
        self._timeout = httpx.Timeout(None, connect=connect_timeout)
        self.decoder = SSEFrameDecoder()
        self.chunks_received = 0

    @property
    def sse_url(self) -> str:
        return f"{self.base_url}{SSE_PATH}"

    def build_headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self._state.auth_token}",
            "Accept": "text/event-stream",
        }

    @asynccontextmanager
    async def open(self) -> AsyncIterator[httpx.Response]:
        """
        Effectue le handshake et fournit la réponse en streaming.

        La réponse est fermée à la sortie du bloc, quel que soit le chemin.

        Raises:
            StreamConnectionError: Statut non-2xx ou erreur de transport
        """
        request = self._client.build_request(
            "GET",
            self.sse_url,
            headers=self.build_headers(),
            timeout=self._timeout,
        )
        try:
            response = await self._client.send(request, stream=True)
        except httpx.TransportError as e:
            raise StreamConnectionError(
                f"SSE connection failed: {e}",
                url=self.sse_url
            ) from e

        try:
            if not response.is_success:
                raise StreamConnectionError(
                    f"SSE connection failed: {response.status_code}",
                    url=self.sse_url,
                    status_code=response.status_code
                )
            logger.info("Stream SSE ouvert: %s", self.sse_url)
            yield response
        finally:
            await response.aclose()

    async def consume(self, response: httpx.Response) -> None:
        """
        Lit le corps jusqu'à la fin du stream en dispatchant chaque frame.

        Raises:
            StreamReadError: Toute erreur pendant la lecture (fatale)
        """
        try:
            async for chunk in response.aiter_bytes():
                self.chunks_received += 1
                for frame in self.decoder.feed(chunk):
                    self.dispatch(frame)
        except (httpx.HTTPError, httpx.StreamError) as e:
            raise StreamReadError(str(e) or type(e).__name__, chunks_received=self.chunks_received) from e
        logger.info("Stream SSE terminé après %d chunks", self.chunks_received)

    def dispatch(self, frame: Frame) -> None:
        if frame.event_type == EVENT_ENDPOINT:
            url = f"{self.base_url}{frame.data}"
            if self._state.bind(url):
                logger.info("Endpoint de message reçu: %s", url)
            else:
                logger.warning(
                    "Endpoint supplémentaire ignoré: %s (lié: %s)",
                    url, self._state.endpoint_url
                )
        elif frame.event_type == EVENT_MESSAGE:
            self._forwarder.forward(frame.data)
        else:
            logger.debug("Frame ignorée (event=%r)", frame.event_type)
