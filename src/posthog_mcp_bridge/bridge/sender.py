"""
Envoi des messages sortants vers l'endpoint découvert.

Une seule tentative par message: pas de file d'attente tant que l'endpoint
n'est pas lié, pas de retry sur statut non-2xx.
"""
import json
import logging
from typing import Any, Optional

import httpx

from ..core.exceptions import NotConnectedError, SendError
from .state import ConnectionState

logger = logging.getLogger(__name__)


class OutboundSender:
    """POST d'un message JSON vers l'endpoint lié dans ConnectionState."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        state: ConnectionState,
        *,
        timeout: Optional[float] = None
    ):
        self._client = http_client
        self._state = state
        self._timeout = httpx.Timeout(timeout)

    def build_headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self._state.auth_token}",
            "Content-Type": "application/json",
        }

    async def send(self, message: Any) -> None:
        """
        Envoie un message au serveur.

        Args:
            message: Payload déjà parsé, re-sérialisé tel quel en JSON

        Raises:
            NotConnectedError: Aucun endpoint lié (aucun appel HTTP effectué)
            SendError: Statut non-2xx ou erreur de transport
        """
        endpoint = self._state.endpoint_url
        if endpoint is None:
            raise NotConnectedError()

        try:
            response = await self._client.post(
                endpoint,
                headers=self.build_headers(),
                content=json.dumps(message),
                timeout=self._timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise SendError(f"Send message failed: {e}") from e

        if not response.is_success:
            raise SendError(
                f"Send message failed: {response.status_code}",
                status_code=response.status_code
            )
        logger.debug("Message envoyé vers %s (%d)", endpoint, response.status_code)
