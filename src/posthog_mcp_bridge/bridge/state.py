"""
État de connexion: endpoint de message découvert via le stream SSE.
"""
import asyncio
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class ConnectionState:
    """
    Endpoint de réponse lié au plus une fois par process.

    Écrit uniquement par le StreamClient, lu par l'OutboundSender. La liaison
    est une affectation unique sur la boucle asyncio: une lecture concurrente
    voit soit None (non connecté), soit l'URL complète.
    """

    def __init__(self, auth_token: str):
        self.auth_token = auth_token
        self._endpoint_url: Optional[str] = None
        self._bound = asyncio.Event()

    @property
    def endpoint_url(self) -> Optional[str]:
        return self._endpoint_url

    @property
    def is_bound(self) -> bool:
        return self._endpoint_url is not None

    def bind(self, url: str) -> bool:
        """
        Lie l'endpoint si ce n'est pas déjà fait.

        Returns:
            True si la liaison a eu lieu, False si un endpoint était déjà lié
            (la première valeur est conservée)
        """
        if self._endpoint_url is not None:
            return False
        self._endpoint_url = url
        self._bound.set()
        return True

    async def wait_bound(self) -> str:
        """Attend la liaison et retourne l'URL liée."""
        await self._bound.wait()
        return self._endpoint_url
