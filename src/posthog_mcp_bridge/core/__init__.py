"""
Cœur du bridge: exceptions, constantes et modèles.
Modules indépendants sans dépendances externes au package.
"""

from .exceptions import (
    BridgeError,
    ConfigurationError,
    StreamConnectionError,
    StreamReadError,
    NotConnectedError,
    SendError,
)
from .constants import (
    DEFAULT_BASE_URLS,
    EVENT_ENDPOINT,
    EVENT_MESSAGE,
    EXIT_FAILURE,
    EXIT_INTERRUPTED,
    EXIT_OK,
    VARIANT_DEV,
    VARIANT_OFFICIAL,
)
from .models import Frame

__all__ = [
    # Exceptions
    "BridgeError",
    "ConfigurationError",
    "StreamConnectionError",
    "StreamReadError",
    "NotConnectedError",
    "SendError",
    # Constants
    "DEFAULT_BASE_URLS",
    "EVENT_ENDPOINT",
    "EVENT_MESSAGE",
    "EXIT_FAILURE",
    "EXIT_INTERRUPTED",
    "EXIT_OK",
    "VARIANT_DEV",
    "VARIANT_OFFICIAL",
    # Models
    "Frame",
]
