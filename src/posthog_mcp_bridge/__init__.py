"""posthog_mcp_bridge: pont stdio <-> SSE/HTTP pour le serveur MCP PostHog.

Usage::

    POSTHOG_PERSONAL_API_KEY=phx_... posthog-mcp-bridge
    POSTHOG_PERSONAL_API_KEY=phx_... posthog-mcp-bridge --variant dev
"""

from .bridge import run_bridge
from .config import BridgeSettings
from .core import BridgeError, ConfigurationError, Frame

__version__ = "1.0.0"

__all__ = [
    "BridgeError",
    "BridgeSettings",
    "ConfigurationError",
    "Frame",
    "run_bridge",
    "__version__",
]
