"""
Constantes partagées du bridge.
"""

# Variables d'environnement
ENV_API_TOKEN = "POSTHOG_PERSONAL_API_KEY"
ENV_BASE_URL = "POSTHOG_MCP_URL"
ENV_VARIANT = "MCP_BRIDGE_VARIANT"
ENV_EXIT_ON_STREAM_END = "MCP_BRIDGE_EXIT_ON_STREAM_END"
ENV_CONNECT_TIMEOUT = "MCP_BRIDGE_CONNECT_TIMEOUT"
ENV_SEND_TIMEOUT = "MCP_BRIDGE_SEND_TIMEOUT"
ENV_STDIO_STREAM_LIMIT = "MCP_BRIDGE_STDIO_STREAM_LIMIT"
ENV_LOG_LEVEL = "MCP_BRIDGE_LOG_LEVEL"

# Variantes de déploiement
VARIANT_OFFICIAL = "official"
VARIANT_DEV = "dev"
VARIANTS = (VARIANT_OFFICIAL, VARIANT_DEV)

DEFAULT_BASE_URLS = {
    VARIANT_OFFICIAL: "https://mcp.posthog.com",
    VARIANT_DEV: "http://localhost:57024",
}

# Protocole SSE
SSE_PATH = "/sse"
EVENT_ENDPOINT = "endpoint"
EVENT_MESSAGE = "message"

# Limite de ligne stdin (asyncio.StreamReader.readline)
DEFAULT_STDIO_STREAM_LIMIT = 8 * 1024 * 1024  # 8 MiB
MIN_STDIO_STREAM_LIMIT = 64 * 1024
MAX_STDIO_STREAM_LIMIT = 64 * 1024 * 1024  # 64 MiB

# Codes de sortie
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130
