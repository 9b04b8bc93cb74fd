"""
Configuration du bridge MCP PostHog.
"""

from .settings import BridgeSettings, clamp_stdio_stream_limit, parse_timeout

__all__ = [
    "BridgeSettings",
    "clamp_stdio_stream_limit",
    "parse_timeout",
]
