"""
Pont stdio <-> SSE/HTTP vers le serveur MCP PostHog.
"""

from .decoder import SSEFrameDecoder, decode_frames
from .state import ConnectionState
from .output import OutputForwarder
from .sender import OutboundSender
from .stream import StreamClient
from .input import InputBridge, connect_stdin_reader
from .runner import run_bridge

__all__ = [
    "SSEFrameDecoder",
    "decode_frames",
    "ConnectionState",
    "OutputForwarder",
    "OutboundSender",
    "StreamClient",
    "InputBridge",
    "connect_stdin_reader",
    "run_bridge",
]
