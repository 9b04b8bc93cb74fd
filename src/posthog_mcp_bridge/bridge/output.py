"""
Forwarder de sortie: payloads des frames "message" vers stdout.
"""
import sys
from typing import TextIO


class OutputForwarder:
    """
    Écrit chaque payload tel quel, une ligne par message.

    Seul composant autorisé à écrire sur stdout: toute autre sortie
    corromprait le flux JSON-RPC côté client.
    """

    def __init__(self, stream: TextIO = None):
        self._stream = stream if stream is not None else sys.stdout
        self.forwarded_total = 0

    def forward(self, data: str) -> None:
        self._stream.write(data + "\n")
        self._stream.flush()
        self.forwarded_total += 1
