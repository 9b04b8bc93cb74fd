"""
Exceptions personnalisées pour le bridge MCP PostHog.
"""


class BridgeError(Exception):
    """Exception de base pour toutes les erreurs du bridge."""

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.code = code or "unknown_error"
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"[{self.code}] {self.message} - Détails: {self.details}"
        return f"[{self.code}] {self.message}"


class ConfigurationError(BridgeError):
    """Erreur de configuration (token manquant, valeur invalide)."""

    def __init__(self, message: str, config_key: str = None):
        super().__init__(
            message=message,
            code="config_error",
            details={"key": config_key} if config_key else {}
        )


class StreamConnectionError(BridgeError):
    """Échec du handshake SSE (statut non-2xx ou erreur de transport)."""

    def __init__(self, message: str, url: str = None, status_code: int = None):
        details = {}
        if url:
            details["url"] = url
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message=message, code="connection_error", details=details)
        self.status_code = status_code


class StreamReadError(BridgeError):
    """Erreur pendant la lecture du stream SSE (fatale)."""

    def __init__(self, message: str, chunks_received: int = 0):
        super().__init__(
            message=message,
            code="stream_read_error",
            details={"chunks_received": chunks_received}
        )
        self.chunks_received = chunks_received


class NotConnectedError(BridgeError):
    """Aucun endpoint de message reçu: impossible d'envoyer."""

    def __init__(self, message: str = "Not connected - no message endpoint"):
        super().__init__(message=message, code="not_connected")


class SendError(BridgeError):
    """Échec d'un POST vers l'endpoint de message."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(
            message=message,
            code="send_error",
            details={"status_code": status_code} if status_code is not None else {}
        )
        self.status_code = status_code
