"""src.posthog_mcp_bridge.config.settings

Configuration du bridge, lue depuis l'environnement.

Deux variantes de déploiement partagent la même logique:
- official: serveur MCP PostHog de production, la fin du stream SSE termine
  le process (code 0);
- dev: serveur Wrangler local, la fin du stream est silencieuse et le bridge
  continue de lire stdin.

Aucune politique de retry/backoff n'est proposée: une seule tentative de
connexion, une seule tentative d'envoi par message.
"""
import os
from dataclasses import dataclass
from typing import Optional

from ..core.constants import (
    DEFAULT_BASE_URLS,
    DEFAULT_STDIO_STREAM_LIMIT,
    ENV_API_TOKEN,
    ENV_BASE_URL,
    ENV_CONNECT_TIMEOUT,
    ENV_EXIT_ON_STREAM_END,
    ENV_LOG_LEVEL,
    ENV_SEND_TIMEOUT,
    ENV_STDIO_STREAM_LIMIT,
    ENV_VARIANT,
    MAX_STDIO_STREAM_LIMIT,
    MIN_STDIO_STREAM_LIMIT,
    VARIANT_DEV,
    VARIANT_OFFICIAL,
    VARIANTS,
)
from ..core.exceptions import ConfigurationError


def env_flag(name: str, *, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, *, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_timeout(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return parse_timeout(raw, config_key=name)


def parse_timeout(raw: str, config_key: str = None) -> Optional[float]:
    """
    Convertit une valeur de timeout en secondes.

    "none", "0" ou une valeur négative désactivent le timeout.

    Raises:
        ConfigurationError: Si la valeur n'est pas numérique
    """
    value = raw.strip().lower()
    if value in {"", "none", "off"}:
        return None
    try:
        seconds = float(value)
    except ValueError:
        raise ConfigurationError(
            message=f"Timeout invalide: {raw!r}",
            config_key=config_key
        )
    return seconds if seconds > 0 else None


def clamp_stdio_stream_limit(configured: int) -> int:
    """Borne la limite de ligne stdin entre 64 KiB et 64 MiB."""
    if configured <= 0:
        return DEFAULT_STDIO_STREAM_LIMIT
    return min(MAX_STDIO_STREAM_LIMIT, max(MIN_STDIO_STREAM_LIMIT, configured))


@dataclass
class BridgeSettings:
    """Configuration globale du bridge."""
    api_token: str
    variant: str = VARIANT_OFFICIAL
    base_url: str = DEFAULT_BASE_URLS[VARIANT_OFFICIAL]
    exit_on_stream_end: bool = True
    connect_timeout: Optional[float] = None
    send_timeout: Optional[float] = None
    stdin_limit: int = DEFAULT_STDIO_STREAM_LIMIT
    log_level: str = "INFO"

    def __post_init__(self):
        if not self.api_token:
            raise ConfigurationError(
                message=f"{ENV_API_TOKEN} environment variable is required",
                config_key=ENV_API_TOKEN
            )
        if self.variant not in VARIANTS:
            raise ConfigurationError(
                message=f"Variante inconnue: {self.variant!r} (attendu: {', '.join(VARIANTS)})",
                config_key=ENV_VARIANT
            )
        self.base_url = self.base_url.rstrip("/")

    @property
    def sse_url(self) -> str:
        return f"{self.base_url}/sse"

    @classmethod
    def from_env(
        cls,
        variant: str = None,
        base_url: str = None,
        connect_timeout: Optional[float] = None,
        send_timeout: Optional[float] = None,
        log_level: str = None,
    ) -> "BridgeSettings":
        """
        Construit la configuration depuis l'environnement.

        Les arguments explicites (issus de la CLI) priment sur l'environnement.

        Raises:
            ConfigurationError: Token absent, variante inconnue ou timeout invalide
        """
        resolved_variant = (variant or os.getenv(ENV_VARIANT) or VARIANT_OFFICIAL).strip().lower()

        # La variante official cible toujours la production, sauf --base-url explicite.
        if base_url is None and resolved_variant == VARIANT_DEV:
            base_url = os.getenv(ENV_BASE_URL)
        if base_url is None:
            base_url = DEFAULT_BASE_URLS.get(resolved_variant, DEFAULT_BASE_URLS[VARIANT_OFFICIAL])

        return cls(
            api_token=os.getenv(ENV_API_TOKEN, ""),
            variant=resolved_variant,
            base_url=base_url,
            exit_on_stream_end=env_flag(
                ENV_EXIT_ON_STREAM_END,
                default=resolved_variant == VARIANT_OFFICIAL
            ),
            connect_timeout=(
                connect_timeout if connect_timeout is not None
                else _env_timeout(ENV_CONNECT_TIMEOUT)
            ),
            send_timeout=(
                send_timeout if send_timeout is not None
                else _env_timeout(ENV_SEND_TIMEOUT)
            ),
            stdin_limit=clamp_stdio_stream_limit(
                env_int(ENV_STDIO_STREAM_LIMIT, default=DEFAULT_STDIO_STREAM_LIMIT)
            ),
            log_level=(log_level or os.getenv(ENV_LOG_LEVEL) or "INFO").upper(),
        )
