"""
Point d'entrée pour `python -m posthog_mcp_bridge`.

Important: stdout est réservé aux messages JSON-RPC, les logs vont sur stderr.
"""
import argparse
import asyncio
import logging
import sys

from .bridge.runner import run_bridge
from .config.settings import BridgeSettings, parse_timeout
from .core.constants import EXIT_FAILURE, EXIT_INTERRUPTED, VARIANTS
from .core.exceptions import ConfigurationError


def _timeout_arg(raw: str):
    try:
        return parse_timeout(raw)
    except ConfigurationError as e:
        raise argparse.ArgumentTypeError(e.message)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="posthog-mcp-bridge",
        description="Bridge stdio <-> SSE/HTTP vers un serveur MCP PostHog",
    )
    parser.add_argument(
        "--variant",
        choices=VARIANTS,
        default=None,
        help="official (production, défaut) ou dev (Wrangler local)",
    )
    parser.add_argument("--base-url", default=None, help="URL de base du serveur MCP")
    parser.add_argument("--log-level", default=None, help="Niveau de log (défaut: INFO)")
    parser.add_argument(
        "--connect-timeout",
        type=_timeout_arg,
        default=None,
        help="Timeout de connexion SSE en secondes (défaut: aucun)",
    )
    parser.add_argument(
        "--send-timeout",
        type=_timeout_arg,
        default=None,
        help="Timeout d'envoi d'un message en secondes (défaut: aucun)",
    )
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    # httpx logue chaque requête en INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def main(argv: list = None) -> None:
    """Fonction principale."""
    args = build_parser().parse_args(argv)

    try:
        settings = BridgeSettings.from_env(
            variant=args.variant,
            base_url=args.base_url,
            connect_timeout=args.connect_timeout,
            send_timeout=args.send_timeout,
            log_level=args.log_level,
        )
    except ConfigurationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(EXIT_FAILURE)

    configure_logging(settings.log_level)

    try:
        code = asyncio.run(run_bridge(settings))
    except KeyboardInterrupt:
        code = EXIT_INTERRUPTED
    sys.exit(code)


if __name__ == "__main__":
    main()
