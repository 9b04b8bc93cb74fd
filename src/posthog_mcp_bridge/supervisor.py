"""
Superviseur du serveur de développement local (Wrangler).

Lance `npx wrangler dev` avec stdio hérité, relaie SIGINT/SIGTERM au
sous-processus et termine avec son code de sortie.
"""
import argparse
import asyncio
import logging
import os
import shlex
import signal
import sys
from typing import Dict, List, Optional

from .core.constants import ENV_API_TOKEN, EXIT_FAILURE

logger = logging.getLogger(__name__)

DEFAULT_DEV_SERVER_COMMAND = "npx wrangler dev"
ENV_DEV_SERVER_COMMAND = "MCP_DEV_SERVER_COMMAND"
FORWARDED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def build_dev_server_command() -> List[str]:
    raw = os.getenv(ENV_DEV_SERVER_COMMAND) or DEFAULT_DEV_SERVER_COMMAND
    return shlex.split(raw)


def build_dev_server_env() -> Dict[str, str]:
    env = dict(os.environ)
    env[ENV_API_TOKEN] = os.environ.get(ENV_API_TOKEN, "")
    return env


async def run_dev_server(command: List[str], cwd: Optional[str] = None) -> int:
    """
    Exécute le serveur de dev jusqu'à sa sortie.

    Returns:
        Code de sortie du sous-processus, ou 1 si le lancement échoue
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *command,
            cwd=cwd,
            env=build_dev_server_env(),
        )
    except OSError as e:
        logger.error("Failed to start server: %s", e)
        return EXIT_FAILURE

    loop = asyncio.get_running_loop()

    def _forward(sig: signal.Signals) -> None:
        try:
            proc.send_signal(sig)
        except ProcessLookupError:
            pass

    installed = []
    for sig in FORWARDED_SIGNALS:
        try:
            loop.add_signal_handler(sig, _forward, sig)
            installed.append(sig)
        except (NotImplementedError, RuntimeError):
            # add_signal_handler indisponible (Windows, thread secondaire)
            pass

    try:
        returncode = await proc.wait()
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)

    logger.info("Server exited with code %s", returncode)
    # Code négatif = tué par un signal
    return returncode if returncode >= 0 else 128 - returncode


def main(argv: list = None) -> None:
    parser = argparse.ArgumentParser(
        prog="posthog-mcp-dev-server",
        description="Lance le serveur MCP PostHog local (wrangler dev)",
    )
    parser.add_argument("--cwd", default=None, help="Répertoire du projet Wrangler")
    args = parser.parse_args(argv)

    logging.basicConfig(stream=sys.stderr, level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")
    sys.exit(asyncio.run(run_dev_server(build_dev_server_command(), cwd=args.cwd)))


if __name__ == "__main__":
    main()
