# SPDX-License-Identifier: Apache-2.0
# Process entry point for the job matcher MCP server (stdio or HTTP)
from __future__ import annotations

import logging
import signal
import sys
from typing import NoReturn, Optional

from ..settings import SETTINGS
from ..utils.logging import configure_logging
from . import SERVER_NAME, SERVER_VERSION
from .secret import Secrets, static_provider

logger = logging.getLogger(__name__)

TRANSPORTS = ("stdio", "http")


def ensure_authentication_ready() -> str:
    """Require API_AUTH_TOKEN in the environment. No interactive fallback."""
    token = Secrets.get_token()  # raises with a clear message if missing
    logger.info("Using backend token from environment (masked).")
    return token


def exit_gracefully(exit_code: int = 0) -> NoReturn:
    logger.info("👋 Shutting down %s", SERVER_NAME)
    sys.exit(exit_code)


def _on_sigterm(signum, frame) -> None:
    exit_gracefully(0)


def main(transport: Optional[str] = None, port: Optional[int] = None) -> None:
    configure_logging(log_level=SETTINGS.log_level, json_format=SETTINGS.log_json)
    transport = (transport or SETTINGS.transport).lower()
    logger.info("🔗 %s v%s (%s)", SERVER_NAME, SERVER_VERSION, transport)

    if transport not in TRANSPORTS:
        logger.error("❌ Unknown transport %r (expected one of: %s)", transport, ", ".join(TRANSPORTS))
        exit_gracefully(1)

    # Phase 1: fail fast without a secret
    try:
        token = ensure_authentication_ready()
    except Exception as e:
        logger.error("❌ %s", e)
        exit_gracefully(1)

    signal.signal(signal.SIGTERM, _on_sigterm)

    # Phase 2: run the transport until interrupted
    try:
        if transport == "http":
            from .http_app import run

            run(SETTINGS, port=port)
        else:
            from .server import create_mcp_server

            mcp = create_mcp_server(secret_provider=static_provider(token))
            logger.info("🚀 Running job matcher MCP server (STDIO mode)")
            mcp.run(transport="stdio")
    except KeyboardInterrupt:
        logger.info("⏹️  Server stopped by user")
        exit_gracefully(0)
    except Exception as e:
        logger.error("Fatal error running MCP server: %s", e, exc_info=True)
        exit_gracefully(1)


if __name__ == "__main__":
    main()
