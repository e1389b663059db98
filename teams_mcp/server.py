"""
Teams MCP — orchestrator.

Loads settings, builds the messaging client for the configured API
variant, registers its tools on a FastMCP instance, and exposes ``main()``
as the entry point.
"""

import logging
import sys
from typing import Optional

import httpx
from mcp.server.fastmcp import FastMCP

from .clients import get_client
from .config import Settings, load_settings
from .errors import ConfigurationError
from .tools import register_all

VERSION = "0.1.0"

logger = logging.getLogger("teams_mcp")


def configure_logging(level: str = "INFO") -> None:
    """Send package logs to stderr; stdout carries the MCP protocol."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(level)
    logger.propagate = False


def create_server(settings: Optional[Settings] = None,
                  transport: Optional[httpx.BaseTransport] = None) -> FastMCP:
    """Build a ready-to-run FastMCP server.

    Raises:
        ConfigurationError: when a setting the selected mode needs is missing
    """
    if settings is None:
        settings = load_settings()
    settings.require_mode()

    mcp = FastMCP("Teams MCP")
    client = get_client(settings, transport=transport)
    register_all(mcp, client)
    logger.info("Teams MCP ready (%s mode)", settings.api_mode)
    return mcp


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    """Run the Teams MCP server."""
    if len(sys.argv) > 1:
        arg = sys.argv[1]
        if arg in ("--help", "-h"):
            print("Teams MCP")
            print("=" * 30)
            print("Usage:")
            print("  teams-mcp            # Start MCP server (stdio)")
            print("  teams-mcp --help     # Show this help")
            print("  teams-mcp --version  # Show version")
            print()
            print("Bot mode (default) needs TEAMS_APP_ID, TEAMS_APP_PASSWORD,")
            print("TEAMS_SERVICE_URL and TEAMS_CONVERSATION_ID.")
            print("Graph mode (TEAMS_API_MODE=graph) needs TEAMS_ACCESS_TOKEN.")
            return
        if arg == "--version":
            print(f"Teams MCP v{VERSION}")
            return

    try:
        settings = load_settings()
        configure_logging(settings.log_level)
        mcp = create_server(settings)
    except ConfigurationError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    logger.info("Running in MCP protocol mode (stdio)")
    try:
        mcp.run()
    except KeyboardInterrupt:
        logger.info("Teams MCP stopped")
    except Exception as e:
        logger.error("Server error: %s", e)
        sys.exit(1)
