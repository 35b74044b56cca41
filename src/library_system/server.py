"""Library System tool server.

Exposes the library operations as MCP tools over stdio. The server acts as a
single operator session whose name and role come from configuration
(``LIBRARY_SYSTEM_OPERATOR_NAME`` / ``LIBRARY_SYSTEM_OPERATOR_ROLE``).
"""

import logging
import signal
import sys
from typing import Any

from fastmcp import FastMCP

from .config import get_config
from .database.session import get_db_manager
from .tools import all_tools

logger = logging.getLogger(__name__)


def create_server() -> FastMCP:
    """Build the FastMCP server and register every tool."""
    config = get_config()

    mcp = FastMCP(
        name=config.server_name,
        version=config.server_version,
        instructions=(
            "Library System - check out books to members, inspect checkout records "
            "and overdue copies, and manage the catalog. Which tools succeed depends "
            "on the operator's role (librarian, admin or both)."
        ),
    )

    for tool in all_tools:
        logger.debug("Registering tool: %s", tool["name"])
        mcp.tool(
            name=tool["name"],
            description=tool["description"],
        )(tool["handler"])

    logger.info("Registered %d tools", len(all_tools))
    return mcp


def configure_logging() -> None:
    config = get_config()
    logging.basicConfig(
        level=logging.DEBUG if config.debug else config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        # stdout carries the protocol on stdio transport
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    if not config.debug:
        logging.getLogger("fastmcp").setLevel(logging.WARNING)


def run_stdio_server(mcp: FastMCP) -> None:
    """Run the server on stdio until terminated."""
    config = get_config()
    logger.info("Starting %s v%s on stdio transport", config.server_name, config.server_version)

    def signal_handler(signum: int, _frame: Any) -> None:
        logger.info("Received signal %s, shutting down...", signum)
        get_db_manager().close()
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        mcp.run(transport="stdio")
    except Exception:
        logger.exception("Fatal error in server")
        sys.exit(1)


def main() -> None:
    """Entry point for ``library-system``."""
    configure_logging()
    config = get_config()

    logger.info("Library System v%s", config.server_version)
    logger.info("Operator: %s (%s)", config.operator_name, config.operator_role)

    try:
        get_db_manager().init_database()
        run_stdio_server(create_server())
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    finally:
        get_db_manager().close()


if __name__ == "__main__":
    main()
