"""markdownlint-trap MCP Server - Main entry point."""
import logging
import sys

from mcp.server.fastmcp import FastMCP

from markdownlint_trap.config import Config
from markdownlint_trap.tools import lint

# Configure logging to stderr (CRITICAL: stdout is reserved for JSON-RPC)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)]
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("markdownlint-trap")


def main():
    """Main entry point for the MCP server."""
    try:
        config = Config.load()
        logger.info(f"markdownlint-trap v{config.version} starting...")
        logger.info(f"Config file: {config.config_path or 'none (defaults)'}")
        for error in config.errors:
            logger.warning(f"Config: {error['message']}")

        # Register tools
        logger.info("Registering tools...")
        lint.register(mcp, config)
        logger.info(
            "Tools registered: lint_markdown, generate_needs_review_report, "
            "get_lint_rules, clear_link_cache"
        )

        # Run the server
        logger.info("Starting MCP server on stdio...")
        mcp.run(transport="stdio")

    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
