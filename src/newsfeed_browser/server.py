"""MCP Server entry point for the news feed browser.

Runs FastMCP with Streamable HTTP transport; connected agents browse the feed
through the registered tools.
"""

import asyncio
import logging
import signal
import sys

from fastmcp import FastMCP

from .client import NewsAPIClient
from .config import load_config
from .engine import NewsFeedEngine
from .tools import register_tools

logging.basicConfig(
    stream=sys.stderr,
    level=logging.INFO,
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Run the news feed MCP server."""
    config = load_config()
    client = NewsAPIClient(config)
    engine = NewsFeedEngine(client, debounce_seconds=config.debounce_seconds)

    mcp = FastMCP("newsfeed-browser")
    register_tools(mcp, engine)

    def handle_shutdown(signum: int, frame: object) -> None:
        logger.info("Received shutdown signal, closing connections...")
        engine.cancel_pending_work()
        asyncio.run(client.aclose())
        sys.exit(0)

    signal.signal(signal.SIGTERM, handle_shutdown)
    signal.signal(signal.SIGINT, handle_shutdown)

    logger.info(
        "Starting news feed MCP server on %s:%d against %s (streamable-http)",
        config.server_host,
        config.server_port,
        config.news_api_base,
    )
    mcp.run(
        transport="streamable-http",
        host=config.server_host,
        port=config.server_port,
    )


if __name__ == "__main__":
    main()
