"""FastMCP server initialization for Taskflow MCP."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from mcp.server.fastmcp import FastMCP

from taskflow_mcp.config import load_config
from taskflow_mcp.runtime import TaskflowRuntime, build_runtime

logger = logging.getLogger("taskflow_mcp")


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[TaskflowRuntime]:
    """Build the engine on startup; clear the reconnect timer and close connections on shutdown."""
    runtime = build_runtime(load_config(), logger=logger)
    await runtime.start()
    try:
        yield runtime
    finally:
        await runtime.aclose()


# Initialize the MCP server
mcp = FastMCP("taskflow_mcp", lifespan=lifespan)


def run() -> None:
    """Run the MCP server."""
    config = load_config()
    # stdout carries the MCP stream; logging goes to stderr.
    logging.basicConfig(level=config.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    mcp.run()

