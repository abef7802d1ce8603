"""Allow ``python -m taskflow_mcp``."""

from taskflow_mcp.server import run

run()
