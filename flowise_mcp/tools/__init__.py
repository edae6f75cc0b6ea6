"""
MCP Tool Layer.

Registers the Flowise tools on a FastMCP server and implements their
handlers on top of the API layer.
"""

from flowise_mcp.tools.handlers import FlowiseToolHandlers, failure, success
from flowise_mcp.tools.server import SERVER_NAME, build_server

__all__ = [
    "FlowiseToolHandlers",
    "SERVER_NAME",
    "build_server",
    "failure",
    "success",
]
