"""
Flowise MCP - Model Context Protocol server for the Flowise API.

Exposes Flowise chatflow management, node discovery, and prediction
execution as MCP tools that an LLM-driven client can call.
"""

__version__ = "1.0.0"
