"""
PyMCP - Model Context Protocol for Python
Simple decorator-free MCP server framework
"""

import asyncio
from typing import Annotated, Any

from pydantic import BaseModel, Field

from mcp_core import McpError, McpServer as _McpServer, serve_stdio


# Clean public API
class Server(_McpServer):
    """MCP Server base class with automatic tool/resource/prompt discovery."""
    pass


def serve(server_instance: _McpServer) -> None:
    """Serve the MCP server over stdin/stdout until the client disconnects."""
    asyncio.run(serve_stdio(server_instance))


# Export clean API
__all__ = ['Server', 'serve', 'McpError', 'BaseModel', 'Field', 'Annotated', 'Any']
