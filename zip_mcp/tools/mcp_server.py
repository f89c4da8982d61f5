# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Publishes the four archive tools over MCP.  Each tool is a thin wrapper
#   that forwards its arguments to tools/dispatcher.py and turns the
#   ToolResponse into what FastMCP expects.
#
# HOW IT WORKS (the flow):
#   1. An agent sends tools/call over stdio (e.g. "compress")
#   2. FastMCP routes the call to the matching function below
#   3. The function hands the arguments to dispatch()
#   4. Success → the JSON text is returned as the tool's text content
#      Error   → raised as ToolError, which MCP reports with isError=true
#   An unregistered tool name is answered by dispatch() through
#   UnknownToolMiddleware, so it gets the same "Error: " text.
#
# SCHEMAS:
#   FastMCP normally derives a tool's input schema from the Python signature.
#   Here the registry's hand-written JSON Schema replaces it, so tools/list
#   publishes exactly the descriptors in tools/registry.py.  The Python
#   parameters are typed Any so every value reaches the dispatcher, which
#   owns validation.
#
# RUNNING THIS SERVER:
#   a) python -m zip_mcp.tools.mcp_server
#   b) zip-mcp                 (console script from pyproject.toml)
#   c) spawned by the demo agent via stdio (zip_mcp/agent/archive_agent.py)
# =============================================================================

import logging
import os
import sys
from typing import Any, Callable

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.server.middleware import Middleware, MiddlewareContext
from fastmcp.tools import Tool

from zip_mcp.tools.dispatcher import dispatch
from zip_mcp.tools.registry import (
    COMPRESS,
    DECOMPRESS,
    ECHO,
    GET_ZIP_INFO,
    ToolDescriptor,
    get_tool,
)

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because the MCP server talks to the agent over STDOUT.
# Anything printed to stdout would corrupt the MCP JSON stream.
# =============================================================================
load_dotenv()

logging.basicConfig(
    level=os.environ.get("ZIP_MCP_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)


# =============================================================================
# Create the FastMCP server instance
# =============================================================================
mcp = FastMCP(
    "zip-mcp",
    instructions=(
        "Local ZIP archive tools. Use getZipInfo to inspect an archive before "
        "extracting it. Every tool reports failures as an error result whose "
        "text starts with 'Error: '."
    ),
)


# =============================================================================
# Unknown tool names
# =============================================================================
# FastMCP answers a call to an unregistered tool itself, with its own text.
# This middleware sends those calls to dispatch() instead, so they come back
# in the same "Error: ..." form as every other failure.
# =============================================================================
class UnknownToolMiddleware(Middleware):
    async def on_call_tool(self, context: MiddlewareContext, call_next):
        name = context.message.name
        if get_tool(name) is None:
            raise ToolError(dispatch(name, context.message.arguments).text)
        return await call_next(context)


mcp.add_middleware(UnknownToolMiddleware())


def _respond(tool_name: str, **arguments: Any) -> str:
    """Dispatch one call; omitted (None) arguments are not forwarded."""
    response = dispatch(
        tool_name, {key: value for key, value in arguments.items() if value is not None},
    )
    if response.is_error:
        raise ToolError(response.text)
    return response.text


# =============================================================================
# Tool functions
# =============================================================================
# The registry descriptions are what the calling agent reads; the
# docstrings here are for people reading this file.
# =============================================================================
def compress(input: Any = None, output: Any = None, options: Any = None) -> str:
    """Compress files/directories into a ZIP archive."""
    return _respond("compress", input=input, output=output, options=options)


def decompress(input: Any = None, output: Any = None, options: Any = None) -> str:
    """Extract a ZIP archive into a directory."""
    return _respond("decompress", input=input, output=output, options=options)


def get_zip_info(input: Any = None, options: Any = None) -> str:
    """Read archive metadata without extracting."""
    return _respond("getZipInfo", input=input, options=options)


def echo(message: Any = None) -> str:
    """Connectivity check."""
    return _respond("echo", message=message)


def _register(fn: Callable[..., str], descriptor: ToolDescriptor) -> None:
    tool = Tool.from_function(fn, name=descriptor.name, description=descriptor.description)
    mcp.add_tool(tool.model_copy(update={"parameters": descriptor.to_dict()["inputSchema"]}))


_register(compress, COMPRESS)
_register(decompress, DECOMPRESS)
_register(get_zip_info, GET_ZIP_INFO)
_register(echo, ECHO)


# =============================================================================
# Server entry point
# =============================================================================
def main() -> None:
    """Serve over stdio until the client disconnects; exit 1 on a fatal error."""
    logging.info("ZIP MCP Server running on stdio")
    try:
        mcp.run()
    except Exception as exc:
        logging.critical("Fatal error: %s", exc, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
