# =============================================================================
# zip_mcp/__init__.py
# =============================================================================
# ZIP archive tools (compress, decompress, inspect) served over MCP.
#
# LAYOUT:
#   core/   →  archive logic: models, errors, handlers, the pyzipper backend
#   tools/  →  tool registry, request dispatcher, FastMCP stdio server
#   agent/  →  demo Google ADK agent that drives the server
# =============================================================================

__version__ = "1.0.0"
