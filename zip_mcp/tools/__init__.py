# =============================================================================
# tools/__init__.py
# =============================================================================
# This package is the "translation layer" between MCP and core/.
#
#   registry.py    →  the four tool descriptors and their JSON Schemas
#   dispatcher.py  →  validates a call, routes it, wraps the outcome in a
#                     ToolResponse envelope (errors become data)
#   mcp_server.py  →  FastMCP stdio server publishing the registry
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT touch archives directly (that's core/backend.py)
#   - They do NOT know about Google ADK (that's agent/)
# =============================================================================
