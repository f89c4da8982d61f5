# =============================================================================
# agent/__init__.py
# =============================================================================
# This package contains the Google ADK demo agent for the zip-mcp server.
#
# ARCHITECTURAL ROLE:
#   The agent is a CLIENT of the tool server.  It decides which archive tool
#   to call and explains the results; it never opens an archive itself.
#
#   prompt.py         →  system prompt (behaviour, safety rules)
#   archive_agent.py  →  Agent + LiteLlm model + MCPToolset over stdio
# =============================================================================
