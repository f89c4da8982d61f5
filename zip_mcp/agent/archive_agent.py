# =============================================================================
# agent/archive_agent.py  —  Google ADK Agent Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Builds the demo agent that drives the zip-mcp server: an ADK Agent with
#   a LiteLlm model and an MCPToolset that spawns the server over stdio.
#
#   ┌─────────────────────────┐   stdio   ┌──────────────────────────┐
#   │  Google ADK Agent       │──────────▶│  FastMCP server          │
#   │  (LiteLlm model)        │◀──────────│  (zip_mcp.tools)         │
#   └─────────────────────────┘           └──────────────────────────┘
#                                                      │
#                                                      ▼
#                                          ┌──────────────────────────┐
#                                          │  core/ (pyzipper backend)│
#                                          └──────────────────────────┘
#
# MODEL:
#   ZIP_AGENT_MODEL picks the LiteLlm model string, e.g.
#     "openrouter/openai/gpt-4o"        (default, needs OPENROUTER_API_KEY)
#     "openrouter/openai/gpt-4o-mini"
#     "anthropic/claude-3-5-sonnet-latest"
#   LiteLlm reads the provider's API key from the environment.
# =============================================================================

import os
import sys

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from zip_mcp.agent.prompt import get_archive_assistant_prompt

DEFAULT_MODEL = "openrouter/openai/gpt-4o"
SERVER_MODULE = "zip_mcp.tools.mcp_server"


def server_parameters() -> StdioServerParameters:
    """How ADK starts the tool server: this interpreter, module mode.

    Using sys.executable keeps the subprocess in the same virtual
    environment as the agent, so fastmcp and pyzipper are importable.
    """
    return StdioServerParameters(
        command=sys.executable,
        args=["-m", SERVER_MODULE],
    )


def create_agent(model: str | None = None) -> Agent:
    """Create the archive assistant agent.

    Args:
        model: LiteLlm model string; defaults to $ZIP_AGENT_MODEL or
            DEFAULT_MODEL.

    Returns:
        A configured Google ADK Agent instance.
    """
    mcp_tools = MCPToolset(connection_params=server_parameters())

    return Agent(
        name="zip_archive_assistant",
        model=LiteLlm(model=model or os.environ.get("ZIP_AGENT_MODEL", DEFAULT_MODEL)),
        instruction=get_archive_assistant_prompt(),
        tools=[mcp_tools],
    )
