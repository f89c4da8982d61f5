# =============================================================================
# main.py  —  Entry Point for the Archive Assistant demo
# =============================================================================
#
# HOW TO RUN:
#   python main.py
#
# WHAT HAPPENS:
#   1. Creates the Google ADK agent (zip_mcp/agent/archive_agent.py), which
#      spawns the zip-mcp tool server as a subprocess over stdio
#   2. Opens an in-memory session
#   3. Reads requests from the terminal ("zip up ./reports into r.zip")
#   4. Prints each tool call as it happens, then the agent's answer
#
# To run ONLY the tool server (for another MCP client), use:
#   python -m zip_mcp.tools.mcp_server
# =============================================================================

import asyncio

from dotenv import load_dotenv

# LiteLlm reads provider API keys from the environment when the agent is
# created, so .env must be loaded first.
load_dotenv()

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from zip_mcp.agent.archive_agent import create_agent

APP_NAME = "zip_archive_assistant"
USER_ID = "demo_user"


async def run_agent():
    """Run the archive assistant interactively until the user quits."""
    print("=" * 70)
    print("  ZIP ARCHIVE ASSISTANT")
    print("  Powered by Google ADK + FastMCP + pyzipper")
    print("=" * 70)
    print("\nInitializing agent...")
    agent = create_agent()

    session_service = InMemorySessionService()
    runner = Runner(
        agent=agent,
        app_name=APP_NAME,
        session_service=session_service,
    )
    session = await session_service.create_session(
        app_name=APP_NAME,
        user_id=USER_ID,
    )

    print("Agent ready. Ask it to compress, extract or inspect ZIP files.")
    print("   (Type 'quit' to exit)\n")
    print("-" * 70)

    while True:
        try:
            user_input = input("\nYou: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n\nGoodbye!")
            break

        if user_input.lower() in ("quit", "exit", "q"):
            print("\nGoodbye!")
            break

        if not user_input:
            continue

        user_message = types.Content(
            role="user",
            parts=[types.Part(text=user_input)],
        )

        print("\nAgent is working...\n")
        print("-" * 70)

        final_response = ""

        async for event in runner.run_async(
            user_id=USER_ID,
            session_id=session.id,
            new_message=user_message,
        ):
            if event.content and event.content.parts:
                for part in event.content.parts:
                    if getattr(part, "text", None):
                        final_response = part.text

                    if getattr(part, "function_call", None):
                        print(f"  Calling tool: {part.function_call.name}")

        print("-" * 70)
        if final_response:
            print(f"\nAgent:\n\n{final_response}")
        else:
            print("\nNo response generated. The agent may have encountered an error.")

        print("\n" + "=" * 70)


if __name__ == "__main__":
    asyncio.run(run_agent())
