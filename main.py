# =============================================================================
# main.py  —  Entry Point for the Task Assistant Agent
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#
# WHAT HAPPENS:
#   1. Creates the Google ADK agent (agent/task_agent.py), which spawns the
#      MCP tool server as a subprocess
#   2. Sets up an in-memory session
#   3. Reads a message, lets the agent call tools, prints its answer
#   4. Repeats until you type "quit"
#
# TRY:
#   "Add a high priority task to renew the SSL certificate, tag it ops"
#   "What's still pending?"
#   "Mark the SSL task as done and email ops@example.com about it"
#
# GOOGLE ADK CONCEPTS USED:
#   - Runner: Manages the agent's execution lifecycle
#   - SessionService: Tracks conversation state across turns
#   - Content/Part: ADK's message format
#   - Event stream: Real-time updates as the agent thinks and acts
# =============================================================================

import asyncio

from dotenv import load_dotenv

# Load environment variables from .env file (OPENROUTER_API_KEY, SMTP_*,
# FEATURE_*).  This must happen BEFORE creating the agent: LiteLlm reads its
# API key at initialization, and the tool server subprocess inherits our
# environment.
load_dotenv()

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from agent.task_agent import create_agent

APP_NAME = "task_assistant"
USER_ID = "demo_user"


async def run_agent():
    """Run the task assistant agent interactively."""
    print("=" * 70)
    print("  TASK ASSISTANT AGENT")
    print("  Powered by Google ADK + LiteLlm + FastMCP")
    print("=" * 70)
    print("\n🔧 Initializing agent...")
    agent = create_agent()

    session_service = InMemorySessionService()
    runner = Runner(
        agent=agent,
        app_name=APP_NAME,
        session_service=session_service,
    )
    session = await session_service.create_session(app_name=APP_NAME, user_id=USER_ID)

    print("✅ Agent initialized and ready!\n")
    print("💬 Ask the agent to manage your tasks, env vars or email.")
    print("   (Type 'quit' to exit)\n")
    print("-" * 70)

    try:
        while True:
            try:
                user_input = input("\n🧑 You: ").strip()
            except (EOFError, KeyboardInterrupt):
                print("\n\n👋 Goodbye!")
                break

            if user_input.lower() in ("quit", "exit", "q"):
                print("\n👋 Goodbye!")
                break

            if not user_input:
                continue

            user_message = types.Content(role="user", parts=[types.Part(text=user_input)])

            print("\n🤖 Agent is thinking...\n")
            print("-" * 70)

            # The last text part of the event stream is the agent's answer;
            # function_call parts are the tools it calls along the way.
            final_response = ""
            async for event in runner.run_async(
                user_id=USER_ID,
                session_id=session.id,
                new_message=user_message,
            ):
                if event.content and event.content.parts:
                    for part in event.content.parts:
                        if part.text:
                            final_response = part.text
                        if part.function_call:
                            print(f"  🔧 Calling tool: {part.function_call.name}")

            print("-" * 70)
            if final_response:
                print(f"\n🤖 Agent:\n\n{final_response}")
            else:
                print("\n⚠️  No response generated. The agent may have encountered an error.")

            print("\n" + "=" * 70)
    finally:
        # Shuts down the MCP toolset, which stops the tool server subprocess.
        await runner.close()


if __name__ == "__main__":
    asyncio.run(run_agent())
