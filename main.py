# =============================================================================
# main.py  -  Entry Point for the Korea Culture Concierge Agent
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py                   interactive chat
#   uv run python main.py "오늘 뭐 볼까?"     one question, then exit
#
# WHAT HAPPENS:
#   1. Creates the Google ADK agent (agent/culture_agent.py), which spawns
#      the stdio tool server
#   2. Opens one in-memory session, so follow-up questions keep context
#   3. Each question is streamed through the ADK Runner; tool calls are
#      echoed as they happen and the last text part is the answer
#
# To serve the tools to another MCP client instead, run one of:
#   python -m tools.mcp_server     (stdio)
#   python -m tools.http_app       (HTTP JSON-RPC)
# =============================================================================

import asyncio
import sys

from dotenv import load_dotenv

# LiteLlm and the spawned tool server both read their keys from the
# environment at start-up.
load_dotenv()

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from agent.culture_agent import create_agent

APP_NAME = "korea_culture_concierge"
USER_ID = "demo_user"
EXIT_WORDS = ("quit", "exit", "q", "종료")
RULE = "─" * 70


async def ask(runner: Runner, session_id: str, question: str) -> str:
    """Send one question through the runner and return the final text."""
    message = types.Content(role="user", parts=[types.Part(text=question)])

    answer = ""
    async for event in runner.run_async(user_id=USER_ID, session_id=session_id, new_message=message):
        if not (event.content and event.content.parts):
            continue
        for part in event.content.parts:
            call = getattr(part, "function_call", None)
            if call:
                args = ", ".join(f"{k}={v!r}" for k, v in (call.args or {}).items())
                print(f"  🔧 {call.name}({args})")
            if getattr(part, "text", None):
                answer = part.text
    return answer


def show(answer: str) -> None:
    print(RULE)
    if answer:
        print(f"\n🎭 Concierge:\n\n{answer}\n")
    else:
        print("\n⚠️  답변을 만들지 못했습니다. 로그를 확인해주세요.\n")


async def run_agent(question: str = None) -> None:
    """Run the concierge; a given question is answered once, else chat."""
    agent = create_agent()
    session_service = InMemorySessionService()
    runner = Runner(agent=agent, app_name=APP_NAME, session_service=session_service)
    session = await session_service.create_session(app_name=APP_NAME, user_id=USER_ID)

    if question:
        show(await ask(runner, session.id, question))
        return

    print(RULE)
    print("  🇰🇷 KOREA CULTURE CONCIERGE  ·  영화 · 공연 · 축제 · 관광지 · 맛집")
    print(RULE)
    print("  예: 오늘 뭐 볼까? / 이번 달 부산 축제 알려줘 / 전주 비빔밥 맛집")
    print(f"  종료: {', '.join(EXIT_WORDS)}")

    while True:
        try:
            question = input("\n🙋 ").strip()
        except (EOFError, KeyboardInterrupt):
            break
        if question.lower() in EXIT_WORDS:
            break
        if question:
            show(await ask(runner, session.id, question))

    print("\n👋 안녕히 가세요!")


if __name__ == "__main__":
    asyncio.run(run_agent(" ".join(sys.argv[1:]) or None))
