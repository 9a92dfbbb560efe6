"""
Offline single-turn harness.

Runs one message through agent selection and the chosen agent without
Slack and prints the response:

    story-builders-ask "@coach I just finished my first draft!"
"""

from __future__ import annotations

import asyncio
import sys
import time
from typing import List, Optional

from dotenv import load_dotenv

from story_builders.agents.base import AgentContext
from story_builders.agents.registry import AgentRegistry
from story_builders.config import load_settings, validate_settings
from story_builders.models.registry import ProviderRegistry
from story_builders.slack.mention_handler import infer_agent_from_text, strip_mentions

USAGE = """Usage: story-builders-ask "<message>"

Examples:
  story-builders-ask "@coach I just finished my first draft!"
  story-builders-ask "@critique Please review this passage: <text>"
  story-builders-ask "I submitted my story!"
"""

RULE = "━" * 44


async def run_turn(registry: AgentRegistry, message: str) -> str:
    text = strip_mentions(message)

    agent_type = registry.select_by_mention(text)
    if agent_type is None:
        agent_type = infer_agent_from_text(text)
        print(f"🔍 No agent specified, inferred: {agent_type}\n")
    else:
        print(f"✅ Agent detected: {agent_type}\n")

    agent = registry.get(agent_type)
    if agent is None:
        raise LookupError(f"Agent not found: {agent_type}")

    context = AgentContext(
        user_id="test-user",
        user_name="Test User",
        channel_id="test-channel",
        thread_ts=str(int(time.time() * 1000)),
    )
    print("⏳ Processing...\n")
    return await agent.process_message(text, context)


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()

    args = sys.argv[1:] if argv is None else argv
    message = " ".join(args).strip()
    if not message:
        print(USAGE)
        return 1

    print("🤖 Story Builders - Agent Test\n")
    print("📝 Your message:", message)
    print("")

    try:
        settings = load_settings()
        validate_settings(settings, require_slack=False)
        providers = ProviderRegistry(settings.provider_keys)
        registry = AgentRegistry.from_yaml(settings.agents_config, providers)
        response = asyncio.run(run_turn(registry, message))
    except Exception as exc:  # noqa: BLE001
        print(f"❌ Error: {exc}", file=sys.stderr)
        return 1

    print(RULE)
    print("💬 Agent Response:\n")
    print(response)
    print(RULE)
    print("")
    return 0


if __name__ == "__main__":
    sys.exit(main())
