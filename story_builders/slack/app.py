"""
Slack app wiring.

Creates the Bolt app, attaches the event handlers, and starts it either
in socket mode (development) or as an HTTP server (production).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler
from slack_bolt.async_app import AsyncApp

from story_builders.agents.registry import AgentRegistry
from story_builders.config import ConfigError, Settings
from story_builders.slack.mention_handler import register_mention_handler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BotContext:
    """Process-wide objects built once at startup and handed to the app."""

    settings: Settings
    registry: AgentRegistry


def build_home_view(registry: AgentRegistry) -> Dict[str, Any]:
    lines: List[str] = []
    for agent_type in registry.list_available():
        info = registry.describe(agent_type)
        if info:
            lines.append(f"• *@{agent_type}* - {info['description']}")

    return {
        "type": "home",
        "blocks": [
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": "*Welcome to Story Builders!* :books:"},
            },
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": (
                        "I provide AI-powered writing assistance with specialized agents:\n\n"
                        + "\n".join(lines)
                        + "\n\n_To use an agent, @mention me in a channel and include the agent name!_"
                    ),
                },
            },
        ],
    }


def create_slack_app(context: BotContext) -> AsyncApp:
    settings = context.settings
    app = AsyncApp(
        token=settings.slack_bot_token,
        signing_secret=settings.slack_signing_secret,
    )

    register_mention_handler(app, context.registry, settings.slack_bot_token)

    home_view = build_home_view(context.registry)

    @app.event("app_home_opened")
    async def handle_home_opened(event: Dict[str, Any], client: Any) -> None:
        try:
            await client.views_publish(user_id=event["user"], view=home_view)
        except Exception:  # noqa: BLE001
            logger.exception("Error publishing home view")

    return app


async def _run_socket_mode(app: AsyncApp, app_token: str) -> None:
    handler = AsyncSocketModeHandler(app, app_token)
    await handler.start_async()


def start_slack_app(app: AsyncApp, settings: Settings) -> None:
    """
    Serve events until the process is stopped.

    Raises:
        ConfigError: In development mode when SLACK_APP_TOKEN is missing.
    """
    if settings.is_development:
        if not settings.slack_app_token:
            raise ConfigError("SLACK_APP_TOKEN is required for socket mode (APP_ENV=development)")
        logger.info("⚡️ Story Builders is running in socket mode!")
        asyncio.run(_run_socket_mode(app, settings.slack_app_token))
    else:
        logger.info("⚡️ Story Builders is running on port %d!", settings.port)
        app.start(port=settings.port)
