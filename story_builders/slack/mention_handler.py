"""
Handling of `app_mention` events.

One mention is one turn: pick an agent, gather the thread and any
attached writing, let the agent answer, and post the Slack-formatted
reply in the thread. Reactions on the triggering message show progress
(:eyes: while working, :white_check_mark: when done). Reactions are
advisory: a failed reaction call is logged and the turn carries on.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

import requests

from story_builders.agents.base import AgentContext, FileAttachment, ThreadMessage
from story_builders.agents.registry import AgentRegistry
from story_builders.slack.formatting import format_for_slack

logger = logging.getLogger(__name__)

MENTION_RE = re.compile(r"<@[A-Z0-9]+>")

PROCESSING_PLACEHOLDER = "_Processing..._"
WORKING_REACTION = "eyes"
DONE_REACTION = "white_check_mark"

THREAD_HISTORY_LIMIT = 100
DEFAULT_USER_NAME = "Writer"
DEFAULT_BOT_NAME = "Story Builders"

MAX_FILE_BYTES = 1024 * 1024
TEXT_FILE_EXTENSIONS = frozenset(
    {".txt", ".md", ".tex", ".rtf", ".doc", ".docx", ".markdown", ".text"}
)
DOWNLOAD_TIMEOUT_SECONDS = 30

# Ordered: the first group with a matching keyword decides the agent.
AGENT_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("critique", ("critique", "feedback", "review")),
    ("craft", ("craft talk", "presentation", "teach")),
    ("prompt", ("prompt", "writing exercise", "idea")),
    (
        "coach",
        ("coach", "celebrate", "milestone", "goal", "submitted", "finished", "completed"),
    ),
)
DEFAULT_AGENT = "critique"


class TurnState(str, Enum):
    STARTED = "started"
    CONTEXT_ASSEMBLED = "context-assembled"
    DISPATCHED = "dispatched"
    REPLIED = "replied"
    COMPLETED = "completed"
    ERROR = "error"
    NO_AGENT = "no-agent"


@dataclass
class TurnResult:
    state: TurnState
    agent_type: Optional[str] = None
    reply_text: Optional[str] = None
    error: Optional[BaseException] = None


FileFetcher = Callable[[str, str], Optional[str]]


def strip_mentions(text: str) -> str:
    return MENTION_RE.sub("", text or "").strip()


def infer_agent_from_text(text: str) -> str:
    """Guess the agent from keywords when the mention names none."""
    lower = text.lower()
    for agent_type, keywords in AGENT_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return agent_type
    return DEFAULT_AGENT


def is_text_attachment(file: Dict[str, Any]) -> bool:
    mimetype = (file.get("mimetype") or "").lower()
    if "text" in mimetype or "latex" in mimetype:
        return True
    extension = os.path.splitext(file.get("name") or "")[1].lower()
    return extension in TEXT_FILE_EXTENSIONS


def available_agents_message(registry: AgentRegistry) -> str:
    lines = []
    for agent_type in registry.list_available():
        info = registry.describe(agent_type)
        if info:
            lines.append(f"• @{agent_type}: {info['description']}")
    descriptions = "\n".join(lines)
    return (
        "I have several specialized agents available:\n\n"
        f"{descriptions}\n\n"
        "Mention an agent name or I'll try to figure out which one you need!"
    )


def download_file_text(url: str, token: str) -> Optional[str]:
    """
    Download a private Slack file and decode it as UTF-8 text.

    Returns None when the download fails; the attachment is then skipped.
    """
    try:
        resp = requests.get(
            url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=DOWNLOAD_TIMEOUT_SECONDS,
        )
    except requests.RequestException as exc:
        logger.error("Error downloading file %s: %s", url, exc)
        return None
    if resp.status_code != 200:
        logger.error("Failed to download file %s: HTTP %s", url, resp.status_code)
        return None
    return resp.content.decode("utf-8", errors="replace")


async def advisory(description: str, call: Callable[[], Awaitable[Any]]) -> bool:
    """
    Run a side effect whose failure must not affect the turn.

    Returns True when the call succeeded.
    """
    try:
        await call()
    except Exception as exc:  # noqa: BLE001
        logger.warning("Advisory call failed (%s): %s", description, exc)
        return False
    return True


class MentionHandler:
    """
    Runs one turn per mention event against a Slack web client.

    The handler holds no per-turn state, so a single instance serves
    concurrent events.
    """

    def __init__(
        self,
        registry: AgentRegistry,
        client: Any,
        bot_token: str,
        fetch_file: Optional[FileFetcher] = None,
    ) -> None:
        self.registry = registry
        self.client = client
        self.bot_token = bot_token
        self.fetch_file = fetch_file or download_file_text

    async def handle(self, event: Dict[str, Any]) -> TurnResult:
        channel = event.get("channel", "")
        event_ts = event.get("ts", "")
        reply_ts = event.get("thread_ts") or event_ts
        text = strip_mentions(event.get("text", ""))

        state = TurnState.STARTED
        agent_type = self.registry.select_by_mention(text) or infer_agent_from_text(text)
        logger.info("Mention from %s in %s routed to '%s'", event.get("user"), channel, agent_type)

        agent = self.registry.get(agent_type)
        if agent is None:
            listing = available_agents_message(self.registry)
            try:
                await self._reply(channel, reply_ts, listing)
            except Exception as exc:  # noqa: BLE001
                logger.exception("Could not post the agent listing")
                return await self._fail(channel, event_ts, reply_ts, agent_type, exc)
            return TurnResult(TurnState.NO_AGENT, agent_type, listing)

        try:
            context = await self._build_context(event, reply_ts)
            state = TurnState.CONTEXT_ASSEMBLED

            await advisory(
                "add working reaction",
                lambda: self.client.reactions_add(
                    channel=channel, timestamp=event_ts, name=WORKING_REACTION
                ),
            )

            response = await agent.process_message(text, context)
            state = TurnState.DISPATCHED

            formatted = format_for_slack(response)
            await self._reply(channel, reply_ts, formatted)
            state = TurnState.REPLIED

            await advisory(
                "remove working reaction",
                lambda: self.client.reactions_remove(
                    channel=channel, timestamp=event_ts, name=WORKING_REACTION
                ),
            )
            await advisory(
                "add done reaction",
                lambda: self.client.reactions_add(
                    channel=channel, timestamp=event_ts, name=DONE_REACTION
                ),
            )
            return TurnResult(TurnState.COMPLETED, agent_type, formatted)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Turn failed after state '%s'", state.value)
            return await self._fail(channel, event_ts, reply_ts, agent_type, exc)

    async def _fail(
        self,
        channel: str,
        event_ts: str,
        reply_ts: str,
        agent_type: str,
        exc: BaseException,
    ) -> TurnResult:
        await advisory(
            "clear working reaction",
            lambda: self.client.reactions_remove(
                channel=channel, timestamp=event_ts, name=WORKING_REACTION
            ),
        )
        error_text = f"Sorry, I encountered an error: {str(exc) or 'Unknown error'}"
        try:
            await self._reply(channel, reply_ts, error_text)
        except Exception:  # noqa: BLE001
            logger.exception("Could not post the error reply")
        return TurnResult(TurnState.ERROR, agent_type, error_text, exc)

    async def _reply(self, channel: str, thread_ts: str, text: str) -> None:
        await self.client.chat_postMessage(channel=channel, thread_ts=thread_ts, text=text)

    # ------------------------------------------------------------------
    # Context assembly
    # ------------------------------------------------------------------

    async def _build_context(self, event: Dict[str, Any], reply_ts: str) -> AgentContext:
        user_id = event.get("user", "")
        user_name = await self._get_user_name(user_id)

        history: Tuple[ThreadMessage, ...] = ()
        if event.get("thread_ts"):
            history = await self._get_thread_history(
                event["channel"], event["thread_ts"], exclude_ts=event.get("ts", "")
            )

        files = await self._collect_files(event.get("files") or [])

        return AgentContext(
            user_id=user_id,
            user_name=user_name,
            channel_id=event["channel"],
            thread_ts=reply_ts,
            thread_history=history,
            files=files,
            file_name=files[0].name if files else None,
            file_content=files[0].content if files else None,
        )

    async def _get_user_name(self, user_id: str) -> str:
        try:
            result = await self.client.users_info(user=user_id)
        except Exception as exc:  # noqa: BLE001
            logger.error("Error getting user name for %s: %s", user_id, exc)
            return DEFAULT_USER_NAME
        user = result.get("user") or {}
        profile = user.get("profile") or {}
        return profile.get("display_name") or user.get("name") or DEFAULT_USER_NAME

    async def _get_thread_history(
        self, channel: str, thread_ts: str, exclude_ts: str
    ) -> Tuple[ThreadMessage, ...]:
        try:
            result = await self.client.conversations_replies(
                channel=channel, ts=thread_ts, limit=THREAD_HISTORY_LIMIT
            )
        except Exception as exc:  # noqa: BLE001
            logger.error("Error fetching thread history for %s: %s", thread_ts, exc)
            return ()

        if not result.get("ok") or not result.get("messages"):
            logger.error("Failed to fetch thread history for %s", thread_ts)
            return ()

        # Display names are looked up once per author for this fetch only.
        user_names: Dict[str, str] = {}
        messages: List[ThreadMessage] = []
        for msg in result["messages"]:
            text = msg.get("text") or ""
            if text == PROCESSING_PLACEHOLDER or msg.get("ts") == exclude_ts:
                continue
            # History turns are never empty (bare mentions, silent uploads).
            text = strip_mentions(text)
            if not text:
                continue

            if msg.get("bot_id"):
                role = "assistant"
                user_name = msg.get("username") or DEFAULT_BOT_NAME
            else:
                role = "user"
                author = msg.get("user")
                if author:
                    if author not in user_names:
                        user_names[author] = await self._get_user_name(author)
                    user_name = user_names[author]
                else:
                    user_name = "User"

            messages.append(
                ThreadMessage(
                    role=role,
                    user_name=user_name,
                    text=text,
                    timestamp=msg.get("ts", ""),
                )
            )

        logger.info("Fetched %d messages from thread %s", len(messages), thread_ts)
        return tuple(messages)

    async def _collect_files(self, files: List[Dict[str, Any]]) -> Tuple[FileAttachment, ...]:
        attachments: List[FileAttachment] = []
        for file in files:
            name = file.get("name") or "untitled"
            if not is_text_attachment(file):
                logger.info("Skipping non-text file: %s (%s)", name, file.get("mimetype"))
                continue
            size = file.get("size") or 0
            if size > MAX_FILE_BYTES:
                logger.info("File too large: %s (%d bytes)", name, size)
                continue
            url = file.get("url_private_download") or file.get("url_private")
            if not url:
                logger.info("No download URL for file: %s", name)
                continue

            logger.info("Downloading file: %s (%d bytes)", name, size)
            content = await asyncio.to_thread(self.fetch_file, url, self.bot_token)
            if content is None:
                continue
            logger.info("Downloaded %d characters from %s", len(content), name)
            attachments.append(FileAttachment(name=name, content=content))
        return tuple(attachments)


def register_mention_handler(app: Any, registry: AgentRegistry, bot_token: str) -> MentionHandler:
    """Attach the mention handler to a Bolt app and return it."""
    handler = MentionHandler(registry, app.client, bot_token)

    @app.event("app_mention")
    async def handle_app_mention(event: Dict[str, Any]) -> None:
        await handler.handle(event)

    return handler
