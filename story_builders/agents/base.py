"""
Base types for the writing agents.

Defines the per-turn context handed to an agent, the thread and file
records it carries, and the BaseAgent contract every persona implements.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from story_builders.config import AgentConfig
from story_builders.models.base import BaseProvider, ChatOptions

MAX_OUTPUT_TOKENS = 4096


@dataclass(frozen=True)
class ThreadMessage:
    """One earlier message in the Slack thread, oldest first."""

    role: str  # "user" | "assistant"
    user_name: str
    text: str
    timestamp: str


@dataclass(frozen=True)
class FileAttachment:
    name: str
    content: str


@dataclass(frozen=True)
class AgentContext:
    """
    Everything an agent knows about the current turn apart from the text.

    `file_name` and `file_content` mirror the first entry of `files` for
    callers that only handle a single attachment.
    """

    user_id: str
    channel_id: str
    thread_ts: str
    user_name: str = "Writer"
    thread_history: Tuple[ThreadMessage, ...] = ()
    files: Tuple[FileAttachment, ...] = ()
    file_name: Optional[str] = None
    file_content: Optional[str] = None

    @property
    def has_history(self) -> bool:
        return len(self.thread_history) > 0


class BaseAgent:
    """
    Abstract base class for the writing agents.

    Subclasses implement `process_message`, which either answers with a
    static message or calls the model once through `_send_to_model`.
    Agents are built once at startup and shared across concurrent turns,
    so they keep no per-turn state.
    """

    help_text: str = ""

    def __init__(self, config: AgentConfig, provider: BaseProvider) -> None:
        self.config = config
        self.provider = provider

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def description(self) -> str:
        return self.config.description

    async def process_message(self, user_text: str, context: AgentContext) -> str:
        raise NotImplementedError

    async def _send_to_model(
        self,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = None,
    ) -> str:
        response = await self.provider.send(
            messages,
            ChatOptions(
                model=self.config.model,
                system_prompt=self.config.system_prompt,
                temperature=temperature,
                max_tokens=MAX_OUTPUT_TOKENS,
            ),
        )
        return response.text
