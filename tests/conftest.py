"""Test configuration and fixtures for Story Builders."""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

import pytest

from story_builders.agents.registry import AgentRegistry
from story_builders.config import AgentConfig
from story_builders.models.base import BaseProvider, ChatOptions, ChatResponse, TokenUsage
from story_builders.models.registry import ProviderRegistry


class FakeProvider(BaseProvider):
    """Provider stub that records every call and returns a canned reply."""

    def __init__(self, reply: str = "Model reply", error: Optional[Exception] = None) -> None:
        super().__init__(name="anthropic", api_key="test-key")
        self.reply = reply
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def send(self, messages, options: ChatOptions) -> ChatResponse:
        self.calls.append({"messages": messages, "options": options})
        if self.error is not None:
            raise self.error
        return ChatResponse(
            text=self.reply,
            model=options.model,
            usage=TokenUsage(input_tokens=10, output_tokens=5),
        )


def make_config(agent_type: str) -> AgentConfig:
    return AgentConfig(
        name=f"{agent_type.title()} Agent",
        description=f"The {agent_type} agent",
        system_prompt=f"You are the {agent_type} agent.",
        default_provider="anthropic",
        model="claude-test",
    )


ALL_TYPES = ("critique", "craft", "prompt", "coach", "recommend")


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def provider_registry(fake_provider: FakeProvider) -> ProviderRegistry:
    providers = ProviderRegistry({"anthropic": "test-key", "openai": ""})
    providers.register_provider(fake_provider)
    return providers


@pytest.fixture
def make_registry(provider_registry: ProviderRegistry):
    def _make(types=ALL_TYPES) -> AgentRegistry:
        return AgentRegistry({t: make_config(t) for t in types}, provider_registry)

    return _make


@pytest.fixture
def registry(make_registry) -> AgentRegistry:
    return make_registry()


@pytest.fixture
def slack_client() -> AsyncMock:
    """Slack web client stub with the calls the mention handler makes."""
    client = AsyncMock()
    client.users_info.return_value = {
        "ok": True,
        "user": {"name": "jdoe", "profile": {"display_name": "Jane"}},
    }
    client.conversations_replies.return_value = {"ok": True, "messages": []}
    client.chat_postMessage.return_value = {"ok": True}
    client.reactions_add.return_value = {"ok": True}
    client.reactions_remove.return_value = {"ok": True}
    return client
