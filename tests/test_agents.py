"""Tests for the writing agents and their shared helpers."""

from __future__ import annotations

import pytest

from story_builders.agents.base import AgentContext, FileAttachment, ThreadMessage
from story_builders.agents.helpers import (
    build_messages,
    empty_attachment_notice,
    format_user_message,
    is_empty_or_greeting,
    seems_like_writing_sample,
)
from story_builders.agents.personas import (
    CoachAgent,
    CraftAgent,
    CritiqueAgent,
    PromptAgent,
    RecommendAgent,
)
from story_builders.models.base import ProviderError

from conftest import make_config

SAMPLE = (
    'Maria walked to the edge of the pier and looked down at the water. '
    '"It is colder than I remembered," she said, and felt the wind bite.'
)


def _context(history=(), files=()) -> AgentContext:
    return AgentContext(
        user_id="U1",
        user_name="Jane",
        channel_id="C1",
        thread_ts="111.222",
        thread_history=tuple(history),
        files=tuple(files),
    )


HISTORY = (
    ThreadMessage(role="user", user_name="Jane", text="Can you help me?", timestamp="1.0"),
    ThreadMessage(role="assistant", user_name="Story Builders", text="Of course.", timestamp="2.0"),
)


class TestHelpers:
    def test_format_without_files_is_text(self):
        assert format_user_message("hello there", _context()) == "hello there"

    def test_format_single_file(self):
        ctx = _context(files=[FileAttachment("story.txt", "Once upon a time.")])

        assert format_user_message("Please read", ctx) == (
            "Please read\n\n[Attached file: story.txt]\n```\nOnce upon a time.\n```"
        )

    def test_format_multiple_files_numbered(self):
        ctx = _context(files=[FileAttachment("a.md", "First"), FileAttachment("b.md", "Second")])

        result = format_user_message("Both please", ctx)

        assert result.startswith("Both please\n\n[Attached files: 2]")
        assert "[File 1: a.md]\n```\nFirst\n```" in result
        assert "[File 2: b.md]\n```\nSecond\n```" in result
        assert result.index("[File 1") < result.index("[File 2")

    def test_build_messages_history_first(self):
        messages = build_messages("And now?", _context(history=HISTORY))

        assert messages == [
            {"role": "user", "content": "Can you help me?"},
            {"role": "assistant", "content": "Of course."},
            {"role": "user", "content": "And now?"},
        ]

    @pytest.mark.parametrize("text", ["hi", "  Hello ", "HEY", "help", "short", ""])
    def test_greetings_and_short_text(self, text):
        assert is_empty_or_greeting(text) is True

    def test_longer_text_is_not_greeting(self):
        assert is_empty_or_greeting("Give me a mystery prompt") is False

    def test_writing_sample_needs_length_and_marker(self):
        assert seems_like_writing_sample(SAMPLE) is True
        assert seems_like_writing_sample("She said hello.") is False
        assert seems_like_writing_sample("x" * 150) is False


class TestCritiqueAgent:
    @pytest.mark.asyncio
    async def test_help_text_without_sample_or_file(self, fake_provider):
        agent = CritiqueAgent(make_config("critique"), fake_provider)

        reply = await agent.process_message("Can you look at my story?", _context())

        assert reply == CritiqueAgent.help_text
        assert fake_provider.calls == []

    @pytest.mark.asyncio
    async def test_short_attachment_returns_empty_notice(self, fake_provider):
        agent = CritiqueAgent(make_config("critique"), fake_provider)
        attachment = FileAttachment("draft.txt", "Only fifteen ch")

        reply = await agent.process_message("@critique", _context(files=[attachment]))

        assert reply == empty_attachment_notice(attachment)
        assert "draft.txt" in reply
        assert fake_provider.calls == []

    @pytest.mark.asyncio
    async def test_pasted_sample_reaches_model(self, fake_provider):
        agent = CritiqueAgent(make_config("critique"), fake_provider)

        reply = await agent.process_message(SAMPLE, _context())

        assert reply == "Model reply"
        options = fake_provider.calls[0]["options"]
        assert options.model == "claude-test"
        assert options.system_prompt == "You are the critique agent."
        assert options.max_tokens == 4096

    @pytest.mark.asyncio
    async def test_attachment_reaches_model_inline(self, fake_provider):
        agent = CritiqueAgent(make_config("critique"), fake_provider)
        attachment = FileAttachment("chapter1.md", "It was a dark and stormy night, again.")

        await agent.process_message("@critique", _context(files=[attachment]))

        content = fake_provider.calls[0]["messages"][-1]["content"]
        assert "[Attached file: chapter1.md]" in content
        assert "dark and stormy" in content

    @pytest.mark.asyncio
    async def test_thread_history_skips_gating(self, fake_provider):
        agent = CritiqueAgent(make_config("critique"), fake_provider)

        reply = await agent.process_message("thanks", _context(history=HISTORY))

        assert reply == "Model reply"
        assert len(fake_provider.calls[0]["messages"]) == 3

    @pytest.mark.asyncio
    async def test_provider_errors_propagate(self, fake_provider):
        fake_provider.error = ProviderError("No content returned by Anthropic")
        agent = CritiqueAgent(make_config("critique"), fake_provider)

        with pytest.raises(ProviderError):
            await agent.process_message(SAMPLE, _context())


CONVERSATIONAL = [
    ("craft", CraftAgent),
    ("prompt", PromptAgent),
    ("coach", CoachAgent),
    ("recommend", RecommendAgent),
]


class TestConversationalAgents:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("agent_type,agent_cls", CONVERSATIONAL)
    @pytest.mark.parametrize("text", ["hi", "hello", "help", "ok then"])
    async def test_greeting_returns_help(self, fake_provider, agent_type, agent_cls, text):
        agent = agent_cls(make_config(agent_type), fake_provider)

        reply = await agent.process_message(text, _context())

        assert reply == agent_cls.help_text
        assert fake_provider.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("agent_type,agent_cls", CONVERSATIONAL)
    async def test_real_request_reaches_model(self, fake_provider, agent_type, agent_cls):
        agent = agent_cls(make_config(agent_type), fake_provider)

        reply = await agent.process_message("I need something about pacing", _context())

        assert reply == "Model reply"
        assert len(fake_provider.calls) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("agent_type,agent_cls", CONVERSATIONAL)
    async def test_greeting_in_thread_reaches_model(self, fake_provider, agent_type, agent_cls):
        agent = agent_cls(make_config(agent_type), fake_provider)

        reply = await agent.process_message("hi", _context(history=HISTORY))

        assert reply == "Model reply"
        assert fake_provider.calls[0]["messages"][-1] == {"role": "user", "content": "hi"}

    @pytest.mark.asyncio
    async def test_attachments_are_inlined_for_craft(self, fake_provider):
        agent = CraftAgent(make_config("craft"), fake_provider)
        ctx = _context(files=[FileAttachment("notes.txt", "Point of view notes")])

        await agent.process_message("Craft talk based on these notes", ctx)

        assert "[Attached file: notes.txt]" in fake_provider.calls[0]["messages"][-1]["content"]
