"""
Writing agent implementations.

Defines:
- CritiqueAgent: feedback on an uploaded or pasted piece of writing.
- CraftAgent: craft talks on writing topics.
- PromptAgent: writing prompts and discussion of the results.
- CoachAgent: celebrates wins and supports writing goals.
- RecommendAgent: reading recommendations for writers.

In a thread that already has messages every agent goes straight to the
model; the earlier turns establish what the writer wants. The help-text
checks below only apply to the first message of a conversation.
"""

from __future__ import annotations

from story_builders.agents.base import AgentContext, BaseAgent
from story_builders.agents.helpers import (
    build_messages,
    empty_attachment_notice,
    find_empty_attachment,
    is_empty_or_greeting,
    seems_like_writing_sample,
)


class CritiqueAgent(BaseAgent):
    """
    Critiques writing. Needs either an attachment or a pasted passage.
    """

    help_text = """Hi! I'm the Critique Agent. I provide thoughtful feedback on your writing.

To get a critique, you can either:
1. Upload your writing as a file attachment and @mention me
2. Paste your writing directly in your message (works best for longer samples)

What would you like me to critique today?"""

    async def process_message(self, user_text: str, context: AgentContext) -> str:
        if not context.has_history:
            if context.files:
                empty = find_empty_attachment(context.files)
                if empty is not None:
                    return empty_attachment_notice(empty)
            elif not seems_like_writing_sample(user_text):
                return self.help_text

        return await self._send_to_model(build_messages(user_text, context))


class CraftAgent(BaseAgent):
    help_text = """Hi! I'm the Craft Agent. I research and create writing craft talks on specific topics.

Ask me to prepare a craft talk on any writing topic, for example:
- "Can you prepare a craft talk on point of view?"
- "Create a presentation about dialogue tags and beats"
- "I need a talk about show vs tell"

I'll provide structured content with examples, exercises, and further reading recommendations.

What craft topic would you like to explore?"""

    async def process_message(self, user_text: str, context: AgentContext) -> str:
        if not context.has_history and is_empty_or_greeting(user_text):
            return self.help_text
        return await self._send_to_model(build_messages(user_text, context))


class PromptAgent(BaseAgent):
    help_text = """Hi! I'm the Prompt Agent. I generate creative writing prompts and discuss your writing.

You can:
1. Ask me for a writing prompt (e.g., "Give me a prompt" or "Prompt for a mystery story")
2. Share what you wrote from a prompt and discuss it with me
3. Ask for specific types of prompts (character-based, setting-based, etc.)

What would you like to do today?"""

    async def process_message(self, user_text: str, context: AgentContext) -> str:
        if not context.has_history and is_empty_or_greeting(user_text):
            return self.help_text
        return await self._send_to_model(build_messages(user_text, context))


class CoachAgent(BaseAgent):
    help_text = """Hi! I'm your Writing Coach. I'm here to celebrate your wins and support your writing journey.

Share with me:
1. Writing goals you've hit (word counts, daily streaks, habits)
2. Submissions or publications (acceptances AND rejections - they're all progress!)
3. Creative breakthroughs (finished drafts, solved plot problems, character insights)
4. Personal growth moments (trying new techniques, overcoming fears)

What would you like to celebrate or talk about today?"""

    async def process_message(self, user_text: str, context: AgentContext) -> str:
        if not context.has_history and is_empty_or_greeting(user_text):
            return self.help_text
        return await self._send_to_model(build_messages(user_text, context))


class RecommendAgent(BaseAgent):
    help_text = """Hi! I'm your Reading Recommendations agent. I help writers discover books, stories, and authors based on what you've enjoyed.

Share with me:
1. Books or stories you loved - tell me what resonated with you
2. Specific elements you're looking for (themes, style, voice, etc.)
3. Authors whose work you admire
4. Literary magazines or short fiction you want to explore

I'll recommend similar works and explain what makes them worth reading, especially from a writer's perspective.

What are you in the mood to discover?"""

    async def process_message(self, user_text: str, context: AgentContext) -> str:
        if not context.has_history and is_empty_or_greeting(user_text):
            return self.help_text
        return await self._send_to_model(build_messages(user_text, context))
