"""
OpenAI provider implementation.

Wraps the OpenAI Chat Completions API using the official async SDK.
Chat Completions accepts system messages inline, but the agents expect
a single instruction block, so every system message is coalesced into
one leading system message.
"""

from typing import Dict, List

from openai import AsyncOpenAI

from story_builders.models.base import (
    DEFAULT_TEMPERATURE,
    BaseProvider,
    ChatOptions,
    ChatResponse,
    ProviderError,
    TokenUsage,
)


def coalesce_system_messages(
    messages: List[Dict[str, str]],
    system_prompt: str,
) -> List[Dict[str, str]]:
    """
    Build the Chat Completions message list.

    The configured system prompt opens the leading system message and
    each system-tagged input is appended to it, separated by a blank
    line. Non-system messages follow in their original order.
    """
    system_parts: List[str] = [system_prompt] if system_prompt else []
    conversation: List[Dict[str, str]] = []
    for msg in messages:
        if msg.get("role") == "system":
            system_parts.append(msg.get("content", ""))
        else:
            conversation.append({"role": msg["role"], "content": msg.get("content", "")})

    if not system_parts:
        return conversation
    return [{"role": "system", "content": "\n\n".join(system_parts)}] + conversation


class OpenAIProvider(BaseProvider):
    """
    OpenAIProvider wraps the OpenAI Chat Completions API via the official SDK.
    """

    def __init__(
        self,
        api_key: str,
        name: str = "openai",
        base_url: str = "https://api.openai.com/v1",
    ) -> None:
        super().__init__(name=name, api_key=api_key)
        self.base_url = base_url
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)

    async def send(
        self,
        messages: List[Dict[str, str]],
        options: ChatOptions,
    ) -> ChatResponse:
        openai_messages = coalesce_system_messages(messages, options.system_prompt)
        temperature = options.temperature
        if temperature is None:
            temperature = DEFAULT_TEMPERATURE
        try:
            resp = await self._client.chat.completions.create(
                model=options.model,
                messages=openai_messages,
                max_tokens=options.max_tokens,
                temperature=temperature,
            )
        except Exception as exc:  # noqa: BLE001
            raise ProviderError(f"OpenAI provider error: {exc}") from exc

        text = ""
        if resp.choices:
            text = resp.choices[0].message.content or ""
        if not text:
            raise ProviderError("No content returned by OpenAI")

        usage = None
        if resp.usage is not None:
            usage = TokenUsage(
                input_tokens=resp.usage.prompt_tokens,
                output_tokens=resp.usage.completion_tokens,
            )
        return ChatResponse(text=text, model=resp.model, usage=usage, raw=resp)
