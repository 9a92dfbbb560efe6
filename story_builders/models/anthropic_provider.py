"""
Anthropic provider implementation.

This provider wraps the Claude messages API via the official `anthropic`
SDK. Claude takes a single system instruction next to a list of
user/assistant turns, so system-tagged chat messages are folded into
that instruction before the call.
"""

from typing import Any, Dict, List, Tuple

import anthropic

from story_builders.models.base import (
    DEFAULT_TEMPERATURE,
    BaseProvider,
    ChatOptions,
    ChatResponse,
    ProviderError,
    TokenUsage,
)


def split_system_messages(
    messages: List[Dict[str, str]],
    system_prompt: str,
) -> Tuple[str, List[Dict[str, str]]]:
    """
    Separate system messages from the conversation.

    System-tagged messages come first in the combined instruction, then
    the configured system prompt; empty parts are dropped. Every other
    message is kept in order as a user or assistant turn.
    """
    system_parts = [m.get("content", "") for m in messages if m.get("role") == "system"]
    system_parts.append(system_prompt)
    system = "\n\n".join(part for part in system_parts if part)

    converted: List[Dict[str, str]] = []
    for msg in messages:
        role = msg.get("role")
        if role == "system":
            continue
        if role != "assistant":
            role = "user"
        converted.append({"role": role, "content": msg.get("content", "")})
    return system, converted


class AnthropicProvider(BaseProvider):
    """
    AnthropicProvider wraps the Claude messages API via the official anthropic SDK.
    """

    def __init__(self, api_key: str, name: str = "anthropic") -> None:
        super().__init__(name=name, api_key=api_key)
        self._client = anthropic.AsyncAnthropic(api_key=api_key)

    async def send(
        self,
        messages: List[Dict[str, str]],
        options: ChatOptions,
    ) -> ChatResponse:
        system, converted = split_system_messages(messages, options.system_prompt)
        temperature = options.temperature
        if temperature is None:
            temperature = DEFAULT_TEMPERATURE
        try:
            resp = await self._client.messages.create(
                model=options.model,
                max_tokens=options.max_tokens,
                temperature=temperature,
                system=system,
                messages=converted,
            )
        except Exception as exc:  # noqa: BLE001
            raise ProviderError(f"Anthropic provider error: {exc}") from exc

        text = _first_text_block(resp.content)
        if not text:
            raise ProviderError("No content returned by Anthropic")

        usage = None
        if getattr(resp, "usage", None) is not None:
            usage = TokenUsage(
                input_tokens=resp.usage.input_tokens,
                output_tokens=resp.usage.output_tokens,
            )
        return ChatResponse(text=text, model=resp.model, usage=usage, raw=resp)


def _first_text_block(blocks: List[Any]) -> str:
    for block in blocks or []:
        if getattr(block, "type", "") == "text":
            return block.text
    return ""
