"""
Base types for model providers.

Defines the request/response shapes every provider speaks, the error
raised when a provider cannot serve a request, and the abstract
provider class the Anthropic and OpenAI backends implement.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

DEFAULT_MAX_TOKENS = 4096
DEFAULT_TEMPERATURE = 1.0


@dataclass(frozen=True)
class TokenUsage:
    input_tokens: int
    output_tokens: int


@dataclass(frozen=True)
class ChatOptions:
    """
    Generation options for a single provider call.
    """

    model: str
    system_prompt: str = ""
    temperature: Optional[float] = None
    max_tokens: int = DEFAULT_MAX_TOKENS


@dataclass
class ChatResponse:
    """
    Normalized chat response returned by providers.

    The text attribute contains the generated text and model the model
    identifier the backend reports having used. The raw attribute keeps
    the provider-specific response for debugging.
    """

    text: str
    model: str
    usage: Optional[TokenUsage] = None
    raw: Any = None


class ProviderError(Exception):
    """Raised when a provider fails to execute a request."""


class BaseProvider:
    """
    Abstract base class for all LLM providers.

    Providers are created once at startup and shared by every agent that
    uses them, so `send` must not keep per-call state on the instance.
    """

    def __init__(self, name: str, api_key: str) -> None:
        self.name = name
        self.api_key = api_key

    def is_ready(self) -> bool:
        return bool(self.api_key)

    async def send(
        self,
        messages: List[Dict[str, str]],
        options: ChatOptions,
    ) -> ChatResponse:
        raise NotImplementedError
