"""
Provider registry.

Resolves a provider name from the agent configuration to a shared
provider instance. Each backend is constructed at most once per
process; agents configured for the same backend share it.
"""

from typing import Callable, Dict, Optional

from story_builders.models.anthropic_provider import AnthropicProvider
from story_builders.models.base import BaseProvider, ProviderError
from story_builders.models.openai_provider import OpenAIProvider

PROVIDER_FACTORIES: Dict[str, Callable[[str], BaseProvider]] = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
}

PROVIDER_LABELS = {
    "anthropic": "Anthropic",
    "openai": "OpenAI",
}


class ProviderRegistry:
    """
    ProviderRegistry keeps the API keys for each backend and the provider
    instances built from them.
    """

    def __init__(self, api_keys: Dict[str, Optional[str]]) -> None:
        self.api_keys = {name: key or "" for name, key in api_keys.items()}
        self.providers: Dict[str, BaseProvider] = {}

    def register_provider(self, provider: BaseProvider) -> None:
        self.providers[provider.name] = provider

    def is_configured(self, name: str) -> bool:
        return bool(self.api_keys.get(name))

    def get(self, name: str) -> BaseProvider:
        """
        Return the provider registered under `name`, building it on first use.

        Raises:
            ProviderError: If the name is unknown or its API key is absent.
        """
        provider = self.providers.get(name)
        if provider is not None:
            return provider

        factory = PROVIDER_FACTORIES.get(name)
        if factory is None:
            raise ProviderError(f"Unknown AI provider: {name}")
        if not self.is_configured(name):
            label = PROVIDER_LABELS.get(name, name)
            raise ProviderError(f"{label} provider not configured (missing API key)")

        provider = factory(self.api_keys[name])
        self.register_provider(provider)
        return provider
