"""
Agent registry.

Builds one agent per configured persona at startup, binds each to its
provider, and resolves which agent a mention is addressed to.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Type

from story_builders.agents.base import BaseAgent
from story_builders.agents.personas import (
    CoachAgent,
    CraftAgent,
    CritiqueAgent,
    PromptAgent,
    RecommendAgent,
)
from story_builders.config import AgentConfig, load_agent_configs
from story_builders.models.registry import ProviderRegistry

logger = logging.getLogger(__name__)

# Order matters: the first type whose name appears in a mention wins.
AGENT_TYPES: Dict[str, Type[BaseAgent]] = {
    "critique": CritiqueAgent,
    "craft": CraftAgent,
    "prompt": PromptAgent,
    "coach": CoachAgent,
    "recommend": RecommendAgent,
}


class AgentRegistry:
    """
    Owns the agent instances for the lifetime of the process.

    Agent types without configuration are simply unavailable. A configured
    agent whose provider has no API key is a startup error, raised from
    the provider registry.
    """

    def __init__(self, configs: Dict[str, AgentConfig], providers: ProviderRegistry) -> None:
        self._configs: Dict[str, AgentConfig] = {}
        self._agents: Dict[str, BaseAgent] = {}

        for agent_type, config in configs.items():
            if agent_type not in AGENT_TYPES:
                logger.warning("Ignoring configuration for unknown agent type '%s'", agent_type)
                continue
            self._configs[agent_type] = config

        for agent_type, agent_cls in AGENT_TYPES.items():
            config = self._configs.get(agent_type)
            if config is None:
                logger.info("No configuration for agent '%s'; it will be unavailable", agent_type)
                continue
            provider = providers.get(config.default_provider)
            self._agents[agent_type] = agent_cls(config, provider)
            logger.info(
                "Registered agent '%s' (%s via %s)",
                agent_type,
                config.model,
                provider.name,
            )

    @classmethod
    def from_yaml(cls, path: Optional[str], providers: ProviderRegistry) -> "AgentRegistry":
        return cls(load_agent_configs(path), providers)

    def select_by_mention(self, text: str) -> Optional[str]:
        """
        Return the agent type named in the text, e.g. "@critique this" -> "critique".
        """
        normalized = text.lower().replace("@", "", 1)
        for agent_type in AGENT_TYPES:
            if agent_type in normalized:
                return agent_type
        return None

    def get(self, agent_type: str) -> Optional[BaseAgent]:
        return self._agents.get(agent_type)

    def list_available(self) -> List[str]:
        return list(self._agents.keys())

    def describe(self, agent_type: str) -> Optional[Dict[str, str]]:
        config = self._configs.get(agent_type)
        if config is None:
            return None
        return {"name": config.name, "description": config.description}
