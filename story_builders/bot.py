"""
Bot bootstrap: load settings, configure logging, build the registries
and serve Slack events until stopped.
"""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from story_builders.agents.registry import AgentRegistry
from story_builders.config import ConfigError, Settings, load_settings, validate_settings
from story_builders.logger import setup_logging
from story_builders.models.base import ProviderError
from story_builders.models.registry import ProviderRegistry
from story_builders.slack.app import BotContext, create_slack_app, start_slack_app

logger = logging.getLogger("story_builders")


# --------------------------------------------------------------------------------------
# Startup
# --------------------------------------------------------------------------------------


def build_bot_context(settings: Settings) -> BotContext:
    """
    Validate configuration and build the registry shared by every turn.

    Raises:
        ConfigError: If required settings or agent configuration are missing.
        ProviderError: If an agent is configured for a provider without a key.
    """
    validate_settings(settings)
    providers = ProviderRegistry(settings.provider_keys)
    registry = AgentRegistry.from_yaml(settings.agents_config, providers)
    logger.info("Available agents: %s", ", ".join(registry.list_available()) or "none")
    return BotContext(settings=settings, registry=registry)


# --------------------------------------------------------------------------------------
# main()
# --------------------------------------------------------------------------------------


def main() -> int:
    # Load environment variables from .env (if present)
    load_dotenv()

    try:
        settings = load_settings()
        setup_logging(settings.log_level)
        logger.info("Validating configuration...")
        context = build_bot_context(settings)

        logger.info("Starting Story Builders...")
        app = create_slack_app(context)
        start_slack_app(app, settings)
    except (ConfigError, ProviderError) as exc:
        logging.critical("Failed to start Story Builders: %s", exc)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
