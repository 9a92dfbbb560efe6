"""
Configuration loader for the Story Builders bot.

Agent personas are stored in a YAML file keyed by agent type. Secrets
(Slack tokens, provider API keys) are never stored there; they are read
from environment variables, optionally populated from a `.env` file by
the entry points.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import yaml

DEFAULT_AGENTS_CONFIG = Path(__file__).resolve().parent / "agents.yaml"

REQUIRED_AGENT_KEYS = ("name", "description", "systemPrompt", "defaultProvider", "model")
KNOWN_PROVIDERS = ("anthropic", "openai")


class ConfigError(Exception):
    """Raised when required configuration is missing or unparsable."""


@dataclass(frozen=True)
class AgentConfig:
    name: str
    description: str
    system_prompt: str
    default_provider: str
    model: str


@dataclass(frozen=True)
class Settings:
    slack_bot_token: str = ""
    slack_signing_secret: str = ""
    slack_app_token: str = ""
    anthropic_api_key: str = ""
    openai_api_key: str = ""
    app_env: str = "development"
    port: int = 3000
    log_level: str = "info"
    agents_config: str = str(DEFAULT_AGENTS_CONFIG)

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def provider_keys(self) -> Dict[str, str]:
        return {
            "anthropic": self.anthropic_api_key,
            "openai": self.openai_api_key,
        }


def _env(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip()


def load_settings() -> Settings:
    """
    Build Settings from the current environment.

    Raises:
        ConfigError: If PORT is not an integer.
    """
    port_raw = _env("PORT", "3000")
    try:
        port = int(port_raw)
    except ValueError as exc:
        raise ConfigError(f"PORT must be an integer, got {port_raw!r}") from exc

    return Settings(
        slack_bot_token=_env("SLACK_BOT_TOKEN"),
        slack_signing_secret=_env("SLACK_SIGNING_SECRET"),
        slack_app_token=_env("SLACK_APP_TOKEN"),
        anthropic_api_key=_env("ANTHROPIC_API_KEY"),
        openai_api_key=_env("OPENAI_API_KEY"),
        app_env=_env("APP_ENV", "development") or "development",
        port=port,
        log_level=_env("LOG_LEVEL", "info") or "info",
        agents_config=_env("AGENTS_CONFIG") or str(DEFAULT_AGENTS_CONFIG),
    )


def validate_settings(settings: Settings, require_slack: bool = True) -> None:
    """
    Fail fast when required configuration is absent.

    Every problem is collected before raising so the operator sees the
    full list at once.

    Raises:
        ConfigError: Listing each missing item, one per line.
    """
    errors: List[str] = []

    if require_slack:
        if not settings.slack_bot_token:
            errors.append("SLACK_BOT_TOKEN is required")
        if not settings.slack_signing_secret:
            errors.append("SLACK_SIGNING_SECRET is required")

    if not settings.anthropic_api_key and not settings.openai_api_key:
        errors.append(
            "At least one AI provider API key is required "
            "(ANTHROPIC_API_KEY or OPENAI_API_KEY)"
        )

    if errors:
        raise ConfigError("Configuration errors:\n" + "\n".join(errors))


def load_agent_configs(path: Optional[str] = None) -> Dict[str, AgentConfig]:
    """
    Load the agent persona configuration from a YAML file.

    Args:
        path: Path to the YAML file. Defaults to the bundled agents.yaml.

    Returns:
        A mapping of agent type (e.g. "critique") to its AgentConfig.

    Raises:
        ConfigError: If the file does not exist, is not valid YAML, is not
            a mapping, or an entry is incomplete.
    """
    config_path = Path(path) if path else DEFAULT_AGENTS_CONFIG
    if not config_path.exists():
        raise ConfigError(f"Agent config file not found at: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Agent config file {config_path} is not valid YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Top-level agent configuration must be a mapping/dictionary.")

    configs: Dict[str, AgentConfig] = {}
    for agent_type, entry in data.items():
        if not isinstance(entry, dict):
            raise ConfigError(f"Configuration for agent '{agent_type}' must be a mapping.")
        missing = [key for key in REQUIRED_AGENT_KEYS if not entry.get(key)]
        if missing:
            raise ConfigError(
                f"Configuration for agent '{agent_type}' is missing: {', '.join(missing)}"
            )
        provider = str(entry["defaultProvider"]).strip().lower()
        if provider not in KNOWN_PROVIDERS:
            raise ConfigError(
                f"Agent '{agent_type}' names unknown provider '{entry['defaultProvider']}'"
            )
        configs[str(agent_type).lower()] = AgentConfig(
            name=str(entry["name"]),
            description=str(entry["description"]).strip(),
            system_prompt=str(entry["systemPrompt"]).strip(),
            default_provider=provider,
            model=str(entry["model"]),
        )
    return configs
