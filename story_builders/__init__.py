"""
Story Builders package root.

This package provides configuration loading, the model providers, the
writing agents and their registry, and the Slack integration that runs
each mention through an agent. `bot.py` (also run by the root
`main.py`) and the offline harness are the two entry points.
"""

__version__ = "0.1.0"

__all__ = [
    "agents",
    "bot",
    "config",
    "harness",
    "logger",
    "models",
    "slack",
]
