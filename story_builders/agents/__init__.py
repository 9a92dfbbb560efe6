"""
Writing agents.

This subpackage provides the shared agent contract and context types,
the helpers that assemble model conversations, the five personas, and
the registry that instantiates them from configuration.
"""

__all__ = [
    "base",
    "helpers",
    "personas",
    "registry",
]
