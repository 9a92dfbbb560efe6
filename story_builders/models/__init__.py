"""
Model provider implementations.

This package collects the shared request/response types in `base.py`,
the Anthropic and OpenAI backends, and the registry that hands each
agent its provider. Adding a new backend involves creating a module
that subclasses `BaseProvider` and listing it in `registry.py`.
"""

__all__ = [
    "base",
    "anthropic_provider",
    "openai_provider",
    "registry",
]
