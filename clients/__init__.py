"""AI client adapters for screenshot-to-solution processing.

Provides one interface over several hosted vision model providers:
- OpenAI (GPT-4o family)
- Anthropic (Claude family)
- Gemini and Ollama are reserved and fail fast until implemented

Usage:
    >>> from clients import AIClientFactory, AIClientConfig
    >>> factory = AIClientFactory()
    >>> client = factory.initialize_client("anthropic", AIClientConfig(api_key="..."))
    >>> info = await client.extract_problem_info([image_b64], "python")
    >>> solutions = await client.generate_solutions(info, "python")

Lazy imports keep provider client libraries out of memory until an adapter
for that provider is requested.
"""

from __future__ import annotations


def __getattr__(name: str):
    """Lazy import to avoid loading provider libraries eagerly."""

    if name in ("AIClient", "SOLUTION_COUNT"):
        from clients import base
        return getattr(base, name)

    if name in (
        "AIClientFactory",
        "ProviderType",
        "get_client_factory",
        "reset_client_factory",
        "get_api_key_for_provider",
        "get_available_providers",
    ):
        from clients import factory
        return getattr(factory, name)

    if name in ("AIClientConfig", "ProcessingResult", "Screenshot"):
        from modules import types
        return getattr(types, name)

    if name == "OpenAIClient":
        from clients.openai_client import OpenAIClient
        return OpenAIClient

    if name == "AnthropicClient":
        from clients.anthropic_client import AnthropicClient
        return AnthropicClient

    raise AttributeError(f"module 'clients' has no attribute '{name}'")


__all__ = [
    # Contract
    "AIClient",
    "SOLUTION_COUNT",
    # Data model
    "AIClientConfig",
    "ProcessingResult",
    "Screenshot",
    # Factory
    "AIClientFactory",
    "ProviderType",
    "get_client_factory",
    "reset_client_factory",
    "get_api_key_for_provider",
    "get_available_providers",
    # Adapters
    "OpenAIClient",
    "AnthropicClient",
]
