"""Provider registry for the AI client adapters.

``AIClientFactory`` maps a provider identifier to a lazily constructed,
cached adapter. The application creates one factory and passes it to the
code that needs it; ``get_client_factory()`` returns a process-wide default
for callers that have nowhere to keep one.
"""

from __future__ import annotations

import importlib
import os
from enum import Enum
from typing import Dict, List, Optional, Type, Union

from clients.base import AIClient, load_client_defaults
from modules.error_handler import (
    ConfigurationError,
    ProviderNotImplementedError,
    UnknownProviderError,
)
from modules.logger import setup_logger
from modules.types import AIClientConfig

logger = setup_logger(__name__)


class ProviderType(str, Enum):
    """Supported AI provider identifiers."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    OLLAMA = "ollama"


# Lazy import mapping so an unused provider's client library is never imported.
# None marks a reserved provider without an adapter.
_CLIENT_CLASSES: Dict[ProviderType, Optional[str]] = {
    ProviderType.OPENAI: "clients.openai_client.OpenAIClient",
    ProviderType.ANTHROPIC: "clients.anthropic_client.AnthropicClient",
    ProviderType.GEMINI: None,
    ProviderType.OLLAMA: None,
}

# Environment variable names for API keys
_API_KEY_ENV_VARS: Dict[ProviderType, str] = {
    ProviderType.OPENAI: "OPENAI_API_KEY",
    ProviderType.ANTHROPIC: "ANTHROPIC_API_KEY",
    ProviderType.GEMINI: "GOOGLE_API_KEY",
}

ProviderLike = Union[ProviderType, str]


def resolve_provider(provider: ProviderLike) -> ProviderType:
    """Convert a provider name into a ProviderType.

    Raises:
        UnknownProviderError: If the name is not a known provider
    """
    if isinstance(provider, ProviderType):
        return provider
    try:
        return ProviderType(str(provider).strip().lower())
    except ValueError:
        raise UnknownProviderError(f"Unknown AI provider: {provider}") from None


def _import_client_class(provider_type: ProviderType) -> Type[AIClient]:
    """Dynamically import an adapter class."""
    class_path = _CLIENT_CLASSES[provider_type]
    if class_path is None:
        raise ProviderNotImplementedError(
            f"{provider_type.value.capitalize()} client not implemented yet"
        )
    module_name, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_name)
    return getattr(module, class_name)


def get_api_key_for_provider(
    provider: ProviderLike,
    api_key: Optional[str] = None,
) -> str:
    """Get the API key for a provider.

    Args:
        provider: The provider
        api_key: Optional explicit API key, returned as-is when given

    Returns:
        The key, or "" for providers that run without one

    Raises:
        ConfigurationError: If the provider needs a key and none is available
    """
    if api_key:
        return api_key

    provider_type = resolve_provider(provider)
    env_var = _API_KEY_ENV_VARS.get(provider_type)
    if env_var:
        key = os.environ.get(env_var)
        if key:
            return key
        raise ConfigurationError(
            f"No API key found for provider {provider_type.value}. "
            f"Set {env_var} environment variable or pass api_key."
        )
    # Local providers (ollama) need no key
    return ""


def get_available_providers() -> List[ProviderType]:
    """Return implemented providers that have an API key configured."""
    return [
        provider_type
        for provider_type, class_path in _CLIENT_CLASSES.items()
        if class_path is not None and os.environ.get(_API_KEY_ENV_VARS.get(provider_type, ""))
    ]


class AIClientFactory:
    """Registry of cached provider adapters.

    Example:
        >>> factory = AIClientFactory()
        >>> factory.initialize_client("openai", AIClientConfig(api_key="sk-..."))
        >>> client = factory.get_client("openai")
        >>> result = await client.extract_problem_info(images, "python")
    """

    def __init__(self) -> None:
        self._clients: Dict[ProviderType, AIClient] = {}

    def get_client(self, provider: ProviderLike) -> AIClient:
        """Return the cached adapter for ``provider``, creating it if needed.

        Raises:
            ProviderNotImplementedError: For reserved providers (gemini, ollama)
            UnknownProviderError: For unrecognized identifiers
        """
        provider_type = resolve_provider(provider)
        client = self._clients.get(provider_type)
        if client is None:
            client = self._create_client(provider_type)
            self._clients[provider_type] = client
            logger.debug(f"Created {provider_type.value} client")
        return client

    def _create_client(self, provider_type: ProviderType) -> AIClient:
        client_class = _import_client_class(provider_type)
        return client_class()

    def initialize_client(
        self,
        provider: ProviderLike,
        config: Optional[AIClientConfig] = None,
    ) -> AIClient:
        """Get the adapter for ``provider`` and initialize it.

        When ``config`` is omitted the API key is taken from the environment
        and timeout/retries from client.yaml.
        """
        client = self.get_client(provider)
        if config is None:
            config = self._config_from_environment(provider)
        client.initialize(config)
        return client

    @staticmethod
    def _config_from_environment(provider: ProviderLike) -> AIClientConfig:
        timeout, max_retries = load_client_defaults()
        return AIClientConfig(
            api_key=get_api_key_for_provider(provider),
            timeout=timeout,
            max_retries=max_retries,
        )

    def reset_client(self, provider: ProviderLike) -> None:
        """Reset and evict one adapter. Unknown or absent providers are ignored."""
        try:
            provider_type = resolve_provider(provider)
        except UnknownProviderError:
            return
        client = self._clients.pop(provider_type, None)
        if client is not None:
            client.reset()
            logger.debug(f"Reset {provider_type.value} client")

    def reset_all_clients(self) -> None:
        """Reset and evict every cached adapter."""
        for client in self._clients.values():
            client.reset()
        self._clients.clear()

    def cached_providers(self) -> List[ProviderType]:
        """Providers that currently have a cached adapter."""
        return list(self._clients)


# ============================================================================
# Process-wide default factory
# ============================================================================
_factory_instance: AIClientFactory | None = None


def get_client_factory() -> AIClientFactory:
    """Get or create the process-wide AIClientFactory."""
    global _factory_instance

    if _factory_instance is None:
        _factory_instance = AIClientFactory()
        logger.debug("Initialized default AIClientFactory")

    return _factory_instance


def reset_client_factory() -> None:
    """Reset every adapter of the default factory and drop it."""
    global _factory_instance

    if _factory_instance is not None:
        _factory_instance.reset_all_clients()
    _factory_instance = None


__all__ = [
    "ProviderType",
    "AIClientFactory",
    "resolve_provider",
    "get_api_key_for_provider",
    "get_available_providers",
    "get_client_factory",
    "reset_client_factory",
]
