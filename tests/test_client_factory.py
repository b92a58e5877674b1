"""Tests for clients/factory.py - Provider registry and API key resolution."""

from __future__ import annotations

import os
from unittest.mock import MagicMock, patch

import pytest

import clients.factory as factory_module
from clients.anthropic_client import AnthropicClient
from clients.factory import (
    AIClientFactory,
    ProviderType,
    get_api_key_for_provider,
    get_available_providers,
    get_client_factory,
    reset_client_factory,
    resolve_provider,
)
from clients.openai_client import OpenAIClient
from modules.error_handler import (
    ConfigurationError,
    ProviderNotImplementedError,
    UnknownProviderError,
)
from modules.types import AIClientConfig


# ============================================================================
# Provider resolution
# ============================================================================

class TestResolveProvider:

    @pytest.mark.parametrize("name", ["openai", "OpenAI", " OPENAI "])
    def test_case_insensitive(self, name):
        assert resolve_provider(name) is ProviderType.OPENAI

    def test_enum_passthrough(self):
        assert resolve_provider(ProviderType.ANTHROPIC) is ProviderType.ANTHROPIC

    def test_unknown(self):
        with pytest.raises(UnknownProviderError, match="Unknown AI provider: mistral"):
            resolve_provider("mistral")


# ============================================================================
# API keys
# ============================================================================

class TestGetApiKey:

    def test_explicit_key_wins(self, mock_api_keys):
        assert get_api_key_for_provider("openai", "explicit") == "explicit"

    def test_from_environment(self, mock_api_keys):
        assert get_api_key_for_provider("openai") == "test-openai-key"
        assert get_api_key_for_provider(ProviderType.ANTHROPIC) == "test-anthropic-key"

    def test_missing_key(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
                get_api_key_for_provider("openai")

    def test_keyless_provider(self):
        with patch.dict(os.environ, {}, clear=True):
            assert get_api_key_for_provider("ollama") == ""


class TestAvailableProviders:

    def test_lists_implemented_providers_with_keys(self, mock_api_keys):
        with patch.dict(os.environ, {"GOOGLE_API_KEY": "g"}):
            available = get_available_providers()
        assert available == [ProviderType.OPENAI, ProviderType.ANTHROPIC]

    def test_empty_without_keys(self):
        with patch.dict(os.environ, {}, clear=True):
            assert get_available_providers() == []


# ============================================================================
# AIClientFactory
# ============================================================================

class TestAIClientFactory:
    """Tests for adapter creation and caching."""

    def test_creates_adapters(self):
        factory = AIClientFactory()
        assert isinstance(factory.get_client("openai"), OpenAIClient)
        assert isinstance(factory.get_client("anthropic"), AnthropicClient)

    def test_caches_adapter(self):
        factory = AIClientFactory()
        assert factory.get_client("openai") is factory.get_client(ProviderType.OPENAI)
        assert factory.cached_providers() == [ProviderType.OPENAI]

    def test_separate_factories_do_not_share(self):
        assert AIClientFactory().get_client("openai") is not AIClientFactory().get_client("openai")

    @pytest.mark.parametrize("provider, message", [
        ("gemini", "Gemini client not implemented yet"),
        ("ollama", "Ollama client not implemented yet"),
    ])
    def test_reserved_providers(self, provider, message):
        factory = AIClientFactory()
        with pytest.raises(ProviderNotImplementedError, match=message):
            factory.get_client(provider)
        assert factory.cached_providers() == []

    def test_unknown_provider(self):
        factory = AIClientFactory()
        with pytest.raises(UnknownProviderError):
            factory.get_client("mistral")
        assert factory.cached_providers() == []

    def test_reset_client_evicts(self):
        factory = AIClientFactory()
        first = factory.get_client("openai")
        first._llm = MagicMock()
        factory.reset_client("openai")
        assert first.is_initialized() is False
        assert factory.get_client("openai") is not first

    def test_reset_client_ignores_unknown_and_absent(self):
        factory = AIClientFactory()
        factory.reset_client("mistral")
        factory.reset_client("anthropic")
        assert factory.cached_providers() == []

    def test_reset_all_clients(self):
        factory = AIClientFactory()
        openai_client = factory.get_client("openai")
        anthropic_client = factory.get_client("anthropic")
        openai_client._llm = MagicMock()
        anthropic_client._llm = MagicMock()

        factory.reset_all_clients()

        assert factory.cached_providers() == []
        assert openai_client.is_initialized() is False
        assert anthropic_client.is_initialized() is False

    def test_initialize_client_with_config(self):
        factory = AIClientFactory()
        config = AIClientConfig(api_key="sk-explicit")
        with patch("clients.openai_client.ChatOpenAI") as mock_cls:
            client = factory.initialize_client("openai", config)
        assert client is factory.get_client("openai")
        assert client.is_initialized() is True
        assert mock_cls.call_args.kwargs["api_key"] == "sk-explicit"

    def test_initialize_client_from_environment(self, mock_api_keys):
        factory = AIClientFactory()
        with patch("clients.factory.load_client_defaults", return_value=(45.0, 3)), \
                patch("clients.anthropic_client.ChatAnthropic") as mock_cls:
            client = factory.initialize_client("anthropic")
        kwargs = mock_cls.call_args.kwargs
        assert client.is_initialized() is True
        assert kwargs["api_key"] == "test-anthropic-key"
        assert kwargs["timeout"] == 45.0
        assert kwargs["max_retries"] == 3

    def test_initialize_client_without_key(self):
        factory = AIClientFactory()
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ConfigurationError):
                factory.initialize_client("openai")
        assert factory.get_client("openai").is_initialized() is False


# ============================================================================
# Default factory
# ============================================================================

class TestDefaultFactory:

    def test_singleton(self):
        with patch.object(factory_module, "_factory_instance", None):
            assert get_client_factory() is get_client_factory()

    def test_reset_client_factory(self):
        with patch.object(factory_module, "_factory_instance", None):
            factory = get_client_factory()
            client = factory.get_client("openai")
            client._llm = MagicMock()

            reset_client_factory()

            assert client.is_initialized() is False
            assert get_client_factory() is not factory


class TestLazyPackageExports:

    def test_lazy_attributes(self):
        import clients

        assert clients.AIClientFactory is AIClientFactory
        assert clients.OpenAIClient is OpenAIClient
        assert clients.SOLUTION_COUNT == 3

    def test_unknown_attribute(self):
        import clients

        with pytest.raises(AttributeError):
            clients.DoesNotExist
