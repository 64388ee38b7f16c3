"""Explicit provider registry built once per process."""

import logging
from collections.abc import Callable, Iterator, Mapping

import httpx

from agent_proxy.config import ProviderConfig

from .anthropic_provider import AnthropicChatProvider
from .base import ChatProvider, HttpChatProvider, ProviderDescriptor
from .huggingface_provider import HuggingFaceChatProvider
from .ollama_provider import OllamaChatProvider
from .openai_compatible import OPENAI_COMPATIBLE_PROVIDERS, create_openai_compatible_provider

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[ProviderConfig, httpx.Client | None], HttpChatProvider]

PROVIDER_FACTORIES: dict[str, ProviderFactory] = {
    **{provider_id: create_openai_compatible_provider for provider_id in OPENAI_COMPATIBLE_PROVIDERS},
    "ollama": OllamaChatProvider,
    "anthropic": AnthropicChatProvider,
    "huggingface": HuggingFaceChatProvider,
}


class ProviderRegistry:
    def __init__(self) -> None:
        self._providers: dict[str, ChatProvider] = {}

    def register(self, provider: ChatProvider) -> None:
        descriptor = provider.descriptor
        self._providers[descriptor.id] = provider
        logger.info(
            "Registered LLM provider",
            extra={"provider": descriptor.id, "display_name": descriptor.display_name},
        )

    def get(self, provider_id: str) -> ChatProvider | None:
        return self._providers.get(provider_id)

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._providers

    def __iter__(self) -> Iterator[ChatProvider]:
        return iter(self._providers.values())

    def __len__(self) -> int:
        return len(self._providers)

    def ids(self) -> list[str]:
        return list(self._providers)

    def descriptors(self) -> list[ProviderDescriptor]:
        return [provider.descriptor for provider in self._providers.values()]

    def available_providers(self) -> list[ChatProvider]:
        """Probe every provider sequentially; order follows registration."""
        return [provider for provider in self._providers.values() if provider.is_available()]


def build_provider_registry(
    configs: Mapping[str, ProviderConfig],
    http_client: httpx.Client | None = None,
) -> ProviderRegistry:
    registry = ProviderRegistry()
    for provider_id, config in configs.items():
        factory = PROVIDER_FACTORIES.get(provider_id)
        if factory is None:
            raise ValueError(f"Unsupported provider: {provider_id}")
        registry.register(factory(config, http_client))
    return registry
