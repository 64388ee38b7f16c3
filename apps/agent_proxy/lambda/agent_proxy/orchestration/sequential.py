"""Sequential fallback orchestration: first success wins."""

from collections.abc import Sequence

from agent_proxy.constants import DEFAULT_CLOUD_PRIORITY, DEFAULT_LOCAL_PRIORITY
from agent_proxy.errors import ProviderError
from agent_proxy.orchestration.base import (
    ChatOrchestrator,
    candidate_order,
    fallback_after,
    record_candidate_failure,
    tag_selected,
)
from agent_proxy.providers.registry import ProviderRegistry
from agent_proxy.schemas import ChatRequest, ChatResponse


class SequentialFallbackOrchestrator(ChatOrchestrator):
    def __init__(
        self,
        registry: ProviderRegistry,
        cloud_priority: Sequence[str] = DEFAULT_CLOUD_PRIORITY,
        local_priority: Sequence[str] = DEFAULT_LOCAL_PRIORITY,
    ) -> None:
        self._registry = registry
        self._cloud_priority = tuple(cloud_priority)
        self._local_priority = tuple(local_priority)

    def run(self, request: ChatRequest) -> ChatResponse:
        errors: list[ProviderError] = []
        for provider in candidate_order(self._registry, self._cloud_priority, self._local_priority):
            try:
                response = provider.generate(request)
            except Exception as e:
                errors.append(record_candidate_failure(provider, e))
                continue
            return tag_selected(response, provider)
        return fallback_after(request, errors)
