"""Orchestration interfaces and candidate selection shared by strategies."""

import logging
from collections.abc import Sequence
from typing import Protocol

from agent_proxy.constants import DEFAULT_CLOUD_PRIORITY, DEFAULT_LOCAL_PRIORITY
from agent_proxy.errors import AllProvidersUnavailable, ProviderError
from agent_proxy.fallback_responses import build_fallback_response
from agent_proxy.providers.base import ChatProvider
from agent_proxy.providers.registry import ProviderRegistry
from agent_proxy.schemas import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)


class ChatOrchestrator(Protocol):
    def run(self, request: ChatRequest) -> ChatResponse:
        """Answer the request from the first provider that succeeds; never raises."""
        ...


def candidate_order(
    registry: ProviderRegistry,
    cloud_priority: Sequence[str] = DEFAULT_CLOUD_PRIORITY,
    local_priority: Sequence[str] = DEFAULT_LOCAL_PRIORITY,
) -> list[ChatProvider]:
    """Configured cloud providers in priority order, then every local provider."""
    candidates: list[ChatProvider] = []
    for provider_id in cloud_priority:
        provider = registry.get(provider_id)
        if provider is not None and provider.is_configured():
            candidates.append(provider)
    for provider_id in local_priority:
        provider = registry.get(provider_id)
        if provider is not None and provider not in candidates:
            candidates.append(provider)
    return candidates


def tag_selected(response: ChatResponse, provider: ChatProvider) -> ChatResponse:
    descriptor = provider.descriptor
    update: dict[str, object] = {"selected_provider": descriptor.id}
    if descriptor.kind == "local":
        update["fallback_to_local"] = True
    return response.model_copy(update=update)


def record_candidate_failure(provider: ChatProvider, error: Exception) -> ProviderError:
    """Log a failed attempt and return it as a ProviderError."""
    provider_id = provider.descriptor.id
    logger.warning(
        "Provider failed, trying next candidate",
        extra={"provider": provider_id, "error_type": type(error).__name__, "error": str(error)},
        exc_info=not isinstance(error, ProviderError),
    )
    if isinstance(error, ProviderError):
        return error
    wrapped = ProviderError(provider_id, f"unexpected failure: {error}")
    wrapped.__cause__ = error
    return wrapped


def fallback_after(request: ChatRequest, errors: list[ProviderError]) -> ChatResponse:
    exhausted = AllProvidersUnavailable(errors)
    logger.error(
        "All providers failed; serving canned response",
        extra={"attempts": len(errors), "providers": [e.provider_id for e in errors]},
    )
    return build_fallback_response(request, original_error=str(exhausted))
