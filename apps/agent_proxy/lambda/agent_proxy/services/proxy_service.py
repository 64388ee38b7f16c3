"""Application service behind the agent-proxy endpoint."""

import logging
import time
from datetime import datetime, timezone

from agent_proxy.constants import AUTO_PROVIDER, HEALTH_CAPABILITIES
from agent_proxy.errors import BadRequestError, ProviderError, RateLimitExceeded
from agent_proxy.fallback_responses import build_fallback_response
from agent_proxy.orchestration.base import ChatOrchestrator
from agent_proxy.providers.base import ChatProvider
from agent_proxy.providers.registry import ProviderRegistry
from agent_proxy.rate_limiter import RateLimiter
from agent_proxy.schemas import ChatRequest, ChatResponse, HealthStatus, ProxyRequest

logger = logging.getLogger(__name__)


class AgentProxyService:
    def __init__(
        self,
        registry: ProviderRegistry,
        orchestrator: ChatOrchestrator,
        rate_limiter: RateLimiter,
    ) -> None:
        self._registry = registry
        self._orchestrator = orchestrator
        self._rate_limiter = rate_limiter

    def handle(self, proxy_request: ProxyRequest, client_id: str) -> ChatResponse:
        """Rate-check, dispatch and normalize one chat request.

        Raises BadRequestError for unknown providers and RateLimitExceeded when
        the (provider, client) window is full. Provider failures never escape:
        they are answered with the canned fallback.
        """
        provider_id = proxy_request.provider
        request = proxy_request.payload
        logger.info(
            "Agent proxy request received",
            extra={
                "provider": provider_id or AUTO_PROVIDER,
                "client_id": client_id,
                "message_count": len(request.messages),
            },
        )

        start = time.perf_counter()
        if provider_id is None or provider_id == AUTO_PROVIDER:
            response = self._run_orchestrator(request)
        else:
            provider = self._registry.get(provider_id)
            if provider is None:
                raise BadRequestError(f"Unsupported provider: {provider_id}")
            if not self._rate_limiter.check_rate_limit(provider_id, client_id):
                raise RateLimitExceeded(provider_id, client_id)
            response = self._dispatch(provider, request)

        if not response.processing_time_ms:
            duration_ms = int((time.perf_counter() - start) * 1000)
            response = response.model_copy(update={"processing_time_ms": duration_ms})
        return response

    def _run_orchestrator(self, request: ChatRequest) -> ChatResponse:
        try:
            return self._orchestrator.run(request)
        except Exception as e:
            logger.exception("Orchestrator failed; serving canned response")
            return build_fallback_response(request, original_error=str(e))

    def _dispatch(self, provider: ChatProvider, request: ChatRequest) -> ChatResponse:
        provider_id = provider.descriptor.id
        try:
            response = provider.generate(request)
        except Exception as e:
            logger.warning(
                "Provider failed; serving canned response",
                extra={"provider": provider_id, "error_type": type(e).__name__, "error": str(e)},
                exc_info=not isinstance(e, ProviderError),
            )
            return build_fallback_response(request, original_error=str(e))
        return response.model_copy(update={"selected_provider": provider_id})

    def health(self, provider_id: str) -> HealthStatus:
        provider = self._registry.get(provider_id)
        if provider is None:
            status = "unsupported"
        elif provider.is_available():
            status = "available"
        else:
            status = "unavailable"
        logger.info("Provider health checked", extra={"provider": provider_id, "status": status})
        return HealthStatus(
            provider=provider_id,
            status=status,
            timestamp=datetime.now(timezone.utc).isoformat(),
            capabilities=list(HEALTH_CAPABILITIES),
        )
