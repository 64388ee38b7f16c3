"""Provider interfaces and shared HTTP plumbing."""

import logging
import time
from dataclasses import dataclass
from typing import Any, Protocol

import httpx
from langsmith import traceable

from agent_proxy.config import ProviderConfig
from agent_proxy.constants import ProviderKind
from agent_proxy.errors import (
    ConfigurationError,
    ProtocolError,
    ProviderTimeoutError,
    UpstreamError,
)
from agent_proxy.schemas import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderDescriptor:
    id: str
    display_name: str
    kind: ProviderKind
    supported_models: frozenset[str]
    rate_limit_per_minute: int
    requires_api_key: bool

    @classmethod
    def from_config(cls, config: ProviderConfig) -> "ProviderDescriptor":
        defaults = config.defaults
        return cls(
            id=config.provider_id,
            display_name=defaults.display_name,
            kind=defaults.kind,
            supported_models=frozenset(defaults.supported_models) | {config.default_model},
            rate_limit_per_minute=config.rate_limit_per_minute,
            requires_api_key=defaults.requires_api_key,
        )


class ChatProvider(Protocol):
    @property
    def descriptor(self) -> ProviderDescriptor: ...

    def is_configured(self) -> bool:
        """Whether the credentials and URL the vendor needs are present."""
        ...

    def is_available(self) -> bool:
        """Probe the vendor; never raises."""
        ...

    def generate(self, request: ChatRequest) -> ChatResponse:
        """Send one chat request to the vendor and normalize the reply."""
        ...


class HttpChatProvider:
    """Base adapter: configuration checks, timing, logging and error translation.

    Subclasses implement ``_generate`` (one outbound call) and ``_probe``.
    """

    def __init__(self, config: ProviderConfig, http_client: httpx.Client | None = None) -> None:
        self._config = config
        self._descriptor = ProviderDescriptor.from_config(config)
        self._http_client = http_client or httpx.Client(timeout=config.timeout_seconds)

    @property
    def descriptor(self) -> ProviderDescriptor:
        return self._descriptor

    @property
    def provider_id(self) -> str:
        return self._descriptor.id

    def _require_configuration(self) -> None:
        if not self._config.base_url:
            raise ConfigurationError(self.provider_id, "base URL not configured")
        if self._descriptor.requires_api_key and not self._config.api_key:
            raise ConfigurationError(self.provider_id, "API key not configured")

    def is_configured(self) -> bool:
        if not self._config.base_url:
            return False
        return not self._descriptor.requires_api_key or bool(self._config.api_key)

    def is_available(self) -> bool:
        if not self.is_configured():
            logger.info("Provider is not configured", extra={"provider": self.provider_id})
            return False
        try:
            return self._probe()
        except Exception:
            logger.warning(
                "Provider availability probe failed",
                extra={"provider": self.provider_id},
                exc_info=True,
            )
            return False

    @traceable(run_type="llm", name="agent_proxy.provider.generate")
    def generate(self, request: ChatRequest) -> ChatResponse:
        self._require_configuration()
        model = request.model or self._config.default_model

        start = time.perf_counter()
        response = self._generate(request, model)
        duration_ms = int((time.perf_counter() - start) * 1000)
        if not response.processing_time_ms:
            response = response.model_copy(update={"processing_time_ms": duration_ms})

        logger.info(
            "Chat response generated",
            extra={
                "provider": self.provider_id,
                "model": response.model,
                "duration_ms": duration_ms,
                "usage_prompt_tokens": response.usage.prompt_tokens,
                "usage_completion_tokens": response.usage.completion_tokens,
                "response_length": len(response.content),
                "response_id": response.id,
            },
        )
        return response

    def _generate(self, request: ChatRequest, model: str) -> ChatResponse:
        raise NotImplementedError

    def _probe(self) -> bool:
        raise NotImplementedError

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self._config.base_url}{path}"
        try:
            response = self._http_client.request(
                method,
                url,
                headers=self._headers(),
                timeout=self._config.timeout_seconds,
                **kwargs,
            )
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(
                self.provider_id, f"no response within {self._config.timeout_seconds}s"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(self.provider_id, None, str(e)) from e

        if response.is_error:
            raise UpstreamError(self.provider_id, response.status_code, response.text)
        return response

    def _read_json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ProtocolError(self.provider_id, "response body is not valid JSON") from e

    def _require_content(self, content: Any) -> str:
        if not isinstance(content, str) or not content.strip():
            raise ProtocolError(self.provider_id, "response has no message content")
        return content
