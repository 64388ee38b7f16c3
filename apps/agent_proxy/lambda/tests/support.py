"""Shared fakes for agent proxy tests."""

from collections.abc import Callable, Mapping

import httpx

from agent_proxy.config import ProviderConfig, load_provider_config
from agent_proxy.constants import ProviderKind
from agent_proxy.errors import ProviderError
from agent_proxy.providers.base import ProviderDescriptor
from agent_proxy.schemas import ChatRequest, ChatResponse, Usage


def make_config(provider_id: str, environ: Mapping[str, str] | None = None) -> ProviderConfig:
    return load_provider_config(provider_id, environ or {})


def make_request(content: str = "hi", **kwargs: object) -> ChatRequest:
    return ChatRequest.model_validate(
        {"messages": [{"role": "user", "content": content}], **kwargs}
    )


class RecordingTransport:
    """httpx MockTransport wrapper that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))


class StubProvider:
    def __init__(
        self,
        provider_id: str,
        kind: ProviderKind = "cloud",
        configured: bool = True,
        error: Exception | None = None,
        content: str = "ok",
        calls: list[str] | None = None,
        rate_limit_per_minute: int = 30,
    ) -> None:
        self._descriptor = ProviderDescriptor(
            id=provider_id,
            display_name=provider_id.title(),
            kind=kind,
            supported_models=frozenset({"stub-model"}),
            rate_limit_per_minute=rate_limit_per_minute,
            requires_api_key=kind == "cloud",
        )
        self._configured = configured
        self._error = error
        self._content = content
        self.calls = calls if calls is not None else []
        self.probes = 0

    @property
    def descriptor(self) -> ProviderDescriptor:
        return self._descriptor

    def is_configured(self) -> bool:
        return self._configured

    def is_available(self) -> bool:
        self.probes += 1
        return self._configured and self._error is None

    def generate(self, request: ChatRequest) -> ChatResponse:
        self.calls.append(self._descriptor.id)
        if self._error is not None:
            raise self._error
        return ChatResponse(
            id=f"resp_{self._descriptor.id}",
            content=self._content,
            model="stub-model",
            usage=Usage(prompt_tokens=1, completion_tokens=1, total_tokens=2),
            processing_time_ms=5,
        )


def failing(provider_id: str) -> ProviderError:
    return ProviderError(provider_id, "boom")
