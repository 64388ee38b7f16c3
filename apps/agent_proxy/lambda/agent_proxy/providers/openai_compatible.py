"""Adapters for vendors exposing the OpenAI chat-completions API."""

import uuid
from typing import Any

import httpx
import openai
from openai import OpenAI

from agent_proxy.config import ProviderConfig
from agent_proxy.constants import OPENROUTER_REFERER, OPENROUTER_TITLE
from agent_proxy.errors import ProtocolError, ProviderTimeoutError, UpstreamError
from agent_proxy.message_mappers import build_chat_messages
from agent_proxy.schemas import ChatRequest, ChatResponse
from agent_proxy.token_utils import normalize_finish_reason, usage_from_counts

from .base import HttpChatProvider

# Local runtimes accept any bearer token; the SDK insists on one.
PLACEHOLDER_API_KEY = "EMPTY"

OPENAI_COMPATIBLE_PROVIDERS = (
    "openai",
    "groq",
    "deepseek",
    "mistral",
    "openrouter",
    "grok",
    "vllm",
    "localai",
)


class OpenAICompatibleProvider(HttpChatProvider):
    def __init__(
        self,
        config: ProviderConfig,
        http_client: httpx.Client | None = None,
        extra_headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(config, http_client)
        self._extra_headers = extra_headers or {}
        self._openai_client = OpenAI(
            api_key=config.api_key or PLACEHOLDER_API_KEY,
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            max_retries=0,
            default_headers=self._extra_headers or None,
            http_client=self._http_client,
        )

    def _probe(self) -> bool:
        self._openai_client.models.list()
        return True

    def _generate(self, request: ChatRequest, model: str) -> ChatResponse:
        messages = build_chat_messages(request.messages)
        params: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
            "stream": False,
        }
        if request.top_p is not None:
            params["top_p"] = request.top_p

        try:
            completion = self._openai_client.chat.completions.create(**params)
        except openai.APITimeoutError as e:
            raise ProviderTimeoutError(
                self.provider_id, f"no response within {self._config.timeout_seconds}s"
            ) from e
        except openai.APIStatusError as e:
            raise UpstreamError(self.provider_id, e.status_code, e.response.text) from e
        except openai.APIConnectionError as e:
            raise UpstreamError(self.provider_id, None, str(e)) from e
        except openai.APIResponseValidationError as e:
            raise ProtocolError(self.provider_id, f"unreadable response: {e}") from e
        except openai.APIError as e:
            raise UpstreamError(self.provider_id, None, str(e)) from e

        choices = getattr(completion, "choices", None) or []
        if not choices:
            raise ProtocolError(self.provider_id, "response has no choices")
        choice = choices[0]
        content = self._require_content(getattr(getattr(choice, "message", None), "content", None))

        usage = getattr(completion, "usage", None)
        return ChatResponse(
            id=getattr(completion, "id", None) or str(uuid.uuid4()),
            content=content,
            model=getattr(completion, "model", None) or model,
            usage=usage_from_counts(
                getattr(usage, "prompt_tokens", None),
                getattr(usage, "completion_tokens", None),
                [m["content"] for m in messages],
                content,
            ),
            finish_reason=normalize_finish_reason(getattr(choice, "finish_reason", None)),
        )


def create_openai_compatible_provider(
    config: ProviderConfig, http_client: httpx.Client | None = None
) -> OpenAICompatibleProvider:
    extra_headers = None
    if config.provider_id == "openrouter":
        extra_headers = {"HTTP-Referer": OPENROUTER_REFERER, "X-Title": OPENROUTER_TITLE}
    return OpenAICompatibleProvider(config, http_client=http_client, extra_headers=extra_headers)
