"""Anthropic Messages API provider implementation."""

import uuid
from typing import Any

from agent_proxy.constants import ANTHROPIC_API_VERSION
from agent_proxy.message_mappers import build_anthropic_messages
from agent_proxy.schemas import ChatRequest, ChatResponse
from agent_proxy.token_utils import normalize_finish_reason, usage_from_counts

from .base import HttpChatProvider


class AnthropicChatProvider(HttpChatProvider):
    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self._config.api_key or "",
            "anthropic-version": ANTHROPIC_API_VERSION,
        }

    def _probe(self) -> bool:
        self._send("GET", "/models")
        return True

    def _generate(self, request: ChatRequest, model: str) -> ChatResponse:
        system_prompt, messages = build_anthropic_messages(request.messages)
        payload: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
        }
        if system_prompt is not None:
            payload["system"] = system_prompt
        if request.top_p is not None:
            payload["top_p"] = request.top_p

        data = self._read_json(self._send("POST", "/messages", json=payload))
        if not isinstance(data, dict):
            data = {}

        blocks = data.get("content")
        texts = [
            block.get("text", "")
            for block in blocks or []
            if isinstance(block, dict) and block.get("type", "text") == "text"
        ]
        content = self._require_content("".join(texts))

        usage = data.get("usage") if isinstance(data.get("usage"), dict) else {}
        prompt_parts = [m["content"] for m in messages]
        if system_prompt is not None:
            prompt_parts.insert(0, system_prompt)
        return ChatResponse(
            id=data.get("id") or str(uuid.uuid4()),
            content=content,
            model=data.get("model") or model,
            usage=usage_from_counts(
                usage.get("input_tokens"), usage.get("output_tokens"), prompt_parts, content
            ),
            finish_reason=normalize_finish_reason(data.get("stop_reason")),
        )
