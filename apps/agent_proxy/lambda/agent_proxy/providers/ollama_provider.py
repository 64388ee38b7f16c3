"""Ollama provider implementation for chat requests."""

import uuid
from typing import Any

from agent_proxy.message_mappers import build_chat_messages
from agent_proxy.schemas import ChatRequest, ChatResponse
from agent_proxy.token_utils import normalize_finish_reason, usage_from_counts

from .base import HttpChatProvider

NANOSECONDS_PER_MILLISECOND = 1_000_000


class OllamaChatProvider(HttpChatProvider):
    def _probe(self) -> bool:
        self._send("GET", "/api/tags")
        return True

    def _generate(self, request: ChatRequest, model: str) -> ChatResponse:
        messages = build_chat_messages(request.messages)
        options: dict[str, Any] = {
            "temperature": request.temperature,
            "num_predict": request.max_tokens,
        }
        if request.top_p is not None:
            options["top_p"] = request.top_p

        response = self._send(
            "POST",
            "/api/chat",
            json={"model": model, "messages": messages, "stream": False, "options": options},
        )
        data = self._read_json(response)
        if not isinstance(data, dict):
            data = {}

        # /api/chat nests the reply; /api/generate-style servers return it flat.
        message = data.get("message")
        content = message.get("content") if isinstance(message, dict) else data.get("response")
        content = self._require_content(content)

        total_duration = data.get("total_duration")
        processing_time_ms = (
            total_duration // NANOSECONDS_PER_MILLISECOND if isinstance(total_duration, int) else 0
        )
        return ChatResponse(
            id=str(uuid.uuid4()),
            content=content,
            model=data.get("model") or model,
            usage=usage_from_counts(
                data.get("prompt_eval_count"),
                data.get("eval_count"),
                [m["content"] for m in messages],
                content,
            ),
            finish_reason=normalize_finish_reason(data.get("done_reason")),
            processing_time_ms=processing_time_ms,
        )
