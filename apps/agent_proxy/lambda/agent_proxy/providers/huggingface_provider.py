"""HuggingFace Inference API provider implementation."""

import uuid
from typing import Any

from agent_proxy.message_mappers import build_prompt_text
from agent_proxy.schemas import ChatRequest, ChatResponse
from agent_proxy.token_utils import estimate_usage

from .base import HttpChatProvider


class HuggingFaceChatProvider(HttpChatProvider):
    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._config.api_key or ''}",
        }

    def _probe(self) -> bool:
        self._send("GET", f"/models/{self._config.default_model}")
        return True

    def _generate(self, request: ChatRequest, model: str) -> ChatResponse:
        prompt = build_prompt_text(request.messages)
        parameters: dict[str, Any] = {
            "temperature": request.temperature,
            "max_new_tokens": request.max_tokens,
            "return_full_text": False,
        }
        if request.top_p is not None:
            parameters["top_p"] = request.top_p

        data = self._read_json(
            self._send("POST", f"/models/{model}", json={"inputs": prompt, "parameters": parameters})
        )
        if isinstance(data, list) and data:
            data = data[0]
        generated = data.get("generated_text") if isinstance(data, dict) else None
        content = self._require_content(generated)

        # The inference API reports no token counts.
        return ChatResponse(
            id=str(uuid.uuid4()),
            content=content,
            model=model,
            usage=estimate_usage([prompt], content),
            finish_reason="stop",
        )
