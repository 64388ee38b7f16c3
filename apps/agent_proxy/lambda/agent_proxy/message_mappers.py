"""Conversion helpers between chat messages and provider-specific formats."""

import logging
from typing import Any

from .schemas import ChatMessage

logger = logging.getLogger(__name__)


def split_system_message(messages: list[ChatMessage]) -> tuple[str | None, list[ChatMessage]]:
    """Return the first system prompt and the remaining conversation.

    Only one system message is honoured; later ones are dropped.
    """
    system_prompt: str | None = None
    conversation: list[ChatMessage] = []
    for message in messages:
        if message.role != "system":
            conversation.append(message)
        elif system_prompt is None:
            system_prompt = message.content
        else:
            logger.debug("Dropping extra system message", extra={"length": len(message.content)})
    return system_prompt, conversation


def build_chat_messages(messages: list[ChatMessage]) -> list[dict[str, str]]:
    """Build OpenAI-style ``messages`` with the system prompt hoisted to the front."""
    system_prompt, conversation = split_system_message(messages)
    chat_messages: list[dict[str, str]] = []
    if system_prompt is not None:
        chat_messages.append({"role": "system", "content": system_prompt})
    chat_messages.extend({"role": m.role, "content": m.content} for m in conversation)
    return chat_messages


def build_anthropic_messages(
    messages: list[ChatMessage],
) -> tuple[str | None, list[dict[str, Any]]]:
    """Split messages into Anthropic's top-level ``system`` and turn list."""
    system_prompt, conversation = split_system_message(messages)
    return system_prompt, [{"role": m.role, "content": m.content} for m in conversation]


def build_prompt_text(messages: list[ChatMessage]) -> str:
    """Flatten a conversation into a single prompt for text-generation endpoints."""
    return "\n".join(f"{m['role']}: {m['content']}" for m in build_chat_messages(messages))
