"""Token estimates and finish-reason normalisation for vendor responses."""

import math
from collections.abc import Iterable
from typing import Any

from .constants import ESTIMATED_CHARS_PER_TOKEN, FinishReason
from .schemas import Usage

_FINISH_REASONS: dict[str, FinishReason] = {
    "stop": "stop",
    "end_turn": "stop",
    "stop_sequence": "stop",
    "eos_token": "stop",
    "length": "length",
    "max_tokens": "length",
    "content_filter": "content_filter",
    "tool_calls": "tool_calls",
    "tool_use": "tool_calls",
    "function_call": "tool_calls",
}


def estimate_tokens(text: str) -> int:
    return math.ceil(len(text) / ESTIMATED_CHARS_PER_TOKEN)


def estimate_usage(prompt_parts: Iterable[str], completion: str) -> Usage:
    prompt_tokens = estimate_tokens(" ".join(prompt_parts))
    completion_tokens = estimate_tokens(completion)
    return Usage(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=prompt_tokens + completion_tokens,
    )


def usage_from_counts(
    prompt_tokens: Any, completion_tokens: Any, prompt_parts: Iterable[str], completion: str
) -> Usage:
    """Use vendor counts when both are present, otherwise estimate."""
    if isinstance(prompt_tokens, int) and isinstance(completion_tokens, int):
        return Usage(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
        )
    return estimate_usage(prompt_parts, completion)


def normalize_finish_reason(reason: Any) -> FinishReason:
    if not isinstance(reason, str):
        return "stop"
    return _FINISH_REASONS.get(reason.lower(), "stop")
