"""Canned responses served when no provider could answer."""

import uuid

from .constants import FALLBACK_MODEL, FALLBACK_PROCESSING_TIME_MS
from .schemas import ChatRequest, ChatResponse
from .token_utils import estimate_usage

GENERIC_RESPONSE = (
    "I'm Meta3's AI Assistant. While our advanced LLM systems are being configured, "
    "I can still help you with questions about Meta3 Ventures, our investment focus, "
    "and startup guidance."
)

# First matching entry wins.
KEYWORD_RESPONSES: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("investment",),
        "I'm Meta3's Investment Specialist. Our LLM systems are currently being set up, "
        "but I can tell you that Meta3 Ventures focuses on AI, blockchain, fintech, and "
        "deep tech investments. We provide strategic capital and expertise to early-stage "
        "ventures. Please try again shortly for more detailed investment analysis.",
    ),
    (
        ("market", "research"),
        "I'm Meta3's Research Specialist. While our advanced market analysis tools are "
        "being configured, I can share that we focus on emerging technology markets, "
        "competitive intelligence, and strategic market positioning. Our research covers "
        "AI/ML, blockchain, fintech, and deep tech sectors.",
    ),
    (
        ("startup", "venture"),
        "I'm Meta3's Venture Launch Specialist. Our advanced guidance systems are being "
        "set up, but I can tell you that we help entrepreneurs through business planning, "
        "market validation, go-to-market strategy, and MVP development. We specialize in "
        "technology startups and provide comprehensive support throughout the startup "
        "journey.",
    ),
)


def select_fallback_text(query: str) -> str:
    lowered = query.lower()
    for keywords, text in KEYWORD_RESPONSES:
        if any(keyword in lowered for keyword in keywords):
            return text
    return GENERIC_RESPONSE


def build_fallback_response(
    request: ChatRequest, original_error: str | None = None
) -> ChatResponse:
    """Build the canned response, tagged ``fallback`` so callers can tell it apart."""
    query = request.last_user_message()
    content = select_fallback_text(query)
    return ChatResponse(
        id=str(uuid.uuid4()),
        content=content,
        model=FALLBACK_MODEL,
        usage=estimate_usage([query], content),
        finish_reason="stop",
        processing_time_ms=FALLBACK_PROCESSING_TIME_MS,
        fallback=True,
        original_error=original_error,
    )
