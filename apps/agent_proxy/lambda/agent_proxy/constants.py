"""Shared constants and literal types for the agent proxy Lambda."""

from typing import Literal

DEFAULT_AWS_REGION = "ap-northeast-1"
LANGSMITH_PROJECT = "agent-proxy"

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1000
DEFAULT_TIMEOUT_SECONDS = 30.0
RATE_LIMIT_WINDOW_SECONDS = 60.0
RATE_LIMIT_SWEEP_INTERVAL_SECONDS = 300.0
ESTIMATED_CHARS_PER_TOKEN = 4

AUTO_PROVIDER = "auto"
FALLBACK_MODEL = "fallback-agent"
FALLBACK_PROCESSING_TIME_MS = 100
HEALTH_CAPABILITIES = ("text-generation", "chat-completion")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}

Role = Literal["system", "user", "assistant"]
FinishReason = Literal["stop", "length", "content_filter", "tool_calls"]
ProviderKind = Literal["cloud", "local"]
OrchestratorStrategy = Literal["sequential", "langgraph"]
HealthState = Literal["available", "unavailable", "unsupported"]

# Cloud candidates are only tried when a key is configured; local ones always are.
DEFAULT_CLOUD_PRIORITY = ("groq", "deepseek", "openai", "anthropic", "mistral", "openrouter", "grok")
DEFAULT_LOCAL_PRIORITY = ("ollama", "vllm", "localai", "huggingface")

DEFAULT_RATE_LIMITS: dict[str, int] = {
    "ollama": 30,
    "localai": 20,
    "vllm": 25,
    "huggingface": 10,
    "groq": 100,
    "openai": 60,
    "anthropic": 50,
    "deepseek": 40,
    "mistral": 40,
    "openrouter": 100,
    "grok": 30,
}

ANTHROPIC_API_VERSION = "2023-06-01"
OPENROUTER_REFERER = "https://meta3ventures.com"
OPENROUTER_TITLE = "Meta3Ventures AI Platform"
