"""Static catalog of supported LLM providers and their defaults."""

from dataclasses import dataclass

from .constants import ProviderKind


@dataclass(frozen=True)
class ProviderDefaults:
    display_name: str
    kind: ProviderKind
    base_url: str
    default_model: str
    requires_api_key: bool
    supported_models: tuple[str, ...] = ()


PROVIDER_DEFAULTS: dict[str, ProviderDefaults] = {
    # --- Cloud providers ---
    "openai": ProviderDefaults(
        display_name="OpenAI",
        kind="cloud",
        base_url="https://api.openai.com/v1",
        default_model="gpt-3.5-turbo",
        requires_api_key=True,
        supported_models=("gpt-3.5-turbo", "gpt-4", "gpt-4-turbo", "gpt-4o", "gpt-4o-mini"),
    ),
    "anthropic": ProviderDefaults(
        display_name="Anthropic (Claude)",
        kind="cloud",
        base_url="https://api.anthropic.com/v1",
        default_model="claude-3-haiku-20240307",
        requires_api_key=True,
        supported_models=(
            "claude-3-haiku-20240307",
            "claude-3-sonnet-20240229",
            "claude-3-opus-20240229",
        ),
    ),
    "groq": ProviderDefaults(
        display_name="Groq",
        kind="cloud",
        base_url="https://api.groq.com/openai/v1",
        default_model="mixtral-8x7b-32768",
        requires_api_key=True,
        supported_models=("llama3-8b-8192", "llama3-70b-8192", "mixtral-8x7b-32768", "gemma-7b-it"),
    ),
    "deepseek": ProviderDefaults(
        display_name="DeepSeek",
        kind="cloud",
        base_url="https://api.deepseek.com/v1",
        default_model="deepseek-chat",
        requires_api_key=True,
        supported_models=("deepseek-chat", "deepseek-coder", "deepseek-math"),
    ),
    "mistral": ProviderDefaults(
        display_name="Mistral AI",
        kind="cloud",
        base_url="https://api.mistral.ai/v1",
        default_model="mistral-small-latest",
        requires_api_key=True,
        supported_models=(
            "mistral-tiny",
            "mistral-small-latest",
            "mistral-medium-latest",
            "mistral-large-latest",
        ),
    ),
    "openrouter": ProviderDefaults(
        display_name="OpenRouter (Multi-Model)",
        kind="cloud",
        base_url="https://openrouter.ai/api/v1",
        default_model="meta-llama/llama-3.1-8b-instruct:free",
        requires_api_key=True,
        supported_models=(
            "meta-llama/llama-3.1-8b-instruct:free",
            "meta-llama/llama-3.1-70b-instruct",
            "mistralai/mistral-7b-instruct:free",
            "google/gemini-pro-1.5",
            "anthropic/claude-3-haiku",
            "openai/gpt-3.5-turbo",
        ),
    ),
    "grok": ProviderDefaults(
        display_name="Grok (xAI)",
        kind="cloud",
        base_url="https://api.x.ai/v1",
        default_model="grok-beta",
        requires_api_key=True,
        supported_models=("grok-beta", "grok-2"),
    ),
    # --- Local / open-source runtimes ---
    "ollama": ProviderDefaults(
        display_name="Ollama (Local)",
        kind="local",
        base_url="http://localhost:11434",
        default_model="llama3",
        requires_api_key=False,
    ),
    "vllm": ProviderDefaults(
        display_name="vLLM (Local)",
        kind="local",
        base_url="http://localhost:8000/v1",
        default_model="llama-3-8b-instruct",
        requires_api_key=False,
    ),
    "localai": ProviderDefaults(
        display_name="LocalAI",
        kind="local",
        base_url="http://localhost:8080/v1",
        default_model="ggml-gpt4all-j",
        requires_api_key=False,
    ),
    "huggingface": ProviderDefaults(
        display_name="HuggingFace Inference",
        kind="local",
        base_url="https://api-inference.huggingface.co",
        default_model="microsoft/DialoGPT-large",
        requires_api_key=True,
    ),
}
SUPPORTED_PROVIDERS = set(PROVIDER_DEFAULTS)
