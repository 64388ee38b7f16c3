"""Domain-level exceptions for the agent proxy."""


class AgentProxyError(Exception):
    """Base class for every error raised by the agent proxy."""


class BadRequestError(AgentProxyError, ValueError):
    """Raised for client-side invalid requests at the domain layer."""


class RateLimitExceeded(AgentProxyError):
    """Raised when a (provider, client) pair is over its per-minute cap."""

    def __init__(self, provider_id: str, client_id: str) -> None:
        super().__init__(f"Rate limit exceeded for provider {provider_id}")
        self.provider_id = provider_id
        self.client_id = client_id


class ProviderError(AgentProxyError):
    """Raised by provider adapters; the orchestrator substitutes another candidate."""

    def __init__(self, provider_id: str, message: str) -> None:
        super().__init__(f"[{provider_id}] {message}")
        self.provider_id = provider_id


class ConfigurationError(ProviderError):
    """A required API key or base URL is missing."""


class ProviderTimeoutError(ProviderError, TimeoutError):
    """The vendor did not answer within the adapter timeout."""


class UpstreamError(ProviderError):
    """The vendor answered with a non-2xx status or the transport failed."""

    def __init__(self, provider_id: str, status_code: int | None, body: str = "") -> None:
        if status_code is None:
            message = f"request failed: {body}"
        else:
            message = f"API error: {status_code} - {body}"
        super().__init__(provider_id, message)
        self.status_code = status_code
        self.body = body


class ProtocolError(ProviderError):
    """A 2xx vendor response could not be read as a chat completion."""


class AllProvidersUnavailable(AgentProxyError):
    """Every orchestrator candidate failed."""

    def __init__(self, errors: list[ProviderError]) -> None:
        message = "All LLM providers unavailable"
        if errors:
            message = f"{message}: {'; '.join(str(e) for e in errors)}"
        super().__init__(message)
        self.errors = errors
